"""
Aggregator: reduce behavioral data points to raw per-modality weight totals.

Totals are kept unclamped; negative evidence is the normalizer's concern.
"""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from src.learning_style.models import MODALITY_ORDER, BehavioralDataPoint, Modality

RawTotals = dict[Modality, float]


def empty_totals() -> RawTotals:
    """All five modalities at zero weight."""
    return {m: 0.0 for m in MODALITY_ORDER}


@dataclass
class WeightAggregate:
    """Raw weight totals for the global scope and each subject scope."""
    global_totals: RawTotals = field(default_factory=empty_totals)
    subject_totals: dict[str, RawTotals] = field(default_factory=dict)
    count: int = 0

    def subjects(self) -> list[str]:
        return sorted(self.subject_totals)


def aggregate(points: Iterable[BehavioralDataPoint]) -> WeightAggregate:
    """
    Sum data point weights per modality, globally and per subject.

    Args:
        points: Behavioral data points, in any order

    Returns:
        WeightAggregate; an empty input yields all-zero totals and count 0
    """
    result = WeightAggregate()
    for point in points:
        result.global_totals[point.modality] += point.weight
        result.count += 1
        if point.subject:
            scoped = result.subject_totals.setdefault(point.subject, empty_totals())
            scoped[point.modality] += point.weight
    return result
