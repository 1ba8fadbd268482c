"""
Normalizer: convert raw weight totals into percentages that sum to exactly 100.

Algorithm:
1. total_weight = signed sum of the raw totals
2. total_weight <= 0 -> all-zero scores
3. each modality gets round(max(0, raw) / total_weight * 100), halves rounded up;
   negative totals shrink the denominator, so the shares can overshoot 100
4. the difference from 100 is applied to the highest score, ties broken by
   enumeration order; a surplus larger than the leader's score spills over
   to the next highest so no score drops below zero
"""
from __future__ import annotations

from collections.abc import Mapping

from src.learning_style.models import MODALITY_ORDER, Modality, ModalityScores, round_half_up

PERCENT_TOTAL = 100

__all__ = ["PERCENT_TOTAL", "normalize", "round_half_up"]


def _leader(percentages: dict[Modality, int]) -> Modality:
    return max(MODALITY_ORDER, key=lambda m: (percentages[m], -MODALITY_ORDER.index(m)))


def normalize(raw_totals: Mapping[Modality, float]) -> ModalityScores:
    """
    Normalize one scope's raw totals into ModalityScores.

    Args:
        raw_totals: Raw weight per modality; missing modalities count as zero

    Returns:
        ModalityScores summing to 100, or all zeros when total evidence <= 0
    """
    raw = {m: float(raw_totals.get(m, 0.0)) for m in MODALITY_ORDER}

    total_weight = sum(raw.values())
    if total_weight <= 0:
        return ModalityScores.zero()

    percentages = {
        m: round_half_up(max(0.0, raw[m]) / total_weight * PERCENT_TOTAL)
        for m in MODALITY_ORDER
    }

    drift = PERCENT_TOTAL - sum(percentages.values())
    if drift > 0:
        percentages[_leader(percentages)] += drift
    while drift < 0:
        leader = _leader(percentages)
        taken = min(-drift, percentages[leader])
        percentages[leader] -= taken
        drift += taken

    return ModalityScores(**{m.value: percentages[m] for m in MODALITY_ORDER})
