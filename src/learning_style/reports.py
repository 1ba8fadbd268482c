"""
Class-wide learning style reports for teachers.

Only profiles backed by at least 20 interactions count towards the
class aggregate; thinner profiles would skew the averages.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Optional

from src.learning_style.classifier import has_minimum_evidence
from src.learning_style.models import MODALITY_ORDER, LearningStyleProfile, ModalityScores
from src.learning_style.normalizer import round_half_up

TEACHING_RECOMMENDATIONS: dict[str, str] = {
    "visual": "Use diagrams, charts, and color-coded content first. Then reinforce with logical reasoning.",
    "logical": "Lead with step-by-step breakdowns, formulas, and cause-effect chains. Support with visual aids.",
    "verbal": "Use rich narrative explanations, analogies, and discussion. Supplement with diagrams.",
    "kinesthetic": "Start with real-world examples and hands-on activities. Then explain the theory behind them.",
    "conceptual": "Begin with the big picture and connections. Then drill down into details with visual aids.",
}
MIXED_RECOMMENDATION = "Use mixed teaching methods equally. This student benefits from varied approaches."


@dataclass
class ClassStyleAggregate:
    """Mean modality scores across profiled students."""
    scores: ModalityScores
    profiled_students: int


def class_style_aggregate(profiles: Iterable[LearningStyleProfile]) -> Optional[ClassStyleAggregate]:
    """
    Average each modality score over profiles with enough evidence.

    Returns:
        ClassStyleAggregate, or None when no profile qualifies
    """
    qualifying = [p for p in profiles if has_minimum_evidence(p.total_interactions)]
    if not qualifying:
        return None

    count = len(qualifying)
    # Averages are rounded independently and may not sum to exactly 100
    means = {
        m.value: round_half_up(sum(p.scores.get(m) for p in qualifying) / count)
        for m in MODALITY_ORDER
    }
    return ClassStyleAggregate(scores=ModalityScores(**means), profiled_students=count)


def teaching_recommendation(profile: Optional[LearningStyleProfile]) -> str:
    """Fixed teacher-facing advice for a student's dominant style."""
    if profile is None or profile.is_balanced:
        return MIXED_RECOMMENDATION
    return TEACHING_RECOMMENDATIONS[profile.dominant_style.value]
