"""
Learning style engine: the pure evidence-in, profile-out pipeline.

Aggregator -> Normalizer -> Confidence Estimator -> Style Classifier.
No I/O happens here; persistence is the bridge's job.
"""
from __future__ import annotations

from collections.abc import Iterable

from loguru import logger

from src.learning_style.aggregator import aggregate
from src.learning_style.classifier import classify, estimate_confidence
from src.learning_style.models import BehavioralDataPoint, LearningStyleProfile
from src.learning_style.normalizer import normalize


def compute_profile(points: Iterable[BehavioralDataPoint]) -> LearningStyleProfile:
    """
    Recompute a full LearningStyleProfile from a collection of data points.

    Identical input always yields an identical profile; last_computed_at
    is left unset so recomputation stays deterministic.
    """
    totals = aggregate(points)

    scores = normalize(totals.global_totals)
    dominant, secondary = classify(scores)
    subject_profiles = {
        subject: normalize(totals.subject_totals[subject])
        for subject in totals.subjects()
    }

    profile = LearningStyleProfile(
        scores=scores,
        dominant_style=dominant,
        secondary_style=secondary,
        total_interactions=totals.count,
        confidence=estimate_confidence(totals.count),
        subject_profiles=subject_profiles,
    )
    logger.debug(
        f"Computed learning style: dominant={dominant.value} "
        f"secondary={secondary.value if secondary else None} "
        f"interactions={totals.count} subjects={len(subject_profiles)}"
    )
    return profile
