"""
Unit tests for class-wide learning style reports.
"""

from src.learning_style.models import DominantStyle, LearningStyleProfile, Modality, ModalityScores
from src.learning_style.reports import (
    MIXED_RECOMMENDATION,
    TEACHING_RECOMMENDATIONS,
    class_style_aggregate,
    teaching_recommendation,
)


def _profile(scores, interactions, dominant=DominantStyle.BALANCED):
    return LearningStyleProfile(
        scores=scores,
        dominant_style=dominant,
        secondary_style=None,
        total_interactions=interactions,
        confidence=min(100, interactions),
    )


class TestClassStyleAggregate:
    def test_no_qualifying_profiles(self):
        profiles = [_profile(ModalityScores(visual=100), 10)]
        assert class_style_aggregate(profiles) is None
        assert class_style_aggregate([]) is None

    def test_mean_over_qualifying_profiles(self):
        profiles = [
            _profile(ModalityScores(visual=100), 30),
            _profile(ModalityScores(logical=50, verbal=50), 20),
            # Too little evidence; excluded
            _profile(ModalityScores(conceptual=100), 5),
        ]
        aggregate = class_style_aggregate(profiles)

        assert aggregate.profiled_students == 2
        assert aggregate.scores.to_dict() == {
            "visual": 50, "logical": 25, "verbal": 25, "kinesthetic": 0, "conceptual": 0,
        }

    def test_means_rounded_half_up(self):
        profiles = [
            _profile(ModalityScores(visual=41, logical=59), 40),
            _profile(ModalityScores(visual=40, logical=60), 40),
        ]
        aggregate = class_style_aggregate(profiles)
        assert aggregate.scores.visual == 41
        assert aggregate.scores.logical == 60


class TestTeachingRecommendation:
    def test_dominant_style_advice(self):
        profile = _profile(ModalityScores(kinesthetic=70, visual=30), 50, DominantStyle.KINESTHETIC)
        assert teaching_recommendation(profile) == TEACHING_RECOMMENDATIONS[Modality.KINESTHETIC.value]

    def test_balanced_or_missing_gets_mixed_methods(self):
        assert teaching_recommendation(None) == MIXED_RECOMMENDATION
        assert teaching_recommendation(_profile(ModalityScores(visual=20, logical=20, verbal=20, kinesthetic=20, conceptual=20), 50)) == MIXED_RECOMMENDATION
