"""
Unit tests for the aggregator and normalizer.

Percentages must sum to exactly 100 whenever total evidence is positive,
and collapse to all zeros otherwise.
"""

import pytest

from src.learning_style.aggregator import aggregate, empty_totals
from src.learning_style.models import BehavioralDataPoint, Modality, ModalityScores
from src.learning_style.normalizer import normalize, round_half_up


def _point(modality, weight=1.0, subject=None):
    return BehavioralDataPoint(modality=modality, weight=weight, subject=subject)


class TestAggregate:
    def test_empty_input_yields_zero_totals(self):
        result = aggregate([])
        assert result.count == 0
        assert result.global_totals == empty_totals()
        assert result.subject_totals == {}

    def test_sums_weights_per_modality(self):
        result = aggregate([
            _point(Modality.VISUAL, 2),
            _point(Modality.VISUAL, 1.5),
            _point(Modality.VERBAL, -1),
        ])
        assert result.count == 3
        assert result.global_totals[Modality.VISUAL] == 3.5
        assert result.global_totals[Modality.VERBAL] == -1
        assert result.global_totals[Modality.LOGICAL] == 0

    def test_subject_points_count_globally_and_per_subject(self):
        result = aggregate([
            _point(Modality.LOGICAL, 2, subject="physics"),
            _point(Modality.VISUAL, 1, subject="biology"),
            _point(Modality.VISUAL, 1),
        ])
        assert result.global_totals[Modality.VISUAL] == 2
        assert result.global_totals[Modality.LOGICAL] == 2
        assert result.subjects() == ["biology", "physics"]
        assert result.subject_totals["physics"][Modality.LOGICAL] == 2
        assert result.subject_totals["biology"][Modality.LOGICAL] == 0

    def test_blank_subject_is_global_only(self):
        result = aggregate([_point(Modality.VISUAL, subject="   ")])
        assert result.subject_totals == {}
        assert result.count == 1


class TestRoundHalfUp:
    @pytest.mark.parametrize("value,expected", [(12.5, 13), (0.5, 1), (2.5, 3), (33.33, 33), (66.67, 67)])
    def test_rounds_halves_up(self, value, expected):
        assert round_half_up(value) == expected

    def test_stored_subject_scores_round_half_up(self):
        scores = ModalityScores.from_mapping({"visual": 12.5, "logical": 87.5})
        assert scores.visual == 13
        assert scores.logical == 88


class TestNormalize:
    def test_no_evidence_is_all_zero(self):
        assert normalize({}) == ModalityScores.zero()

    def test_non_positive_total_is_all_zero(self):
        scores = normalize({Modality.VISUAL: 1, Modality.LOGICAL: -1})
        assert scores.is_empty

        scores = normalize({Modality.VERBAL: -3})
        assert scores.is_empty

    def test_single_modality_takes_everything(self):
        scores = normalize({Modality.KINESTHETIC: 4})
        assert scores.kinesthetic == 100
        assert scores.total == 100

    def test_negative_modality_gets_no_share(self):
        scores = normalize({Modality.VISUAL: 3, Modality.LOGICAL: -1})
        assert scores.visual == 100
        assert scores.logical == 0

    def test_negative_evidence_deflates_denominator(self):
        # 3/3 and 1/3 of a signed total of 3; the 33-point surplus comes off visual
        scores = normalize({Modality.VISUAL: 3, Modality.LOGICAL: 1, Modality.VERBAL: -1})
        assert scores.to_dict() == {
            "visual": 67, "logical": 33, "verbal": 0, "kinesthetic": 0, "conceptual": 0,
        }

    def test_large_surplus_never_goes_negative(self):
        # Signed total of 0.1 inflates both shares to 1000
        scores = normalize({Modality.VISUAL: 1, Modality.LOGICAL: 1, Modality.KINESTHETIC: -1.9})
        assert scores.total == 100
        assert all(value >= 0 for value in scores.to_dict().values())
        assert scores.kinesthetic == 0

    def test_deficit_goes_to_first_tied_leader(self):
        # 33.33 x 3 rounds to 99; visual wins the tie by enumeration order
        scores = normalize({Modality.VISUAL: 1, Modality.LOGICAL: 1, Modality.VERBAL: 1})
        assert scores.to_dict() == {
            "visual": 34, "logical": 33, "verbal": 33, "kinesthetic": 0, "conceptual": 0,
        }

    def test_surplus_taken_from_leader(self):
        # 12.5 rounds up four times (52) plus 50 = 102
        scores = normalize({
            Modality.VISUAL: 1,
            Modality.LOGICAL: 1,
            Modality.VERBAL: 1,
            Modality.KINESTHETIC: 1,
            Modality.CONCEPTUAL: 4,
        })
        assert scores.conceptual == 48
        assert scores.visual == 13
        assert scores.total == 100

    def test_tie_break_ignores_mapping_order(self):
        forward = normalize({Modality.LOGICAL: 1, Modality.VERBAL: 1, Modality.CONCEPTUAL: 1})
        backward = normalize({Modality.CONCEPTUAL: 1, Modality.VERBAL: 1, Modality.LOGICAL: 1})
        assert forward == backward
        assert forward.logical == 34

    @pytest.mark.parametrize("weights", [
        (1, 1, 1, 0, 0),
        (7, 3, 11, 13, 17),
        (0.1, 0.2, 0.3, 0.4, 0.5),
        (5, -2, 3, 1, 0),
        (1, 1, 1, 1, 1),
        (2, 2, 2, 1, 0),
    ])
    def test_sum_invariant(self, weights):
        totals = dict(zip(Modality, weights))
        assert normalize(totals).total == 100
