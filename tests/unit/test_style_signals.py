"""
Unit tests for signal ingestion and observation validation.
"""

import math

import pytest

from src.learning_style.exceptions import MalformedObservationError
from src.learning_style.models import BehavioralDataPoint, Modality, SignalType
from src.learning_style.signals import (
    classify_explicit_request,
    classify_question,
    comprehension,
    content_choice,
    explicit_request,
    parse_data_point,
    question_asked,
    time_on_content,
)


class TestClassifyQuestion:
    @pytest.mark.parametrize("text,modality,question_type", [
        ("Can you show me a diagram of the heart?", Modality.VISUAL, "show_me"),
        ("Why does ice float on water?", Modality.LOGICAL, "why"),
        ("Give me a real world example", Modality.KINESTHETIC, "real_example"),
        ("How is this related to photosynthesis?", Modality.CONCEPTUAL, "how_relate"),
        ("Explain osmosis again", Modality.VERBAL, "step_by_step"),
        ("Hmm?", Modality.VERBAL, "general"),
    ])
    def test_question_types(self, text, modality, question_type):
        assert classify_question(text) == (modality, question_type)

    def test_word_boundaries_respected(self):
        # "should" must not match "show"
        assert classify_question("What should I read next?") == (Modality.VERBAL, "general")

    def test_case_insensitive(self):
        assert classify_question("DRAW IT PLEASE")[0] is Modality.VISUAL


class TestExplicitRequest:
    def test_format_request_detected(self):
        point = explicit_request("Can you draw that as a chart?", subject="math")

        assert point.modality is Modality.VISUAL
        assert point.weight == 2.0
        assert point.signal is SignalType.REQUEST_PATTERN
        assert point.subject == "math"

    def test_no_format_named(self):
        assert classify_explicit_request("thanks!") is None
        assert explicit_request("thanks!") is None


class TestSignalFactories:
    @pytest.mark.parametrize("seconds,weight", [(5, 1), (60, 1), (120, 2), (299, 2), (300, 3), (900, 3)])
    def test_time_on_content_weights(self, seconds, weight):
        point = time_on_content(Modality.VISUAL, seconds)
        assert point.weight == weight
        assert point.signal is SignalType.TIME_SPENT

    def test_brief_visit_ignored(self):
        assert time_on_content(Modality.VISUAL, 4.9) is None

    def test_comprehension_weights(self):
        assert comprehension(Modality.VERBAL, understood=True).weight == 2.5
        assert comprehension(Modality.VERBAL, understood=False).weight == -1.5

    def test_question_asked(self):
        point = question_asked("Why does this happen?", subject="physics")

        assert point.modality is Modality.LOGICAL
        assert point.weight == 1.5
        assert point.details["question_type"] == "why"

    def test_content_choice_accepts_string_modality(self):
        point = content_choice("kinesthetic")
        assert point.modality is Modality.KINESTHETIC
        assert point.weight == 1.5


class TestParseDataPoint:
    def test_valid_record(self):
        point = parse_data_point({"modality": "Visual", "weight": "2", "subject": " biology "})

        assert point.modality is Modality.VISUAL
        assert point.weight == 2.0
        assert point.subject == "biology"

    def test_unknown_modality_rejected(self):
        with pytest.raises(MalformedObservationError, match="auditory"):
            parse_data_point({"modality": "auditory", "weight": 1})

    @pytest.mark.parametrize("raw", [
        {"modality": "visual"},
        {"weight": 1},
        {"modality": "visual", "weight": "heavy"},
        {"modality": "visual", "weight": math.nan},
        {"modality": "visual", "weight": math.inf},
    ])
    def test_malformed_records_rejected(self, raw):
        with pytest.raises(MalformedObservationError):
            parse_data_point(raw)

    def test_epoch_millisecond_timestamp(self):
        point = parse_data_point({"modality": "logical", "weight": 1, "timestamp": 1_700_000_000_000})
        assert point.timestamp.year == 2023

    def test_tracker_type_field_maps_to_signal(self):
        point = parse_data_point({"modality": "verbal", "weight": 1.5, "type": "question_type"})
        assert point.signal is SignalType.QUESTION_TYPE

    def test_malformed_error_is_value_error(self):
        with pytest.raises(ValueError):
            BehavioralDataPoint(modality="smell", weight=1)
