"""
Signal ingestion: turn activity tracker signals into validated data points.

This is the only place observations are created, so it is also where
unknown modalities are rejected.

Weights:
- Time on content: 1 (< 2 min), 2 (>= 2 min), 3 (>= 5 min); under 5 s ignored
- Question asked: 1.5
- Explicit format request: 2
- Comprehension: +2.5 understood, -1.5 not understood
- Content choice: 1.5
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Optional

from src.learning_style.models import BehavioralDataPoint, Modality, SignalType

MIN_ENGAGEMENT_SECONDS = 5
PREVIEW_CHARS = 100

QUESTION_WEIGHT = 1.5
EXPLICIT_REQUEST_WEIGHT = 2.0
UNDERSTOOD_WEIGHT = 2.5
MISUNDERSTOOD_WEIGHT = -1.5
CONTENT_CHOICE_WEIGHT = 1.5

# Question wording patterns, checked in order; first match wins
QUESTION_PATTERNS: list[tuple[Modality, str, re.Pattern[str]]] = [
    (Modality.VISUAL, "show_me", re.compile(
        r"\b(show|diagram|picture|image|draw|chart|graph|visuali[sz]e|map|flowchart|illustrat\w*)\b")),
    (Modality.LOGICAL, "why", re.compile(
        r"\b(why does|how does .* work|step.?by.?step|logica?l|reason|prove|formula|cause"
        r"|because|if.*then|derive|calculat\w*)\b")),
    (Modality.KINESTHETIC, "real_example", re.compile(
        r"\b(real.?(life|world)|example|practic\w*|hands.?on|experiment|try|build|make|create"
        r"|appl\w*|use this)\b")),
    (Modality.CONCEPTUAL, "how_relate", re.compile(
        r"\b(relat\w*|connect\w*|big picture|overview|how does .* fit|context|broader|system"
        r"|framework|analogy)\b")),
    (Modality.VERBAL, "step_by_step", re.compile(
        r"\b(explain|tell me|describe|elaborate|detail|story|narrat\w*|what is|define|meaning)\b")),
]


EXPLICIT_PATTERNS: list[tuple[Modality, re.Pattern[str]]] = [
    (Modality.VISUAL, re.compile(r"\b(draw|diagram|chart|visual|picture|image|graph)\b")),
    (Modality.LOGICAL, re.compile(r"\b(step.?by.?step|logic|reason|proof|formula|systematic)\b")),
    (Modality.KINESTHETIC, re.compile(r"\b(real|example|practical|hands.?on|try|build|experiment)\b")),
    (Modality.CONCEPTUAL, re.compile(r"\b(big picture|connect\w*|relat\w*|overview|analogy|framework)\b")),
    (Modality.VERBAL, re.compile(r"\b(explain more|elaborate|tell me|discuss|talk about)\b")),
]


def classify_question(text: str) -> tuple[Modality, str]:
    """
    Classify the type of a learner question (not its topic).

    Returns:
        (modality, question_type); defaults to (VERBAL, "general")
    """
    lower = text.lower()
    for modality, question_type, pattern in QUESTION_PATTERNS:
        if pattern.search(lower):
            return modality, question_type
    return Modality.VERBAL, "general"


def classify_explicit_request(text: str) -> Optional[Modality]:
    """Modality named by an explicit format request, or None."""
    lower = text.lower()
    for modality, pattern in EXPLICIT_PATTERNS:
        if pattern.search(lower):
            return modality
    return None


def engagement_weight(duration_seconds: float) -> int:
    if duration_seconds >= 300:
        return 3
    if duration_seconds >= 120:
        return 2
    return 1


def time_on_content(
    modality: Modality | str,
    duration_seconds: float,
    subject: Optional[str] = None,
) -> Optional[BehavioralDataPoint]:
    """Time spent on content in one modality; trivial visits return None."""
    if duration_seconds < MIN_ENGAGEMENT_SECONDS:
        return None
    return BehavioralDataPoint(
        modality=modality,
        weight=engagement_weight(duration_seconds),
        subject=subject,
        signal=SignalType.TIME_SPENT,
        details={"duration_seconds": duration_seconds},
    )


def question_asked(text: str, subject: Optional[str] = None) -> BehavioralDataPoint:
    modality, question_type = classify_question(text)
    return BehavioralDataPoint(
        modality=modality,
        weight=QUESTION_WEIGHT,
        subject=subject,
        signal=SignalType.QUESTION_TYPE,
        details={"question_type": question_type, "preview": text[:PREVIEW_CHARS]},
    )


def explicit_request(text: str, subject: Optional[str] = None) -> Optional[BehavioralDataPoint]:
    """Explicit request for an explanation format; None when no format is named."""
    modality = classify_explicit_request(text)
    if modality is None:
        return None
    return BehavioralDataPoint(
        modality=modality,
        weight=EXPLICIT_REQUEST_WEIGHT,
        subject=subject,
        signal=SignalType.REQUEST_PATTERN,
        details={"preview": text[:PREVIEW_CHARS]},
    )


def comprehension(
    modality: Modality | str,
    understood: bool,
    subject: Optional[str] = None,
) -> BehavioralDataPoint:
    """Correlate an explanation modality with whether the learner understood it."""
    return BehavioralDataPoint(
        modality=modality,
        weight=UNDERSTOOD_WEIGHT if understood else MISUNDERSTOOD_WEIGHT,
        subject=subject,
        signal=SignalType.COMPREHENSION,
        details={"understood": understood},
    )


def content_choice(modality: Modality | str, subject: Optional[str] = None) -> BehavioralDataPoint:
    return BehavioralDataPoint(
        modality=modality,
        weight=CONTENT_CHOICE_WEIGHT,
        subject=subject,
        signal=SignalType.CONTENT_CHOICE,
    )


def parse_data_point(raw: Mapping[str, Any]) -> BehavioralDataPoint:
    """
    Validate a raw tracker record.

    Raises:
        MalformedObservationError: unknown modality, missing fields or bad weight
    """
    data = dict(raw)
    data.setdefault("timestamp", datetime.now().isoformat())
    return BehavioralDataPoint.from_dict(data)
