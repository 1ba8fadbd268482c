"""
Learning Style Domain Models.

Observations flow in as BehavioralDataPoint records, are reduced to
ModalityScores, and surface as a LearningStyleProfile that the tutor
prompt composer consumes.

Modalities:
1. VISUAL: diagrams, charts, spatial layouts
2. LOGICAL: step-by-step reasoning, cause and effect
3. VERBAL: narrative explanation, discussion, analogies
4. KINESTHETIC: hands-on problems, learn-by-doing
5. CONCEPTUAL: big picture first, relationships between ideas
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from src.learning_style.exceptions import MalformedObservationError


class Modality(str, Enum):
    """
    Closed set of content modalities.

    Declaration order is the tie-break order used by the normalizer
    and the style classifier.
    """
    VISUAL = "visual"
    LOGICAL = "logical"
    VERBAL = "verbal"
    KINESTHETIC = "kinesthetic"
    CONCEPTUAL = "conceptual"

    @classmethod
    def parse(cls, value: Any) -> "Modality":
        """Coerce a raw value into a Modality or reject it."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise MalformedObservationError(
                f"Unknown modality {value!r}; expected one of "
                f"{', '.join(m.value for m in cls)}"
            ) from None


MODALITY_ORDER: tuple[Modality, ...] = tuple(Modality)


def round_half_up(value: float) -> int:
    """Round .5 upwards (not banker's rounding), matching the tracker's Math.round."""
    return int(math.floor(value + 0.5))


class DominantStyle(str, Enum):
    """Dominant style label: a modality, or BALANCED below the dominance threshold."""
    VISUAL = "visual"
    LOGICAL = "logical"
    VERBAL = "verbal"
    KINESTHETIC = "kinesthetic"
    CONCEPTUAL = "conceptual"
    BALANCED = "balanced"

    @classmethod
    def from_modality(cls, modality: Modality) -> "DominantStyle":
        return cls(modality.value)

    @property
    def modality(self) -> Optional[Modality]:
        """The underlying modality, or None for BALANCED."""
        if self is DominantStyle.BALANCED:
            return None
        return Modality(self.value)


class SignalType(str, Enum):
    """Kind of tracker signal a data point was derived from."""
    TIME_SPENT = "time_spent"
    QUESTION_TYPE = "question_type"
    REQUEST_PATTERN = "request_pattern"
    COMPREHENSION = "comprehension"
    CONTENT_CHOICE = "content_choice"


STYLE_LABELS: dict[str, str] = {
    "visual": "Visual",
    "logical": "Logical",
    "verbal": "Verbal",
    "kinesthetic": "Kinesthetic",
    "conceptual": "Conceptual",
    "balanced": "Balanced",
}


@dataclass(frozen=True)
class BehavioralDataPoint:
    """
    One observed learner interaction.

    Attributes:
        modality: Content modality the learner engaged with
        weight: Strength of evidence; negative values signal disengagement
        subject: Optional subject identifier (None for modality-agnostic activity)
        timestamp: Creation time, kept for external windowing only
        signal: Tracker signal kind, when known
        details: Free-form tracker metadata
    """
    modality: Modality
    weight: float
    subject: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.now)
    signal: Optional[SignalType] = None
    details: dict[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        # Validation happens here, at creation, so the aggregator never sees bad input
        object.__setattr__(self, "modality", Modality.parse(self.modality))
        try:
            weight = float(self.weight)
        except (TypeError, ValueError):
            raise MalformedObservationError(f"Weight must be numeric, got {self.weight!r}") from None
        if not math.isfinite(weight):
            raise MalformedObservationError(f"Weight must be finite, got {self.weight!r}")
        object.__setattr__(self, "weight", weight)
        if self.subject is not None:
            subject = str(self.subject).strip()
            object.__setattr__(self, "subject", subject or None)
        if self.signal is not None and not isinstance(self.signal, SignalType):
            try:
                object.__setattr__(self, "signal", SignalType(self.signal))
            except ValueError:
                raise MalformedObservationError(f"Unknown signal type {self.signal!r}") from None

    def to_dict(self) -> dict[str, Any]:
        return {
            "modality": self.modality.value,
            "weight": self.weight,
            "subject": self.subject,
            "timestamp": self.timestamp.isoformat(),
            "signal": self.signal.value if self.signal else None,
            "details": dict(self.details),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BehavioralDataPoint":
        """Create from a serialized record. Raises MalformedObservationError."""
        if "modality" not in data or "weight" not in data:
            raise MalformedObservationError(f"Data point missing modality or weight: {data!r}")
        timestamp = data.get("timestamp")
        if isinstance(timestamp, str):
            timestamp = datetime.fromisoformat(timestamp)
        elif isinstance(timestamp, (int, float)):
            # Tracker timestamps are epoch milliseconds
            timestamp = datetime.fromtimestamp(timestamp / 1000)
        return cls(
            modality=data["modality"],
            weight=data["weight"],
            subject=data.get("subject"),
            timestamp=timestamp or datetime.now(),
            signal=data.get("signal") or data.get("type"),
            details=dict(data.get("details") or {}),
        )


@dataclass(frozen=True)
class ModalityScores:
    """Integer percentages per modality. Sum is 100, or all zero without evidence."""
    visual: int = 0
    logical: int = 0
    verbal: int = 0
    kinesthetic: int = 0
    conceptual: int = 0

    @classmethod
    def zero(cls) -> "ModalityScores":
        return cls()

    @classmethod
    def from_mapping(cls, values: dict[Any, Any]) -> "ModalityScores":
        """Build from a {modality: score} mapping keyed by Modality or its value."""
        normalized = {Modality.parse(k).value: round_half_up(float(v)) for k, v in values.items()}
        return cls(**normalized)

    def get(self, modality: Modality) -> int:
        return getattr(self, modality.value)

    @property
    def total(self) -> int:
        return sum(self.get(m) for m in MODALITY_ORDER)

    @property
    def is_empty(self) -> bool:
        return self.total == 0

    def ranked(self) -> list[tuple[Modality, int]]:
        """(modality, score) pairs, highest first, ties in enumeration order."""
        # sorted() is stable, so equal scores keep MODALITY_ORDER
        return sorted(
            ((m, self.get(m)) for m in MODALITY_ORDER),
            key=lambda pair: pair[1],
            reverse=True,
        )

    def to_dict(self) -> dict[str, int]:
        return {m.value: self.get(m) for m in MODALITY_ORDER}


@dataclass
class LearningStyleProfile:
    """
    Derived, user-visible learning style summary.

    Fully recomputed from the current data points on every request.
    ``last_computed_at`` is only populated on records read back from the
    durable store.
    """
    scores: ModalityScores
    dominant_style: DominantStyle
    secondary_style: Optional[Modality]
    total_interactions: int
    confidence: int
    subject_profiles: dict[str, ModalityScores] = field(default_factory=dict)
    last_computed_at: Optional[datetime] = None

    @property
    def is_balanced(self) -> bool:
        return self.dominant_style is DominantStyle.BALANCED

    def to_dict(self) -> dict[str, Any]:
        return {
            "scores": self.scores.to_dict(),
            "dominant_style": self.dominant_style.value,
            "secondary_style": self.secondary_style.value if self.secondary_style else None,
            "total_interactions": self.total_interactions,
            "confidence": self.confidence,
            "subject_profiles": {
                subject: scores.to_dict()
                for subject, scores in sorted(self.subject_profiles.items())
            },
            "last_computed_at": self.last_computed_at.isoformat() if self.last_computed_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LearningStyleProfile":
        last_computed = data.get("last_computed_at")
        secondary = data.get("secondary_style")
        return cls(
            scores=ModalityScores.from_mapping(data["scores"]),
            dominant_style=DominantStyle(data["dominant_style"]),
            secondary_style=Modality.parse(secondary) if secondary else None,
            total_interactions=int(data["total_interactions"]),
            confidence=int(data["confidence"]),
            subject_profiles={
                subject: ModalityScores.from_mapping(scores)
                for subject, scores in (data.get("subject_profiles") or {}).items()
            },
            last_computed_at=datetime.fromisoformat(last_computed) if last_computed else None,
        )
