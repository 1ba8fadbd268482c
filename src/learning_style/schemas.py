"""
Pydantic schema for the durable learning style record.

One record per user identity. Column names match the hosted
``learning_style_profiles`` table so REST payloads and SQL rows
share a single shape.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.learning_style.classifier import estimate_confidence
from src.learning_style.models import (
    DominantStyle,
    LearningStyleProfile,
    Modality,
    ModalityScores,
    round_half_up,
)


class ProfileRecord(BaseModel):
    """Durable profile record as stored by the backend."""

    model_config = ConfigDict(extra="ignore", from_attributes=True)

    user_id: str
    visual_score: float = Field(default=0, ge=0, le=100)
    logical_score: float = Field(default=0, ge=0, le=100)
    verbal_score: float = Field(default=0, ge=0, le=100)
    kinesthetic_score: float = Field(default=0, ge=0, le=100)
    conceptual_score: float = Field(default=0, ge=0, le=100)
    dominant_style: str = DominantStyle.BALANCED.value
    secondary_style: Optional[str] = None
    total_interactions: int = Field(default=0, ge=0)
    confidence: Optional[int] = Field(default=None, ge=0, le=100)
    subject_profiles: dict[str, dict[str, float]] = Field(default_factory=dict)
    last_analyzed_at: Optional[datetime] = None

    @field_validator("dominant_style")
    @classmethod
    def _check_dominant(cls, value: str) -> str:
        return DominantStyle(value).value

    @field_validator("secondary_style")
    @classmethod
    def _check_secondary(cls, value: Optional[str]) -> Optional[str]:
        if value is None or value == "":
            return None
        return Modality.parse(value).value

    @field_validator("subject_profiles", mode="before")
    @classmethod
    def _default_subjects(cls, value):
        return value or {}

    @classmethod
    def from_profile(
        cls,
        user_id: str,
        profile: LearningStyleProfile,
        analyzed_at: Optional[datetime] = None,
    ) -> "ProfileRecord":
        """Flatten a profile into the storage shape, stamping the computation time."""
        scores = profile.scores
        return cls(
            user_id=user_id,
            visual_score=scores.visual,
            logical_score=scores.logical,
            verbal_score=scores.verbal,
            kinesthetic_score=scores.kinesthetic,
            conceptual_score=scores.conceptual,
            dominant_style=profile.dominant_style.value,
            secondary_style=profile.secondary_style.value if profile.secondary_style else None,
            total_interactions=profile.total_interactions,
            confidence=profile.confidence,
            subject_profiles={
                subject: sub.to_dict() for subject, sub in profile.subject_profiles.items()
            },
            last_analyzed_at=analyzed_at or datetime.now(timezone.utc),
        )

    def to_profile(self) -> LearningStyleProfile:
        """
        Rebuild the profile as stored, rounding fractional scores half up.

        Older records without a stored confidence derive it from the
        interaction count.
        """
        confidence = self.confidence
        if confidence is None:
            confidence = estimate_confidence(self.total_interactions)
        return LearningStyleProfile(
            scores=ModalityScores(
                visual=round_half_up(self.visual_score),
                logical=round_half_up(self.logical_score),
                verbal=round_half_up(self.verbal_score),
                kinesthetic=round_half_up(self.kinesthetic_score),
                conceptual=round_half_up(self.conceptual_score),
            ),
            dominant_style=DominantStyle(self.dominant_style),
            secondary_style=Modality(self.secondary_style) if self.secondary_style else None,
            total_interactions=self.total_interactions,
            confidence=confidence,
            subject_profiles={
                subject: ModalityScores.from_mapping(values)
                for subject, values in self.subject_profiles.items()
            },
            last_computed_at=self.last_analyzed_at,
        )

    def to_payload(self) -> dict:
        """JSON-ready dict for REST upserts."""
        payload = self.model_dump(mode="json")
        payload["updated_at"] = datetime.now(timezone.utc).isoformat()
        return payload
