"""
Learning Style Profile Models.

SQLAlchemy model for the durable learning style record:
- One row per user identity (upserted on every local recomputation)
- Five modality percentages plus dominant/secondary style
- Per-subject breakdowns stored as JSON
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, Integer, Numeric, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class LearningStyleProfileRow(Base):
    """
    Durable copy of a learner's learning style profile.

    Advisory only: a fresh local recomputation always supersedes it
    when enough local evidence exists.
    """

    __tablename__ = "learning_style_profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(Text, nullable=False, unique=True, index=True)

    # Modality percentages (0-100, sum to 100 or all zero)
    visual_score: Mapped[float] = mapped_column(Numeric(5, 2, asdecimal=False), default=0)
    logical_score: Mapped[float] = mapped_column(Numeric(5, 2, asdecimal=False), default=0)
    verbal_score: Mapped[float] = mapped_column(Numeric(5, 2, asdecimal=False), default=0)
    kinesthetic_score: Mapped[float] = mapped_column(Numeric(5, 2, asdecimal=False), default=0)
    conceptual_score: Mapped[float] = mapped_column(Numeric(5, 2, asdecimal=False), default=0)

    # Classification
    dominant_style: Mapped[str] = mapped_column(Text, default="balanced")
    secondary_style: Mapped[str | None] = mapped_column(Text)

    # Evidence
    total_interactions: Mapped[int] = mapped_column(Integer, default=0)
    confidence: Mapped[int | None] = mapped_column(Integer)
    subject_profiles: Mapped[dict | None] = mapped_column(JSON)

    # Timestamps
    last_analyzed_at: Mapped[datetime | None] = mapped_column()
    created_at: Mapped[datetime] = mapped_column(default=func.now())
    updated_at: Mapped[datetime] = mapped_column(default=func.now(), onupdate=func.now())

    def __repr__(self) -> str:
        return (
            f"<LearningStyleProfileRow user={self.user_id} "
            f"dominant={self.dominant_style} interactions={self.total_interactions}>"
        )
