"""
Confidence estimation and dominant/secondary style classification.

Thresholds (fixed):
- Confidence rises linearly with observation count, saturating at 100 observations
- Profiles built from fewer than 20 observations are provisional
- Dominant style requires a score strictly above 25, otherwise BALANCED
- Secondary style requires a score strictly above 20
"""
from __future__ import annotations

from typing import Optional

from src.learning_style.normalizer import round_half_up
from src.learning_style.models import DominantStyle, Modality, ModalityScores

EVIDENCE_CEILING = 100
MIN_EVIDENCE = 20
DOMINANCE_THRESHOLD = 25
SECONDARY_THRESHOLD = 20
MAX_CONFIDENCE = 100


def estimate_confidence(count: int) -> int:
    """
    Map global observation count to a 0-100 confidence value.

    confidence = min(100, round(count / 100 * 100))
    """
    if count <= 0:
        return 0
    return min(MAX_CONFIDENCE, round_half_up(count / EVIDENCE_CEILING * MAX_CONFIDENCE))


def has_minimum_evidence(count: int) -> bool:
    """True once enough observations exist to trust a local recomputation."""
    return count >= MIN_EVIDENCE


def classify(scores: ModalityScores) -> tuple[DominantStyle, Optional[Modality]]:
    """
    Pick the dominant and secondary styles from global scores.

    Returns:
        (dominant_style, secondary_style); secondary is None when absent
    """
    ranked = scores.ranked()
    top_modality, top_score = ranked[0]
    second_modality, second_score = ranked[1]

    if top_score > DOMINANCE_THRESHOLD:
        dominant = DominantStyle.from_modality(top_modality)
    else:
        dominant = DominantStyle.BALANCED

    secondary: Optional[Modality] = None
    if second_score > SECONDARY_THRESHOLD and dominant.modality is not second_modality:
        secondary = second_modality

    return dominant, secondary
