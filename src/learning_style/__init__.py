"""
Adaptive Learning Style Engine.

Infers how a learner best absorbs material from behavioral observations.

Components:
- aggregate / normalize: Raw modality weights -> percentages summing to 100
- estimate_confidence / classify: Evidence volume -> confidence, dominant/secondary style
- compute_profile: Pure evidence-in, profile-out pipeline
- ProfileBridge: Local recomputation vs. durable store fallback
- compose_directive: Profile -> personalization directive for the tutor
"""
from src.learning_style.aggregator import WeightAggregate, aggregate
from src.learning_style.bridge import (
    ProfileBridge,
    ProfileResolution,
    ProfileSource,
    decide_source,
)
from src.learning_style.cache import BehaviorCache
from src.learning_style.classifier import (
    DOMINANCE_THRESHOLD,
    EVIDENCE_CEILING,
    MIN_EVIDENCE,
    SECONDARY_THRESHOLD,
    classify,
    estimate_confidence,
)
from src.learning_style.composer import PromptState, compose_directive, prompt_state
from src.learning_style.engine import compute_profile
from src.learning_style.exceptions import (
    LearningStyleError,
    MalformedObservationError,
    RepositoryError,
)
from src.learning_style.models import (
    BehavioralDataPoint,
    DominantStyle,
    LearningStyleProfile,
    Modality,
    ModalityScores,
    SignalType,
)
from src.learning_style.normalizer import normalize

__all__ = [
    # Pipeline
    "aggregate",
    "normalize",
    "estimate_confidence",
    "classify",
    "compute_profile",
    "WeightAggregate",
    # Bridge
    "ProfileBridge",
    "ProfileResolution",
    "ProfileSource",
    "decide_source",
    "BehaviorCache",
    # Composer
    "compose_directive",
    "prompt_state",
    "PromptState",
    # Models
    "BehavioralDataPoint",
    "LearningStyleProfile",
    "ModalityScores",
    # Enums
    "Modality",
    "DominantStyle",
    "SignalType",
    # Errors
    "LearningStyleError",
    "MalformedObservationError",
    "RepositoryError",
    # Thresholds
    "DOMINANCE_THRESHOLD",
    "EVIDENCE_CEILING",
    "MIN_EVIDENCE",
    "SECONDARY_THRESHOLD",
]
