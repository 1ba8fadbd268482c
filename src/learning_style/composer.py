"""
Prompt Composer: render a learning style profile into a tutor directive.

States (keyed on profile presence and confidence):
- NO_PROFILE:   generic balanced mix across all five modalities
- PROVISIONAL:  breakdown + equal weighting + low-confidence caveat
                (confidence < 40, or fewer than 20 interactions)
- TRUSTED:      breakdown + dominant style instruction + optional secondary support

Every directive ends with CLOSING_DIRECTIVE.
"""
from __future__ import annotations

from enum import Enum
from typing import Callable, Optional

from src.learning_style.classifier import has_minimum_evidence
from src.learning_style.models import (
    MODALITY_ORDER,
    STYLE_LABELS,
    LearningStyleProfile,
    Modality,
    ModalityScores,
)

TRUSTED_CONFIDENCE = 40


class PromptState(str, Enum):
    """Composer state derived from profile quality."""
    NO_PROFILE = "no_profile"
    PROVISIONAL = "provisional"
    TRUSTED = "trusted"


BALANCED_INSTRUCTION = (
    "Use a balanced teaching approach that mixes all five modalities equally: "
    "visual descriptions, logical reasoning, verbal explanations, hands-on practice, "
    "and big-picture connections. Do not emphasize any single style."
)

PROVISIONAL_INSTRUCTION = (
    "This profile is still being built and its confidence is low, so do not rely on the "
    "tentative dominant style. Weight all modalities roughly equally and observe which "
    "explanations land best."
)

STYLE_INSTRUCTIONS: dict[Modality, str] = {
    Modality.VISUAL: (
        "This student is a VISUAL learner. Use diagrams, charts, color-coded content, "
        "spatial arrangements, and vivid imagery. Format content with clear visual "
        "hierarchy, bullet points, and structured layouts."
    ),
    Modality.LOGICAL: (
        "This student is a LOGICAL learner. Use step-by-step proofs, reasoning frameworks, "
        "cause-and-effect chains, and systematic breakdowns. Show WHY things work, not "
        "just WHAT they are."
    ),
    Modality.VERBAL: (
        "This student is a VERBAL learner. Use rich explanations, discussions, analogies, "
        "storytelling, and word-based mnemonics. Explain concepts conversationally as if "
        "teaching a friend."
    ),
    Modality.KINESTHETIC: (
        "This student is a KINESTHETIC learner. Focus on hands-on problems, interactive "
        "exercises, real-world applications, and learn-by-doing approaches. Give them "
        "problems to solve immediately after each concept."
    ),
    Modality.CONCEPTUAL: (
        "This student is a CONCEPTUAL learner. Start with the big picture, show how concepts "
        "connect to each other, and use mind-maps and relationship diagrams. Help them see "
        "the forest before the trees."
    ),
}

SECONDARY_TEMPLATE = (
    "Secondary style: {label}. Incorporate elements of this style as well to support "
    "the primary approach."
)

CLOSING_DIRECTIVE = (
    "If the student explicitly asks for a different explanation format, honor it immediately. "
    "After explaining, offer to present the material in an alternate format. If the student "
    "indicates they did not understand, switch to a different modality. Never sacrifice the "
    "completeness or accuracy of the educational content for stylistic fit."
)


def prompt_state(profile: Optional[LearningStyleProfile]) -> PromptState:
    """Classify a profile into a composer state."""
    if profile is None:
        return PromptState.NO_PROFILE
    if profile.confidence < TRUSTED_CONFIDENCE or not has_minimum_evidence(profile.total_interactions):
        return PromptState.PROVISIONAL
    return PromptState.TRUSTED


def format_breakdown(scores: ModalityScores, heading: str = "Learning style profile") -> str:
    """One-line numeric breakdown, e.g. 'visual 40%, logical 30%, ...'."""
    parts = ", ".join(f"{m.value} {scores.get(m)}%" for m in MODALITY_ORDER)
    return f"{heading}: {parts}."


def _compose_no_profile(profile: None) -> list[str]:
    return [BALANCED_INSTRUCTION]


def _compose_provisional(profile: LearningStyleProfile) -> list[str]:
    return [
        format_breakdown(profile.scores)
        + f" (confidence {profile.confidence}%, based on {profile.total_interactions} interactions)",
        PROVISIONAL_INSTRUCTION,
    ]


def _compose_trusted(profile: LearningStyleProfile) -> list[str]:
    lines = [
        format_breakdown(profile.scores) + f" (confidence {profile.confidence}%)",
    ]
    dominant = profile.dominant_style.modality
    if dominant is None:
        lines.append(BALANCED_INSTRUCTION)
    else:
        lines.append(STYLE_INSTRUCTIONS[dominant])

    secondary = profile.secondary_style
    if secondary is not None and secondary is not dominant:
        lines.append(SECONDARY_TEMPLATE.format(label=STYLE_LABELS[secondary.value]))
    return lines


_STATE_RENDERERS: dict[PromptState, Callable[..., list[str]]] = {
    PromptState.NO_PROFILE: _compose_no_profile,
    PromptState.PROVISIONAL: _compose_provisional,
    PromptState.TRUSTED: _compose_trusted,
}


def compose_directive(
    profile: Optional[LearningStyleProfile],
    subject: Optional[str] = None,
) -> str:
    """
    Build the personalization directive placed ahead of user content.

    Args:
        profile: Active profile, or None when no profile is available
        subject: Current subject; its breakdown is appended when the
            profile has a sub-profile for it

    Returns:
        Directive string ending with the closing directive
    """
    state = prompt_state(profile)
    lines = _STATE_RENDERERS[state](profile)

    if profile is not None and subject and subject in profile.subject_profiles:
        sub_scores = profile.subject_profiles[subject]
        if not sub_scores.is_empty:
            lines.append(format_breakdown(sub_scores, heading=f"For {subject} specifically"))

    lines.append(CLOSING_DIRECTIVE)
    return "\n\n".join(lines)
