"""Interviewer mood derivation."""
from __future__ import annotations

from typing import Optional, Sequence

from agents.types import Mood
from config.policy import MoodPolicy

_POSITIVE = {"confident", "authentic", "diplomatic"}
_NEGATIVE = {"evasive", "defensive", "aggressive", "confrontational"}


def derive_mood(
    frustration: float,
    recent_tones: Sequence[str],
    contradiction_count: int,
    evasion_count: int = 0,
    policy: Optional[MoodPolicy] = None,
) -> Mood:
    """Map the interviewer's scalars onto a mood label.

    Pure: the same inputs always give the same label, so a frustration trace
    is enough to replay mood. Anger bands and any caught contradiction win over
    the tone window; a calm interviewer warms up only after a full window of
    answers with no dodging or attacking in it.
    """

    policy = policy or MoodPolicy()
    if frustration >= policy.hostile_at:
        return "hostile"
    if frustration >= policy.frustrated_at:
        return "frustrated"
    if (
        frustration >= policy.skeptical_at
        or contradiction_count >= policy.skeptical_contradictions
        or evasion_count >= policy.skeptical_evasions
    ):
        return "skeptical"

    window = list(recent_tones)[-policy.window:]
    if len(window) < policy.window or any(tone in _NEGATIVE for tone in window):
        return "neutral"
    if frustration < policy.calm_below:
        if all(tone == "confident" for tone in window):
            return "excited"
        if sum(tone in ("authentic", "diplomatic") for tone in window) >= 2:
            return "sympathetic"
    if all(tone in _POSITIVE for tone in window):
        return "professional"
    return "neutral"


__all__ = ["derive_mood"]
