"""Tone-conflict contradiction check against earlier answers."""
from __future__ import annotations

from typing import Dict, FrozenSet, Iterable, Optional

from agents.types import PlayerResponse, Tone

TONE_CONFLICTS: Dict[str, FrozenSet[str]] = {
    "aggressive": frozenset({"defensive", "evasive"}),
    "defensive": frozenset({"aggressive", "confrontational"}),
    "confrontational": frozenset({"diplomatic", "defensive"}),
    "diplomatic": frozenset({"aggressive", "confrontational"}),
}


def tones_conflict(earlier: str, later: str) -> bool:
    return later in TONE_CONFLICTS.get(earlier, frozenset())


def find_contradiction(
    topic: Optional[str],
    tone: Tone,
    history: Iterable[PlayerResponse],
) -> Optional[PlayerResponse]:
    """Earliest answer on the same topic whose tone clashes with ``tone``."""

    if not topic:
        return None
    for previous in history:
        if previous.topic == topic and tones_conflict(previous.tone, tone):
            return previous
    return None


__all__ = ["TONE_CONFLICTS", "find_contradiction", "tones_conflict"]
