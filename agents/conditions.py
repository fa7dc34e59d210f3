"""Condition grammar shared by follow-up rules and interruption triggers."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

from agents.types import (
    ConversationState,
    FollowUpRule,
    InterruptionTrigger,
    Mood,
    PlayerResponse,
)
from services.randomness import RandomSource

logger = logging.getLogger(__name__)

_WORD_COUNT = re.compile(r"word_count\s*([<>])\s*(\d+)")
_PREFIXED = ("tone", "topic", "interviewer_mood")
_NAMED = {
    "contradicts:previous": "contradicts_previous",
    "low_confidence": "low_confidence",
    "high_consistency": "high_consistency",
    "evasion": "evasive",
    "evasive": "evasive",
    "deflection": "deflection",
    "repeated_evasion": "repeated_evasion",
    "high_frustration": "high_frustration",
}

LOW_CONFIDENCE_BELOW = 40.0
HIGH_CONSISTENCY_ABOVE = 80.0
HIGH_FRUSTRATION_ABOVE = 60.0
DEFLECTION_MIN_WORDS = 30


@dataclass(frozen=True)
class Condition:
    """Parsed form of a condition string."""

    kind: str
    value: Optional[str] = None
    threshold: Optional[int] = None


@dataclass
class ConditionContext:
    response: PlayerResponse
    state: ConversationState
    mood: Mood = "neutral"
    frustration: float = 0.0


def parse_condition(raw: Optional[str]) -> Optional[Condition]:
    """Return the parsed condition or ``None`` when the string is not understood."""

    text = (raw or "").strip()
    if not text:
        return None
    if text in _NAMED:
        return Condition(kind=_NAMED[text])
    match = _WORD_COUNT.fullmatch(text)
    if match:
        kind = "word_count_gt" if match.group(1) == ">" else "word_count_lt"
        return Condition(kind=kind, threshold=int(match.group(2)))
    prefix, sep, value = text.partition(":")
    if sep and prefix in _PREFIXED and value.strip():
        return Condition(kind=prefix, value=value.strip())
    return None


def evaluate(condition: Condition, ctx: ConditionContext) -> bool:
    response = ctx.response
    perf = ctx.state.performance
    kind = condition.kind

    if kind == "tone":
        return response.tone == condition.value
    if kind == "topic":
        return response.topic == condition.value
    if kind == "interviewer_mood":
        return ctx.mood == condition.value
    if kind == "word_count_gt":
        return response.word_count > (condition.threshold or 0)
    if kind == "word_count_lt":
        return response.word_count < (condition.threshold or 0)
    if kind == "contradicts_previous":
        return response.contradicts_previous
    if kind == "low_confidence":
        return perf.confidence < LOW_CONFIDENCE_BELOW
    if kind == "high_consistency":
        return perf.consistency > HIGH_CONSISTENCY_ABOVE
    if kind == "evasive":
        return response.tone == "evasive"
    if kind == "deflection":
        return response.tone == "defensive" and response.word_count > DEFLECTION_MIN_WORDS
    if kind == "repeated_evasion":
        recent = ctx.state.player_responses[-2:]
        return len(recent) == 2 and all(r.tone == "evasive" for r in recent)
    if kind == "high_frustration":
        return ctx.frustration > HIGH_FRUSTRATION_ABOVE
    return False


def _roll(probability: float, rng: RandomSource) -> bool:
    if probability >= 1.0:
        return True
    if probability <= 0.0:
        return False
    return rng.random() < probability


def rule_fires(rule: FollowUpRule, ctx: ConditionContext, rng: RandomSource) -> bool:
    """Follow-up rules: unknown or malformed conditions never match."""

    condition = parse_condition(rule.condition)
    if condition is None:
        logger.debug("ignoring follow-up rule with unparseable condition %r", rule.condition)
        return False
    if not evaluate(condition, ctx):
        return False
    probability = 1.0 if rule.probability is None else rule.probability
    return _roll(probability, rng)


def trigger_fires(trigger: InterruptionTrigger, ctx: ConditionContext, rng: RandomSource) -> bool:
    """Interruption triggers: unrecognised conditions fire on probability alone."""

    condition = parse_condition(trigger.condition)
    if condition is not None and not evaluate(condition, ctx):
        return False
    return _roll(trigger.probability, rng)


__all__ = [
    "Condition",
    "ConditionContext",
    "parse_condition",
    "evaluate",
    "rule_fires",
    "trigger_fires",
]
