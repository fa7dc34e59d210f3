"""Rapid-fire escalation: a short burst of timed, escalating questions."""
from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Optional

from agents.errors import RapidFireSessionError
from agents.types import (
    ConversationAction,
    ExpectedResponseType,
    FollowUpType,
    Intensity,
    Mood,
    PlayerResponse,
    RapidFireQuestion,
    RapidFireSession,
    RapidFireStatus,
)
from config.rapid_fire import RapidFireConfig, RapidFireTrigger
from services.clock import Clock, monotonic

logger = logging.getLogger(__name__)

URGENCY_PREFIXES = ("Look,", "Listen,", "Come on,", "Seriously,")

_THRESHOLD = re.compile(r"(evasion_count|topic_avoidance|interviewer_frustration)\s*>=\s*(\d+(?:\.\d+)?)")
_POLICY_OR_ISSUE = re.compile(r"this (policy|issue)")


@dataclass
class TriggerSignals:
    """Live counters a trigger condition can test."""

    evasion_count: int
    topic_avoidance: int
    interviewer_frustration: float
    contradiction_detected: bool


def condition_met(condition: str, signals: TriggerSignals) -> bool:
    text = condition.strip()
    if text == "contradiction_detected":
        return signals.contradiction_detected
    match = _THRESHOLD.fullmatch(text)
    if not match:
        logger.debug("unknown rapid-fire condition %r", condition)
        return False
    return getattr(signals, match.group(1)) >= float(match.group(2))


def follow_up_type_for(index: int, total: int) -> FollowUpType:
    if index == 0:
        return "clarification"
    if index < total / 2:
        return "challenge"
    if index == total - 1:
        return "contradiction"
    return "pressure"


def expected_response_type_for(index: int, intensity: Intensity) -> ExpectedResponseType:
    if intensity == "extreme" or index == 0:
        return "yes-no"
    if intensity == "high" and index < 2:
        return "direct"
    if index == 1:
        return "specific-fact"
    return "detailed"


def escalation_level(index: int, rate: float) -> int:
    # round half up
    return int(math.floor(rate ** index + 0.5))


def contextualize(template: str, topic: Optional[str], position: int) -> str:
    """Fill the topic into a template and add urgency from the third question on."""

    text = template
    if topic:
        text = text.replace("this topic", topic)
        text = _POLICY_OR_ISSUE.sub(lambda m: f"this {topic} {m.group(1)}", text)
    if position > 2:
        prefix = URGENCY_PREFIXES[min(position - 3, len(URGENCY_PREFIXES) - 1)]
        text = f"{prefix} {text.lower()}"
    return text


class RapidFireEngine:
    """Idle/active state machine owning at most one session."""

    def __init__(self, config: Optional[RapidFireConfig] = None, clock: Optional[Clock] = None) -> None:
        self.config = config or RapidFireConfig()
        self._clock = clock or monotonic
        self.session: Optional[RapidFireSession] = None
        self.last_started_at: Optional[float] = None

    @property
    def is_active(self) -> bool:
        return self.session is not None

    def reset(self) -> None:
        self.session = None
        self.last_started_at = None

    def cooldown_remaining(self) -> float:
        if self.last_started_at is None:
            return 0.0
        return max(0.0, self.last_started_at + self.config.cooldown_seconds - self._clock())

    def find_trigger(self, signals: TriggerSignals) -> Optional[RapidFireTrigger]:
        if not self.config.enabled or self.is_active:
            return None
        if self.cooldown_remaining() > 0:
            return None
        for trigger in self.config.triggers:
            if condition_met(trigger.condition, signals):
                return trigger
        return None

    def start(self, trigger: RapidFireTrigger, response: PlayerResponse) -> RapidFireSession:
        if self.is_active:
            raise RapidFireSessionError("a rapid-fire session is already active")
        scaling = self.config.scaling_for(trigger.intensity)
        total = trigger.question_count or scaling.question_count
        time_limit = trigger.time_constraint or scaling.time_limit
        questions = []
        for index in range(total):
            template = trigger.questions[index] if index < len(trigger.questions) else trigger.questions[-1]
            questions.append(
                RapidFireQuestion(
                    id=f"rapid-fire-{trigger.id}-{index + 1}",
                    text=contextualize(template, response.topic, index + 1),
                    follow_up_type=follow_up_type_for(index, total),
                    time_limit=time_limit,
                    expected_response_type=expected_response_type_for(index, trigger.intensity),
                    escalation_level=escalation_level(index, scaling.escalation_rate),
                )
            )
        now = self._clock()
        self.session = RapidFireSession(
            trigger_id=trigger.id,
            trigger_reason=trigger.description,
            target_topic=response.topic or "general",
            intensity=trigger.intensity,
            max_questions=total,
            questions_remaining=total,
            time_constraint=time_limit,
            questions=questions,
            started_at=now,
        )
        self.last_started_at = now
        return self.session

    def should_end(self, response: PlayerResponse, mood: Mood) -> bool:
        session = self.session
        if session is None:
            return True
        if response.tone == "confident" and 15 <= response.word_count <= 40:
            return True
        if mood in ("sympathetic", "excited"):
            return True
        return session.current_question > session.max_questions

    def next_action(self, response: PlayerResponse, mood: Mood) -> Optional[ConversationAction]:
        """Ask the next burst question, or close the session and return ``None``."""

        session = self.session
        if session is None:
            raise RapidFireSessionError("rapid-fire handler called without an active session")

        if session.questions_remaining <= 0 or self.should_end(response, mood):
            self.end()
            return None

        index = session.max_questions - session.questions_remaining
        if index >= len(session.questions):
            self.end()
            return None
        question = session.questions[index]
        session.questions_remaining -= 1
        session.current_question += 1

        return ConversationAction(
            type="follow-up",
            content=question.text,
            metadata={
                "rapid_fire": True,
                "question_id": question.id,
                "follow_up_type": question.follow_up_type,
                "time_limit": question.time_limit,
                "expected_response_type": question.expected_response_type,
                "escalation_level": question.escalation_level,
                "questions_remaining": session.questions_remaining,
                "session_intensity": session.intensity,
                "trigger_reason": session.trigger_reason,
            },
        )

    def end(self) -> None:
        if self.session is not None:
            logger.debug(
                "rapid-fire session %s closed after %d questions",
                self.session.trigger_id,
                self.session.current_question,
            )
        self.session = None

    def status(self) -> RapidFireStatus:
        return RapidFireStatus(
            is_active=self.is_active,
            session=self.session.model_copy(deep=True) if self.session else None,
            cooldown_remaining=self.cooldown_remaining(),
        )


__all__ = [
    "URGENCY_PREFIXES",
    "TriggerSignals",
    "RapidFireEngine",
    "condition_met",
    "contextualize",
    "escalation_level",
    "expected_response_type_for",
    "follow_up_type_for",
]
