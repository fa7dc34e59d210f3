"""Interviewer memory: what the candidate said, dodged, and how it landed."""
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, List, Literal, Optional

from pydantic import BaseModel

from agents.interviewer_profile import (
    DEFAULT_INTERRUPTIONS,
    STYLE_INTERRUPTIONS,
    InterviewerProfile,
)
from agents.mood import derive_mood
from agents.types import MemoryStats, Mood, PlayerResponse
from config.policy import InterviewPolicy
from config.settings import settings
from services.randomness import RandomSource, seeded

logger = logging.getLogger(__name__)

AssessmentLabel = Literal["impressed", "frustrated", "cautiously optimistic", "skeptical", "neutral"]

ACCOUNTABILITY_CHALLENGES: List[str] = [
    "You've contradicted yourself, evaded questions, and given weak answers. How can voters trust you?",
    "I count multiple contradictions and evasions tonight. Is this how you'll govern?",
    "Your track record in this interview raises serious questions about your reliability.",
    "Politicians promise accountability, but you can't even be accountable in this interview.",
]

MOOD_INTENSIFIERS: Dict[str, str] = {
    "frustrated": " I'm losing patience here.",
    "hostile": " This is unacceptable.",
    "skeptical": " Do you think our viewers are fooled by this?",
    "excited": " But let's dig deeper into this.",
    "sympathetic": " Help me understand your position.",
}

_QUOTABLE = ("confident", "confrontational")
_STRONG = ("confident", "diplomatic")


@dataclass
class _Statement:
    question_id: str
    text: str


@dataclass
class _Evasion:
    question_id: str
    topic: Optional[str]


@dataclass
class _Contradiction:
    question_id: str
    topic: Optional[str]
    previous_statement: Optional[str]


class InterviewerAssessment(BaseModel):
    mood: Mood
    frustration: float
    approval: float
    label: AssessmentLabel


def _clip(text: str, limit: int) -> str:
    return text[:limit] + ("..." if len(text) > limit else "")


def _clamp(value: float) -> float:
    return max(0.0, min(100.0, value))


def intensify_by_mood(message: str, mood: str) -> str:
    """Append the mood's sting to an interruption; calm moods leave it alone."""

    return message + MOOD_INTENSIFIERS.get(mood, "")


class InterviewerMemory:
    """Per-interview memory with a derived mood.

    Everything here is owned by one interview. Logs are bounded by
    ``policy.memory``; frustration and approval stay within [0, 100] and move
    only through ``record_statement``.
    """

    def __init__(
        self,
        profile: Optional[InterviewerProfile] = None,
        policy: Optional[InterviewPolicy] = None,
        rng: Optional[RandomSource] = None,
    ) -> None:
        self.profile = profile or InterviewerProfile()
        self.policy = policy or InterviewPolicy()
        self._rng = rng or seeded(settings.RANDOM_SEED)
        self.reset()

    def reset(self) -> None:
        limits = self.policy.memory
        self._statements: Dict[str, List[_Statement]] = {}
        self._quotes: Deque[str] = deque(maxlen=limits.quotes)
        self._evasions: Deque[_Evasion] = deque(maxlen=limits.evasions)
        self._strong_moments: Deque[str] = deque(maxlen=limits.moments)
        self._weak_moments: Deque[str] = deque(maxlen=limits.moments)
        self._contradictions: Deque[_Contradiction] = deque(maxlen=limits.contradictions)
        self._recent_tones: Deque[str] = deque(maxlen=limits.recent_tones)
        self._frustration = 0.0
        self._approval = self.policy.approval.start
        self._last_question_id: Optional[str] = None

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------
    def record_statement(self, response: PlayerResponse) -> None:
        limits = self.policy.memory
        frustration = self.policy.frustration
        approval = self.policy.approval
        text = response.response_text
        topic = response.topic
        previous = self._earlier_statement(topic, response.question_id)

        if topic and len(text) > limits.statement_min_chars:
            self._statements.setdefault(topic, []).append(_Statement(response.question_id, text))

        if response.tone in _QUOTABLE and len(text) > limits.quote_min_chars:
            self._quotes.append(f'"{_clip(text, 80)}"')

        if response.tone == "evasive":
            self._evasions.append(_Evasion(response.question_id, topic))
            self._approval += approval.evasion_delta

        if response.word_count > 50 and response.tone in _STRONG:
            self._strong_moments.append(response.question_id)
            self._approval += approval.strong_moment_delta
        elif response.word_count < 10 or response.tone == "evasive":
            self._weak_moments.append(response.question_id)

        if response.contradicts_previous:
            self._contradictions.append(
                _Contradiction(
                    question_id=response.question_id,
                    topic=topic,
                    previous_statement=previous.text if previous else None,
                )
            )
            self._frustration += frustration.contradiction_delta
            self._approval += approval.contradiction_delta

        self._frustration += frustration.tone_deltas.get(response.tone, 0.0)
        if response.word_count < frustration.short_response_words:
            self._frustration += frustration.short_response_delta

        self._frustration = _clamp(self._frustration)
        self._approval = _clamp(self._approval)
        self._recent_tones.append(response.tone)
        self._last_question_id = response.question_id
        logger.debug(
            "memory updated question=%s frustration=%.1f approval=%.1f",
            response.question_id,
            self._frustration,
            self._approval,
        )

    def _earlier_statement(self, topic: Optional[str], exclude_question: Optional[str]) -> Optional[_Statement]:
        if not topic:
            return None
        for statement in self._statements.get(topic, []):
            if statement.question_id != exclude_question:
                return statement
        return None

    # ------------------------------------------------------------------
    # Recall
    # ------------------------------------------------------------------
    def generate_reference(self, topic: str) -> Optional[str]:
        earlier = self._earlier_statement(topic, self._last_question_id)
        if earlier:
            return f'Earlier you said "{_clip(earlier.text, 60)}" How does that square with this?'

        contradiction = next(
            (c for c in self._contradictions if c.topic == topic and c.previous_statement),
            None,
        )
        if contradiction:
            return (
                "Wait, you just contradicted yourself. You previously said "
                f'"{contradiction.previous_statement[:60]}..." Which position is correct?'
            )

        topic_evasions = [e for e in self._evasions if e.topic == topic]
        if len(topic_evasions) >= 2:
            ordinal = "second" if len(topic_evasions) == 2 else "third"
            return (
                f"This is the {ordinal} time you've avoided answering about {topic}. "
                "Why won't you give a straight answer?"
            )

        if self._quotes and self._rng.random() < self.policy.quote_recall_probability:
            quote = self._rng.choice(list(self._quotes))
            return f"You seemed so confident when you said {quote}. What's different now?"

        return None

    def generate_contextual_follow_up(self, response: PlayerResponse) -> Optional[str]:
        if response.tone == "confident" and self._weak_moments:
            return "You sound confident now, but you seemed uncertain when I asked about other issues. What's changed?"
        if response.tone == "evasive" and self._strong_moments:
            return "You were articulate earlier, why the vague answer now? What are you not telling us?"
        if response.tone == "evasive" and response.topic in self.profile.expertise_topics:
            return "This should be your area of expertise. Why are you being so vague?"
        return None

    def generate_accountability_challenge(self) -> Optional[str]:
        problems = len(self._contradictions) + len(self._evasions) + len(self._weak_moments)
        if problems < 3:
            return None
        return self._rng.choice(ACCOUNTABILITY_CHALLENGES)

    # ------------------------------------------------------------------
    # Interruptions
    # ------------------------------------------------------------------
    def should_interrupt(self, response: PlayerResponse) -> bool:
        profile = self.profile
        if response.tone == "evasive" and self._rng.random() < (1 - profile.interruption_threshold):
            return True
        if response.word_count > 100 and profile.follow_up_tendency > 0.7:
            return self._rng.random() < 0.3
        return False

    def generate_interruption(self, response: PlayerResponse) -> str:
        profile = self.profile
        if response.topic and response.topic in profile.contextual_focus:
            reactions = profile.contextual_reactions.get(response.topic)
            if reactions:
                return self._rng.choice(reactions)
        pool = STYLE_INTERRUPTIONS.get(profile.questioning_style, DEFAULT_INTERRUPTIONS)
        return self._rng.choice(pool)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get_mood(self) -> Mood:
        return derive_mood(
            self._frustration,
            list(self._recent_tones),
            len(self._contradictions),
            len(self._evasions),
            self.policy.mood,
        )

    def get_frustration_level(self) -> float:
        return self._frustration

    def get_approval_level(self) -> float:
        return self._approval

    def get_memory_stats(self) -> MemoryStats:
        return MemoryStats(
            total_statements=len(self._statements),
            contradictions=len(self._contradictions),
            evasions=len(self._evasions),
            strong_moments=len(self._strong_moments),
            weak_moments=len(self._weak_moments),
            quotes=len(self._quotes),
        )

    def get_overall_assessment(self) -> InterviewerAssessment:
        mood = self.get_mood()
        frustration = self._frustration
        approval = self._approval
        if frustration > 70 or mood == "hostile":
            label: AssessmentLabel = "frustrated"
        elif mood in ("excited", "approving") or approval >= 75:
            label = "impressed"
        elif mood == "skeptical":
            label = "skeptical"
        elif approval >= 60:
            label = "cautiously optimistic"
        else:
            label = "neutral"
        return InterviewerAssessment(mood=mood, frustration=frustration, approval=approval, label=label)


__all__ = [
    "ACCOUNTABILITY_CHALLENGES",
    "MOOD_INTENSIFIERS",
    "InterviewerAssessment",
    "InterviewerMemory",
    "intensify_by_mood",
]
