"""Evasion, filibuster and deflection detection."""
from __future__ import annotations

from typing import Dict, List, Optional

from agents.types import ConversationAction, ConversationState, EvasionStats, PlayerResponse
from services.randomness import RandomSource, seeded

EVASION_TRIGGER_COUNT = 3
TOPIC_AVOIDANCE_COUNT = 2
SHORT_ANSWER_WORDS = 8
LONG_DEFENSIVE_WORDS = 50
FILIBUSTER_RATIO = 2.5
FILIBUSTER_MIN_WORDS = 80
DEFAULT_AVERAGE_WORDS = 30.0
DEFLECTION_WINDOW = 3
DEFLECTION_MIN_RUN = 2

DEFLECTION_PHRASES = (
    "but what about",
    "the real issue is",
    "we should focus on",
    "that's not the point",
    "the important thing is",
)

ESCALATION_TIERS = ("first", "second", "critical")

ESCALATION_MESSAGES: Dict[str, List[str]] = {
    "first": [
        "I need to stop you there. You're not answering the questions.",
        "Hold on. Can we get a straight answer please?",
        "You're dodging every question. Our viewers deserve better.",
    ],
    "second": [
        "This is becoming a pattern. Answer the question directly.",
        "Stop. Every answer is an evasion. What are you hiding?",
        "I'm going to keep asking until you give a real answer.",
    ],
    "critical": [
        "This interview is pointless if you won't engage honestly.",
        "Your refusal to answer is telling our viewers everything they need to know.",
        "Either answer the questions or we'll end this interview.",
    ],
}

TOPIC_AVOIDANCE_MESSAGES: Dict[str, List[str]] = {
    "climate": [
        "You keep avoiding climate questions. This is a critical issue.",
        "Every time I ask about climate, you change the subject. Why?",
        "Climate action can't wait for more evasions.",
    ],
    "immigration": [
        "Immigration is too important for non-answers.",
        "You've avoided this immigration question twice. What's your position?",
        "Voters want clarity on immigration, not evasion.",
    ],
    "healthcare": [
        "Healthcare affects everyone. Stop dodging the question.",
        "People are suffering. They deserve straight answers about healthcare.",
        "You can't govern healthcare policy while avoiding healthcare questions.",
    ],
    "economy": [
        "Economic policy needs clear answers, not deflection.",
        "The economy is central to governance. Why won't you engage?",
        "Financial expertise means nothing if you won't discuss economics.",
    ],
}

FILIBUSTER_MESSAGES: List[str] = [
    "I'm going to stop you there. That's a lot of words without answering the question.",
    "You're filibustering. Can you give me a concise, direct answer?",
    "All those words, but where's the answer to my question?",
    "Let's cut through the political rhetoric. Simple question, simple answer.",
]

DEFLECTION_MESSAGES: List[str] = [
    "Stop deflecting. I'm asking about your position, not others'.",
    "You keep changing the subject. Stay focused on the question.",
    "Deflection isn't leadership. What would you do?",
    "That's deflection again. Take responsibility and answer directly.",
]


def escalation_tier(evasion_count: int) -> str:
    """Tier name for a consecutive-evasion count: first at 3, second at 4, critical from 5."""

    index = min(max(evasion_count - EVASION_TRIGGER_COUNT, 0), len(ESCALATION_TIERS) - 1)
    return ESCALATION_TIERS[index]


def has_deflection_language(text: str) -> bool:
    lowered = text.lower()
    return any(phrase in lowered for phrase in DEFLECTION_PHRASES)


def average_response_length(state: ConversationState) -> float:
    if not state.player_responses:
        return DEFAULT_AVERAGE_WORDS
    total = sum(r.word_count for r in state.player_responses)
    return total / len(state.player_responses)


def count_consecutive_deflections(state: ConversationState) -> int:
    """Length of the newest run of defensive or deflecting answers among the last three."""

    count = 0
    for response in reversed(state.player_responses[-DEFLECTION_WINDOW:]):
        if response.tone == "defensive" or has_deflection_language(response.response_text):
            count += 1
        else:
            break
    return count


def _topic_avoidance_lines(topic: str, count: int) -> List[str]:
    lines = TOPIC_AVOIDANCE_MESSAGES.get(topic)
    if lines:
        return lines
    ordinal = "second" if count == 2 else "third"
    return [
        f"You keep avoiding questions about {topic}. Why?",
        f"This is the {ordinal} time you've dodged this {topic} question.",
        f"{topic[:1].upper()}{topic[1:]} policy requires honest discussion.",
    ]


class EvasionDetector:
    """Tracks evasion counters and spots dodging patterns."""

    def __init__(self, rng: Optional[RandomSource] = None) -> None:
        self._rng = rng or seeded()
        self.evasion_counter = 0
        self.topic_evasions: Dict[str, int] = {}

    def reset(self) -> None:
        self.evasion_counter = 0
        self.topic_evasions = {}

    @staticmethod
    def is_evasive(response: PlayerResponse) -> bool:
        return (
            response.tone == "evasive"
            or (response.tone == "defensive" and response.word_count > LONG_DEFENSIVE_WORDS)
            or response.word_count < SHORT_ANSWER_WORDS
        )

    def update_tracking(self, response: PlayerResponse) -> None:
        if self.is_evasive(response):
            self.evasion_counter += 1
            if response.topic:
                self.topic_evasions[response.topic] = self.topic_evasions.get(response.topic, 0) + 1
        else:
            self.evasion_counter = max(0, self.evasion_counter - 1)

    def topic_avoidance(self, topic: Optional[str]) -> int:
        if not topic:
            return 0
        return self.topic_evasions.get(topic, 0)

    def is_filibustering(self, response: PlayerResponse, state: ConversationState) -> bool:
        return (
            response.word_count > average_response_length(state) * FILIBUSTER_RATIO
            and response.word_count > FILIBUSTER_MIN_WORDS
            and response.tone in ("evasive", "defensive")
        )

    def is_deflecting(self, response: PlayerResponse, state: ConversationState) -> bool:
        return (
            has_deflection_language(response.response_text)
            and count_consecutive_deflections(state) >= DEFLECTION_MIN_RUN
        )

    def check_patterns(self, response: PlayerResponse, state: ConversationState) -> Optional[ConversationAction]:
        """First matching pattern wins: evasions, topic avoidance, filibuster, deflection."""

        if self.evasion_counter >= EVASION_TRIGGER_COUNT:
            tier = escalation_tier(self.evasion_counter)
            return ConversationAction(
                type="interruption",
                content=self._rng.choice(ESCALATION_MESSAGES[tier]),
                metadata={
                    "trigger": "consecutive-evasions",
                    "evasion_count": self.evasion_counter,
                    "escalation_tier": tier,
                    "severity": "critical" if tier == "critical" else "major",
                },
            )

        avoided = self.topic_avoidance(response.topic)
        if avoided >= TOPIC_AVOIDANCE_COUNT:
            return ConversationAction(
                type="interruption",
                content=self._rng.choice(_topic_avoidance_lines(response.topic, avoided)),
                metadata={
                    "trigger": "topic-avoidance",
                    "topic": response.topic,
                    "avoidance_count": avoided,
                },
            )

        if self.is_filibustering(response, state):
            return ConversationAction(
                type="interruption",
                content=self._rng.choice(FILIBUSTER_MESSAGES),
                metadata={
                    "trigger": "filibustering",
                    "word_count": response.word_count,
                    "average_length": average_response_length(state),
                },
            )

        if self.is_deflecting(response, state):
            return ConversationAction(
                type="interruption",
                content=self._rng.choice(DEFLECTION_MESSAGES),
                metadata={
                    "trigger": "deflection-pattern",
                    "consecutive_deflections": count_consecutive_deflections(state),
                },
            )

        return None

    def get_evasion_stats(self) -> EvasionStats:
        return EvasionStats(
            total_evasions=self.evasion_counter,
            topic_evasions=dict(self.topic_evasions),
        )


__all__ = [
    "DEFLECTION_PHRASES",
    "ESCALATION_MESSAGES",
    "ESCALATION_TIERS",
    "TOPIC_AVOIDANCE_MESSAGES",
    "FILIBUSTER_MESSAGES",
    "DEFLECTION_MESSAGES",
    "EvasionDetector",
    "average_response_length",
    "count_consecutive_deflections",
    "escalation_tier",
    "has_deflection_language",
]
