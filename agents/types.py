"""Shared type definitions for the interview controller."""
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Tone = Literal[
    "confident",
    "defensive",
    "evasive",
    "diplomatic",
    "aggressive",
    "confrontational",
    "authentic",
]

Mood = Literal[
    "neutral",
    "professional",
    "skeptical",
    "frustrated",
    "hostile",
    "sympathetic",
    "excited",
    "surprised",
    "approving",
]

ActionType = Literal[
    "question",
    "follow-up",
    "interruption",
    "contradiction-challenge",
    "conclusion",
]

Intensity = Literal["low", "medium", "high", "extreme"]
FollowUpType = Literal["clarification", "challenge", "contradiction", "pressure"]
ExpectedResponseType = Literal["yes-no", "specific-fact", "direct", "detailed"]


class PlayerResponse(BaseModel):
    """One classified answer from the candidate."""

    model_config = ConfigDict(frozen=True)

    question_id: str
    response_text: str
    tone: Tone
    word_count: int = Field(ge=0)
    topic: Optional[str] = None
    contradicts_previous: bool = False
    timestamp: float = 0.0


class PerformanceSnapshot(BaseModel):  # Written by the external analyzer
    confidence: float = 50.0
    consistency: float = 100.0
    authenticity: float = 50.0
    engagement: float = 50.0
    overall_score: float = 50.0
    major_mistakes: List[str] = Field(default_factory=list)
    strong_moments: List[str] = Field(default_factory=list)


class ConversationState(BaseModel):
    """Per-interview conversation record shared with the analyzer."""

    answered_questions: List[str] = Field(default_factory=list)
    player_responses: List[PlayerResponse] = Field(default_factory=list)
    performance: PerformanceSnapshot = Field(default_factory=PerformanceSnapshot)

    def mark_answered(self, question_id: str) -> None:
        if question_id not in self.answered_questions:
            self.answered_questions.append(question_id)

    def record_response(self, response: PlayerResponse) -> None:
        self.player_responses.append(response)
        self.mark_answered(response.question_id)


class ConversationAction(BaseModel):
    """The single decision emitted per player turn."""

    type: ActionType
    content: str
    metadata: Dict[str, Any] = Field(default_factory=dict)


# ----------------------------------------------------------------------
# Question content
# ----------------------------------------------------------------------
class Urgency(BaseModel):
    time_limit: int
    warning_threshold: int
    timeout_action: Literal["auto-select", "penalty"] = "auto-select"


class InterruptionTrigger(BaseModel):
    condition: str
    message: str
    probability: float = Field(default=1.0, ge=0.0, le=1.0)
    follow_up_action: Optional[str] = None


class FollowUpRule(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    condition: str = Field(alias="if")
    then: str
    probability: Optional[float] = Field(default=None, ge=0.0, le=1.0)


class DynamicQuestion(BaseModel):
    id: str
    question: str
    setup: Optional[str] = None
    type: str = "standard"
    topic: Optional[str] = None
    urgency: Optional[Urgency] = None
    interruption_triggers: List[InterruptionTrigger] = Field(default_factory=list)
    follow_up_rules: List[FollowUpRule] = Field(default_factory=list)


class QuestionArc(BaseModel):
    """Ordered plan of questions for one interview."""

    background_id: str = "general"
    questions: List[DynamicQuestion] = Field(default_factory=list)

    def get(self, question_id: Optional[str]) -> Optional[DynamicQuestion]:
        if not question_id:
            return None
        return next((q for q in self.questions if q.id == question_id), None)

    def ids(self) -> List[str]:
        return [q.id for q in self.questions]


# ----------------------------------------------------------------------
# Rapid-fire
# ----------------------------------------------------------------------
class RapidFireQuestion(BaseModel):
    id: str
    text: str
    follow_up_type: FollowUpType
    time_limit: int
    expected_response_type: ExpectedResponseType
    escalation_level: int


class RapidFireSession(BaseModel):  # At most one alive per controller
    trigger_id: str
    trigger_reason: str
    target_topic: str = "general"
    intensity: Intensity
    max_questions: int
    questions_remaining: int
    current_question: int = 0
    time_constraint: int
    questions: List[RapidFireQuestion] = Field(default_factory=list)
    started_at: float = 0.0


class RapidFireStatus(BaseModel):
    is_active: bool
    session: Optional[RapidFireSession] = None
    cooldown_remaining: float = 0.0


# ----------------------------------------------------------------------
# Analytics
# ----------------------------------------------------------------------
class MemoryStats(BaseModel):
    total_statements: int = 0
    contradictions: int = 0
    evasions: int = 0
    strong_moments: int = 0
    weak_moments: int = 0
    quotes: int = 0


class EvasionStats(BaseModel):
    total_evasions: int = 0
    topic_evasions: Dict[str, int] = Field(default_factory=dict)


class ConversationAnalytics(BaseModel):
    memory: MemoryStats
    evasions: EvasionStats
    interruptions: int
    interviewer_mood: Mood
    frustration_level: float
    pending_follow_ups: int
    rapid_fire_active: bool


class ControllerSnapshot(BaseModel):
    """Point-in-time copy of everything a controller owns."""

    version: int = 1
    evasion_counter: int
    topic_evasions: Dict[str, int]
    interruption_history: List[str]
    follow_up_queue: List[str]
    rapid_fire_session: Optional[RapidFireSession] = None
    last_rapid_fire_at: Optional[float] = None
    frustration_level: float
    approval_level: float
    interviewer_mood: Mood
    memory: MemoryStats


__all__ = [
    "Tone",
    "Mood",
    "ActionType",
    "Intensity",
    "FollowUpType",
    "ExpectedResponseType",
    "PlayerResponse",
    "PerformanceSnapshot",
    "ConversationState",
    "ConversationAction",
    "Urgency",
    "InterruptionTrigger",
    "FollowUpRule",
    "DynamicQuestion",
    "QuestionArc",
    "RapidFireQuestion",
    "RapidFireSession",
    "RapidFireStatus",
    "MemoryStats",
    "EvasionStats",
    "ConversationAnalytics",
    "ControllerSnapshot",
]
