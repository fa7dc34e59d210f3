"""Session driver: turns raw answers into responses and follows the controller."""
from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union
from uuid import uuid4

from pydantic import BaseModel

from agents.errors import InterviewFlowError
from agents.flow_controller import ConversationFlowController, FlowDeps
from agents.interviewer_profile import InterviewerProfile
from agents.types import (
    ConversationAction,
    ConversationState,
    DynamicQuestion,
    PlayerResponse,
    QuestionArc,
    Tone,
)
from config.policy import InterviewPolicy, load_yaml_file
from config.rapid_fire import RapidFireConfig
from observability.logger import log_event
from services.contradiction import find_contradiction
from services.topics import extract_topic

logger = logging.getLogger(__name__)

PerformanceHook = Callable[[PlayerResponse, ConversationState], None]


class TranscriptEntry(BaseModel):  # One answer and the interviewer's move
    turn: int
    response: PlayerResponse
    action: ConversationAction


def load_question_arc(source: Union[str, Path, Dict[str, Any]]) -> QuestionArc:
    """Build an arc from a mapping or a YAML file path."""

    if isinstance(source, dict):
        data = source
    else:
        data = load_yaml_file(str(source))
    return QuestionArc.model_validate(data)


def count_words(text: str) -> int:
    return len(text.split())


class InterviewSession:
    """Drives one interview: classifies the turn, asks the controller, follows its lead.

    The session owns the ``ConversationState`` and keeps track of which question
    the candidate is currently answering, including rapid-fire questions that
    live outside the arc.
    """

    def __init__(
        self,
        arc: QuestionArc,
        *,
        interview_id: Optional[str] = None,
        controller: Optional[ConversationFlowController] = None,
        profile: Optional[InterviewerProfile] = None,
        policy: Optional[InterviewPolicy] = None,
        rapid_fire_config: Optional[RapidFireConfig] = None,
        deps: Optional[FlowDeps] = None,
        performance_hook: Optional[PerformanceHook] = None,
        state: Optional[ConversationState] = None,
    ) -> None:
        self.arc = arc
        self.interview_id = interview_id or uuid4().hex
        self.state = state or ConversationState()
        self.controller = controller or ConversationFlowController(
            arc,
            profile=profile,
            policy=policy,
            rapid_fire_config=rapid_fire_config,
            deps=deps,
            interview_id=self.interview_id,
        )
        self.current_question_id: Optional[str] = arc.questions[0].id if arc.questions else None
        self.pending_rapid_fire_id: Optional[str] = None
        self.transcript: List[TranscriptEntry] = []
        self.finished = False
        self._performance_hook = performance_hook

    def current_question(self) -> Optional[DynamicQuestion]:
        return self.arc.get(self.current_question_id)

    def current_prompt(self) -> Optional[str]:
        if self.pending_rapid_fire_id and self.transcript:
            return self.transcript[-1].action.content
        question = self.current_question()
        return question.question if question else None

    def build_response(
        self,
        response_text: str,
        tone: Tone,
        *,
        topic: Optional[str] = None,
        timestamp: Optional[float] = None,
    ) -> PlayerResponse:
        question = self.current_question()
        if question is None:
            raise InterviewFlowError("no current question to respond to")
        topic = topic or extract_topic(question)
        earlier = find_contradiction(topic, tone, self.state.player_responses)
        return PlayerResponse(
            question_id=self.pending_rapid_fire_id or question.id,
            response_text=response_text,
            tone=tone,
            word_count=count_words(response_text),
            topic=topic,
            contradicts_previous=earlier is not None,
            timestamp=time.time() if timestamp is None else timestamp,
        )

    def submit(
        self,
        response_text: str,
        tone: Tone,
        *,
        topic: Optional[str] = None,
        timestamp: Optional[float] = None,
    ) -> ConversationAction:
        if self.finished:
            raise InterviewFlowError("interview has already concluded")
        response = self.build_response(response_text, tone, topic=topic, timestamp=timestamp)
        if self._performance_hook is not None:
            self._performance_hook(response, self.state)

        action = self.controller.determine_next_action(response, self.state)
        self._follow(action)
        self.transcript.append(
            TranscriptEntry(turn=len(self.transcript) + 1, response=response, action=action)
        )
        if self.finished:
            log_event(
                "interview_concluded",
                self.interview_id,
                action=action.type,
                trigger=action.metadata.get("assessment"),
            )
        return action

    def _follow(self, action: ConversationAction) -> None:
        self.pending_rapid_fire_id = None
        if action.type == "conclusion":
            self.finished = True
        elif action.type == "question":
            self.current_question_id = action.metadata.get("question_id", self.current_question_id)
        elif action.metadata.get("rapid_fire"):
            self.pending_rapid_fire_id = action.metadata.get("question_id")

    def is_complete(self) -> bool:
        return self.finished or self.controller.should_conclude(self.state)


__all__ = [
    "PerformanceHook",
    "TranscriptEntry",
    "InterviewSession",
    "count_words",
    "load_question_arc",
]
