import os
import sys
from pathlib import Path

os.environ.setdefault("ENABLE_FILE_LOGS", "0")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from agents.flow_controller import ConversationFlowController, FlowDeps
from agents.types import (
    ConversationState,
    DynamicQuestion,
    PlayerResponse,
    QuestionArc,
)
from config.policy import InterviewPolicy
from config.rapid_fire import RapidFireConfig
from services.clock import ManualClock
from services.randomness import ScriptedRandom


def make_response(
    question_id: str = "q1",
    tone: str = "diplomatic",
    word_count: int = 20,
    *,
    topic=None,
    text=None,
    contradicts: bool = False,
) -> PlayerResponse:
    if text is None:
        text = " ".join(["word"] * word_count)
    return PlayerResponse(
        question_id=question_id,
        response_text=text,
        tone=tone,
        word_count=word_count,
        topic=topic,
        contradicts_previous=contradicts,
    )


def make_arc(count: int = 3, **overrides) -> QuestionArc:
    questions = []
    for index in range(1, count + 1):
        data = {"id": f"q{index}", "question": f"Question number {index}?"}
        data.update(overrides.get(f"q{index}", {}))
        questions.append(DynamicQuestion.model_validate(data))
    return QuestionArc(background_id="general", questions=questions)


def make_controller(
    arc=None,
    *,
    rolls=(),
    default_roll: float = 0.99,
    rapid_fire=None,
    clock=None,
    policy=None,
) -> ConversationFlowController:
    return ConversationFlowController(
        arc or make_arc(),
        policy=policy or InterviewPolicy(),
        rapid_fire_config=rapid_fire or RapidFireConfig(enabled=False),
        deps=FlowDeps(rng=ScriptedRandom(rolls, default=default_roll), now=clock or ManualClock()),
        interview_id="test",
    )


@pytest.fixture
def state():
    return ConversationState()


@pytest.fixture
def clock():
    return ManualClock(start=1000.0)
