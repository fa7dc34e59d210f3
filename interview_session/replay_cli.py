"""Replay a scripted interview and print the interviewer's moves."""
from __future__ import annotations

import argparse
import json
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from agents.flow_controller import FlowDeps
from agents.interviewer_profile import profile_for_background
from agents.types import PerformanceSnapshot, QuestionArc, Tone
from config.policy import InterviewPolicy, load_yaml_file
from config.rapid_fire import RapidFireConfig
from interview_session.interview_session import InterviewSession
from observability.logger import LogConfig, configure_logging
from services.clock import ManualClock
from services.randomness import seeded


class ScriptedTurn(BaseModel):
    text: str
    tone: Tone
    topic: Optional[str] = None


class ReplayScript(BaseModel):
    interview_id: str = "replay"
    seed: int = 0
    seconds_per_turn: float = 10.0
    arc: QuestionArc
    policy: InterviewPolicy = Field(default_factory=InterviewPolicy)
    rapid_fire: RapidFireConfig = Field(default_factory=RapidFireConfig)
    performance: PerformanceSnapshot = Field(default_factory=PerformanceSnapshot)
    responses: List[ScriptedTurn] = Field(default_factory=list)


def replay(script: ReplayScript, seed: Optional[int] = None) -> List[Dict[str, Any]]:
    """Run every scripted answer through a fresh session; stops at the conclusion."""

    clock = ManualClock()
    session = InterviewSession(
        script.arc,
        interview_id=script.interview_id,
        profile=profile_for_background(script.arc.background_id),
        policy=script.policy,
        rapid_fire_config=script.rapid_fire,
        deps=FlowDeps(rng=seeded(script.seed if seed is None else seed), now=clock),
    )
    session.state.performance = script.performance.model_copy(deep=True)

    rows: List[Dict[str, Any]] = []
    for turn in script.responses:
        if session.finished:
            break
        action = session.submit(turn.text, turn.tone, topic=turn.topic, timestamp=clock())
        entry = session.transcript[-1]
        rows.append(
            {
                "turn": entry.turn,
                "question_id": entry.response.question_id,
                "tone": entry.response.tone,
                "action": action.type,
                "content": action.content,
                "trigger": action.metadata.get("trigger"),
            }
        )
        clock.advance(script.seconds_per_turn)
    return rows


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("script", help="YAML file with arc, responses and optional tuning")
    parser.add_argument("--seed", type=int, help="Override the script's random seed")
    parser.add_argument("--json", action="store_true", help="Emit one JSON object per turn")
    parser.add_argument("--log-level", help="Reconfigure interview event logging")
    args = parser.parse_args(argv)

    if args.log_level:
        base = LogConfig.from_env()
        base.level = args.log_level.upper()
        configure_logging(base)

    script = ReplayScript.model_validate(load_yaml_file(args.script))
    for row in replay(script, seed=args.seed):
        if args.json:
            print(json.dumps(row, ensure_ascii=False))
        else:
            trigger = f" ({row['trigger']})" if row["trigger"] else ""
            print(f"[{row['turn']}] {row['question_id']} {row['tone']} -> {row['action']}{trigger}: {row['content']}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
