"""Rapid-fire escalation configuration."""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from agents.types import Intensity
from config.policy import load_yaml_file
from config.settings import settings

logger = logging.getLogger(__name__)


class IntensityScaling(BaseModel):
    question_count: int = Field(ge=1)
    time_limit: int = Field(ge=1)
    escalation_rate: float = Field(gt=1.0)


class RapidFireTrigger(BaseModel):
    """Named condition that opens a rapid-fire burst."""

    id: str
    condition: str
    intensity: Intensity
    questions: List[str] = Field(min_length=1)
    question_count: Optional[int] = Field(default=None, ge=1)
    time_constraint: Optional[int] = Field(default=None, ge=1)
    description: str = ""


def _default_scaling() -> Dict[str, IntensityScaling]:
    return {
        "low": IntensityScaling(question_count=2, time_limit=15, escalation_rate=1.1),
        "medium": IntensityScaling(question_count=3, time_limit=12, escalation_rate=1.2),
        "high": IntensityScaling(question_count=4, time_limit=10, escalation_rate=1.3),
        "extreme": IntensityScaling(question_count=5, time_limit=8, escalation_rate=1.5),
    }


def _default_triggers() -> List[RapidFireTrigger]:
    return [
        RapidFireTrigger(
            id="evasion-pressure",
            condition="evasion_count>=3",
            intensity="medium",
            question_count=3,
            time_constraint=12,
            questions=[
                "Yes or no - do you support this policy?",
                "What specifically would you do differently?",
                "When will you give voters a straight answer?",
            ],
            description="Triggered by consecutive evasions to force direct answers",
        ),
        RapidFireTrigger(
            id="topic-avoidance-pressure",
            condition="topic_avoidance>=2",
            intensity="high",
            question_count=4,
            time_constraint=10,
            questions=[
                "Why do you keep avoiding this topic?",
                "What are you afraid to tell voters?",
                "Is this how you'll govern - by dodging difficult questions?",
                "One more time - what's your position?",
            ],
            description="Triggered by avoiding specific topics multiple times",
        ),
        RapidFireTrigger(
            id="contradiction-challenge",
            condition="contradiction_detected",
            intensity="high",
            question_count=3,
            time_constraint=15,
            questions=[
                "Which statement is true?",
                "How do you explain this contradiction?",
                "Can voters trust what you say?",
            ],
            description="Triggered by detecting contradictions in statements",
        ),
        RapidFireTrigger(
            id="frustration-escalation",
            condition="interviewer_frustration>=70",
            intensity="extreme",
            question_count=5,
            time_constraint=8,
            questions=[
                "Do you think this is acceptable?",
                "What would your constituents think?",
                "Are you prepared to defend this?",
                "Is this the leadership we need?",
                "Final chance - what's your answer?",
            ],
            description="Triggered when interviewer becomes extremely frustrated",
        ),
    ]


class RapidFireConfig(BaseModel):
    enabled: bool = Field(default_factory=lambda: settings.RAPID_FIRE_ENABLED)
    max_concurrent_sessions: int = Field(default=1, ge=1, le=1)
    cooldown_seconds: float = Field(
        default_factory=lambda: settings.RAPID_FIRE_COOLDOWN_SECONDS, ge=0.0
    )
    intensity_scaling: Dict[Intensity, IntensityScaling] = Field(default_factory=_default_scaling)
    triggers: List[RapidFireTrigger] = Field(default_factory=_default_triggers)

    def scaling_for(self, intensity: Intensity) -> IntensityScaling:
        scaling = self.intensity_scaling.get(intensity)
        if scaling is None:
            return _default_scaling()[intensity]
        return scaling


def load_rapid_fire_config(path: Optional[str] = None) -> RapidFireConfig:
    """Read trigger definitions from YAML; missing files keep the built-ins."""

    path = path or settings.RAPID_FIRE_CONFIG_PATH
    try:
        data = load_yaml_file(path)
    except FileNotFoundError:
        logger.debug("rapid-fire config %s not found, using defaults", path)
        data = {}
    return RapidFireConfig.model_validate(data)


__all__ = [
    "IntensityScaling",
    "RapidFireTrigger",
    "RapidFireConfig",
    "load_rapid_fire_config",
]
