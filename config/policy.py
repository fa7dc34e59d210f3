"""Tunable interviewer policy tables, overridable from YAML."""
from __future__ import annotations

import logging
from typing import Dict, Optional

from pydantic import BaseModel, Field

from config.settings import settings

logger = logging.getLogger(__name__)


def load_yaml_file(path: str) -> dict:
    import yaml  # local import to avoid mandatory dependency until used

    with open(path, "r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


class FrustrationPolicy(BaseModel):
    """How much each kind of answer moves the frustration scalar."""

    tone_deltas: Dict[str, float] = Field(
        default_factory=lambda: {
            "evasive": 12.0,
            "defensive": 8.0,
            "aggressive": 5.0,
            "confrontational": 4.0,
            "diplomatic": -2.0,
            "confident": -5.0,
            "authentic": -6.0,
        }
    )
    short_response_words: int = 10
    short_response_delta: float = 6.0
    contradiction_delta: float = 15.0


class ApprovalPolicy(BaseModel):
    start: float = 50.0
    strong_moment_delta: float = 5.0
    evasion_delta: float = -5.0
    contradiction_delta: float = -10.0


class MoodPolicy(BaseModel):
    hostile_at: float = 80.0
    frustrated_at: float = 60.0
    skeptical_at: float = 35.0
    skeptical_contradictions: int = 1
    skeptical_evasions: int = 3
    calm_below: float = 20.0
    window: int = Field(default=3, ge=1)


class MemoryLimits(BaseModel):
    quotes: int = 10
    evasions: int = 5
    moments: int = 20
    contradictions: int = 20
    recent_tones: int = 5
    quote_min_chars: int = 20
    statement_min_chars: int = 15


class ConclusionPolicy(BaseModel):
    answered_ratio: float = Field(default=0.7, ge=0.0, le=1.0)
    min_overall_score: float = 85.0
    min_consistency: float = 90.0
    give_up_frustration: float = 90.0
    give_up_interruptions: int = 3


class InterviewPolicy(BaseModel):
    frustration: FrustrationPolicy = Field(default_factory=FrustrationPolicy)
    approval: ApprovalPolicy = Field(default_factory=ApprovalPolicy)
    mood: MoodPolicy = Field(default_factory=MoodPolicy)
    memory: MemoryLimits = Field(default_factory=MemoryLimits)
    conclusion: ConclusionPolicy = Field(default_factory=ConclusionPolicy)
    accountability_probability: float = Field(
        default_factory=lambda: settings.ACCOUNTABILITY_PROBABILITY, ge=0.0, le=1.0
    )
    reference_probability: float = Field(
        default_factory=lambda: settings.MEMORY_REFERENCE_PROBABILITY, ge=0.0, le=1.0
    )
    quote_recall_probability: float = Field(
        default_factory=lambda: settings.QUOTE_RECALL_PROBABILITY, ge=0.0, le=1.0
    )


def load_policy(path: Optional[str] = None) -> InterviewPolicy:
    """Read the policy YAML, falling back to built-in tables when absent."""

    path = path or settings.INTERVIEW_POLICY_PATH
    try:
        data = load_yaml_file(path)
    except FileNotFoundError:
        logger.debug("policy file %s not found, using defaults", path)
        data = {}
    return InterviewPolicy.model_validate(data)


__all__ = [
    "FrustrationPolicy",
    "ApprovalPolicy",
    "MoodPolicy",
    "MemoryLimits",
    "ConclusionPolicy",
    "InterviewPolicy",
    "load_policy",
    "load_yaml_file",
]
