"""Configuration package for the interview controller."""
from .policy import InterviewPolicy, load_policy
from .rapid_fire import RapidFireConfig, RapidFireTrigger, load_rapid_fire_config
from .settings import Settings, settings

__all__ = [
    "InterviewPolicy",
    "load_policy",
    "RapidFireConfig",
    "RapidFireTrigger",
    "load_rapid_fire_config",
    "Settings",
    "settings",
]
