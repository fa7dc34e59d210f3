"""Observability utilities for the interview controller."""
from .logger import LogConfig, configure_logging, log_event

__all__ = ["LogConfig", "configure_logging", "log_event"]
