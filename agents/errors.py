"""Errors raised by the interview controller."""
from __future__ import annotations


class InterviewFlowError(RuntimeError):
    """Base error for controller misuse."""


class RapidFireSessionError(InterviewFlowError):
    """Raised when the rapid-fire handler runs without an active session."""


__all__ = ["InterviewFlowError", "RapidFireSessionError"]
