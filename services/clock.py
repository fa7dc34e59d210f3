"""Monotonic clocks used for rapid-fire cooldowns."""
from __future__ import annotations

import time
from typing import Callable

Clock = Callable[[], float]


def monotonic() -> float:
    return time.monotonic()


class ManualClock:
    """Clock that only moves when told to; handy for replays."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        if seconds < 0:
            raise ValueError("a monotonic clock cannot go backwards")
        self.now += seconds


__all__ = ["Clock", "ManualClock", "monotonic"]
