"""Injectable randomness for probability gates and template picks."""
from __future__ import annotations

import random
from typing import Iterable, List, Optional, Protocol, Sequence, TypeVar

T = TypeVar("T")


class RandomSource(Protocol):  # Satisfied by random.Random
    def random(self) -> float:
        ...

    def choice(self, seq: Sequence[T]) -> T:
        ...


def seeded(seed: Optional[int] = None) -> random.Random:
    """Return an isolated generator so replays never touch the global one."""

    return random.Random(seed)


class ScriptedRandom:
    """Replay a fixed list of rolls; ``choice`` maps the next roll onto the sequence."""

    def __init__(self, rolls: Iterable[float], *, default: float = 0.0) -> None:
        self._rolls: List[float] = list(rolls)
        self._default = default
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        if self._rolls:
            return self._rolls.pop(0)
        return self._default

    def choice(self, seq: Sequence[T]) -> T:
        if not seq:
            raise IndexError("cannot choose from an empty sequence")
        roll = self.random()
        index = min(int(roll * len(seq)), len(seq) - 1)
        return seq[index]


__all__ = ["RandomSource", "ScriptedRandom", "seeded"]
