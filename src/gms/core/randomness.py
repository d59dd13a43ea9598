from __future__ import annotations

import hashlib
import random
from typing import Any, Sequence

from gms.contracts import RandomSource

from .ids import play_stream_id


class PythonRandomSource(RandomSource):
    """Seedable randomness for play resolution and deterministic replays."""

    def __init__(self, seed: int | None = None) -> None:
        self._seed = seed
        self._rng = random.Random(seed)

    @property
    def seed(self) -> int | None:
        return self._seed

    def rand(self) -> float:
        return self._rng.random()

    def randint(self, a: int, b: int) -> int:
        return self._rng.randint(a, b)

    def choice(self, items: Sequence[Any]) -> Any:
        if not items:
            raise ValueError("choice items must not be empty")
        return self._rng.choice(items)

    def shuffle(self, items: list[Any]) -> None:
        self._rng.shuffle(items)

    def spawn(self, substream_id: str) -> RandomSource:
        if self._seed is None:
            return PythonRandomSource(seed=None)
        digest = hashlib.sha256(f"{self._seed}:{substream_id}".encode("ascii", "ignore")).hexdigest()
        return PythonRandomSource(seed=int(digest[:16], 16))


def gameplay_random() -> PythonRandomSource:
    return PythonRandomSource(seed=None)


def seeded_random(seed: int) -> PythonRandomSource:
    return PythonRandomSource(seed=seed)


def play_random(source: RandomSource, match_id: str, play_index: int) -> RandomSource:
    """Draws for a single play, independent of how many draws earlier plays consumed."""
    return source.spawn(play_stream_id(match_id, play_index))
