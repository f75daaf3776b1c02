"""Identifier generation for entries and points."""

import time
from typing import Callable


def epoch_millis() -> int:
    return time.time_ns() // 1_000_000


class TimestampIds:
    """Creation timestamps in milliseconds, bumped to stay unique.

    Two ids requested within the same millisecond would collide, so each
    id is at least one more than the previous one.
    """

    def __init__(self, clock: Callable[[], int] = epoch_millis) -> None:
        self._clock = clock
        self._last = 0

    def __call__(self) -> int:
        self._last = max(self._clock(), self._last + 1)
        return self._last
