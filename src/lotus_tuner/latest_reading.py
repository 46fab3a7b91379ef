from __future__ import annotations

import threading
from collections import deque
from typing import Optional

from lotus_tuner.pipeline import PitchReading


class LatestReadingSlot:
    """Single-slot hand-off between the capture callback and the display.

    Publishing replaces whatever is held; stale readings are dropped rather
    than queued.
    """

    def __init__(self) -> None:
        self._slot: deque[PitchReading] = deque(maxlen=1)
        self._cond = threading.Condition()
        self._version = 0
        self.published_count = 0
        self.dropped_count = 0

    @property
    def version(self) -> int:
        with self._cond:
            return self._version

    def publish(self, reading: PitchReading) -> None:
        with self._cond:
            if self._slot:
                self.dropped_count += 1
            self._slot.append(reading)
            self._version += 1
            self.published_count += 1
            self._cond.notify_all()

    def latest(self) -> Optional[PitchReading]:
        with self._cond:
            return self._slot[-1] if self._slot else None

    def take(self) -> Optional[PitchReading]:
        with self._cond:
            return self._slot.pop() if self._slot else None

    def wait_for_update(self, seen_version: int, timeout: float | None = None) -> tuple[Optional[PitchReading], int]:
        """Block until a reading newer than ``seen_version`` is published.

        Returns the latest reading (``None`` on timeout or if it was taken) and
        the current version for the next call.
        """
        with self._cond:
            self._cond.wait_for(lambda: self._version > seen_version, timeout=timeout)
            if self._version <= seen_version:
                return None, self._version
            reading = self._slot[-1] if self._slot else None
            return reading, self._version
