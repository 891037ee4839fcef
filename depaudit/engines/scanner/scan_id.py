"""Scan identifiers derived from the completion time."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable


class ScanIdGenerator:
    """Millisecond timestamps, bumped by one when two scans finish in the same tick.

    Ids are strictly increasing for the lifetime of the generator, so they stay
    unique within a process even under a coarse or stepped-back clock.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def next_id(self) -> str:
        with self._lock:
            candidate = int(self._clock() * 1000)
            if candidate <= self._last:
                candidate = self._last + 1
            self._last = candidate
            return str(candidate)
