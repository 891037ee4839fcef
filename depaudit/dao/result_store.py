"""ResultStore — lock-guarded, time-boxed map of completed scans."""

from __future__ import annotations

import asyncio
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

import structlog

from depaudit.engines.scanner.models import ScanResult

log = structlog.get_logger("depaudit.store")

DEFAULT_TTL = 3600.0


@dataclass(frozen=True)
class _Entry:
    result: ScanResult
    expires_at: float


class ResultStore:
    """Keyed holder of :class:`ScanResult` objects for the life of the process.

    Entries are immutable, so readers always see either a whole result or
    nothing. ``delete`` is remove-if-present, which lets an explicit delete and a
    scheduled one land in any order.
    """

    def __init__(
        self,
        ttl: float | None = DEFAULT_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl
        self._clock = clock
        self._entries: dict[str, _Entry] = {}
        self._timers: dict[str, asyncio.TimerHandle] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            self._purge_expired()
            return len(self._entries)

    def __contains__(self, scan_id: object) -> bool:
        return isinstance(scan_id, str) and self.get(scan_id) is not None

    def put(self, scan_id: str, result: ScanResult) -> None:
        expires_at = self._clock() + self._ttl if self._ttl else float("inf")
        with self._lock:
            self._purge_expired()
            self._entries[scan_id] = _Entry(result, expires_at)
        log.debug("store.put", scan_id=scan_id)

    def get(self, scan_id: str) -> ScanResult | None:
        with self._lock:
            entry = self._entries.get(scan_id)
            if entry is None:
                return None
            if entry.expires_at <= self._clock():
                del self._entries[scan_id]
                log.debug("store.expired", scan_id=scan_id)
                return None
            return entry.result

    def delete(self, scan_id: str) -> bool:
        """Remove *scan_id* if present. Returns whether anything was removed."""
        with self._lock:
            removed = self._entries.pop(scan_id, None) is not None
            timer = self._timers.pop(scan_id, None)
        if timer is not None:
            timer.cancel()
        if removed:
            log.debug("store.deleted", scan_id=scan_id)
        return removed

    def schedule_delete(self, scan_id: str, delay: float) -> None:
        """Delete *scan_id* after *delay* seconds on the running event loop.

        A deletion already pending for the same id is left as is, so repeated
        reads do not keep an entry alive.
        """
        loop = asyncio.get_running_loop()
        with self._lock:
            if scan_id in self._timers:
                return
            self._timers[scan_id] = loop.call_later(delay, self._expire_scheduled, scan_id)
        log.debug("store.delete_scheduled", scan_id=scan_id, delay=delay)

    def cancel_pending(self) -> None:
        """Drop every scheduled deletion (used on shutdown)."""
        with self._lock:
            timers = list(self._timers.values())
            self._timers.clear()
        for timer in timers:
            timer.cancel()

    def _expire_scheduled(self, scan_id: str) -> None:
        with self._lock:
            self._timers.pop(scan_id, None)
            removed = self._entries.pop(scan_id, None) is not None
        if removed:
            log.info("store.cleanup", scan_id=scan_id)

    def _purge_expired(self) -> None:
        # Caller holds the lock.
        now = self._clock()
        stale = [k for k, e in self._entries.items() if e.expires_at <= now]
        for key in stale:
            del self._entries[key]
