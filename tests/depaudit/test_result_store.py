"""Tests for the in-memory result store."""

from __future__ import annotations

import asyncio

import pytest
from factories import finding, scan_result

from depaudit.dao import ResultStore


class FakeClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    s = ResultStore(ttl=60, clock=clock)
    yield s
    s.cancel_pending()


# ── Basic operations ─────────────────────────────────────────────────────


class TestResultStore:
    def test_put_get(self, store):
        result = scan_result((finding("lodash"),))
        store.put("1", result)

        assert store.get("1") is result
        assert "1" in store
        assert len(store) == 1

    def test_get_missing(self, store):
        assert store.get("nope") is None
        assert "nope" not in store

    def test_put_overwrites(self, store):
        store.put("1", scan_result())
        newer = scan_result(scan_id="1", total_dependencies=3)
        store.put("1", newer)
        assert store.get("1") is newer

    def test_delete_is_idempotent(self, store):
        store.put("1", scan_result())
        assert store.delete("1") is True
        assert store.delete("1") is False
        assert store.get("1") is None

    def test_ttl_expiry(self, store, clock):
        store.put("1", scan_result())
        clock.now = 59.9
        assert store.get("1") is not None
        clock.now = 60.0
        assert store.get("1") is None
        assert len(store) == 0

    def test_put_purges_expired(self, store, clock):
        store.put("old", scan_result())
        clock.now = 100.0
        store.put("new", scan_result())
        assert len(store) == 1

    def test_no_ttl_keeps_entries(self, clock):
        s = ResultStore(ttl=None, clock=clock)
        s.put("1", scan_result())
        clock.now = 10**9
        assert s.get("1") is not None


# ── Scheduled deletion ───────────────────────────────────────────────────


class TestScheduledDelete:
    @pytest.mark.asyncio
    async def test_fires_after_delay(self):
        store = ResultStore()
        store.put("1", scan_result())
        store.schedule_delete("1", 0.02)

        assert store.get("1") is not None
        await asyncio.sleep(0.05)
        assert store.get("1") is None

    @pytest.mark.asyncio
    async def test_rescheduling_does_not_extend(self):
        store = ResultStore()
        store.put("1", scan_result())
        store.schedule_delete("1", 0.03)
        await asyncio.sleep(0.02)
        store.schedule_delete("1", 10.0)
        await asyncio.sleep(0.03)

        assert store.get("1") is None
        store.cancel_pending()

    @pytest.mark.asyncio
    async def test_explicit_delete_cancels_timer(self):
        store = ResultStore()
        store.put("1", scan_result())
        store.schedule_delete("1", 0.02)
        assert store.delete("1") is True

        # A new result under the same id must survive the cancelled timer.
        store.put("1", scan_result())
        await asyncio.sleep(0.04)
        assert store.get("1") is not None

    @pytest.mark.asyncio
    async def test_cancel_pending(self):
        store = ResultStore()
        store.put("1", scan_result())
        store.schedule_delete("1", 0.02)
        store.cancel_pending()
        await asyncio.sleep(0.04)
        assert store.get("1") is not None

    @pytest.mark.asyncio
    async def test_missing_id_is_harmless(self):
        store = ResultStore()
        store.schedule_delete("ghost", 0.0)
        await asyncio.sleep(0.01)
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_readers_see_whole_result_or_nothing(self):
        store = ResultStore()
        result = scan_result((finding("lodash", 2),))
        store.put("1", result)
        store.schedule_delete("1", 0.01)

        seen = []
        for _ in range(20):
            seen.append(store.get("1"))
            await asyncio.sleep(0.002)

        assert all(item is result or item is None for item in seen)
        first_gone = seen.index(None)
        assert all(item is None for item in seen[first_gone:])
