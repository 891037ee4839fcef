"""ReportService — PDF reports for stored and client-supplied scan results."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import datetime

import structlog

from depaudit.dao.result_store import ResultStore
from depaudit.engines.report import DEFAULT_TITLE, ReportRenderer
from depaudit.engines.scanner import ScanResult
from depaudit.services import NotFoundError, ScanFailedError

log = structlog.get_logger("depaudit.service")

DEFAULT_CLEANUP_DELAY = 30.0


class ReportService:
    """Renders reports; a by-id render also schedules the scan's removal."""

    def __init__(
        self,
        store: ResultStore,
        renderer: ReportRenderer | None = None,
        *,
        cleanup_delay: float = DEFAULT_CLEANUP_DELAY,
    ) -> None:
        self._store = store
        self._renderer = renderer or ReportRenderer()
        self._cleanup_delay = cleanup_delay

    async def render_stored(self, scan_id: str) -> bytes:
        """Render the stored scan *scan_id*.

        Raises :class:`NotFoundError` if the scan is absent or already cleaned
        up. The stored entry is deleted ``cleanup_delay`` seconds later.
        """
        result = self._store.get(scan_id)
        if result is None:
            raise NotFoundError("scan results not found")

        pdf = await self._render(lambda: self._renderer.render(result), scan_id=scan_id)
        self._store.schedule_delete(scan_id, self._cleanup_delay)
        return pdf

    async def render_supplied(
        self,
        result: ScanResult,
        *,
        title: str = DEFAULT_TITLE,
        generated_at: datetime | None = None,
    ) -> bytes:
        """Legacy path: render a result the client posted, without touching the store."""
        return await self._render(
            lambda: self._renderer.render_legacy(result, title=title, generated_at=generated_at),
            scan_id=result.scan_id or None,
        )

    @staticmethod
    async def _render(fn: Callable[[], bytes], *, scan_id: str | None) -> bytes:
        # Layout is CPU-bound; keep it off the event loop.
        try:
            return await asyncio.to_thread(fn)
        except Exception as exc:
            log.exception("report.failed", scan_id=scan_id)
            raise ScanFailedError("failed to generate PDF") from exc
