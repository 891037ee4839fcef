"""Dependency injection — settings, shared HTTP client and service singletons."""

from __future__ import annotations

import httpx

from depaudit.core.config import Settings
from depaudit.dao.result_store import ResultStore
from depaudit.engines.report import ReportRenderer
from depaudit.engines.scanner import ScanOrchestrator
from depaudit.engines.vuln_sources import build_sources
from depaudit.services.report_service import ReportService
from depaudit.services.scan_service import ScanService

# ---------------------------------------------------------------------------
# Singletons (initialised by app lifespan)
# ---------------------------------------------------------------------------
_settings: Settings | None = None
_http_client: httpx.AsyncClient | None = None
_store: ResultStore | None = None
_scan_service: ScanService | None = None
_report_service: ReportService | None = None


def init_services(settings: Settings) -> None:
    """Build the HTTP client, store and services. Called once at startup."""
    global _settings, _http_client, _store, _scan_service, _report_service  # noqa: PLW0603
    _settings = settings
    _http_client = httpx.AsyncClient(
        timeout=settings.http_timeout,
        headers={"User-Agent": "depaudit"},
        follow_redirects=True,
    )
    _store = ResultStore(ttl=settings.result_ttl)
    orchestrator = ScanOrchestrator(
        build_sources(_http_client, settings),
        scan_limit=settings.scan_limit,
        concurrency=settings.scan_concurrency,
    )
    _scan_service = ScanService(
        orchestrator, _store, max_upload_bytes=settings.max_upload_bytes
    )
    _report_service = ReportService(
        _store, ReportRenderer(), cleanup_delay=settings.cleanup_delay
    )


async def shutdown_services() -> None:
    """Close the HTTP client and drop pending store deletions."""
    global _http_client  # noqa: PLW0603
    if _store is not None:
        _store.cancel_pending()
    if _http_client is not None:
        await _http_client.aclose()
        _http_client = None


# ---------------------------------------------------------------------------
# Getters (for Depends())
# ---------------------------------------------------------------------------


def get_settings() -> Settings:
    if _settings is None:
        raise RuntimeError("services not initialised; call init_services() first")
    return _settings


def get_scan_service() -> ScanService:
    if _scan_service is None:
        raise RuntimeError("services not initialised; call init_services() first")
    return _scan_service


def get_report_service() -> ReportService:
    if _report_service is None:
        raise RuntimeError("services not initialised; call init_services() first")
    return _report_service
