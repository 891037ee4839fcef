"""ScanService — run scans and keep their results addressable by id."""

from __future__ import annotations

import structlog

from depaudit.dao.result_store import ResultStore
from depaudit.engines.manifest_parser import detect_format, supported_formats
from depaudit.engines.scanner import ScanOrchestrator, ScanResult
from depaudit.services import (
    NotFoundError,
    PayloadTooLargeError,
    ScanFailedError,
    ValidationError,
)

log = structlog.get_logger("depaudit.service")

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024


class ScanService:
    """Validates uploads, runs the orchestrator, stores the outcome."""

    def __init__(
        self,
        orchestrator: ScanOrchestrator,
        store: ResultStore,
        *,
        max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
    ) -> None:
        self._orchestrator = orchestrator
        self._store = store
        self._max_upload_bytes = max_upload_bytes

    @property
    def store(self) -> ResultStore:
        return self._store

    @property
    def max_upload_bytes(self) -> int:
        return self._max_upload_bytes

    def resolve_format(self, declared: str | None, filename: str | None) -> str:
        """Pick the manifest format from the form field, else from the file name.

        Raises :class:`ValidationError` when neither names a supported format.
        """
        if declared:
            if declared in supported_formats():
                return declared
            raise ValidationError(
                f"unsupported fileType {declared!r}; expected one of "
                + ", ".join(supported_formats())
            )
        detected = detect_format(filename)
        if detected is None:
            raise ValidationError(
                "fileType is required; expected one of " + ", ".join(supported_formats())
            )
        return detected

    async def scan(
        self,
        content: bytes,
        *,
        declared_format: str | None = None,
        filename: str | None = None,
    ) -> ScanResult:
        """Scan an uploaded manifest and store the result under its scan id."""
        if len(content) > self._max_upload_bytes:
            raise PayloadTooLargeError(
                f"file exceeds the {self._max_upload_bytes} byte upload limit"
            )
        manifest_format = self.resolve_format(declared_format, filename)

        try:
            result = await self._orchestrator.run_scan(content, manifest_format)
        except Exception as exc:
            log.exception("scan.failed", manifest_format=manifest_format)
            raise ScanFailedError("internal server error during scanning") from exc

        self._store.put(result.scan_id, result)
        return result

    def get(self, scan_id: str) -> ScanResult:
        """Return a stored result. Raises :class:`NotFoundError` if absent or expired."""
        result = self._store.get(scan_id)
        if result is None:
            raise NotFoundError("scan results not found")
        return result

    def delete(self, scan_id: str) -> bool:
        return self._store.delete(scan_id)
