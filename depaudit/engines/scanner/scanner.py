"""ScanOrchestrator — parse a manifest, fan out to every source, build the result."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Sequence
from datetime import datetime, timezone

import structlog

from depaudit.engines.manifest_parser import Dependency, parse_manifest
from depaudit.engines.scanner.models import DependencyFinding, ScanResult
from depaudit.engines.scanner.scan_id import ScanIdGenerator
from depaudit.engines.vuln_sources.base import VulnSource
from depaudit.engines.vuln_sources.models import Vulnerability

log = structlog.get_logger("depaudit.engine")

DEFAULT_SCAN_LIMIT = 20
DEFAULT_CONCURRENCY = 4


def utc_timestamp(now: datetime | None = None) -> str:
    """ISO-8601 UTC with millisecond precision and a ``Z`` suffix."""
    now = now or datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ScanOrchestrator:
    """Pure engine: no storage, no HTTP surface.

    Dependencies beyond *scan_limit* are counted but never queried. Up to
    *concurrency* dependencies are looked up at once; for each one every source
    is queried concurrently and the answers are concatenated in source order.
    """

    def __init__(
        self,
        sources: Sequence[VulnSource],
        *,
        scan_limit: int = DEFAULT_SCAN_LIMIT,
        concurrency: int = DEFAULT_CONCURRENCY,
        id_generator: ScanIdGenerator | None = None,
    ) -> None:
        self._sources = list(sources)
        self._scan_limit = scan_limit
        self._concurrency = max(concurrency, 1)
        self._ids = id_generator or ScanIdGenerator()

    @property
    def sources(self) -> list[VulnSource]:
        return list(self._sources)

    async def run_scan(self, content: bytes | str, declared_format: str | None) -> ScanResult:
        """Parse *content* and scan the first ``scan_limit`` dependencies."""
        dependencies = parse_manifest(content, declared_format)
        return await self.scan_dependencies(dependencies)

    async def scan_dependencies(self, dependencies: Sequence[Dependency]) -> ScanResult:
        start = time.perf_counter()
        limited = list(dependencies[: self._scan_limit])
        if len(dependencies) > len(limited):
            log.info(
                "scan.limited",
                total=len(dependencies),
                scanned=len(limited),
                scan_limit=self._scan_limit,
            )

        sem = asyncio.Semaphore(self._concurrency)

        async def _scan_one(dep: Dependency) -> DependencyFinding:
            async with sem:
                return await self.check_dependency(dep)

        # gather() preserves argument order, so results follow the manifest.
        findings = await asyncio.gather(*[_scan_one(d) for d in limited])
        results = tuple(f for f in findings if f.vulnerabilities)

        result = ScanResult(
            scan_id=self._ids.next_id(),
            timestamp=utc_timestamp(),
            total_dependencies=len(dependencies),
            scanned_dependencies=len(limited),
            vulnerable_dependencies=len(results),
            results=results,
        )
        log.info(
            "scan.completed",
            scan_id=result.scan_id,
            total=result.total_dependencies,
            scanned=result.scanned_dependencies,
            vulnerable=result.vulnerable_dependencies,
            duration_ms=round((time.perf_counter() - start) * 1000, 1),
        )
        return result

    async def check_dependency(self, dependency: Dependency) -> DependencyFinding:
        """Query every source for one dependency and wait for all of them."""
        log.info("scan.dependency", dependency=dependency.name, version=dependency.version)
        per_source = await asyncio.gather(*[s.lookup(dependency) for s in self._sources])

        vulns: list[Vulnerability] = []
        for found in per_source:
            vulns.extend(found)
        return DependencyFinding(
            dependency=dependency.name,
            version=dependency.version,
            type=dependency.ecosystem,
            vulnerabilities=tuple(vulns),
        )
