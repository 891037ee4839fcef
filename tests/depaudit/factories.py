"""Test doubles and model factories shared by the depaudit tests."""

from __future__ import annotations

import asyncio
from collections.abc import Callable

from depaudit.engines.manifest_parser.models import Dependency
from depaudit.engines.scanner.models import DependencyFinding, ScanResult
from depaudit.engines.vuln_sources.base import VulnSource
from depaudit.engines.vuln_sources.models import Vulnerability


class FakeSource(VulnSource):
    """In-memory source: answers from a callback, records every dependency asked."""

    def __init__(
        self,
        name: str,
        answer: Callable[[Dependency], list[Vulnerability]] | None = None,
        *,
        delay: float = 0.0,
        max_results: int = 10,
    ) -> None:
        super().__init__(client=None)  # type: ignore[arg-type]
        self.name = name
        self.max_results = max_results
        self._answer = answer or (lambda _dep: [])
        self._delay = delay
        self.calls: list[str] = []

    async def fetch(self, dependency: Dependency) -> list[Vulnerability]:
        self.calls.append(dependency.name)
        if self._delay:
            await asyncio.sleep(self._delay)
        return self._answer(dependency)


def vuln(ident: str, *, source: str = "nvd", score: float = 5.0, **overrides) -> Vulnerability:
    fields = {
        "id": ident,
        "description": f"description of {ident}",
        "severity": "MEDIUM",
        "score": score,
        "references": (f"https://example.com/{ident}",),
        "published": "2024-01-01T00:00:00.000",
        "source": source,
    }
    fields.update(overrides)
    return Vulnerability(**fields)


def finding(name: str, vuln_count: int = 1, *, version: str = "1.0.0") -> DependencyFinding:
    return DependencyFinding(
        dependency=name,
        version=version,
        type="npm",
        vulnerabilities=tuple(vuln(f"CVE-{name}-{i}") for i in range(vuln_count)),
    )


def scan_result(findings: tuple[DependencyFinding, ...] = (), **overrides) -> ScanResult:
    fields = {
        "scan_id": "1700000000000",
        "timestamp": "2026-01-15T12:00:00.000Z",
        "total_dependencies": 25,
        "scanned_dependencies": 20,
        "vulnerable_dependencies": len(findings),
        "results": findings,
    }
    fields.update(overrides)
    return ScanResult(**fields)


