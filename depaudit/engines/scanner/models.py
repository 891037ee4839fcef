"""Data models for the scan orchestrator."""

from __future__ import annotations

from dataclasses import dataclass, field

from depaudit.engines.manifest_parser.models import Ecosystem
from depaudit.engines.vuln_sources.models import Vulnerability


@dataclass(frozen=True)
class DependencyFinding:
    """Every advisory any source reported for one dependency, in source order."""

    dependency: str
    version: str
    type: Ecosystem | str
    vulnerabilities: tuple[Vulnerability, ...] = ()


@dataclass(frozen=True)
class ScanResult:
    """Outcome of one manifest scan. Never mutated once built."""

    scan_id: str
    timestamp: str
    total_dependencies: int
    scanned_dependencies: int
    vulnerable_dependencies: int
    results: tuple[DependencyFinding, ...] = field(default_factory=tuple)
