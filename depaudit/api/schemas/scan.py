"""Scan result request/response schemas (camelCase on the wire)."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from depaudit.engines.scanner.models import DependencyFinding, ScanResult
from depaudit.engines.vuln_sources.models import Vulnerability, normalize_severity


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )


class VulnerabilitySchema(_CamelModel):
    id: str = ""
    description: str = ""
    severity: str | None = "UNKNOWN"
    score: float = 0.0
    references: list[str] = Field(default_factory=list)
    published: str | None = None
    source: str = ""

    @classmethod
    def from_engine(cls, vuln: Vulnerability) -> VulnerabilitySchema:
        return cls(
            id=vuln.id,
            description=vuln.description,
            severity=vuln.severity,
            score=vuln.score,
            references=list(vuln.references),
            published=vuln.published,
            source=vuln.source,
        )

    def to_engine(self) -> Vulnerability:
        return Vulnerability(
            id=self.id,
            description=self.description,
            severity=normalize_severity(self.severity),
            score=max(self.score, 0.0),
            references=tuple(self.references),
            published=self.published,
            source=self.source,
        )


class FindingSchema(_CamelModel):
    dependency: str
    version: str = "*"
    type: str = ""
    vulnerabilities: list[VulnerabilitySchema] = Field(default_factory=list)

    @classmethod
    def from_engine(cls, finding: DependencyFinding) -> FindingSchema:
        return cls(
            dependency=finding.dependency,
            version=finding.version,
            type=getattr(finding.type, "value", finding.type),
            vulnerabilities=[VulnerabilitySchema.from_engine(v) for v in finding.vulnerabilities],
        )

    def to_engine(self) -> DependencyFinding:
        return DependencyFinding(
            dependency=self.dependency,
            version=self.version,
            type=self.type,
            vulnerabilities=tuple(v.to_engine() for v in self.vulnerabilities),
        )


class ScanResultSchema(_CamelModel):
    scan_id: str = ""
    timestamp: str = ""
    total_dependencies: int = 0
    scanned_dependencies: int = 0
    vulnerable_dependencies: int = 0
    results: list[FindingSchema]

    @classmethod
    def from_engine(cls, result: ScanResult) -> ScanResultSchema:
        return cls(
            scan_id=result.scan_id,
            timestamp=result.timestamp,
            total_dependencies=result.total_dependencies,
            scanned_dependencies=result.scanned_dependencies,
            vulnerable_dependencies=result.vulnerable_dependencies,
            results=[FindingSchema.from_engine(f) for f in result.results],
        )

    def to_engine(self) -> ScanResult:
        return ScanResult(
            scan_id=self.scan_id,
            timestamp=self.timestamp,
            total_dependencies=self.total_dependencies,
            scanned_dependencies=self.scanned_dependencies,
            vulnerable_dependencies=self.vulnerable_dependencies,
            results=tuple(f.to_engine() for f in self.results),
        )


class LegacyReportRequest(_CamelModel):
    """Body of ``POST /api/generate-pdf``; ``scanResults`` is validated by hand."""

    scan_results: Any = None
    title: str = "Vulnerability Scan Report"


class HealthResponse(BaseModel):
    status: str
    timestamp: str
