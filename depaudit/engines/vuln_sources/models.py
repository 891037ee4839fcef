"""Data models for the vulnerability source adapters."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Severity(str, Enum):
    """Normalized severity buckets. Sources may still report other strings."""

    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    UNKNOWN = "UNKNOWN"


DESCRIPTION_LIMIT = 200


def truncate(text: str | None, limit: int = DESCRIPTION_LIMIT) -> str:
    return (text or "")[:limit]


def normalize_severity(value: object) -> str:
    """Upper-case a source severity; empty or missing becomes ``UNKNOWN``."""
    if value is None:
        return Severity.UNKNOWN.value
    text = str(value).strip().upper()
    return text or Severity.UNKNOWN.value


def severity_from_score(score: float) -> str:
    """CVSS v3 qualitative rating for a base score."""
    if score >= 9.0:
        return Severity.CRITICAL.value
    if score >= 7.0:
        return Severity.HIGH.value
    if score >= 4.0:
        return Severity.MEDIUM.value
    if score > 0.0:
        return Severity.LOW.value
    return Severity.UNKNOWN.value


@dataclass(frozen=True)
class Vulnerability:
    """One advisory reported by an upstream source, in normalized form.

    ``severity`` is one of :class:`Severity` for the built-in sources, but is kept
    as a plain string so an opaque source rating survives untouched.
    """

    id: str
    description: str
    severity: str = Severity.UNKNOWN.value
    score: float = 0.0
    references: tuple[str, ...] = ()
    published: str | None = None
    source: str = ""


@dataclass(frozen=True)
class SourceOutcome:
    """Result of one source lookup: advisories, or the reason there are none."""

    source: str
    vulnerabilities: list[Vulnerability] = field(default_factory=list)
    error: str | None = None
    skipped: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None
