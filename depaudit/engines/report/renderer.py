"""ReportRenderer — lay a ScanResult out as a PDF vulnerability report."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone

import structlog

from depaudit.engines.report.writer import PageWriter
from depaudit.engines.scanner.models import DependencyFinding, ScanResult
from depaudit.engines.vuln_sources.models import Vulnerability

log = structlog.get_logger("depaudit.engine")

DEFAULT_TITLE = "Vulnerability Scan Report"

# Cursor positions (points from the page top) past which the next block moves
# to a fresh page. Vulnerability entries are smaller, so they may go lower.
DEPENDENCY_BREAK_Y = 650
VULNERABILITY_BREAK_Y = 700

LEGACY_MAX_DEPENDENCIES = 10
LEGACY_MAX_VULNERABILITIES = 5
LEGACY_DESCRIPTION_LIMIT = 100

_LEFT = 100


def _format_score(score: float) -> str:
    return f"{score:g}"


def _format_when(value: str | datetime | None) -> str:
    if value is None:
        value = datetime.now(timezone.utc)
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%d %H:%M:%S UTC")


def _dependency_label(finding: DependencyFinding) -> str:
    ecosystem = getattr(finding.type, "value", finding.type)
    return f"{finding.dependency}@{finding.version} ({ecosystem})"


class ReportRenderer:
    """Stateless PDF layout. Output depends only on the arguments."""

    def render(self, result: ScanResult, *, title: str = DEFAULT_TITLE) -> bytes:
        """Full report for a stored scan, dated with the scan's own timestamp."""
        writer = PageWriter(title)
        writer.text(title, size=20, x=_LEFT, y=100)
        writer.text(f"Generated on: {_format_when(result.timestamp)}", size=12, x=_LEFT, y=130)
        writer.text(f"Scan ID: {result.scan_id}", x=_LEFT, y=150)
        writer.move_down(2)

        writer.text("Scan Summary", size=16, x=_LEFT, bold=True)
        writer.text(f"Total Dependencies: {result.total_dependencies}", size=10)
        writer.text(f"Dependencies Scanned: {result.scanned_dependencies}")
        writer.text(f"Vulnerable Dependencies Found: {result.vulnerable_dependencies}")
        writer.move_down()

        if result.results:
            writer.text("Vulnerabilities Found:", size=16, bold=True)
            writer.move_down()
            for index, finding in enumerate(result.results, start=1):
                writer.break_if_below(DEPENDENCY_BREAK_Y)
                writer.text(f"{index}. {_dependency_label(finding)}", size=12, underline=True)
                writer.move_down(0.3)
                for vuln_index, vuln in enumerate(finding.vulnerabilities, start=1):
                    writer.break_if_below(VULNERABILITY_BREAK_Y)
                    self._write_vulnerability(writer, vuln_index, vuln)
                writer.move_down(0.5)
        else:
            writer.text("No vulnerabilities found!", size=10)

        pdf = writer.finish()
        log.debug("report.rendered", scan_id=result.scan_id, pages=writer.page_count)
        return pdf

    def render_legacy(
        self,
        result: ScanResult,
        *,
        title: str = DEFAULT_TITLE,
        generated_at: str | datetime | None = None,
    ) -> bytes:
        """Reduced report for a result posted by the client.

        Kept for older clients: at most ten dependencies with five
        vulnerabilities each, short descriptions, no scan id or scanned count.
        """
        result = self.limit_for_legacy(result)

        writer = PageWriter(title)
        writer.text(title, size=20, x=_LEFT, y=100)
        writer.text(f"Generated on: {_format_when(generated_at)}", size=12, x=_LEFT, y=130)
        writer.move_down(2)

        writer.text("Scan Summary", size=16, x=_LEFT, bold=True)
        writer.text(f"Total Dependencies: {result.total_dependencies}", size=10)
        writer.text(f"Vulnerable Dependencies Found: {result.vulnerable_dependencies}")
        writer.move_down()

        if result.results:
            writer.text("Vulnerabilities Found:", size=16, bold=True)
            writer.move_down()
            for index, finding in enumerate(result.results, start=1):
                writer.break_if_below(DEPENDENCY_BREAK_Y)
                writer.text(
                    f"{index}. {finding.dependency}@{finding.version}", size=12, underline=True
                )
                writer.move_down(0.3)
                for vuln_index, vuln in enumerate(finding.vulnerabilities, start=1):
                    writer.text(
                        f"   {vuln_index}. {vuln.id} - {vuln.severity} "
                        f"(Score: {_format_score(vuln.score)})",
                        size=10,
                    )
                    short = vuln.description[:LEGACY_DESCRIPTION_LIMIT]
                    writer.text(f"      Description: {short}...")
                    writer.move_down(0.2)
                writer.move_down()
        else:
            writer.text("No vulnerabilities found!", size=10)

        return writer.finish()

    @staticmethod
    def limit_for_legacy(result: ScanResult) -> ScanResult:
        findings = tuple(
            replace(f, vulnerabilities=f.vulnerabilities[:LEGACY_MAX_VULNERABILITIES])
            for f in result.results[:LEGACY_MAX_DEPENDENCIES]
        )
        return replace(result, results=findings)

    @staticmethod
    def _write_vulnerability(writer: PageWriter, index: int, vuln: Vulnerability) -> None:
        writer.text(
            f"   {index}. {vuln.id} - Severity: {vuln.severity} "
            f"- Score: {_format_score(vuln.score)}",
            size=10,
        )
        writer.text(f"   Description: {vuln.description}")
        writer.move_down(0.2)
