"""CLI entry point: depaudit.

Subcommands:
    depaudit scan package.json                 # Scan a manifest, print a summary
    depaudit scan reqs.txt --type requirements.txt --json
    depaudit scan composer.json --pdf report.pdf
    depaudit serve --port 5000                 # Run the HTTP API
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import click
import httpx

from depaudit.api.schemas.scan import ScanResultSchema
from depaudit.core.config import Settings
from depaudit.core.logging import setup_logging
from depaudit.engines.manifest_parser import detect_format, supported_formats
from depaudit.engines.report import ReportRenderer
from depaudit.engines.scanner import ScanOrchestrator, ScanResult
from depaudit.engines.vuln_sources import build_sources


async def _run_scan(content: bytes, manifest_format: str, settings: Settings) -> ScanResult:
    async with httpx.AsyncClient(timeout=settings.http_timeout) as client:
        orchestrator = ScanOrchestrator(
            build_sources(client, settings),
            scan_limit=settings.scan_limit,
            concurrency=settings.scan_concurrency,
        )
        return await orchestrator.run_scan(content, manifest_format)


def _print_summary(result: ScanResult) -> None:
    click.echo(f"Scan {result.scan_id}")
    click.echo(f"  Total dependencies:      {result.total_dependencies}")
    click.echo(f"  Dependencies scanned:    {result.scanned_dependencies}")
    click.echo(f"  Vulnerable dependencies: {result.vulnerable_dependencies}")
    if not result.results:
        click.echo("\nNo vulnerabilities found!")
        return
    for finding in result.results:
        click.echo(f"\n  {finding.dependency}@{finding.version}")
        for vuln in finding.vulnerabilities:
            click.echo(f"    {vuln.id:<24} {vuln.severity:<9} {vuln.score:>4g}  [{vuln.source}]")


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(verbose: bool) -> None:
    """depaudit: scan dependency manifests against public vulnerability databases."""
    setup_logging("DEBUG" if verbose else None)


@main.command("scan")
@click.argument("manifest", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--type",
    "manifest_format",
    type=click.Choice(supported_formats()),
    default=None,
    help="Manifest format (default: inferred from the file name)",
)
@click.option("--json", "as_json", is_flag=True, help="Print the full result as JSON")
@click.option(
    "--pdf",
    "pdf_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also write a PDF report to this path",
)
def scan(manifest: Path, manifest_format: str | None, as_json: bool, pdf_path: Path | None) -> None:
    """Scan MANIFEST and report vulnerable dependencies."""
    manifest_format = manifest_format or detect_format(manifest.name)
    if manifest_format is None:
        raise click.UsageError(
            f"cannot infer the format of {manifest.name}; pass --type "
            f"({', '.join(supported_formats())})"
        )

    settings = Settings.from_env()
    result = asyncio.run(_run_scan(manifest.read_bytes(), manifest_format, settings))

    if as_json:
        payload = ScanResultSchema.from_engine(result).model_dump(by_alias=True)
        click.echo(json.dumps(payload, indent=2))
    else:
        _print_summary(result)

    if pdf_path is not None:
        pdf_path.write_bytes(ReportRenderer().render(result))
        click.echo(f"PDF report written to {pdf_path}", err=as_json)


@main.command("serve")
@click.option("--host", default="0.0.0.0", help="Bind address")
@click.option("--port", type=int, default=None, help="Port (default: $PORT or 5000)")
def serve(host: str, port: int | None) -> None:
    """Run the HTTP API under uvicorn."""
    import uvicorn

    settings = Settings.from_env()
    uvicorn.run(
        "depaudit.api:create_app",
        factory=True,
        host=host,
        port=port or settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
