"""Vulnerability source adapters — one per upstream database."""

from __future__ import annotations

import httpx

from depaudit.core.config import Settings
from depaudit.engines.vuln_sources.base import VulnSource
from depaudit.engines.vuln_sources.models import Severity, SourceOutcome, Vulnerability
from depaudit.engines.vuln_sources.nvd import NvdSource
from depaudit.engines.vuln_sources.oss_index import OssIndexSource
from depaudit.engines.vuln_sources.snyk import SnykSource


def build_sources(client: httpx.AsyncClient, settings: Settings) -> list[VulnSource]:
    """The default source line-up, in the order their results are concatenated."""
    return [
        NvdSource(client, api_key=settings.nvd_api_key, timeout=settings.http_timeout),
        SnykSource(
            client,
            api_token=settings.snyk_api_token,
            org_id=settings.snyk_org_id,
            api_version=settings.snyk_api_version,
            timeout=settings.http_timeout,
        ),
        OssIndexSource(client, api_key=settings.oss_index_api_key, timeout=settings.http_timeout),
    ]


__all__ = [
    "NvdSource",
    "OssIndexSource",
    "Severity",
    "SnykSource",
    "SourceOutcome",
    "VulnSource",
    "Vulnerability",
    "build_sources",
]
