"""Snyk REST API org-scoped package-issues source."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx
import structlog

from depaudit.engines.manifest_parser.models import Dependency, Ecosystem
from depaudit.engines.vuln_sources.base import VulnSource
from depaudit.engines.vuln_sources.models import Vulnerability, normalize_severity, truncate

SNYK_URL = "https://api.snyk.io/rest"

log = structlog.get_logger("depaudit.engine")

_PURL_TYPES = {
    Ecosystem.NPM: "npm",
    Ecosystem.COMPOSER: "composer",
    Ecosystem.PYTHON: "pypi",
}
_MAX_REFERENCES = 2


def package_url(dependency: Dependency) -> str:
    """Build the purl Snyk expects, e.g. ``pkg:npm/lodash@4.17.20``."""
    purl = f"pkg:{_PURL_TYPES[dependency.ecosystem]}/{dependency.name}"
    if dependency.version and dependency.version != "*":
        purl += f"@{dependency.version}"
    return purl


def parse_issue(item: dict[str, Any]) -> Vulnerability:
    attrs = item.get("attributes") or {}

    # A CVE id is more useful in a report than Snyk's internal issue key.
    ident = item.get("id") or attrs.get("key") or ""
    for problem in attrs.get("problems") or []:
        if problem.get("source") == "CVE" and problem.get("id"):
            ident = problem["id"]
            break

    score = 0.0
    for entry in attrs.get("severities") or []:
        if entry.get("score") is not None:
            score = float(entry["score"])
            break

    slots = attrs.get("slots") or {}
    refs = [r["url"] for r in (slots.get("references") or []) if r.get("url")]

    return Vulnerability(
        id=ident,
        description=truncate(attrs.get("description") or attrs.get("title")),
        severity=normalize_severity(attrs.get("effective_severity_level")),
        score=score,
        references=tuple(refs[:_MAX_REFERENCES]),
        published=slots.get("publication_time") or attrs.get("created_at"),
        source=SnykSource.name,
    )


class SnykSource(VulnSource):
    name = "snyk"
    max_results = 3

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        api_token: str = "",
        org_id: str = "",
        api_version: str = "2024-10-15",
        url: str = SNYK_URL,
        timeout: float | None = None,
    ) -> None:
        super().__init__(client, timeout=timeout)
        self._api_token = api_token
        self._org_id = org_id
        self._api_version = api_version
        self._url = url.rstrip("/")
        if api_token and not org_id:
            log.warning("snyk.missing_org_id", hint="set SNYK_ORG_ID to enable Snyk lookups")

    @property
    def enabled(self) -> bool:
        # Issues are looked up per organization; both are required.
        return bool(self._api_token and self._org_id)

    async def fetch(self, dependency: Dependency) -> list[Vulnerability]:
        purl = quote(package_url(dependency), safe="")
        url = f"{self._url}/orgs/{self._org_id}/packages/{purl}/issues"
        headers = {
            "Authorization": f"token {self._api_token}",
            "Accept": "application/vnd.api+json",
        }
        resp = await self._client.get(
            url,
            params={"version": self._api_version, "limit": self.max_results},
            headers=headers,
            **self._request_kwargs(),
        )
        resp.raise_for_status()

        items = resp.json().get("data") or []
        return [parse_issue(item) for item in items[: self.max_results]]
