"""Sonatype OSS Index component-report source."""

from __future__ import annotations

import base64
from typing import Any

import httpx

from depaudit.engines.manifest_parser.models import Dependency
from depaudit.engines.vuln_sources.base import VulnSource
from depaudit.engines.vuln_sources.models import (
    Vulnerability,
    severity_from_score,
    truncate,
)

OSS_INDEX_URL = "https://ossindex.sonatype.org/api/v3/component-report"

_MAX_REFERENCES = 2


def coordinate(dependency: Dependency) -> str:
    return f"{dependency.ecosystem.value}:{dependency.name}:{dependency.version}"


def parse_advisory(item: dict[str, Any]) -> Vulnerability:
    score = float(item.get("cvssScore") or 0)
    refs = [item["reference"]] if item.get("reference") else []
    refs.extend(u for u in item.get("externalReferences") or [] if u not in refs)
    return Vulnerability(
        id=item.get("cve") or item.get("displayName") or item.get("id") or "",
        description=truncate(item.get("description") or item.get("title")),
        severity=severity_from_score(score),
        score=score,
        references=tuple(refs[:_MAX_REFERENCES]),
        published=None,
        source=OssIndexSource.name,
    )


class OssIndexSource(VulnSource):
    name = "oss_index"
    max_results = 3

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        api_key: str = "",
        url: str = OSS_INDEX_URL,
        timeout: float | None = None,
    ) -> None:
        super().__init__(client, timeout=timeout)
        self._api_key = api_key
        self._url = url

    async def fetch(self, dependency: Dependency) -> list[Vulnerability]:
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            token = base64.b64encode(self._api_key.encode()).decode()
            headers["Authorization"] = f"Basic {token}"

        resp = await self._client.post(
            self._url,
            json={"coordinates": [coordinate(dependency)]},
            headers=headers,
            **self._request_kwargs(),
        )
        resp.raise_for_status()

        data = resp.json()
        # The API answers with one report per coordinate.
        reports = data if isinstance(data, list) else [data]
        advisories: list[dict[str, Any]] = []
        for report in reports:
            advisories.extend(report.get("vulnerabilities") or [])
        return [parse_advisory(item) for item in advisories[: self.max_results]]
