"""NVD CVE API 2.0 keyword-search source."""

from __future__ import annotations

from typing import Any

import httpx

from depaudit.engines.manifest_parser.models import Dependency
from depaudit.engines.vuln_sources.base import VulnSource
from depaudit.engines.vuln_sources.models import Vulnerability, normalize_severity, truncate

NVD_URL = "https://services.nvd.nist.gov/rest/json/cves/2.0"

_RESULTS_PER_PAGE = 10
_MAX_REFERENCES = 2

# Newest scoring metric first. v3.x keep severity inside cvssData, v2 beside it.
_METRIC_KEYS = ("cvssMetricV31", "cvssMetricV30", "cvssMetricV2")


def _pick_metric(metrics: dict[str, Any]) -> tuple[str | None, float]:
    for key in _METRIC_KEYS:
        entries = metrics.get(key) or []
        if not entries:
            continue
        entry = entries[0]
        data = entry.get("cvssData") or {}
        severity = data.get("baseSeverity") or entry.get("baseSeverity")
        score = data.get("baseScore") or 0
        return severity, float(score)
    return None, 0.0


def parse_cve(cve: dict[str, Any]) -> Vulnerability | None:
    """Normalize one ``vulnerabilities[].cve`` record; None if it has no description."""
    descriptions = cve.get("descriptions") or []
    if not descriptions:
        return None
    # Prefer the English text; NVD lists it first in practice.
    text = next(
        (d.get("value") for d in descriptions if d.get("lang") == "en"),
        descriptions[0].get("value"),
    )
    if not text:
        return None

    severity, score = _pick_metric(cve.get("metrics") or {})
    refs = [r["url"] for r in (cve.get("references") or [])[:_MAX_REFERENCES] if r.get("url")]
    return Vulnerability(
        id=cve.get("id") or "",
        description=truncate(text),
        severity=normalize_severity(severity),
        score=score,
        references=tuple(refs),
        published=cve.get("published"),
        source=NvdSource.name,
    )


class NvdSource(VulnSource):
    name = "nvd"
    max_results = 5

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        api_key: str = "",
        url: str = NVD_URL,
        timeout: float | None = None,
    ) -> None:
        super().__init__(client, timeout=timeout)
        self._api_key = api_key
        self._url = url

    async def fetch(self, dependency: Dependency) -> list[Vulnerability]:
        headers = {"apiKey": self._api_key} if self._api_key else {}
        params = {"keywordSearch": dependency.name, "resultsPerPage": _RESULTS_PER_PAGE}

        resp = await self._client.get(
            self._url, params=params, headers=headers, **self._request_kwargs()
        )
        resp.raise_for_status()

        vulns: list[Vulnerability] = []
        for item in resp.json().get("vulnerabilities") or []:
            vuln = parse_cve(item.get("cve") or {})
            if vuln is not None:
                vulns.append(vuln)
            if len(vulns) >= self.max_results:
                break
        return vulns
