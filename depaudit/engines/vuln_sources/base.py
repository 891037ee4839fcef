"""Abstract base for vulnerability sources."""

from __future__ import annotations

import time
from abc import ABC, abstractmethod

import httpx
import structlog

from depaudit.engines.manifest_parser.models import Dependency
from depaudit.engines.vuln_sources.models import SourceOutcome, Vulnerability

log = structlog.get_logger("depaudit.engine")


class VulnSource(ABC):
    """One upstream vulnerability database.

    Subclasses implement :meth:`fetch`, which may raise freely. :meth:`query`
    turns every failure into a :class:`SourceOutcome` carrying the reason, and
    :meth:`lookup` collapses that outcome to a plain list so a single bad
    upstream can never abort a scan.
    """

    name: str = ""
    max_results: int = 0

    def __init__(self, client: httpx.AsyncClient, *, timeout: float | None = None) -> None:
        self._client = client
        self._timeout = timeout

    @property
    def enabled(self) -> bool:
        """False when the source lacks the configuration it needs to run."""
        return True

    @abstractmethod
    async def fetch(self, dependency: Dependency) -> list[Vulnerability]:
        """Query the upstream and normalize its answer. May raise."""

    async def query(self, dependency: Dependency) -> SourceOutcome:
        if not self.enabled:
            return SourceOutcome(source=self.name, skipped=True)

        start = time.perf_counter()
        try:
            vulns = await self.fetch(dependency)
        except httpx.HTTPStatusError as exc:
            reason = f"HTTP {exc.response.status_code}"
        except httpx.HTTPError as exc:
            reason = f"{type(exc).__name__}: {exc}"
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            reason = f"malformed response: {type(exc).__name__}: {exc}"
        else:
            duration_ms = round((time.perf_counter() - start) * 1000, 1)
            log.debug(
                f"{self.name}.lookup",
                dependency=dependency.name,
                count=len(vulns),
                duration_ms=duration_ms,
            )
            return SourceOutcome(source=self.name, vulnerabilities=vulns[: self.max_results])

        log.warning(f"{self.name}.lookup_failed", dependency=dependency.name, error=reason)
        return SourceOutcome(source=self.name, error=reason)

    async def lookup(self, dependency: Dependency) -> list[Vulnerability]:
        """Never raises: failures and skips both come back as ``[]``."""
        outcome = await self.query(dependency)
        return outcome.vulnerabilities

    def _request_kwargs(self) -> dict:
        if self._timeout is None:
            return {}
        return {"timeout": self._timeout}
