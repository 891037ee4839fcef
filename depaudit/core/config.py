"""Runtime settings read from the environment (and an optional ``.env`` file)."""

from __future__ import annotations

import os
from dataclasses import dataclass

import structlog
from dotenv import load_dotenv

log = structlog.get_logger("depaudit.config")


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        log.warning("config.invalid_value", variable=name, value=raw, default=default)
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        log.warning("config.invalid_value", variable=name, value=raw, default=default)
        return default


@dataclass(frozen=True)
class Settings:
    """Upstream credentials and scan tuning knobs.

    Every credential is optional: the NVD and OSS Index sources run anonymously
    without one. The Snyk source is skipped unless both a token and an org id are set.
    """

    nvd_api_key: str = ""
    snyk_api_token: str = ""
    snyk_org_id: str = ""
    snyk_api_version: str = "2024-10-15"
    oss_index_api_key: str = ""

    scan_limit: int = 20
    scan_concurrency: int = 4
    http_timeout: float = 15.0
    result_ttl: float = 3600.0
    cleanup_delay: float = 30.0
    max_upload_bytes: int = 10 * 1024 * 1024

    cors_origins: tuple[str, ...] = ("*",)
    port: int = 5000

    @classmethod
    def from_env(cls, *, dotenv: bool = True) -> Settings:
        """Build settings from ``os.environ``, loading ``.env`` first if present."""
        if dotenv:
            load_dotenv()

        origins = os.environ.get("DEPAUDIT_CORS_ORIGINS", "*")
        return cls(
            nvd_api_key=os.environ.get("NVD_API_KEY", ""),
            snyk_api_token=os.environ.get("SNYK_API_TOKEN", ""),
            snyk_org_id=os.environ.get("SNYK_ORG_ID", ""),
            snyk_api_version=os.environ.get("SNYK_API_VERSION", cls.snyk_api_version),
            oss_index_api_key=os.environ.get("OSS_INDEX_API_KEY", ""),
            scan_limit=_env_int("DEPAUDIT_SCAN_LIMIT", cls.scan_limit),
            scan_concurrency=max(_env_int("DEPAUDIT_SCAN_CONCURRENCY", cls.scan_concurrency), 1),
            http_timeout=_env_float("DEPAUDIT_HTTP_TIMEOUT", cls.http_timeout),
            result_ttl=_env_float("DEPAUDIT_RESULT_TTL", cls.result_ttl),
            cleanup_delay=_env_float("DEPAUDIT_CLEANUP_DELAY", cls.cleanup_delay),
            max_upload_bytes=_env_int("DEPAUDIT_MAX_UPLOAD_BYTES", cls.max_upload_bytes),
            cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()) or ("*",),
            port=_env_int("PORT", cls.port),
        )
