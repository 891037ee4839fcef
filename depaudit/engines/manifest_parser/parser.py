"""Manifest parsing entry point — bytes in, uniform dependency list out."""

from __future__ import annotations

import structlog

# Ensure parsers are registered before any manifest is parsed.
import depaudit.engines.manifest_parser.parsers  # noqa: F401
from depaudit.engines.manifest_parser.models import Dependency
from depaudit.engines.manifest_parser.registry import PARSER_REGISTRY

log = structlog.get_logger("depaudit.engine")


def parse_manifest(content: bytes | str, declared_format: str | None) -> list[Dependency]:
    """Parse *content* as a *declared_format* manifest.

    Never raises for bad input: an unknown format yields ``[]`` and each parser
    salvages what it can from malformed documents.
    """
    parser = PARSER_REGISTRY.get(declared_format or "")
    if parser is None:
        log.warning("parser.unknown_format", declared_format=declared_format)
        return []

    if isinstance(content, bytes):
        text = content.decode("utf-8", errors="replace")
    else:
        text = content
    # Editors on Windows like to prepend a BOM, which json.loads rejects.
    text = text.lstrip("\ufeff")

    deps = parser.parse(text)
    log.debug("parser.parsed", manifest_format=declared_format, count=len(deps))
    return deps
