"""Helpers shared by the JSON manifest parsers."""

from __future__ import annotations

import json
import re
from typing import Any

import structlog

log = structlog.get_logger("depaudit.engine")

_RANGE_PREFIX_RE = re.compile(r"^[\^~=]+")


def strip_range_prefix(version: Any) -> str:
    """Drop a leading ``^``/``~``/``=`` from a declared version."""
    text = str(version).strip()
    return _RANGE_PREFIX_RE.sub("", text) or "*"


def load_json_object(content: str, manifest_format: str) -> dict[str, Any]:
    """Decode a JSON manifest, returning ``{}`` for anything that is not an object."""
    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        log.warning("parser.invalid_json", manifest_format=manifest_format, error=str(exc))
        return {}
    if not isinstance(data, dict):
        log.warning("parser.not_an_object", manifest_format=manifest_format)
        return {}
    return data


def merge_sections(
    data: dict[str, Any], sections: tuple[str, ...], manifest_format: str
) -> dict[str, Any]:
    """Union the name→version maps under *sections*.

    A name declared in more than one section keeps the position of its first
    declaration and the version of its last one.
    """
    merged: dict[str, Any] = {}
    for section in sections:
        block = data.get(section)
        if block is None:
            continue
        if not isinstance(block, dict):
            log.warning("parser.invalid_section", manifest_format=manifest_format, section=section)
            continue
        for name, version in block.items():
            if name in merged:
                log.warning(
                    "parser.duplicate_dependency",
                    manifest_format=manifest_format,
                    name=name,
                    old_version=merged[name],
                    new_version=version,
                    section=section,
                )
            merged[name] = version
    return merged
