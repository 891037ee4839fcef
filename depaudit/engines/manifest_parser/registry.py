"""Parser registry — map declared manifest formats to parsers."""

from __future__ import annotations

from pathlib import PurePath
from typing import Protocol, runtime_checkable

from depaudit.engines.manifest_parser.models import Dependency, Ecosystem


@runtime_checkable
class ManifestParser(Protocol):
    """Interface that every manifest parser must satisfy."""

    manifest_format: str
    ecosystem: Ecosystem

    def parse(self, content: str) -> list[Dependency]: ...


PARSER_REGISTRY: dict[str, ManifestParser] = {}


def register_parser(parser: ManifestParser) -> None:
    """Register a parser instance by the manifest file name it understands."""
    PARSER_REGISTRY[parser.manifest_format] = parser


def supported_formats() -> list[str]:
    return sorted(PARSER_REGISTRY)


def detect_format(filename: str | None) -> str | None:
    """Infer the manifest format from an uploaded file's name.

    Only the base name matters, so ``app/package.json`` resolves to
    ``package.json``. Returns None for anything unrecognized.
    """
    if not filename:
        return None
    name = PurePath(filename.replace("\\", "/")).name
    return name if name in PARSER_REGISTRY else None
