"""Parser for PHP composer.json manifests."""

from __future__ import annotations

from depaudit.engines.manifest_parser.models import Dependency, Ecosystem
from depaudit.engines.manifest_parser.parsers.common import (
    load_json_object,
    merge_sections,
    strip_range_prefix,
)
from depaudit.engines.manifest_parser.registry import register_parser


class ComposerJsonParser:
    manifest_format = "composer.json"
    ecosystem = Ecosystem.COMPOSER
    sections = ("require", "require-dev")

    def parse(self, content: str) -> list[Dependency]:
        data = load_json_object(content, self.manifest_format)
        merged = merge_sections(data, self.sections, self.manifest_format)

        deps: list[Dependency] = []
        for name, version in merged.items():
            # Platform requirements (php, ext-*, lib-*) have no vendor prefix.
            if "/" not in name:
                continue
            deps.append(
                Dependency(name=name, version=strip_range_prefix(version), ecosystem=self.ecosystem)
            )
        return deps


register_parser(ComposerJsonParser())
