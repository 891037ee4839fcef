"""Parser for npm package.json manifests."""

from __future__ import annotations

from depaudit.engines.manifest_parser.models import Dependency, Ecosystem
from depaudit.engines.manifest_parser.parsers.common import (
    load_json_object,
    merge_sections,
    strip_range_prefix,
)
from depaudit.engines.manifest_parser.registry import register_parser


class PackageJsonParser:
    manifest_format = "package.json"
    ecosystem = Ecosystem.NPM
    sections = ("dependencies", "devDependencies")

    def parse(self, content: str) -> list[Dependency]:
        data = load_json_object(content, self.manifest_format)
        merged = merge_sections(data, self.sections, self.manifest_format)
        return [
            Dependency(name=name, version=strip_range_prefix(version), ecosystem=self.ecosystem)
            for name, version in merged.items()
        ]


register_parser(PackageJsonParser())
