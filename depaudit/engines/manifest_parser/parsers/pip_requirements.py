"""Parser for pip requirements.txt files."""

from __future__ import annotations

import re

from depaudit.engines.manifest_parser.models import Dependency, Ecosystem
from depaudit.engines.manifest_parser.registry import register_parser

# Matches: package_name, then optionally one comparator and a version literal.
# A version never starts with a comparator character, so "flask>=" is dropped.
_REQ_RE = re.compile(
    r"^([A-Za-z0-9._-]+)"  # package name
    r"(?:\s*(===|==|~=|!=|<=|>=|=|<|>)\s*([^\s,;=<>!~][^\s,;]*))?"  # comparator + version
    r"\s*(?:[,;].*)?$",  # extra specifiers / environment markers are ignored
)

_INLINE_COMMENT_RE = re.compile(r"\s+#.*$")


class PipRequirementsParser:
    manifest_format = "requirements.txt"
    ecosystem = Ecosystem.PYTHON

    def parse(self, content: str) -> list[Dependency]:
        deps: list[Dependency] = []

        for raw_line in content.splitlines():
            line = raw_line.strip()
            if not line or line.startswith(("#", "-")):
                continue
            line = _INLINE_COMMENT_RE.sub("", line)

            m = _REQ_RE.match(line)
            if not m:
                continue

            deps.append(
                Dependency(
                    name=m.group(1),
                    version=m.group(3) or "*",
                    ecosystem=self.ecosystem,
                )
            )

        return deps


register_parser(PipRequirementsParser())
