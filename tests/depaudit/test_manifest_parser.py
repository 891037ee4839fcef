"""Tests for the manifest parser engine."""

from __future__ import annotations

import json

import pytest

from depaudit.engines.manifest_parser import (
    Dependency,
    Ecosystem,
    detect_format,
    parse_manifest,
    supported_formats,
)
from depaudit.engines.manifest_parser.parsers.common import strip_range_prefix
from depaudit.engines.manifest_parser.parsers.composer_json import ComposerJsonParser
from depaudit.engines.manifest_parser.parsers.package_json import PackageJsonParser
from depaudit.engines.manifest_parser.parsers.pip_requirements import PipRequirementsParser
from depaudit.engines.manifest_parser.registry import PARSER_REGISTRY


def _pairs(deps: list[Dependency]) -> list[tuple[str, str]]:
    return [(d.name, d.version) for d in deps]


# ── Registry ─────────────────────────────────────────────────────────────


class TestRegistry:
    def test_all_parsers_registered(self):
        assert set(PARSER_REGISTRY) == {"package.json", "composer.json", "requirements.txt"}
        assert supported_formats() == ["composer.json", "package.json", "requirements.txt"]

    @pytest.mark.parametrize(
        ("filename", "expected"),
        [
            ("package.json", "package.json"),
            ("frontend/package.json", "package.json"),
            ("C:\\work\\composer.json", "composer.json"),
            ("requirements.txt", "requirements.txt"),
            ("requirements-dev.txt", None),
            ("Pipfile", None),
            ("", None),
            (None, None),
        ],
    )
    def test_detect_format(self, filename, expected):
        assert detect_format(filename) == expected

    def test_unknown_format_yields_nothing(self):
        assert parse_manifest(b'{"dependencies": {"a": "1"}}', "Gemfile") == []
        assert parse_manifest(b"flask", None) == []

    def test_bytes_with_bom(self):
        content = "\ufeff" + json.dumps({"dependencies": {"left-pad": "^1.3.0"}})
        deps = parse_manifest(content.encode("utf-8"), "package.json")
        assert _pairs(deps) == [("left-pad", "1.3.0")]

    def test_invalid_utf8_does_not_raise(self):
        deps = parse_manifest(b"flask==2.0\n\xff\xfe\n", "requirements.txt")
        assert _pairs(deps) == [("flask", "2.0")]


# ── strip_range_prefix ───────────────────────────────────────────────────


class TestStripRangePrefix:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("^4.17.21", "4.17.21"),
            ("~1.2.0", "1.2.0"),
            ("=2.0.0", "2.0.0"),
            ("1.0.0", "1.0.0"),
            (">=1.0", ">=1.0"),
            ("*", "*"),
            ("^", "*"),
            (3, "3"),
        ],
    )
    def test_strip(self, raw, expected):
        assert strip_range_prefix(raw) == expected


# ── PackageJsonParser ────────────────────────────────────────────────────


class TestPackageJsonParser:
    @pytest.fixture
    def parser(self):
        return PackageJsonParser()

    def test_dependencies_and_dev_dependencies(self, parser):
        content = json.dumps(
            {
                "name": "app",
                "dependencies": {"express": "^4.18.2", "lodash": "~4.17.20"},
                "devDependencies": {"jest": "29.7.0"},
            }
        )
        deps = parser.parse(content)
        assert _pairs(deps) == [
            ("express", "4.18.2"),
            ("lodash", "4.17.20"),
            ("jest", "29.7.0"),
        ]
        assert all(d.ecosystem is Ecosystem.NPM for d in deps)

    def test_duplicate_name_later_declaration_wins(self, parser):
        content = json.dumps(
            {
                "dependencies": {"react": "^17.0.0", "axios": "1.0.0"},
                "devDependencies": {"react": "^18.2.0"},
            }
        )
        deps = parser.parse(content)
        # First position, last version.
        assert _pairs(deps) == [("react", "18.2.0"), ("axios", "1.0.0")]

    def test_length_bounded_by_distinct_keys(self, parser):
        dependencies = {f"pkg-{i}": f"^{i}.0.0" for i in range(8)}
        dev = {f"pkg-{i}": f"~{i}.1.0" for i in range(5, 12)}
        deps = parser.parse(json.dumps({"dependencies": dependencies, "devDependencies": dev}))
        assert len(deps) == len(set(dependencies) | set(dev))
        assert not any(d.version.startswith(("^", "~")) for d in deps)

    def test_missing_sections(self, parser):
        assert parser.parse('{"name": "empty"}') == []

    def test_invalid_json(self, parser):
        assert parser.parse('{"dependencies": {') == []

    def test_not_an_object(self, parser):
        assert parser.parse('["express"]') == []

    def test_non_object_section_is_skipped(self, parser):
        content = json.dumps({"dependencies": ["express"], "devDependencies": {"jest": "1.0.0"}})
        assert _pairs(parser.parse(content)) == [("jest", "1.0.0")]


# ── ComposerJsonParser ───────────────────────────────────────────────────


class TestComposerJsonParser:
    @pytest.fixture
    def parser(self):
        return ComposerJsonParser()

    def test_require_and_require_dev(self, parser):
        content = json.dumps(
            {
                "require": {
                    "php": ">=8.1",
                    "ext-json": "*",
                    "laravel/framework": "^10.0",
                    "guzzlehttp/guzzle": "~7.5",
                },
                "require-dev": {"phpunit/phpunit": "10.2.0"},
            }
        )
        deps = parser.parse(content)
        assert _pairs(deps) == [
            ("laravel/framework", "10.0"),
            ("guzzlehttp/guzzle", "7.5"),
            ("phpunit/phpunit", "10.2.0"),
        ]
        assert all(d.ecosystem is Ecosystem.COMPOSER for d in deps)

    def test_duplicate_name_later_declaration_wins(self, parser):
        content = json.dumps(
            {
                "require": {"monolog/monolog": "^2.0"},
                "require-dev": {"monolog/monolog": "^3.0"},
            }
        )
        assert _pairs(parser.parse(content)) == [("monolog/monolog", "3.0")]

    def test_invalid_json(self, parser):
        assert parser.parse("not json") == []


# ── PipRequirementsParser ────────────────────────────────────────────────


class TestPipRequirementsParser:
    @pytest.fixture
    def parser(self):
        return PipRequirementsParser()

    def test_pinned(self, parser):
        deps = parser.parse("flask==2.0.1\n")
        assert deps == [Dependency("flask", "2.0.1", Ecosystem.PYTHON)]

    def test_bare_name(self, parser):
        assert _pairs(parser.parse("numpy\n")) == [("numpy", "*")]

    @pytest.mark.parametrize(
        ("line", "version"),
        [
            ("django>=4.2", "4.2"),
            ("django<5", "5"),
            ("django!=4.0", "4.0"),
            ("django~=4.2", "4.2"),
            ("django=4.2", "4.2"),
            ("django == 4.2", "4.2"),
            ("requests>=2.28,<3.0", "2.28"),
            ('pywin32==306; sys_platform == "win32"', "306"),
        ],
    )
    def test_comparators(self, parser, line, version):
        deps = parser.parse(line)
        assert len(deps) == 1
        assert deps[0].version == version

    def test_skips_comments_blanks_and_options(self, parser):
        content = (
            "# pinned deps\n"
            "\n"
            "-r base.txt\n"
            "--index-url https://pypi.org/simple\n"
            "-e ./local\n"
            "   \n"
            "flask==2.0.1  # web\n"
            "numpy\n"
        )
        assert _pairs(parser.parse(content)) == [("flask", "2.0.1"), ("numpy", "*")]

    def test_unmatched_lines_dropped(self, parser):
        content = (
            "requests[security]==2.31\n"
            "git+https://github.com/org/repo.git\n"
            "pkg @ https://example.com/pkg.whl\n"
            "flask>=\n"
            "click==8.1.7\n"
        )
        assert _pairs(parser.parse(content)) == [("click", "8.1.7")]

    @pytest.mark.parametrize("line", ["flask>=", "django==", "six~=", "numpy<", "pandas ==="])
    def test_dangling_comparator_dropped(self, parser, line):
        assert _pairs(parser.parse(f"{line}\nclick==8.1\n")) == [("click", "8.1")]

    def test_range_keeps_first_bound(self, parser):
        assert _pairs(parser.parse("flask>=1.0,<2\n")) == [("flask", "1.0")]

    def test_keeps_duplicates(self, parser):
        assert _pairs(parser.parse("six==1.15\nsix==1.16\n")) == [("six", "1.15"), ("six", "1.16")]
