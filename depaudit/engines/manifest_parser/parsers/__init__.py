"""Manifest parsers — auto-registered on import."""

from depaudit.engines.manifest_parser.parsers import (
    composer_json,  # noqa: F401
    package_json,  # noqa: F401
    pip_requirements,  # noqa: F401
)
