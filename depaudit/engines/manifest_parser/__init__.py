"""Manifest parser engine — turn dependency manifests into Dependency lists."""

from depaudit.engines.manifest_parser.models import Dependency, Ecosystem
from depaudit.engines.manifest_parser.parser import parse_manifest
from depaudit.engines.manifest_parser.registry import detect_format, supported_formats

__all__ = ["Dependency", "Ecosystem", "detect_format", "parse_manifest", "supported_formats"]
