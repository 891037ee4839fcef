"""Data models for the manifest parser engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Ecosystem(str, Enum):
    """Packaging system a dependency is resolved against."""

    NPM = "npm"
    COMPOSER = "composer"
    PYTHON = "python"


@dataclass(frozen=True)
class Dependency:
    """A single package/version pair declared in a manifest.

    ``version`` is ``"*"`` when the manifest leaves it unconstrained, otherwise the
    declared literal with its leading comparator stripped.
    """

    name: str
    version: str
    ecosystem: Ecosystem
