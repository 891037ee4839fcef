"""Shared fixtures for depaudit tests. No network access is needed."""

from __future__ import annotations

import pytest

from depaudit.dao import ResultStore


@pytest.fixture
def store():
    """Default-TTL store; pending deletions are cancelled at teardown."""
    s = ResultStore()
    yield s
    s.cancel_pending()
