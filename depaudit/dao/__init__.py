"""Data access layer — in-process storage for scan results."""

from depaudit.dao.result_store import ResultStore

__all__ = ["ResultStore"]
