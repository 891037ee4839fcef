"""Scan orchestrator engine — manifest in, aggregated findings out."""

from depaudit.engines.scanner.models import DependencyFinding, ScanResult
from depaudit.engines.scanner.scanner import ScanOrchestrator

__all__ = ["DependencyFinding", "ScanOrchestrator", "ScanResult"]
