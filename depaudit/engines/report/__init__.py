"""Report engine — render scan results as paginated PDF documents."""

from depaudit.engines.report.renderer import DEFAULT_TITLE, ReportRenderer

__all__ = ["DEFAULT_TITLE", "ReportRenderer"]
