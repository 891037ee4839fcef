"""depaudit — dependency manifest vulnerability scanner."""

__version__ = "1.0.0"
