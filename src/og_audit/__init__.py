"""og-audit - Open Graph tag validation and site audit."""

__version__ = "0.1.0"
