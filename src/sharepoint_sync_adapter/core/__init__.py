"""
Core infrastructure shared across the SharePoint sync adapter.

This package intentionally stays dependency-free apart from the standard
library. It exposes the structured logging helpers used by the adapters, the
HTTP client and the CLI.
"""

from .logging import StructuredLogFormatter, configure_logging, get_logger, log_progress

__all__ = [
    "StructuredLogFormatter",
    "configure_logging",
    "get_logger",
    "log_progress",
]
