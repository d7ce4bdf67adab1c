"""Command-line entry points for the SharePoint sync adapter."""

from .main import app

__all__ = ["app"]
