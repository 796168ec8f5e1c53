"""HTTP API for SheetCopilot."""

from .app import create_app

__all__ = ["create_app"]
