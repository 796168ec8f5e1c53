"""Spreadsheet host integration."""

from .client import GoogleSheetsHost
from .host import SpreadsheetHost
from .models import GridSnapshot, SheetBounds

__all__ = [
    "GoogleSheetsHost",
    "SpreadsheetHost",
    "GridSnapshot",
    "SheetBounds",
]
