"""Spreadsheet host interface."""

from abc import ABC, abstractmethod
from typing import Optional

from .models import GridSnapshot, SheetBounds


class SpreadsheetHost(ABC):
    """The spreadsheet a formula is generated for.

    Implementations read the active selection as a typed grid, report sheet
    bounds and write a formula into one cell.
    """

    @abstractmethod
    def get_selection(self) -> Optional[GridSnapshot]:
        """Return the current selection, or None when nothing is selected."""
        pass

    @abstractmethod
    def get_bounds(self, sheet_name: str) -> SheetBounds:
        """Return the maximum row and column counts of a sheet."""
        pass

    @abstractmethod
    def set_formula(self, sheet_name: str, cell: str, formula: str) -> None:
        """Write a formula into a single cell; raise on rejection."""
        pass
