"""Choosing and writing the cell that receives a generated formula."""

import logging

from ..errors import HostError, InsertionError, SheetCopilotError
from ..sheets.addressing import cell_address
from ..sheets.host import SpreadsheetHost
from ..sheets.models import GridSnapshot, SheetBounds

logger = logging.getLogger(__name__)


def read_bounds(host: SpreadsheetHost, sheet_name: str) -> SheetBounds:
    """Size of the named sheet, with host faults raised as HostError."""
    try:
        return host.get_bounds(sheet_name)
    except SheetCopilotError:
        raise
    except Exception as e:
        raise HostError(f"Failed to read bounds of {sheet_name}: {e}") from e


def resolve_target_position(snapshot: GridSnapshot, bounds: SheetBounds) -> tuple[int, int]:
    """Return the 1-based (row, column) of the destination cell.

    A table (more than one row and column) gets the formula below it in its
    leftmost column. Anything else gets it right of its last column, in the
    first row. The result is clamped to the sheet bounds.
    """
    if snapshot.row_count > 1 and snapshot.col_count > 1:
        row = snapshot.last_row + 1
        column = snapshot.first_column
    else:
        row = snapshot.first_row
        column = snapshot.last_column + 1

    row = min(row, bounds.max_rows)
    column = min(column, bounds.max_columns)
    return row, column


def resolve_target_cell(snapshot: GridSnapshot, bounds: SheetBounds) -> str:
    """A1 address of the destination cell."""
    row, column = resolve_target_position(snapshot, bounds)
    return cell_address(row, column)


class FormulaInserter:
    """Writes formulas through a spreadsheet host."""

    def __init__(self, host: SpreadsheetHost):
        self.host = host

    def insert(self, sheet_name: str, cell: str, formula: str) -> None:
        """Write the formula, raising InsertionError if the host rejects it."""
        try:
            self.host.set_formula(sheet_name, cell, formula)
        except Exception as e:
            logger.warning(f"Host rejected formula for {sheet_name}!{cell}: {e}")
            raise InsertionError(cell, str(e)) from e
        logger.info(f"Inserted {formula} into {sheet_name}!{cell}")
