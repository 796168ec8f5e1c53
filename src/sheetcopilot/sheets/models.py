"""Data models for spreadsheet selections."""

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict

from .addressing import cell_address, range_address


def is_number(value: Any) -> bool:
    # bool is an int subclass but is not a spreadsheet number
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_text(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def is_date(value: Any) -> bool:
    return isinstance(value, date)


def format_cell(value: Any) -> str:
    """Render a cell value the way it reads in the grid."""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


class SheetBounds(BaseModel):
    """Maximum row and column counts of a sheet."""

    max_rows: int
    max_columns: int


class GridSnapshot(BaseModel):
    """The values of the selected block, captured once per action."""

    model_config = ConfigDict(frozen=True)

    sheet_name: str
    first_row: int  # 1-based
    first_column: int  # 1-based
    rows: tuple[tuple[Any, ...], ...] = ()

    @classmethod
    def from_values(
        cls,
        values: list[list[Any]],
        sheet_name: str = "Sheet1",
        first_row: int = 1,
        first_column: int = 1,
    ) -> "GridSnapshot":
        """Build a snapshot, padding ragged rows with empty strings."""
        width = max((len(row) for row in values), default=0)
        rows = tuple(tuple(row) + ("",) * (width - len(row)) for row in values)
        return cls(
            sheet_name=sheet_name,
            first_row=first_row,
            first_column=first_column,
            rows=rows,
        )

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def col_count(self) -> int:
        return len(self.rows[0]) if self.rows else 0

    @property
    def last_row(self) -> int:
        return self.first_row + max(self.row_count, 1) - 1

    @property
    def last_column(self) -> int:
        return self.first_column + max(self.col_count, 1) - 1

    @property
    def address(self) -> str:
        """A1 address of the block, e.g. "A1:B4"."""
        return range_address(self.first_row, self.first_column, self.row_count, self.col_count)

    def column(self, index: int) -> list[Any]:
        """Return all values of a column, header row included."""
        return [row[index] for row in self.rows]

    def cell_address_at(self, row_offset: int, col_offset: int) -> str:
        """A1 address of a cell given its offset inside the block."""
        return cell_address(self.first_row + row_offset, self.first_column + col_offset)
