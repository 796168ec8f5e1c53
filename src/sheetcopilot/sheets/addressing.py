"""A1 notation helpers."""

import re
from typing import Optional

_CELL_RE = re.compile(r"^\$?([A-Za-z]+)\$?(\d+)$")


def col_letter_to_index(col: str) -> int:
    """Convert column letter(s) to 0-based index. A=0, B=1, ..., Z=25, AA=26, etc."""
    result = 0
    for char in col.upper():
        result = result * 26 + (ord(char) - ord("A") + 1)
    return result - 1


def index_to_col_letter(index: int) -> str:
    """Convert 0-based index to column letter(s)."""
    if index < 0:
        raise ValueError(f"Column index must be non-negative: {index}")
    result = ""
    index += 1
    while index > 0:
        index -= 1
        result = chr(ord("A") + (index % 26)) + result
        index //= 26
    return result


def parse_cell_notation(cell: str) -> tuple[str, int]:
    """Parse A1 notation into column letters and row number."""
    match = _CELL_RE.match(cell.strip())
    if not match:
        raise ValueError(f"Invalid cell notation: {cell}")
    return match.group(1).upper(), int(match.group(2))


def cell_address(row: int, column: int) -> str:
    """Build an A1 address from 1-based row and column numbers."""
    return f"{index_to_col_letter(column - 1)}{row}"


def split_sheet_name(range_notation: str) -> tuple[Optional[str], str]:
    """Split "'Sheet 1'!A1:B2" into ("Sheet 1", "A1:B2")."""
    if "!" not in range_notation:
        return None, range_notation
    sheet, _, cells = range_notation.rpartition("!")
    return sheet.strip("'"), cells


def parse_range_notation(range_notation: str) -> tuple[int, int, int, int]:
    """Return (first_row, first_column, last_row, last_column), all 1-based.

    Only bounded ranges are accepted ("B2:D10" or a single cell "C3").
    """
    _, cells = split_sheet_name(range_notation)
    start, _, end = cells.partition(":")
    start_col, start_row = parse_cell_notation(start)
    end_col, end_row = parse_cell_notation(end) if end else (start_col, start_row)

    first_column = col_letter_to_index(start_col) + 1
    last_column = col_letter_to_index(end_col) + 1
    return (
        min(start_row, end_row),
        min(first_column, last_column),
        max(start_row, end_row),
        max(first_column, last_column),
    )


def range_address(first_row: int, first_column: int, row_count: int, col_count: int) -> str:
    """Build the A1 address of a block; single cells render without a colon."""
    start = cell_address(first_row, first_column)
    if row_count <= 1 and col_count <= 1:
        return start
    end = cell_address(first_row + row_count - 1, first_column + col_count - 1)
    return f"{start}:{end}"
