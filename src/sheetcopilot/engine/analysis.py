"""Structured description of a selected range."""

import logging
from typing import Optional

from pydantic import BaseModel, Field

from ..errors import EmptySelectionError, HostError, NoSelectionError, SheetCopilotError
from ..sheets.addressing import index_to_col_letter
from ..sheets.host import SpreadsheetHost
from ..sheets.models import GridSnapshot, is_text
from .profiler import ColumnProfile, profile_columns

logger = logging.getLogger(__name__)


class DataAnalysis(BaseModel):
    """Shape, header flag and column profiles of a selection."""

    range_address: str
    row_count: int
    col_count: int
    has_headers: bool = False
    columns: list[ColumnProfile] = Field(default_factory=list)
    # 1-based sheet column of the leftmost selected column
    first_column: int = 1

    def column_letter(self, index: int) -> str:
        """Sheet column letter of the column at a 0-based selection index."""
        return index_to_col_letter(self.first_column - 1 + index)


def detect_headers(snapshot: GridSnapshot) -> bool:
    """True iff every cell of the first row is non-empty text."""
    if snapshot.row_count == 0:
        return False
    return all(is_text(cell) for cell in snapshot.rows[0])


def capture_selection(host: SpreadsheetHost) -> GridSnapshot:
    """Read the selection fresh from the host, rejecting missing or empty ones."""
    try:
        snapshot = host.get_selection()
    except SheetCopilotError:
        raise
    except Exception as e:
        raise HostError(f"Failed to read selection: {e}") from e
    if snapshot is None:
        raise NoSelectionError()
    if snapshot.row_count == 0 or snapshot.col_count == 0:
        raise EmptySelectionError()
    return snapshot


def analyze_snapshot(snapshot: GridSnapshot) -> DataAnalysis:
    """Build the analysis of a non-empty snapshot."""
    if snapshot.row_count == 0 or snapshot.col_count == 0:
        raise EmptySelectionError()

    analysis = DataAnalysis(
        range_address=snapshot.address,
        row_count=snapshot.row_count,
        col_count=snapshot.col_count,
        has_headers=detect_headers(snapshot),
        columns=profile_columns(snapshot),
        first_column=snapshot.first_column,
    )
    logger.debug(
        f"Analyzed {analysis.range_address}: {analysis.row_count}x{analysis.col_count}, "
        f"headers={analysis.has_headers}"
    )
    return analysis


def analyze_selection(host: SpreadsheetHost) -> dict:
    """Analyze the host's current selection for UI callers.

    Never raises for a missing or empty selection; returns {"error": message}
    instead so a dialog can display it.
    """
    try:
        snapshot = capture_selection(host)
    except SheetCopilotError as e:
        return {"error": str(e)}
    return analyze_snapshot(snapshot).model_dump(mode="json")


def selection_summary(analysis: DataAnalysis) -> str:
    """One-line description such as "Selected: A1:B4 (4×2)"."""
    return f"Selected: {analysis.range_address} ({analysis.row_count}×{analysis.col_count})"


def render_analysis_summary(analysis: DataAnalysis, target_cell: Optional[str] = None) -> str:
    """Human-readable debug view of what is sent to the model."""
    lines = [
        "DEBUG INFO:",
        "",
        f"Selected Range: {analysis.range_address}",
        f"Rows: {analysis.row_count}, Columns: {analysis.col_count}",
        f"Has Headers: {analysis.has_headers}",
        "",
    ]
    if analysis.columns:
        lines.append("Columns:")
        for column in analysis.columns:
            lines.append(
                f'  {analysis.column_letter(column.index)}: "{column.header}" '
                f"({column.data_type.value})"
            )
    if target_cell:
        lines.extend(["", f"Target Cell: {target_cell}"])
    lines.extend(["", "This info will be sent to AI when generating formulas."])
    return "\n".join(lines)
