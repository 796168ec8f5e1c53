"""Column type detection and per-column statistics.

Row 0 of a selection is always treated as a prospective header: it never
contributes to a column's type, samples or counts, whether or not the row
actually looks like a header. A request that is about the header row itself
("count the headers") still sees statistics of the data rows only.
"""

from enum import Enum
from typing import Any, Sequence

from pydantic import BaseModel, Field

from ..sheets.models import GridSnapshot, is_date, is_number, is_text

SAMPLE_SIZE = 3

DATE_THRESHOLD = 0.5
NUMBER_THRESHOLD = 0.7
TEXT_THRESHOLD = 0.7


class DataType(str, Enum):
    """Detected type of a column."""

    EMPTY = "empty"
    NUMBER = "number"
    TEXT = "text"
    DATE = "date"
    MIXED = "mixed"


class ColumnProfile(BaseModel):
    """Type and summary of one column of the selection."""

    index: int
    header: Any = ""
    data_type: DataType
    sample_values: list[Any] = Field(default_factory=list)
    unique_count: int = 0
    has_numbers: bool = False
    has_text: bool = False
    has_dates: bool = False


def detect_data_type(values: Sequence[Any]) -> DataType:
    """Classify a list of non-empty cell values.

    Dates win above half the values; numbers or text need more than 70%.
    Booleans count as neither, so they push a column towards mixed.
    """
    total = len(values)
    if total == 0:
        return DataType.EMPTY

    date_count = sum(1 for value in values if is_date(value))
    number_count = sum(1 for value in values if is_number(value))
    text_count = sum(1 for value in values if is_text(value))

    if date_count / total > DATE_THRESHOLD:
        return DataType.DATE
    if number_count / total > NUMBER_THRESHOLD:
        return DataType.NUMBER
    if text_count / total > TEXT_THRESHOLD:
        return DataType.TEXT
    return DataType.MIXED


def _unique_key(value: Any) -> tuple:
    # keep True distinct from 1
    return (isinstance(value, bool), value)


def data_values(snapshot: GridSnapshot, index: int) -> list[Any]:
    """Non-empty values of a column below the header row."""
    return [row[index] for row in snapshot.rows[1:] if row[index] != ""]


def profile_column(snapshot: GridSnapshot, index: int) -> ColumnProfile:
    values = data_values(snapshot, index)
    return ColumnProfile(
        index=index,
        header=snapshot.rows[0][index],
        data_type=detect_data_type(values),
        sample_values=values[:SAMPLE_SIZE],
        unique_count=len({_unique_key(value) for value in values}),
        has_numbers=any(is_number(value) for value in values),
        has_text=any(isinstance(value, str) for value in values),
        has_dates=any(is_date(value) for value in values),
    )


def profile_columns(snapshot: GridSnapshot) -> list[ColumnProfile]:
    """Profile every column of a snapshot; an empty snapshot yields []."""
    if snapshot.row_count == 0:
        return []
    return [profile_column(snapshot, index) for index in range(snapshot.col_count)]


def summarize_columns(snapshot: GridSnapshot) -> list[float]:
    """Numeric total of each column, header row excluded."""
    sums = [0.0] * snapshot.col_count
    for row in snapshot.rows[1:]:
        for index, value in enumerate(row):
            if is_number(value):
                sums[index] += value
    return sums
