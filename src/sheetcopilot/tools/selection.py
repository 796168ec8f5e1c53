"""Tools that describe the current selection to the model."""

from functools import lru_cache

from ..engine.analysis import analyze_snapshot, detect_headers
from ..engine.profiler import data_values, detect_data_type
from ..sheets.models import format_cell, is_date, is_number, is_text
from .registry import Tool, ToolContext, ToolParameter, ToolRegistry


def _jsonable(value):
    return value if isinstance(value, (str, int, float, bool)) else format_cell(value)


def _jsonable_rows(rows) -> list[list]:
    return [[_jsonable(cell) for cell in row] for row in rows]


def analyze_structure(context: ToolContext) -> dict:
    """Column types, header flag and shape of the selection."""
    return analyze_snapshot(context.snapshot).model_dump(mode="json")


def range_details(context: ToolContext) -> dict:
    """Headers, sample rows and content flags of the selection."""
    snapshot = context.snapshot
    cells = [cell for row in snapshot.rows for cell in row]
    return {
        "sheet_name": snapshot.sheet_name,
        "range_address": snapshot.address,
        "num_rows": snapshot.row_count,
        "num_columns": snapshot.col_count,
        "has_headers": detect_headers(snapshot),
        "headers": _jsonable_rows(snapshot.rows[:1])[0] if snapshot.rows else [],
        "sample_data": _jsonable_rows(snapshot.rows[1:6]),
        "all_data": _jsonable_rows(snapshot.rows),
        "is_empty": all(cell == "" for cell in cells),
        "contains_numbers": any(is_number(cell) for cell in cells),
        "contains_text": any(is_text(cell) for cell in cells),
        "contains_dates": any(is_date(cell) for cell in cells),
    }


def column_info(context: ToolContext, column_index: int) -> dict:
    """Type, unique values and numeric statistics of one column."""
    snapshot = context.snapshot
    column_index = int(column_index)
    if column_index < 0 or column_index >= snapshot.col_count:
        return {"error": "Column index out of range"}

    values = data_values(snapshot, column_index)
    numbers = [value for value in values if is_number(value)]

    unique_values = []
    for value in values:
        if not any(value == seen and type(value) is type(seen) for seen in unique_values):
            unique_values.append(value)

    return {
        "column_index": column_index,
        "header": _jsonable(snapshot.rows[0][column_index]),
        "total_values": len(values),
        "unique_values": [_jsonable(value) for value in unique_values],
        "data_type": detect_data_type(values).value,
        "min": min(numbers) if numbers else None,
        "max": max(numbers) if numbers else None,
        "sum": sum(numbers),
        "average": sum(numbers) / len(numbers) if numbers else None,
    }


def suggest_formula_type(context: ToolContext, request: str) -> dict:
    """Keyword-based function family suggestions for a request."""
    text = request.lower()
    suggestions = []

    if "sum" in text or "total" in text:
        if "if" in text or "where" in text or "condition" in text:
            suggestions.append(
                {"type": "SUMIF/SUMIFS", "confidence": "high", "reason": "Conditional sum requested"}
            )
        else:
            suggestions.append({"type": "SUM", "confidence": "high", "reason": "Simple sum requested"})

    if "lookup" in text or "find" in text or "match" in text:
        suggestions.append(
            {"type": "VLOOKUP/XLOOKUP", "confidence": "high", "reason": "Lookup operation requested"}
        )

    if "count" in text:
        if "if" in text or "where" in text:
            suggestions.append(
                {"type": "COUNTIF/COUNTIFS", "confidence": "high", "reason": "Conditional count requested"}
            )
        else:
            suggestions.append(
                {"type": "COUNT/COUNTA", "confidence": "medium", "reason": "Count operation requested"}
            )

    if "average" in text or "mean" in text:
        suggestions.append(
            {"type": "AVERAGE/AVERAGEIF", "confidence": "high", "reason": "Average calculation requested"}
        )

    if "rank" in text or "order" in text:
        suggestions.append({"type": "RANK", "confidence": "medium", "reason": "Ranking requested"})

    return {
        "user_request": request,
        "suggestions": suggestions,
        "top_suggestion": (
            suggestions[0]
            if suggestions
            else {"type": "CUSTOM", "confidence": "low", "reason": "Custom formula needed"}
        ),
    }


SELECTION_TOOLS = (
    Tool(
        name="selection.analyze_structure",
        description=(
            "Analyzes the selected data to understand column types, headers, and data patterns"
        ),
        handler=analyze_structure,
    ),
    Tool(
        name="selection.range_details",
        description=(
            "Gets detailed information about the currently selected range including "
            "headers and data context"
        ),
        handler=range_details,
    ),
    Tool(
        name="selection.column_info",
        description="Gets detailed information about a specific column in the selected range",
        parameters=[
            ToolParameter(
                name="column_index",
                type="integer",
                description="Zero-based index of the column to analyze",
            ),
        ],
        handler=column_info,
    ),
    Tool(
        name="formula.suggest_type",
        description="Suggests the most appropriate formula type based on user request",
        parameters=[
            ToolParameter(
                name="request",
                type="string",
                description="User's natural language request",
            ),
        ],
        handler=suggest_formula_type,
    ),
)


@lru_cache(maxsize=1)
def default_registry() -> ToolRegistry:
    """The process-wide tool registry, built on first use."""
    return ToolRegistry(SELECTION_TOOLS)
