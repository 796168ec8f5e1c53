"""Prompts sent to the completion service."""

from ..engine.analysis import DataAnalysis
from ..sheets.models import GridSnapshot, format_cell

SYSTEM_PROMPT = """You are a Google Sheets formula expert. Generate accurate Google Sheets formulas based on user requests and data context.

IMPORTANT RULES:
1. Always return the formula starting with = sign
2. Use Google Sheets function names (not Excel)
3. Reference ranges using A1 notation
4. For relative references, use the range structure shown in the data context
5. Be precise with column references based on headers provided
6. Return ONLY the formula, no explanations unless specifically asked

Common Google Sheets functions:
- SUM, SUMIF, SUMIFS for totaling
- COUNT, COUNTA, COUNTIF, COUNTIFS for counting
- AVERAGE, AVERAGEIF, AVERAGEIFS for averages
- VLOOKUP, XLOOKUP, INDEX/MATCH for lookups
- QUERY for complex filtering and analysis
- FILTER for dynamic filtering"""

TOOLS_PROMPT_ADDENDUM = """

You may call the provided tools to inspect the selected data (structure, a single column, or a formula-type suggestion) before answering. When you are done, reply with the formula only."""

DEFAULT_PREVIEW_REQUEST = "Sum all values in the Amount column"


def system_prompt(with_tools: bool = False) -> str:
    """System instruction for plain or function-calling mode."""
    return SYSTEM_PROMPT + TOOLS_PROMPT_ADDENDUM if with_tools else SYSTEM_PROMPT


def _render_row(row) -> str:
    return " | ".join(format_cell(cell) for cell in row)


def compose_prompt(
    user_request: str,
    analysis: DataAnalysis,
    snapshot: GridSnapshot,
    sample_rows: int = 3,
) -> str:
    """Render the request and the selection context into one user prompt.

    Pure: the same request, analysis and snapshot always give the same text.
    Column letters and row numbers are the sheet's own, so the model can
    reference them directly.
    """
    first_row = snapshot.first_row
    lines = [
        f"USER REQUEST: {user_request}",
        "",
        "SELECTED DATA CONTEXT:",
        f"Range: {analysis.range_address}",
        f"Size: {analysis.row_count} rows × {analysis.col_count} columns",
        f"Has Headers: {'yes' if analysis.has_headers else 'no'}",
    ]

    if analysis.columns:
        lines.append("Columns:")
        for column in analysis.columns:
            lines.append(
                f'  {analysis.column_letter(column.index)}: "{format_cell(column.header)}" '
                f"({column.data_type.value})"
            )

    lines.extend(["", "SAMPLE DATA:"])
    if analysis.has_headers:
        headers = [
            f"{analysis.column_letter(index)}:{format_cell(header)}"
            for index, header in enumerate(snapshot.rows[0])
        ]
        lines.append(f"Headers: {', '.join(headers)}")
        for offset, row in enumerate(snapshot.rows[1 : sample_rows + 1], start=1):
            lines.append(f"Row {first_row + offset}: {_render_row(row)}")
    else:
        for offset, row in enumerate(snapshot.rows[:sample_rows]):
            lines.append(f"Row {first_row + offset}: {_render_row(row)}")

    last_row = first_row + analysis.row_count - 1
    lines.extend(
        [
            "",
            "INSTRUCTIONS:",
            f"- Generate a formula that works with the selected range {analysis.range_address}",
        ]
    )
    if analysis.has_headers and analysis.row_count > 1:
        lines.append(
            f"- Row {first_row} holds the headers; data is in rows {first_row + 1} to {last_row}, "
            "reference only data rows"
        )
    lines.extend(
        [
            "- Use proper column references (A, B, C, etc.) as shown above",
            "- Consider the data types when choosing functions: SUM/AVERAGE for number columns, "
            "COUNTIF/lookups for text columns, date functions for date columns",
            "- Return only the formula starting with =",
        ]
    )
    return "\n".join(lines) + "\n"
