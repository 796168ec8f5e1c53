"""Selection analysis and formula handling."""

from .profiler import (
    ColumnProfile,
    DataType,
    detect_data_type,
    profile_columns,
    summarize_columns,
)
from .analysis import (
    DataAnalysis,
    analyze_selection,
    analyze_snapshot,
    capture_selection,
    detect_headers,
    render_analysis_summary,
    selection_summary,
)
from .extractor import MATCHERS, FormulaMatcher, extract_formula
from .placement import FormulaInserter, read_bounds, resolve_target_cell, resolve_target_position

__all__ = [
    "ColumnProfile",
    "DataType",
    "detect_data_type",
    "profile_columns",
    "summarize_columns",
    "DataAnalysis",
    "analyze_selection",
    "analyze_snapshot",
    "capture_selection",
    "detect_headers",
    "render_analysis_summary",
    "selection_summary",
    "MATCHERS",
    "FormulaMatcher",
    "extract_formula",
    "FormulaInserter",
    "read_bounds",
    "resolve_target_cell",
    "resolve_target_position",
]
