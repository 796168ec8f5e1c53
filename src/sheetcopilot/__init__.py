"""SheetCopilot - natural-language formula generation for Google Sheets."""

__version__ = "0.1.0"
