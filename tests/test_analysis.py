"""Tests for selection analysis."""

import pytest

from sheetcopilot.engine.analysis import (
    analyze_selection,
    analyze_snapshot,
    capture_selection,
    detect_headers,
    render_analysis_summary,
    selection_summary,
)
from sheetcopilot.errors import EmptySelectionError, HostError, NoSelectionError
from sheetcopilot.sheets import GridSnapshot

from conftest import InMemorySpreadsheet


class TestDetectHeaders:
    """Test header row detection."""

    def test_text_first_row(self):
        snapshot = GridSnapshot.from_values([["Name", "Amount"], ["a", 1]])
        assert detect_headers(snapshot) is True

    def test_numeric_first_row(self):
        snapshot = GridSnapshot.from_values([[1, 2], [3, 4]])
        assert detect_headers(snapshot) is False

    def test_blank_header_cell(self):
        snapshot = GridSnapshot.from_values([["Name", ""], ["a", 1]])
        assert detect_headers(snapshot) is False

    def test_single_text_row_counts_as_headers(self):
        snapshot = GridSnapshot.from_values([["Q1", "Q2"]])
        assert detect_headers(snapshot) is True


class TestAnalyzeSnapshot:
    """Test the analysis record."""

    def test_grocery_table(self, grocery_snapshot):
        analysis = analyze_snapshot(grocery_snapshot)

        assert analysis.range_address == "A1:B4"
        assert analysis.row_count == 4
        assert analysis.col_count == 2
        assert analysis.has_headers is True
        assert len(analysis.columns) == analysis.col_count
        assert [c.header for c in analysis.columns] == ["Item", "Amount"]

    def test_offset_selection_uses_sheet_letters(self):
        snapshot = GridSnapshot.from_values(
            [["Region", "Sales"], ["North", 4]], first_row=3, first_column=3
        )
        analysis = analyze_snapshot(snapshot)

        assert analysis.range_address == "C3:D4"
        assert analysis.column_letter(0) == "C"
        assert analysis.column_letter(1) == "D"

    def test_empty_snapshot_rejected(self):
        with pytest.raises(EmptySelectionError):
            analyze_snapshot(GridSnapshot.from_values([]))


class TestCaptureSelection:
    """Test reading the selection from a host."""

    def test_no_selection(self):
        with pytest.raises(NoSelectionError, match="No range selected"):
            capture_selection(InMemorySpreadsheet(None))

    def test_empty_selection(self):
        with pytest.raises(EmptySelectionError, match="No data in selected range"):
            capture_selection(InMemorySpreadsheet([]))

    def test_reads_fresh_each_time(self, grocery_host):
        capture_selection(grocery_host)
        capture_selection(grocery_host)
        assert grocery_host.selection_reads == 2

    def test_host_fault_raised_as_host_error(self):
        host = InMemorySpreadsheet(None, selection_error=RuntimeError("Failed to read range A1:B4: 503"))

        with pytest.raises(HostError, match="Failed to read selection: Failed to read range A1:B4: 503"):
            capture_selection(host)

    def test_host_error_not_rewrapped(self):
        host = InMemorySpreadsheet(None, selection_error=HostError("Sheet not found: Other"))

        with pytest.raises(HostError, match="^Sheet not found: Other$"):
            capture_selection(host)


class TestAnalyzeSelection:
    """Test the dialog-facing analysis entry point."""

    def test_returns_plain_dict(self, grocery_host):
        result = analyze_selection(grocery_host)

        assert result["range_address"] == "A1:B4"
        assert result["has_headers"] is True
        assert result["columns"][1]["data_type"] == "number"

    def test_missing_selection_returns_error(self):
        assert analyze_selection(InMemorySpreadsheet(None)) == {"error": "No range selected"}

    def test_empty_selection_returns_error(self):
        assert analyze_selection(InMemorySpreadsheet([])) == {"error": "No data in selected range"}

    def test_host_fault_returns_error(self):
        host = InMemorySpreadsheet(None, selection_error=TimeoutError("timed out"))

        assert analyze_selection(host) == {"error": "Failed to read selection: timed out"}


class TestSummaries:
    """Test human-readable summaries."""

    def test_selection_summary(self, grocery_snapshot):
        assert selection_summary(analyze_snapshot(grocery_snapshot)) == "Selected: A1:B4 (4×2)"

    def test_render_analysis_summary(self, grocery_snapshot):
        text = render_analysis_summary(analyze_snapshot(grocery_snapshot), target_cell="A5")

        assert "Selected Range: A1:B4" in text
        assert "Rows: 4, Columns: 2" in text
        assert "Has Headers: True" in text
        assert '  A: "Item" (text)' in text
        assert '  B: "Amount" (number)' in text
        assert "Target Cell: A5" in text

    def test_render_without_target(self, grocery_snapshot):
        text = render_analysis_summary(analyze_snapshot(grocery_snapshot))
        assert "Target Cell" not in text
