"""Tests for the Google Sheets host."""

from datetime import date, datetime
from unittest.mock import Mock

import pytest
from googleapiclient.errors import HttpError

from sheetcopilot.errors import HostError
from sheetcopilot.sheets.client import GoogleSheetsHost, cell_to_value, serial_to_datetime


def grid_response(rows, title="Sales", row_count=1000, column_count=26):
    return {
        "sheets": [
            {
                "properties": {
                    "title": title,
                    "gridProperties": {"rowCount": row_count, "columnCount": column_count},
                },
                "data": [{"rowData": [{"values": row} for row in rows]}],
            }
        ]
    }


def number(value, number_type=None):
    cell = {"effectiveValue": {"numberValue": value}}
    if number_type:
        cell["effectiveFormat"] = {"numberFormat": {"type": number_type}}
    return cell


def text(value):
    return {"effectiveValue": {"stringValue": value}}


def http_error(status=403):
    return HttpError(Mock(status=status, reason="Forbidden"), b'{"error": {"message": "denied"}}')


@pytest.fixture
def service():
    return Mock()


class TestCellToValue:
    """Test conversion of CellData resources."""

    def test_empty_cell(self):
        assert cell_to_value({}) == ""

    def test_string(self):
        assert cell_to_value(text("Apples")) == "Apples"

    def test_number(self):
        assert cell_to_value(number(10)) == 10

    def test_bool(self):
        assert cell_to_value({"effectiveValue": {"boolValue": True}}) is True

    def test_error(self):
        assert cell_to_value({"effectiveValue": {"errorValue": {"type": "DIVIDE_BY_ZERO"}}}) == "DIVIDE_BY_ZERO"

    def test_date(self):
        assert cell_to_value(number(45352, "DATE")) == date(2024, 3, 1)

    def test_date_time(self):
        assert cell_to_value(number(45352.5, "DATE_TIME")) == datetime(2024, 3, 1, 12, 0)

    def test_serial_epoch(self):
        assert serial_to_datetime(1) == datetime(1899, 12, 31)


class TestGetSelection:
    """Test reading the selection."""

    def test_no_range_means_no_selection(self, service):
        host = GoogleSheetsHost("sheet-123", service=service)

        assert host.get_selection() is None
        service.spreadsheets.assert_not_called()

    def test_reads_typed_values(self, service):
        service.spreadsheets().get().execute.return_value = grid_response(
            [
                [text("Item"), text("Amount")],
                [text("Apples"), number(10)],
                [text("Bread"), number(5)],
            ]
        )
        host = GoogleSheetsHost("sheet-123", "Sales!B2:C4", service=service)

        snapshot = host.get_selection()

        assert snapshot.sheet_name == "Sales"
        assert snapshot.first_row == 2
        assert snapshot.first_column == 2
        assert snapshot.address == "B2:C4"
        assert snapshot.rows[1] == ("Apples", 10)

        kwargs = service.spreadsheets().get.call_args.kwargs
        assert kwargs["spreadsheetId"] == "sheet-123"
        assert kwargs["ranges"] == ["Sales!B2:C4"]
        assert kwargs["includeGridData"] is True

    def test_omitted_trailing_cells_padded(self, service):
        service.spreadsheets().get().execute.return_value = grid_response(
            [[text("Item"), text("Amount")], [text("Apples")]]
        )
        host = GoogleSheetsHost("sheet-123", "A1:B3", service=service)

        snapshot = host.get_selection()

        assert snapshot.rows == (("Item", "Amount"), ("Apples", ""), ("", ""))

    def test_api_error(self, service):
        service.spreadsheets().get().execute.side_effect = http_error()
        host = GoogleSheetsHost("sheet-123", "A1:B3", service=service)

        with pytest.raises(HostError, match="Failed to read range A1:B3"):
            host.get_selection()


class TestGetBounds:
    """Test sheet size lookups."""

    def test_bounds(self, service):
        service.spreadsheets().get().execute.return_value = grid_response([], row_count=200, column_count=8)
        host = GoogleSheetsHost("sheet-123", service=service)

        bounds = host.get_bounds("Sales")

        assert (bounds.max_rows, bounds.max_columns) == (200, 8)

    def test_unknown_sheet(self, service):
        service.spreadsheets().get().execute.return_value = grid_response([])
        host = GoogleSheetsHost("sheet-123", service=service)

        with pytest.raises(HostError, match="Sheet not found: Other"):
            host.get_bounds("Other")


class TestSetFormula:
    """Test formula writes."""

    def test_user_entered_write(self, service):
        host = GoogleSheetsHost("sheet-123", service=service)

        host.set_formula("Sales", "B5", "=SUM(C3:C4)")

        kwargs = service.spreadsheets().values().update.call_args.kwargs
        assert kwargs["range"] == "'Sales'!B5"
        assert kwargs["valueInputOption"] == "USER_ENTERED"
        assert kwargs["body"] == {"values": [["=SUM(C3:C4)"]]}

    def test_write_error(self, service):
        service.spreadsheets().values().update().execute.side_effect = http_error()
        host = GoogleSheetsHost("sheet-123", service=service)

        with pytest.raises(HostError, match="Failed to write 'Sales'!B5"):
            host.set_formula("Sales", "B5", "=A1")
