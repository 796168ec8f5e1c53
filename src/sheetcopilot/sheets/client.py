"""Google Sheets API host."""

import logging
from datetime import datetime, timedelta
from typing import Any, Optional

from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from ..config import settings
from ..errors import HostError
from .addressing import parse_range_notation
from .host import SpreadsheetHost
from .models import GridSnapshot, SheetBounds

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]

# Day zero of the Sheets serial date system
SERIAL_EPOCH = datetime(1899, 12, 30)

GRID_FIELDS = (
    "sheets(properties(title,gridProperties),"
    "data(startRow,startColumn,rowData(values(effectiveValue,effectiveFormat/numberFormat))))"
)


def serial_to_datetime(serial: float) -> datetime:
    """Convert a Sheets serial number to a datetime."""
    return SERIAL_EPOCH + timedelta(days=serial)


def cell_to_value(cell: dict) -> Any:
    """Convert a CellData resource into a typed Python value."""
    effective = cell.get("effectiveValue")
    if not effective:
        return ""
    if "boolValue" in effective:
        return effective["boolValue"]
    if "stringValue" in effective:
        return effective["stringValue"]
    if "errorValue" in effective:
        return effective["errorValue"].get("type", "#ERROR!")
    if "numberValue" in effective:
        number = effective["numberValue"]
        number_type = cell.get("effectiveFormat", {}).get("numberFormat", {}).get("type")
        if number_type == "DATE":
            return serial_to_datetime(number).date()
        if number_type in ("DATE_TIME", "TIME"):
            return serial_to_datetime(number)
        return number
    return ""


def get_credentials() -> Credentials:
    """Get or refresh OAuth2 credentials."""
    creds = None

    if settings.google_token_path.exists():
        creds = Credentials.from_authorized_user_file(str(settings.google_token_path), SCOPES)

    if not creds or not creds.valid:
        if creds and creds.expired and creds.refresh_token:
            creds.refresh(Request())
        else:
            if not settings.google_credentials_path.exists():
                raise FileNotFoundError(
                    f"Google credentials file not found at {settings.google_credentials_path}. "
                    "Please download it from Google Cloud Console."
                )
            flow = InstalledAppFlow.from_client_secrets_file(
                str(settings.google_credentials_path), SCOPES
            )
            creds = flow.run_local_server(port=0)

        # Save credentials for next run
        settings.google_token_path.parent.mkdir(parents=True, exist_ok=True)
        with open(settings.google_token_path, "w") as token:
            token.write(creds.to_json())

    return creds


class GoogleSheetsHost(SpreadsheetHost):
    """Reads a selection from, and writes formulas to, a Google spreadsheet.

    The Sheets REST API has no notion of an active selection, so the
    selection is the range this host was created with.
    """

    def __init__(self, spreadsheet_id: str, range_notation: Optional[str] = None, service=None):
        self.spreadsheet_id = spreadsheet_id
        self.range_notation = range_notation
        self._service = service

    @property
    def service(self):
        """Get or create the Sheets API service."""
        if self._service is None:
            self._service = build("sheets", "v4", credentials=get_credentials())
        return self._service

    def get_selection(self) -> Optional[GridSnapshot]:
        if not self.range_notation:
            return None

        first_row, first_column, last_row, last_column = parse_range_notation(self.range_notation)
        try:
            result = (
                self.service.spreadsheets()
                .get(
                    spreadsheetId=self.spreadsheet_id,
                    ranges=[self.range_notation],
                    includeGridData=True,
                    fields=GRID_FIELDS,
                )
                .execute()
            )
        except HttpError as e:
            raise HostError(f"Failed to read range {self.range_notation}: {e}") from e

        sheet = result["sheets"][0]
        sheet_name = sheet["properties"]["title"]
        grid = (sheet.get("data") or [{}])[0]
        row_data = grid.get("rowData", [])

        # The API omits trailing empty rows and cells
        width = last_column - first_column + 1
        values = []
        for row_idx in range(last_row - first_row + 1):
            cells = row_data[row_idx].get("values", []) if row_idx < len(row_data) else []
            row = [cell_to_value(cell) for cell in cells[:width]]
            row.extend([""] * (width - len(row)))
            values.append(row)

        logger.info(
            f"Read selection '{sheet_name}'!{self.range_notation} "
            f"({len(values)}x{width}) from {self.spreadsheet_id}"
        )
        return GridSnapshot.from_values(
            values,
            sheet_name=sheet_name,
            first_row=first_row,
            first_column=first_column,
        )

    def get_bounds(self, sheet_name: str) -> SheetBounds:
        try:
            result = (
                self.service.spreadsheets()
                .get(
                    spreadsheetId=self.spreadsheet_id,
                    fields="sheets(properties(title,gridProperties))",
                )
                .execute()
            )
        except HttpError as e:
            raise HostError(f"Failed to get spreadsheet info: {e}") from e

        for sheet in result.get("sheets", []):
            properties = sheet["properties"]
            if properties["title"] == sheet_name:
                grid = properties["gridProperties"]
                return SheetBounds(max_rows=grid["rowCount"], max_columns=grid["columnCount"])
        raise HostError(f"Sheet not found: {sheet_name}")

    def set_formula(self, sheet_name: str, cell: str, formula: str) -> None:
        target = f"'{sheet_name}'!{cell}"
        try:
            (
                self.service.spreadsheets()
                .values()
                .update(
                    spreadsheetId=self.spreadsheet_id,
                    range=target,
                    valueInputOption="USER_ENTERED",
                    body={"values": [[formula]]},
                )
                .execute()
            )
        except HttpError as e:
            raise HostError(f"Failed to write {target}: {e}") from e
        logger.info(f"Wrote formula to {target}")
