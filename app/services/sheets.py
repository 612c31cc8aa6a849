"""Spreadsheet-backed cell grid sources."""

import json
import logging
from datetime import date, datetime
from typing import Any, Protocol

from google.oauth2.service_account import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from openpyxl import load_workbook
from openpyxl.utils import range_boundaries

from app.core.config import Settings
from app.core.exceptions import UpstreamError

logger = logging.getLogger(__name__)

SHEETS_SCOPES = ["https://www.googleapis.com/auth/spreadsheets.readonly"]

Grid = list[list[Any]]


class CellGridSource(Protocol):
    """Anything that returns the rows of a named range."""

    def get_values(self, range_name: str) -> Grid:
        ...


def cell_text(value: Any) -> str:
    """Coerce a raw cell value to stripped text."""
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


class GoogleSheetsSource:
    """Reads ranges through the Google Sheets v4 values API."""

    def __init__(self, spreadsheet_id: str, credentials: Credentials):
        self.spreadsheet_id = spreadsheet_id
        self.credentials = credentials

    @classmethod
    def from_settings(cls, settings: Settings) -> "GoogleSheetsSource":
        if not settings.GOOGLE_SHEET_ID:
            raise UpstreamError("GOOGLE_SHEET_ID is not configured")

        try:
            if settings.GOOGLE_SERVICE_ACCOUNT_JSON:
                info = json.loads(settings.GOOGLE_SERVICE_ACCOUNT_JSON)
                credentials = Credentials.from_service_account_info(info, scopes=SHEETS_SCOPES)
            elif settings.GOOGLE_SERVICE_ACCOUNT_FILE:
                credentials = Credentials.from_service_account_file(
                    settings.GOOGLE_SERVICE_ACCOUNT_FILE, scopes=SHEETS_SCOPES
                )
            else:
                raise UpstreamError("Google service account credentials are not configured")
        except (ValueError, OSError) as e:
            logger.error(f"[SHEETS] Failed to load service account credentials: {e}")
            raise UpstreamError(f"Invalid service account credentials: {e}")

        return cls(settings.GOOGLE_SHEET_ID, credentials)

    def get_values(self, range_name: str) -> Grid:
        logger.debug(f"[SHEETS] Fetching range '{range_name}' from {self.spreadsheet_id}")
        try:
            service = build("sheets", "v4", credentials=self.credentials, cache_discovery=False)
            result = (
                service.spreadsheets()
                .values()
                .get(spreadsheetId=self.spreadsheet_id, range=range_name)
                .execute()
            )
        except HttpError as e:
            logger.error(f"[SHEETS] Failed to fetch range '{range_name}': {e}")
            raise UpstreamError(str(e), details={"range": range_name})

        rows = result.get("values", [])
        logger.debug(f"[SHEETS] Range '{range_name}' returned {len(rows)} rows")
        return rows


class ExcelWorkbookSource:
    """Reads ranges from a local .xlsx workbook.

    A range is a sheet name, optionally followed by a cell reference,
    e.g. ``Attendance`` or ``Attendance!A1:J200``.
    """

    def __init__(self, path: str):
        self.path = path

    def get_values(self, range_name: str) -> Grid:
        sheet_name, _, cell_range = range_name.partition("!")
        try:
            wb = load_workbook(self.path, read_only=True, data_only=True)
        except Exception as e:
            logger.error(f"[EXCEL] Failed to load workbook {self.path}: {e}")
            raise UpstreamError(f"Invalid Excel workbook: {e}")

        try:
            if sheet_name not in wb.sheetnames:
                logger.warning(f"[EXCEL] Sheet '{sheet_name}' not found in {self.path}")
                return []
            ws = wb[sheet_name]
            bounds = {}
            if cell_range:
                min_col, min_row, max_col, max_row = range_boundaries(cell_range)
                bounds = {
                    "min_col": min_col,
                    "min_row": min_row,
                    "max_col": max_col,
                    "max_row": max_row,
                }
            rows = [list(row) for row in ws.iter_rows(values_only=True, **bounds)]
        finally:
            wb.close()

        # Trailing empty rows are noise from formatted but unused cells
        while rows and not any(cell_text(v) for v in rows[-1]):
            rows.pop()
        return rows


def build_source(settings: Settings) -> CellGridSource:
    """Build the configured cell grid source."""
    if settings.DATA_SOURCE == "excel":
        if not settings.EXCEL_WORKBOOK_PATH:
            raise UpstreamError("EXCEL_WORKBOOK_PATH is not configured")
        return ExcelWorkbookSource(settings.EXCEL_WORKBOOK_PATH)
    return GoogleSheetsSource.from_settings(settings)
