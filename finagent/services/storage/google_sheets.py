"""
Google Sheets Ledger Store

DESIGN DECISION: Google Sheets is the persistent backend because:
1. The owner of the ledger can open it and read their data directly
2. No database setup required
3. Built-in backup (Google's infrastructure)

Layout: one worksheet, one row per key, two columns (key, value_json).
The ledger only ever uses four keys, so a full scan per call is fine.

TRADEOFFS:
- No transactions. Read-append-write safety comes from the single
  ledger actor in the orchestrator, not from Sheets.
- Every value is re-serialized as a whole on put.
"""

import json
from typing import Any, Optional

import gspread
from google.oauth2.service_account import Credentials
from tenacity import retry, stop_after_attempt, wait_exponential

from finagent.config import get_settings
from finagent.config.settings import GoogleSheetsSettings
from finagent.services.storage.interface import (
    ConnectionError,
    LedgerStore,
    StorageError,
)


LEDGER_COLUMNS = [
    "key",
    "value_json",
]


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for connecting.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def get_ledger_sheet(self) -> gspread.Worksheet:
        """Get or create the ledger worksheet."""
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(self._settings.ledger_sheet_name)
        except gspread.WorksheetNotFound:
            sheet = spreadsheet.add_worksheet(
                title=self._settings.ledger_sheet_name,
                rows=100,
                cols=len(LEDGER_COLUMNS),
            )
            sheet.append_row(LEDGER_COLUMNS)
        return sheet


class GoogleSheetsLedgerStore(LedgerStore):
    """
    Google Sheets implementation of the ledger store.

    Values are JSON-serialized into the second column.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _find_row(self, sheet: gspread.Worksheet, key: str) -> tuple[Optional[int], Optional[list]]:
        """Return (1-based row number, row) for key, skipping the header."""
        all_rows = sheet.get_all_values()
        for idx, row in enumerate(all_rows[1:], start=2):
            if row and row[0] == key:
                return idx, row
        return None, None

    async def get(self, key: str) -> Optional[Any]:
        """Read one key."""
        try:
            sheet = self._client.get_ledger_sheet()
            _, row = self._find_row(sheet, key)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to read {key}: {e}")

        if row is None or len(row) < 2 or not row[1]:
            return None

        try:
            return json.loads(row[1])
        except json.JSONDecodeError as e:
            raise StorageError(f"Corrupt value stored under {key}: {e}")

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def put(self, key: str, value: Any) -> bool:
        """Write one key, updating its row in place or appending a new one."""
        try:
            sheet = self._client.get_ledger_sheet()
            payload = json.dumps(value)
            row_number, _ = self._find_row(sheet, key)
            if row_number is None:
                sheet.append_row([key, payload], value_input_option="RAW")
            else:
                sheet.update_cell(row_number, 2, payload)
            return True
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to write {key}: {e}")
