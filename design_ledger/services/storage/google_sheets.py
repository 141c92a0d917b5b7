"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets is offered as an optional backend so both
parties can point at one shared copy of the ledger instead of carrying
bridge links around. It also gives non-technical users a place to look at
the raw document.

Layout: one worksheet, one row per storage key:
    key | document | updated_at

TRADEOFFS:
- A Sheets cell holds at most 50,000 characters, plenty for a ledger
  between two people but not unbounded
- No transactions: last write wins, exactly like the local backend
"""

from datetime import datetime, timezone
from typing import Optional

import gspread
from google.oauth2.service_account import Credentials
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from design_ledger.config import GoogleSheetsSettings, get_settings
from design_ledger.services.storage.interface import (
    ConnectionError,
    StateStorageInterface,
    StorageError,
)


STATE_COLUMNS = [
    "key",
    "document",
    "updated_at",
]

# Google Sheets limit on characters in a single cell
MAX_CELL_CHARS = 50000


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
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

    def get_state_sheet(self) -> gspread.Worksheet:
        """Get or create the ledger state worksheet."""
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(self._settings.state_sheet_name)
        except gspread.WorksheetNotFound:
            # Create the sheet with headers
            sheet = spreadsheet.add_worksheet(
                title=self._settings.state_sheet_name,
                rows=100,
                cols=len(STATE_COLUMNS),
            )
            sheet.append_row(STATE_COLUMNS)
        return sheet


class GoogleSheetsStateStorage(StateStorageInterface):
    """
    Google Sheets implementation of ledger document storage.

    Documents are stored as a single cell per key. Transient API errors
    are retried; anything else surfaces as StorageError.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _find_row(self, sheet: gspread.Worksheet, key: str) -> Optional[tuple[int, list]]:
        """Return (1-based row index, row values) for a key, skipping the header."""
        all_rows = sheet.get_all_values()
        for idx, row in enumerate(all_rows[1:], start=2):
            if row and row[0] == key:
                return idx, row
        return None

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type(gspread.exceptions.APIError),
        reraise=True,
    )
    def _read_row(self, key: str) -> Optional[tuple[int, list]]:
        return self._find_row(self._client.get_state_sheet(), key)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type(gspread.exceptions.APIError),
        reraise=True,
    )
    def _write_row(self, row: list) -> None:
        sheet = self._client.get_state_sheet()
        found = self._find_row(sheet, row[0])
        if found is None:
            sheet.append_row(row, value_input_option="RAW")
        else:
            idx, _ = found
            sheet.update(
                range_name=f"A{idx}:C{idx}",
                values=[row],
                value_input_option="RAW",
            )

    def load(self, key: str) -> Optional[str]:
        """Load a document from the sheet."""
        try:
            found = self._read_row(key)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to read ledger document: {e}")

        if found is None:
            return None
        _, row = found
        return row[1] if len(row) > 1 and row[1] else None

    def save(self, key: str, document: str) -> None:
        """Insert or overwrite the row for a key."""
        if len(document) > MAX_CELL_CHARS:
            raise StorageError(
                f"Ledger document is {len(document)} characters; "
                f"Google Sheets cells hold at most {MAX_CELL_CHARS}"
            )

        row = [key, document, datetime.now(timezone.utc).isoformat()]
        try:
            self._write_row(row)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to save ledger document: {e}")

    def delete(self, key: str) -> bool:
        """Delete the row for a key."""
        try:
            sheet = self._client.get_state_sheet()
            found = self._find_row(sheet, key)
            if found is None:
                return False
            idx, _ = found
            sheet.delete_rows(idx)
            return True
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to delete ledger document: {e}")
