"""Backing-table adapters: a Google Sheets worksheet or an in-memory grid.

Row numbers are 1-based and include the header row, matching the sheet UI.
"""
from __future__ import annotations

import copy
import logging
import threading
from contextlib import contextmanager
from typing import Any, Callable, Iterator, List, Optional, Protocol, Sequence

import gspread
import requests
from gspread.utils import DateTimeOption, ValueInputOption, ValueRenderOption, rowcol_to_a1

from contract_tracker.core.config import StoreConfig
from contract_tracker.core.errors import StoreUnavailableError
from contract_tracker.core.models import RawRow

logger = logging.getLogger(__name__)

# Failures the Sheets API or its HTTP transport can raise mid-request.
_SHEETS_ERRORS = (gspread.exceptions.APIError, requests.RequestException, OSError)


class Table(Protocol):
    """Minimal surface the record store needs from a backing table."""

    def get_all_values(self) -> List[RawRow]:
        ...

    def header_row(self) -> RawRow:
        ...

    def column_values(self, column: int) -> List[Any]:
        ...

    def append_row(self, values: RawRow) -> None:
        ...

    def update_row(self, row_number: int, values: RawRow) -> None:
        ...

    def delete_row(self, row_number: int) -> None:
        ...


TableOpener = Callable[[], Table]


@contextmanager
def _sheets_call(action: str) -> Iterator[None]:
    """Report API and network failures as ``StoreUnavailableError``."""

    try:
        yield
    except _SHEETS_ERRORS as exc:
        logger.error("Google Sheets call failed while %s: %s", action, exc)
        raise StoreUnavailableError(f"Google Sheets unavailable while {action}: {exc}") from exc


class SheetsTable:
    """Adapter over a ``gspread`` worksheet.

    Cells are read unformatted so numbers arrive as numbers, and date cells
    arrive as serial day counts that the codec converts without guessing the
    sheet's locale.
    """

    def __init__(self, worksheet: Any) -> None:
        self._worksheet = worksheet

    def get_all_values(self) -> List[RawRow]:
        with _sheets_call("reading rows"):
            return self._worksheet.get_all_values(
                value_render_option=ValueRenderOption.unformatted,
                date_time_render_option=DateTimeOption.serial_number,
            )

    def header_row(self) -> RawRow:
        with _sheets_call("reading the header row"):
            return self._worksheet.row_values(1)

    def column_values(self, column: int) -> List[Any]:
        with _sheets_call("reading the key column"):
            return self._worksheet.col_values(column, value_render_option=ValueRenderOption.unformatted)

    def append_row(self, values: RawRow) -> None:
        with _sheets_call("appending a row"):
            self._worksheet.append_row(values, value_input_option=ValueInputOption.user_entered)

    def update_row(self, row_number: int, values: RawRow) -> None:
        end_cell = rowcol_to_a1(row_number, max(len(values), 1))
        with _sheets_call(f"updating row {row_number}"):
            self._worksheet.update(
                range_name=f"A{row_number}:{end_cell}",
                values=[values],
                value_input_option=ValueInputOption.user_entered,
            )

    def delete_row(self, row_number: int) -> None:
        with _sheets_call(f"deleting row {row_number}"):
            self._worksheet.delete_rows(row_number)


def sheets_opener(config: StoreConfig) -> TableOpener:
    """Return a callable opening the configured worksheet on every call.

    The authorized client is created lazily once and reused; the spreadsheet
    and worksheet are looked up each time so renamed or removed sheets are
    reported as ``StoreUnavailableError`` instead of going stale.
    """

    state: dict[str, Any] = {}

    def _client() -> Any:
        if "client" not in state:
            state["client"] = (
                gspread.service_account(filename=str(config.service_account_path))
                if config.service_account_path
                else gspread.service_account()
            )
        return state["client"]

    def _open() -> Table:
        if not config.spreadsheet_id:
            raise StoreUnavailableError("No spreadsheet ID configured for the contracts store.")
        try:
            spreadsheet = _client().open_by_key(config.spreadsheet_id)
            worksheet = spreadsheet.worksheet(config.worksheet_title)
        except gspread.exceptions.WorksheetNotFound as exc:
            raise StoreUnavailableError(f'Sheet "{config.worksheet_title}" not found.') from exc
        except gspread.exceptions.SpreadsheetNotFound as exc:
            raise StoreUnavailableError(
                f"Spreadsheet {config.spreadsheet_id} not found or not shared with the service account."
            ) from exc
        except _SHEETS_ERRORS as exc:
            raise StoreUnavailableError(f"Google Sheets unavailable: {exc}") from exc
        return SheetsTable(worksheet)

    return _open


class MemoryTable:
    """Thread-safe in-memory table with the same row semantics as a sheet."""

    def __init__(self, headers: Sequence[Any], rows: Optional[Sequence[Sequence[Any]]] = None) -> None:
        self._rows: List[RawRow] = [list(headers)] + [list(row) for row in rows or []]
        self._lock = threading.Lock()

    def get_all_values(self) -> List[RawRow]:
        with self._lock:
            return copy.deepcopy(self._rows)

    def header_row(self) -> RawRow:
        with self._lock:
            return list(self._rows[0]) if self._rows else []

    def column_values(self, column: int) -> List[Any]:
        with self._lock:
            index = column - 1
            return [row[index] if index < len(row) else "" for row in self._rows]

    def append_row(self, values: RawRow) -> None:
        with self._lock:
            self._rows.append(list(values))

    def update_row(self, row_number: int, values: RawRow) -> None:
        with self._lock:
            self._check_row(row_number)
            self._rows[row_number - 1] = list(values)

    def delete_row(self, row_number: int) -> None:
        with self._lock:
            self._check_row(row_number)
            del self._rows[row_number - 1]

    def _check_row(self, row_number: int) -> None:
        if not 2 <= row_number <= len(self._rows):
            raise IndexError(f"Row {row_number} is outside the data range")

    def opener(self) -> TableOpener:
        """Return an opener handing out this table, for ``ContractStore``."""

        return lambda: self
