"""Google Sheets adapter and opener exercised against fake gspread objects."""
import gspread
import pytest
import requests
from fastapi.testclient import TestClient
from gspread.utils import DateTimeOption, ValueInputOption, ValueRenderOption

from contract_tracker.api.app import create_app
from contract_tracker.core.config import StoreConfig
from contract_tracker.core.errors import StoreUnavailableError
from contract_tracker.store.records import ContractStore
from contract_tracker.store.tables import SheetsTable, sheets_opener


class FakeWorksheet:
    """Records gspread worksheet calls; set ``fail`` to make every call raise."""

    def __init__(self, values=None):
        self.values = values or []
        self.calls = []
        self.fail = None

    def _record(self, name, *args, **kwargs):
        self.calls.append((name, args, kwargs))
        if self.fail is not None:
            raise self.fail

    def get_all_values(self, **kwargs):
        self._record("get_all_values", **kwargs)
        return self.values

    def row_values(self, row):
        self._record("row_values", row)
        return self.values[row - 1]

    def col_values(self, column, **kwargs):
        self._record("col_values", column, **kwargs)
        return [row[column - 1] for row in self.values]

    def append_row(self, values, **kwargs):
        self._record("append_row", values, **kwargs)

    def update(self, **kwargs):
        self._record("update", **kwargs)

    def delete_rows(self, index):
        self._record("delete_rows", index)


class FakeResponse:
    """Just enough of a ``requests.Response`` for ``gspread.exceptions.APIError``."""

    status_code = 429
    text = "Quota exceeded"

    def json(self):
        return {"error": {"code": 429, "message": "Quota exceeded", "status": "RESOURCE_EXHAUSTED"}}


@pytest.fixture
def worksheet(headers, sample_rows):
    return FakeWorksheet([headers, *sample_rows])


def test_reads_ask_for_unformatted_values_and_serial_dates(worksheet):
    table = SheetsTable(worksheet)

    assert table.get_all_values() == worksheet.values
    table.column_values(4)

    assert worksheet.calls[0] == (
        "get_all_values",
        (),
        {
            "value_render_option": ValueRenderOption.unformatted,
            "date_time_render_option": DateTimeOption.serial_number,
        },
    )
    assert worksheet.calls[1] == ("col_values", (4,), {"value_render_option": ValueRenderOption.unformatted})


def test_update_row_writes_a_full_width_range(worksheet):
    row = ["x"] * 24

    SheetsTable(worksheet).update_row(3, row)

    name, _, kwargs = worksheet.calls[-1]
    assert name == "update"
    assert kwargs == {
        "range_name": "A3:X3",
        "values": [row],
        "value_input_option": ValueInputOption.user_entered,
    }


def test_append_and_delete_use_sheet_row_numbers(worksheet):
    table = SheetsTable(worksheet)

    table.append_row(["CUI009"])
    table.delete_row(4)

    assert worksheet.calls[0] == (
        "append_row",
        (["CUI009"],),
        {"value_input_option": ValueInputOption.user_entered},
    )
    assert worksheet.calls[1] == ("delete_rows", (4,), {})


def test_store_deletes_the_located_sheet_row(worksheet, store_config):
    store = ContractStore(lambda: SheetsTable(worksheet), store_config)

    assert store.remove("CUI002") == {"success": True, "id": "CUI002"}
    assert worksheet.calls[-1] == ("delete_rows", (3,), {})


@pytest.mark.parametrize(
    "error",
    [
        requests.ConnectionError("connection reset"),
        gspread.exceptions.APIError(FakeResponse()),
    ],
)
def test_call_failures_become_store_unavailable(worksheet, error):
    worksheet.fail = error
    table = SheetsTable(worksheet)

    with pytest.raises(StoreUnavailableError, match="while reading rows"):
        table.get_all_values()
    with pytest.raises(StoreUnavailableError, match="while appending a row"):
        table.append_row(["CUI009"])


def test_api_reports_table_failures_as_json(worksheet, store_config):
    client = TestClient(create_app(ContractStore(lambda: SheetsTable(worksheet), store_config)))
    worksheet.fail = requests.ConnectionError("connection reset")

    read = client.get("/")
    write = client.post(
        "/",
        content='{"action": "CREATE", "payload": {"cui": "CUI009"}}',
        headers={"Content-Type": "text/plain;charset=utf-8"},
    )

    assert read.status_code == 500
    assert read.json()["error"].startswith("Server error: Google Sheets unavailable")
    assert write.status_code == 400
    assert write.json()["error"].startswith("Request error: Google Sheets unavailable")


class FakeSpreadsheet:
    def __init__(self, worksheets):
        self.worksheets = worksheets

    def worksheet(self, title):
        if title not in self.worksheets:
            raise gspread.exceptions.WorksheetNotFound(title)
        return self.worksheets[title]


class FakeClient:
    def __init__(self, spreadsheets):
        self.spreadsheets = spreadsheets

    def open_by_key(self, key):
        if key not in self.spreadsheets:
            raise gspread.exceptions.SpreadsheetNotFound(key)
        return self.spreadsheets[key]


@pytest.fixture
def service_account_calls(monkeypatch, worksheet):
    calls = []
    client = FakeClient({"sheet-1": FakeSpreadsheet({"Contratos": worksheet})})

    def fake_service_account(**kwargs):
        calls.append(kwargs)
        return client

    monkeypatch.setattr(gspread, "service_account", fake_service_account)
    return calls


def test_opener_authorizes_once_with_the_configured_account(service_account_calls, fake_service_account_file, worksheet):
    opener = sheets_opener(StoreConfig(spreadsheet_id="sheet-1", service_account_path=fake_service_account_file))

    first, second = opener(), opener()

    assert isinstance(first, SheetsTable)
    assert second.get_all_values() == worksheet.values
    assert service_account_calls == [{"filename": str(fake_service_account_file)}]


def test_opener_without_account_file_uses_gspread_default(service_account_calls):
    sheets_opener(StoreConfig(spreadsheet_id="sheet-1"))()

    assert service_account_calls == [{}]


@pytest.mark.parametrize(
    "config, message",
    [
        (StoreConfig(spreadsheet_id="sheet-1", worksheet_title="Hoja2"), 'Sheet "Hoja2" not found.'),
        (StoreConfig(spreadsheet_id="other"), "Spreadsheet other not found"),
        (StoreConfig(), "No spreadsheet ID configured"),
    ],
)
def test_opener_reports_missing_sheets(service_account_calls, config, message):
    with pytest.raises(StoreUnavailableError, match=message):
        sheets_opener(config)()
