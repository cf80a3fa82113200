"""GSheetStore against mocked gspread objects.

Covers:
- worksheet lookup and caching
- size snapshot and block reads
- write buffering and flush
- append and delete requests
- rate-limit retries
"""

from unittest.mock import MagicMock, Mock

import pytest
from gspread.exceptions import APIError, WorksheetNotFound
from gspread.utils import ValueInputOption, absolute_range_name

from sheet_query import BatchMutationError, sheet_query
from sheet_query.shared.exceptions import TableNotFoundError
from sheet_query.store.gsheet import GSheetStore, GSheetStoreConfig

GRID = [["Name", "Age"], ["Ann", 31], ["Bob", 17]]


def _api_error(status_code: int, message: str) -> APIError:
    response = Mock()
    response.status_code = status_code
    response.text = message
    response.json.return_value = {
        "error": {"code": status_code, "message": message, "status": "ERROR"}
    }
    return APIError(response)


@pytest.fixture
def worksheet() -> MagicMock:
    worksheet = MagicMock()
    worksheet.id = 7
    worksheet.title = "People"
    return worksheet


@pytest.fixture
def spreadsheet(worksheet) -> MagicMock:
    ranges = {
        absolute_range_name("People"): GRID,
        absolute_range_name("People", "A1:B1"): GRID[:1],
        absolute_range_name("People", "A2:B3"): GRID[1:],
        absolute_range_name("People", "A2:C4"): GRID[1:],
    }

    def values_get(range, params=None):
        return {"values": ranges.get(range, [])}

    spreadsheet = MagicMock()
    spreadsheet.worksheet.return_value = worksheet
    spreadsheet.values_get.side_effect = values_get
    return spreadsheet


@pytest.fixture
def store(spreadsheet) -> GSheetStore:
    return GSheetStore(spreadsheet, GSheetStoreConfig(max_retries=3, backoff_base=0))


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    sleeps = []
    monkeypatch.setattr("sheet_query.store.gsheet.time.sleep", sleeps.append)
    return sleeps


# ── lookup ───────────────────────────────────────────────────────────────


def test_table_is_resolved_once(store, spreadsheet, worksheet) -> None:
    table = store.get_table_by_name("People")

    assert store.get_table_by_name("People") is table
    assert table.worksheet is worksheet
    spreadsheet.worksheet.assert_called_once_with("People")


def test_missing_worksheet(store, spreadsheet) -> None:
    spreadsheet.worksheet.side_effect = WorksheetNotFound("Nope")

    with pytest.raises(TableNotFoundError) as exc_info:
        store.get_table_by_name("Nope")

    assert isinstance(exc_info.value.__cause__, WorksheetNotFound)


def test_from_service_account_needs_key(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        GSheetStore.from_service_account(tmp_path / "sa.json", "1BxiMV")


# ── reads ────────────────────────────────────────────────────────────────


def test_size_comes_from_one_snapshot(store, spreadsheet) -> None:
    table = store.get_table_by_name("People")

    assert table.last_row() == 3
    assert table.last_column() == 2
    spreadsheet.values_get.assert_called_once_with(absolute_range_name("People"))


def test_flush_drops_snapshot(store, spreadsheet) -> None:
    table = store.get_table_by_name("People")
    table.last_row()
    store.flush()
    table.last_row()

    assert spreadsheet.values_get.call_count == 2


def test_read_block_is_padded(store, spreadsheet) -> None:
    table = store.get_table_by_name("People")

    assert table.read_block(2, 1, 3, 3) == [["Ann", 31, ""], ["Bob", 17, ""], ["", "", ""]]
    assert spreadsheet.values_get.call_args.args == (
        absolute_range_name("People", "A2:C4"),
    )
    assert spreadsheet.values_get.call_args.kwargs["params"] == {
        "valueRenderOption": "UNFORMATTED_VALUE"
    }


# ── writes ───────────────────────────────────────────────────────────────


def test_writes_are_buffered_until_flush(store, spreadsheet) -> None:
    table = store.get_table_by_name("People")
    table.write_block(2, 1, [["Ann", 32]])
    table.write_block(3, 1, [["Bob", 18]])

    spreadsheet.values_batch_update.assert_not_called()
    assert store.pending_writes == 2

    store.flush()

    spreadsheet.values_batch_update.assert_called_once()
    body = spreadsheet.values_batch_update.call_args.args[0]
    assert body["valueInputOption"] == ValueInputOption.raw
    assert body["data"] == [
        {"range": absolute_range_name("People", "A2:B2"), "values": [["Ann", 32]]},
        {"range": absolute_range_name("People", "A3:B3"), "values": [["Bob", 18]]},
    ]
    assert store.pending_writes == 0


def test_flush_without_writes_sends_nothing(store, spreadsheet) -> None:
    store.flush()
    spreadsheet.values_batch_update.assert_not_called()


def test_read_commits_pending_writes_first(store, spreadsheet) -> None:
    table = store.get_table_by_name("People")
    table.write_block(2, 1, [["Ann", 32]])
    table.read_block(2, 1, 1, 2)

    names = [call[0] for call in spreadsheet.method_calls]
    assert names.index("values_batch_update") < names.index("values_get")


def test_append_row(store, worksheet) -> None:
    store.get_table_by_name("People").append_row(["Cid", 45])

    worksheet.append_row.assert_called_once_with(
        ["Cid", 45], value_input_option=ValueInputOption.raw, table_range="A1"
    )


def test_delete_rows_sends_delete_range(store, spreadsheet) -> None:
    table = store.get_table_by_name("People")
    table.write_block(2, 1, [["Ann", 32]])
    table.delete_rows(3, 1, 1, 2)

    names = [call[0] for call in spreadsheet.method_calls]
    assert names.index("values_batch_update") < names.index("batch_update")

    spreadsheet.batch_update.assert_called_once_with(
        {
            "requests": [
                {
                    "deleteRange": {
                        "range": {
                            "sheetId": 7,
                            "startRowIndex": 2,
                            "endRowIndex": 3,
                            "startColumnIndex": 0,
                            "endColumnIndex": 2,
                        },
                        "shiftDimension": "ROWS",
                    }
                }
            ]
        }
    )


# ── retries ──────────────────────────────────────────────────────────────


def test_rate_limit_is_retried(store, spreadsheet, no_sleep) -> None:
    spreadsheet.worksheet.side_effect = [
        _api_error(429, "Quota exceeded"),
        spreadsheet.worksheet.return_value,
    ]

    store.get_table_by_name("People")

    assert spreadsheet.worksheet.call_count == 2
    assert no_sleep == [1]


def test_other_errors_are_not_retried(store, spreadsheet) -> None:
    spreadsheet.batch_update.side_effect = _api_error(400, "Invalid range")
    table = store.get_table_by_name("People")

    with pytest.raises(APIError):
        table.delete_rows(2, 1, 1, 2)

    assert spreadsheet.batch_update.call_count == 1


def test_retries_run_out(store, spreadsheet, no_sleep) -> None:
    spreadsheet.values_batch_update.side_effect = _api_error(429, "Quota exceeded")
    store.get_table_by_name("People").write_block(2, 1, [["Ann", 32]])

    with pytest.raises(APIError):
        store.flush()

    assert spreadsheet.values_batch_update.call_count == 3
    assert len(no_sleep) == 2
    assert store.pending_writes == 1


# ── through the query builder ────────────────────────────────────────────


def test_query_update_is_one_batch(store, spreadsheet) -> None:
    result = sheet_query(store).from_("People").update_rows(lambda row: None)

    assert result.applied == 2
    spreadsheet.values_batch_update.assert_called_once()
    body = spreadsheet.values_batch_update.call_args.args[0]
    assert [item["values"] for item in body["data"]] == [[["Ann", 31]], [["Bob", 17]]]


def test_query_update_flush_failure_is_batch_error(store, spreadsheet) -> None:
    spreadsheet.values_batch_update.side_effect = _api_error(500, "Backend error")

    with pytest.raises(BatchMutationError) as exc_info:
        sheet_query(store).from_("People").update_rows(lambda row: None)

    assert exc_info.value.result.applied == 0
    assert exc_info.value.result.failed == [2, 3]
    assert isinstance(exc_info.value.__cause__, APIError)


def test_query_delete_targets_shifted_rows(store, spreadsheet) -> None:
    sheet_query(store).from_("People").delete_rows()

    requests = [
        call.args[0]["requests"][0]["deleteRange"]["range"]["startRowIndex"]
        for call in spreadsheet.batch_update.call_args_list
    ]
    assert requests == [1, 1]
