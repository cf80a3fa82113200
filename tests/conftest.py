"""Shared test fixtures for sheet-query."""

from typing import Any

import pytest

from sheet_query.store.memory import InMemoryStore, InMemoryTable

# ---------------------------------------------------------------------------
# Recording store
# ---------------------------------------------------------------------------


class RecordingTable(InMemoryTable):
    """In-memory table that logs every positional call made against it."""

    def __init__(self, name: str, rows: list[list[Any]] | None = None):
        super().__init__(name, rows)
        self.calls: list[tuple[str, tuple]] = []

    def read_block(self, *args):
        self.calls.append(("read_block", args))
        return super().read_block(*args)

    def write_block(self, *args):
        self.calls.append(("write_block", args))
        super().write_block(*args)

    def append_row(self, *args):
        self.calls.append(("append_row", args))
        super().append_row(*args)

    def delete_rows(self, *args):
        self.calls.append(("delete_rows", args))
        super().delete_rows(*args)

    def called(self, name: str) -> list[tuple]:
        return [args for call, args in self.calls if call == name]

    def data_reads(self) -> list[tuple]:
        """Block reads that start on the first data row."""
        return [args for args in self.called("read_block") if args[0] == 2]


class RecordingStore(InMemoryStore):
    def __init__(self, tables: dict[str, list[list[Any]]] | None = None):
        self.lookups: list[str] = []
        super().__init__(tables)

    def add_table(self, name: str, rows: list[list[Any]] | None = None) -> RecordingTable:
        table = RecordingTable(name, rows)
        self.tables[name] = table
        return table

    def get_table_by_name(self, name: str) -> RecordingTable:
        self.lookups.append(name)
        return super().get_table_by_name(name)


PEOPLE = [
    ["Name", "Age", "City"],
    ["Ann", 31, "Oslo"],
    ["Bob", 17, "Rome"],
    ["Cid", 45, "Oslo"],
    ["Dee", 12, "Lima"],
]


@pytest.fixture
def store() -> RecordingStore:
    return RecordingStore({"People": PEOPLE, "Empty": [["A", "B"]]})


@pytest.fixture
def people(store: RecordingStore) -> RecordingTable:
    return store.tables["People"]


@pytest.fixture
def make_store():
    return RecordingStore
