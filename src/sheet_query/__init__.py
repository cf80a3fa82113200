"""sheet-query: a small query/mutation layer over spreadsheet-like tables.

Row 1 of a table holds the headings and data starts on row 2. Pick a table,
filter its rows with a predicate, then read, insert, update or delete them.
Reads are cached for the life of a query chain and every mutation drops the
cache and flushes the store.

Quick Start:
    >>> from sheet_query import InMemoryStore, RowRecord, sheet_query
    >>> store = InMemoryStore({"People": [["Name", "Age"], ["Ann", 31]]})
    >>> query = sheet_query(store).from_("People")
    >>> query.insert_rows([{"Name": "Bob", "Age": 17}])
    >>> query.where(lambda row: row["Age"] < 18).update_rows(
    ...     lambda row: RowRecord(row.handle, row, Age=18)
    ... )
"""

import logging

from .query import BatchResult, QueryBuilder, RowHandle, RowRecord, sheet_query
from .shared.exceptions import (
    BatchMutationError,
    QueryConfigError,
    SheetError,
    TableNotFoundError,
)
from .store import CsvStore, GSheetStore, GSheetStoreConfig, InMemoryStore

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

__version__ = "0.1.0"
__all__ = [
    "sheet_query",
    "QueryBuilder",
    "BatchResult",
    "RowHandle",
    "RowRecord",
    "SheetError",
    "QueryConfigError",
    "TableNotFoundError",
    "BatchMutationError",
    "InMemoryStore",
    "CsvStore",
    "GSheetStore",
    "GSheetStoreConfig",
    "logger",
]
