"""Table stores the query builder can run against.

Classes:
    TableStore, TableHandle: The contract every store meets.
    InMemoryStore: Tables held in lists.
    CsvStore: Tables kept as CSV files in a directory.
    GSheetStore: Worksheets of a Google spreadsheet, through gspread.
"""

from .base import TableHandle, TableStore
from .csv_store import CsvStore
from .gsheet import GSheetStore, GSheetStoreConfig, GSheetTable
from .memory import InMemoryStore, InMemoryTable

__all__ = [
    "TableHandle",
    "TableStore",
    "CsvStore",
    "GSheetStore",
    "GSheetStoreConfig",
    "GSheetTable",
    "InMemoryStore",
    "InMemoryTable",
]
