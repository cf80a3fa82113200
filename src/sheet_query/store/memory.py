"""In-process tables held as lists of rows.

Useful on its own for scripting and tests, and as the working copy behind
:class:`~sheet_query.store.csv_store.CsvStore`.
"""

import logging
from typing import Any

from sheet_query.shared.consts import EMPTY_CELL
from sheet_query.shared.exceptions import TableNotFoundError

logger = logging.getLogger(__name__)


def _is_blank(value: Any) -> bool:
    return value is None or value == EMPTY_CELL


def _check_block(start_row: int, start_col: int, num_rows: int, num_cols: int) -> None:
    if start_row < 1 or start_col < 1:
        raise ValueError(f"Block must start at row/col >= 1, got ({start_row}, {start_col})")
    if num_rows < 1 or num_cols < 1:
        raise ValueError(f"Block must be at least 1x1, got {num_rows}x{num_cols}")


class InMemoryTable:
    """A named grid of cells.

    Rows may be ragged; missing cells read as ''. ``last_row`` and
    ``last_column`` only count cells that hold something, like a spreadsheet
    does.

    Attributes:
        name: Table name.
        rows: The grid, row 1 first.
        dirty: True once the grid changed since the last flush.
    """

    def __init__(self, name: str, rows: list[list[Any]] | None = None):
        self.name = name
        self.rows: list[list[Any]] = [list(row) for row in rows or []]
        self.dirty = False

    def last_row(self) -> int:
        for r in range(len(self.rows), 0, -1):
            if not all(_is_blank(value) for value in self.rows[r - 1]):
                return r
        return 0

    def last_column(self) -> int:
        last = 0
        for row in self.rows:
            for c in range(len(row), last, -1):
                if not _is_blank(row[c - 1]):
                    last = c
                    break
        return last

    def read_block(
        self, start_row: int, start_col: int, num_rows: int, num_cols: int
    ) -> list[list[Any]]:
        _check_block(start_row, start_col, num_rows, num_cols)

        return [
            [self.__get_cell(r, c) for c in range(start_col - 1, start_col - 1 + num_cols)]
            for r in range(start_row - 1, start_row - 1 + num_rows)
        ]

    def write_block(
        self, start_row: int, start_col: int, values: list[list[Any]]
    ) -> None:
        _check_block(start_row, start_col, 1, 1)

        for i, row_values in enumerate(values):
            for j, value in enumerate(row_values):
                self.__set_cell(start_row - 1 + i, start_col - 1 + j, value)
        self.dirty = True

    def append_row(self, values: list[Any]) -> None:
        # Trailing blank rows are dropped so the new row lands right after the data
        del self.rows[self.last_row() :]
        self.rows.append(list(values))
        self.dirty = True

    def delete_rows(
        self, start_row: int, start_col: int, num_rows: int, num_cols: int
    ) -> None:
        """Remove a block and shift the cells below it up.

        Only the block's columns move. When the block spans every column the
        rows themselves are removed.
        """
        _check_block(start_row, start_col, num_rows, num_cols)

        top = start_row - 1
        width = max((len(row) for row in self.rows), default=0)

        if start_col == 1 and num_cols >= width:
            del self.rows[top : top + num_rows]
        else:
            for c in range(start_col - 1, start_col - 1 + num_cols):
                for r in range(top, len(self.rows)):
                    self.__set_cell(r, c, self.__get_cell(r + num_rows, c))
        self.dirty = True

    def __get_cell(self, row: int, col: int) -> Any:
        if row < len(self.rows) and col < len(self.rows[row]):
            return self.rows[row][col]
        return EMPTY_CELL

    def __set_cell(self, row: int, col: int, value: Any) -> None:
        while len(self.rows) <= row:
            self.rows.append([])
        while len(self.rows[row]) <= col:
            self.rows[row].append(EMPTY_CELL)
        self.rows[row][col] = value


class InMemoryStore:
    """A set of :class:`InMemoryTable` keyed by name.

    Example:
        >>> store = InMemoryStore({"People": [["Name", "Age"], ["Ann", 31]]})
        >>> store.get_table_by_name("People").last_row()
        2
    """

    def __init__(self, tables: dict[str, list[list[Any]]] | None = None):
        self.tables: dict[str, InMemoryTable] = {}
        self.flush_count = 0

        for name, rows in (tables or {}).items():
            self.add_table(name, rows)

    def add_table(self, name: str, rows: list[list[Any]] | None = None) -> InMemoryTable:
        table = InMemoryTable(name, rows)
        self.tables[name] = table
        return table

    def get_table_by_name(self, name: str) -> InMemoryTable:
        if name not in self.tables:
            raise TableNotFoundError(name)
        return self.tables[name]

    def flush(self) -> None:
        for table in self.tables.values():
            table.dirty = False
        self.flush_count += 1
