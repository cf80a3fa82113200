"""Backing store contract for the query builder.

A store hands out tables by name and commits buffered writes on ``flush``.
Every coordinate is 1-based, with row 1 holding the headings.
"""

from typing import Any, Protocol


class TableHandle(Protocol):
    def last_row(self) -> int: ...

    def last_column(self) -> int: ...

    def read_block(
        self, start_row: int, start_col: int, num_rows: int, num_cols: int
    ) -> list[list[Any]]: ...

    def write_block(
        self, start_row: int, start_col: int, values: list[list[Any]]
    ) -> None: ...

    def append_row(self, values: list[Any]) -> None: ...

    def delete_rows(
        self, start_row: int, start_col: int, num_rows: int, num_cols: int
    ) -> None: ...


class TableStore(Protocol):
    def get_table_by_name(self, name: str) -> TableHandle:
        """Return the named table.

        Raises:
            TableNotFoundError: If no table has that name.
        """
        ...

    def flush(self) -> None: ...
