"""Fluent query builder over a table store.

Example:
    >>> store = InMemoryStore({"People": [["Name", "Age"], ["Ann", 31], ["Bob", 17]]})
    >>> minors = sheet_query(store).from_("People").where(lambda row: row["Age"] < 18)
    >>> [row["Name"] for row in minors.get_rows()]
    ['Bob']
    >>> minors.delete_rows().applied
    1
"""

import logging
from typing import Any, Callable, Iterable, Mapping

from sheet_query.shared.consts import EMPTY_CELL, FIRST_COLUMN, FIRST_DATA_ROW, HEADER_ROW
from sheet_query.shared.exceptions import BatchMutationError, QueryConfigError
from sheet_query.store.base import TableHandle, TableStore

from .cache import CachedValue
from .models import BatchResult, RowHandle, RowRecord

logger = logging.getLogger(__name__)

WhereFn = Callable[[RowRecord], bool]
UpdateFn = Callable[[RowRecord], RowRecord | None]


class QueryBuilder:
    """Select a table, filter its rows, then read or change them.

    Headings and rows are read once and cached until a mutation (or
    :meth:`clear_cache`) drops them, so one chain of calls sees one snapshot.

    Attributes:
        store: Where tables come from.
        column_names: Columns named by :meth:`select`. Recorded only.
        sheet_name: Table named by :meth:`from_`.
        where_fn: Row filter set by :meth:`where`.
    """

    def __init__(self, store: TableStore):
        self.store = store
        self.column_names: list[str] = []
        self.sheet_name: str | None = None
        self.where_fn: WhereFn | None = None

        self._sheet: CachedValue[TableHandle | None] = CachedValue(lambda: None)
        self._sheet_headings: CachedValue[list[str]] = CachedValue(list)
        self._sheet_values: CachedValue[list[RowRecord]] = CachedValue(list)

    def select(self, column_names: str | list[str]) -> "QueryBuilder":
        self.column_names = (
            list(column_names) if isinstance(column_names, list) else [column_names]
        )
        return self

    def from_(self, sheet_name: str) -> "QueryBuilder":
        """Name the table to work on. Nothing is read yet."""
        if sheet_name != self.sheet_name:
            self._sheet.clear()
            self._sheet_headings.clear()
            self._sheet_values.clear()
        self.sheet_name = sheet_name
        return self

    def where(self, fn: WhereFn) -> "QueryBuilder":
        """Keep only rows for which ``fn`` returns True. Replaces any earlier filter."""
        self.where_fn = fn
        return self

    def get_sheet(self) -> TableHandle:
        """Return the selected table, resolving it on first use.

        Raises:
            QueryConfigError: If :meth:`from_` was never called.
            TableNotFoundError: If the store has no such table.
        """
        sheet = self._sheet.get(self.__resolve_sheet)
        assert sheet is not None
        return sheet

    def __resolve_sheet(self) -> TableHandle:
        if self.sheet_name is None:
            raise QueryConfigError("No table selected, call from_() first")

        sheet = self.store.get_table_by_name(self.sheet_name)
        logger.info(f"Using table {self.sheet_name!r}")
        return sheet

    def get_headings(self) -> list[str]:
        return self._sheet_headings.get(self.__load_headings)

    def __load_headings(self) -> list[str]:
        sheet = self.get_sheet()
        num_cols = sheet.last_column()
        if num_cols < 1:
            return []

        return list(sheet.read_block(HEADER_ROW, FIRST_COLUMN, 1, num_cols)[0])

    def get_values(self) -> list[RowRecord]:
        """Return every data row of the table, cached."""
        return self._sheet_values.get(self.__load_values)

    def __load_values(self) -> list[RowRecord]:
        sheet = self.get_sheet()
        num_cols = sheet.last_column()
        num_rows = sheet.last_row() - HEADER_ROW
        headings = self.get_headings()

        if num_rows < 1 or num_cols < 1:
            logger.info(f"Table {self.sheet_name!r} has no data rows")
            return []

        sheet_values = sheet.read_block(FIRST_DATA_ROW, FIRST_COLUMN, num_rows, num_cols)

        rows = [
            RowRecord.from_cells(
                RowHandle(position=r + FIRST_DATA_ROW, cols=num_cols), headings, cells
            )
            for r, cells in enumerate(sheet_values)
        ]
        logger.info(f"Loaded {len(rows)} row(s) from {self.sheet_name!r}")
        return rows

    def get_rows(self) -> list[RowRecord]:
        """Return the cached rows that pass the current filter, in table order."""
        sheet_values = self.get_values()

        if self.where_fn is None:
            return sheet_values
        return [row for row in sheet_values if self.where_fn(row)]

    def insert_rows(self, new_rows: Iterable[Mapping[str, Any]]) -> BatchResult:
        """Append rows given as ``{heading: value}`` mappings.

        Values are placed by heading. Falsy values, and headings the mapping
        does not have, become empty cells.
        """
        sheet = self.get_sheet()
        headings = self.get_headings()
        result = BatchResult(operation="insert_rows")

        applied: list[int] = []
        for i, row in enumerate(new_rows):
            row_values = [row.get(heading) or EMPTY_CELL for heading in headings]
            self.__apply(result, i, sheet.append_row, row_values)
            applied.append(i)

        self.__commit(result, applied)
        logger.info(f"Inserted {result.applied} row(s) into {self.sheet_name!r}")
        return result

    def update_rows(self, update_fn: UpdateFn) -> BatchResult:
        """Rewrite every matched row with what ``update_fn`` returns.

        ``update_fn`` gets the cached row and returns the row to write. A result
        that is not a :class:`RowRecord` (``None`` or a plain dict) writes the
        original row back exactly as it was read. Cells are placed by heading,
        except where several columns share a heading: those keep their
        original cells.
        """
        rows = self.get_rows()
        sheet = self.get_sheet()
        headings = self.get_headings()
        result = BatchResult(operation="update_rows")
        applied: list[int] = []

        for row in rows:
            position = row.handle.position
            updated_row = update_fn(row)

            if isinstance(updated_row, RowRecord):
                row_values = updated_row.to_values(
                    headings[: row.handle.cols], row.original_values()
                )
            else:
                if updated_row is not None:
                    logger.warning(
                        f"Update for row {position} returned "
                        f"{type(updated_row).__name__}, writing original values"
                    )
                row_values = row.original_values()

            logger.debug(f"Writing row {position}")
            self.__apply(
                result, position, sheet.write_block, position, FIRST_COLUMN, [row_values]
            )
            applied.append(position)

        self.__commit(result, applied)
        logger.info(f"Updated {result.applied} row(s) in {self.sheet_name!r}")
        return result

    def delete_rows(self) -> BatchResult:
        """Delete every matched row.

        Positions in the cache predate the first delete, and each delete moves
        the rows below it up by one, so the k-th delete (in ascending order)
        targets ``position - k``.
        """
        rows = sorted(self.get_rows(), key=lambda row: row.handle.position)
        sheet = self.get_sheet()
        result = BatchResult(operation="delete_rows")
        applied: list[int] = []

        for i, row in enumerate(rows):
            target = row.handle.position - i
            logger.debug(f"Deleting row {row.handle.position} at {target}")
            self.__apply(
                result,
                row.handle.position,
                sheet.delete_rows,
                target,
                FIRST_COLUMN,
                1,
                row.handle.cols,
            )
            applied.append(row.handle.position)

        self.__commit(result, applied)
        logger.info(f"Deleted {result.applied} row(s) from {self.sheet_name!r}")
        return result

    def __apply(
        self,
        result: BatchResult,
        key: int,
        operation: Callable[..., Any],
        *args: Any,
    ) -> None:
        """Run one row's store call, counting it, or abort the batch on error.

        ``key`` is the row's table position, or its input index for inserts.

        On error the cache is dropped without flushing and the error is
        re-raised as :class:`BatchMutationError`.
        """
        try:
            operation(*args)
        except Exception as e:
            result.failed.append(key)
            self.__drop_cache()
            logger.error(f"{result.operation} stopped after {result.applied} row(s): {e}")
            raise BatchMutationError(result) from e

        result.applied += 1

    def __commit(self, result: BatchResult, applied: list[int]) -> None:
        """Clear the cache and flush, the last step of every batch.

        Stores may hold writes until flush, so a failed flush means none of
        this batch's rows are known to be committed: all of them are reported
        as failed.
        """
        try:
            self.clear_cache()
        except Exception as e:
            result.failed.extend(applied)
            result.applied = 0
            logger.error(f"{result.operation} could not flush {len(applied)} row(s): {e}")
            raise BatchMutationError(result) from e

    def __drop_cache(self) -> None:
        self._sheet_values.clear()
        self._sheet_headings.clear()

    def clear_cache(self) -> "QueryBuilder":
        """Forget cached rows and headings and flush the store."""
        self.__drop_cache()
        self.store.flush()
        return self


def sheet_query(store: TableStore) -> QueryBuilder:
    """Start a new query against ``store``."""
    return QueryBuilder(store)
