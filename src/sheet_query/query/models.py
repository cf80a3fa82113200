from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field

from sheet_query.shared.consts import EMPTY_CELL


class RowHandle(BaseModel):
    """Where a row lived in the table when it was loaded.

    ``position`` is 1-based and counts the header row, so the first data row
    is 2. ``cols`` is the table width at load time.
    """

    model_config = ConfigDict(frozen=True)

    position: int
    cols: int


class RowRecord(dict):
    """A data row keyed by heading.

    The ``handle`` lives outside the mapping so it can never leak into the
    cells written back to the table. ``cells`` keeps the row as it was read,
    one value per column, so columns sharing a heading (blank headings
    included) can still be written back one by one.
    """

    def __init__(self, handle: RowHandle, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.handle = handle
        self.cells: list[Any] = []

    @classmethod
    def from_cells(
        cls, handle: RowHandle, headings: list[str], cells: list[Any]
    ) -> Self:
        record = cls(handle, zip(headings[: handle.cols], cells))
        record.cells = list(cells[: handle.cols])
        return record

    def copy(self) -> Self:
        record = type(self)(self.handle, self)
        record.cells = list(self.cells)
        return record

    def to_values(
        self, headings: list[str], original: list[Any] | None = None
    ) -> list[Any]:
        """Flatten by heading.

        A heading used by more than one column cannot tell its columns apart,
        so those columns take the cell from ``original`` (or this row's own
        ``cells``) unchanged.
        """
        fallback = original if original is not None else self.cells
        values = []
        for c, heading in enumerate(headings):
            if headings.count(heading) == 1:
                values.append(self.get(heading, EMPTY_CELL))
            else:
                values.append(fallback[c] if c < len(fallback) else EMPTY_CELL)
        return values

    def original_values(self) -> list[Any]:
        """The row exactly as read, padded to ``handle.cols``."""
        return self.cells + [EMPTY_CELL] * (self.handle.cols - len(self.cells))

    def __repr__(self) -> str:
        return (
            f"RowRecord({dict.__repr__(self)}, "
            f"position={self.handle.position}, cols={self.handle.cols})"
        )


class BatchResult(BaseModel):
    operation: str
    applied: int = 0
    failed: list[int] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed
