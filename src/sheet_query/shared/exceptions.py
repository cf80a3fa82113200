from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sheet_query.query.models import BatchResult


class SheetError(Exception):
    pass


class QueryConfigError(SheetError):
    """Raised when a terminal operation runs before a table is selected."""


class TableNotFoundError(SheetError):
    def __init__(self, name: str):
        super().__init__(f"Table not found: {name}")
        self.name = name


class BatchMutationError(SheetError):
    """A bulk insert/update/delete stopped partway through.

    Rows already written stay written. ``result`` tells how far the batch got.
    """

    def __init__(self, result: "BatchResult"):
        super().__init__(
            f"{result.operation} failed after {result.applied} row(s), "
            f"failed at: {result.failed}"
        )
        self.result = result
