"""Google Sheets table store.

This module binds the query builder to a live spreadsheet through gspread.
Each worksheet is a table. Cell writes are buffered and committed together on
:meth:`GSheetStore.flush`, in one ``values:batchUpdate`` call.

The store:
- Buffers ``write_block`` calls until flush
- Flushes pending writes before any read, append or delete
- Retries rate-limited API calls with exponential backoff

Example:
    >>> store = GSheetStore.from_service_account(Path("keys/sa.json"), "1BxiMV...")
    >>> people = store.get_table_by_name("People")
    >>> people.write_block(2, 1, [["Ann", 31]])
    >>> store.flush()
"""

import logging
import time
from pathlib import Path
from typing import Any, Callable, MutableMapping

import gspread
from gspread.exceptions import APIError, WorksheetNotFound
from gspread.utils import ValueInputOption, ValueRenderOption, absolute_range_name
from pydantic import BaseModel, Field

from sheet_query.shared.consts import RATE_LIMIT_KEYWORDS, RATE_LIMIT_STATUS_CODES
from sheet_query.shared.exceptions import TableNotFoundError

from .utils import block_to_a1, block_to_grid_range, pad_block

logger = logging.getLogger(__name__)


class GSheetStoreConfig(BaseModel):
    """Retry settings for :class:`GSheetStore`.

    Attributes:
        max_retries: Attempts per API call before giving up on rate limits.
        backoff_base: Wait ``backoff_base ** attempt`` seconds between attempts.
    """

    max_retries: int = Field(default=3, ge=1, description="Attempts per API call")
    backoff_base: float = Field(default=2.0, ge=0, description="Backoff base in seconds")


class GSheetTable:
    """One worksheet seen as a table.

    ``last_row`` and ``last_column`` come from a snapshot of the worksheet's
    values that is dropped whenever this table changes or the store flushes.

    Attributes:
        store: The owning store.
        worksheet: The gspread worksheet.
    """

    def __init__(self, store: "GSheetStore", worksheet: gspread.Worksheet) -> None:
        self.store = store
        self.worksheet = worksheet
        self._snapshot: list[list[Any]] | None = None

    @property
    def title(self) -> str:
        return self.worksheet.title

    def invalidate(self) -> None:
        self._snapshot = None

    def __values(self) -> list[list[Any]]:
        if self._snapshot is None:
            self.store.commit_pending()
            res = self.store.execute(
                self.store.spreadsheet.values_get,
                absolute_range_name(self.title),
            )
            self._snapshot = res.get("values", [])
        return self._snapshot

    def last_row(self) -> int:
        return len(self.__values())

    def last_column(self) -> int:
        return max((len(row) for row in self.__values()), default=0)

    def read_block(
        self, start_row: int, start_col: int, num_rows: int, num_cols: int
    ) -> list[list[Any]]:
        """Read a block of cells, padded with '' to the full size.

        Values come back unformatted, so numbers stay numbers.
        """
        self.store.commit_pending()

        a1_range = block_to_a1(start_row, start_col, num_rows, num_cols)
        res = self.store.execute(
            self.store.spreadsheet.values_get,
            absolute_range_name(self.title, a1_range),
            params={"valueRenderOption": ValueRenderOption.unformatted},
        )

        return pad_block(res.get("values", []), num_rows, num_cols)

    def write_block(
        self, start_row: int, start_col: int, values: list[list[Any]]
    ) -> None:
        """Queue a block write. Nothing is sent until the store flushes."""
        num_cols = max((len(row) for row in values), default=0)
        if not values or num_cols == 0:
            return

        a1_range = block_to_a1(start_row, start_col, len(values), num_cols)
        self.store.queue_write(absolute_range_name(self.title, a1_range), values)
        self.invalidate()

    def append_row(self, values: list[Any]) -> None:
        self.store.commit_pending()

        self.store.execute(
            self.worksheet.append_row,
            values,
            value_input_option=ValueInputOption.raw,
            table_range="A1",
        )
        self.invalidate()

    def delete_rows(
        self, start_row: int, start_col: int, num_rows: int, num_cols: int
    ) -> None:
        """Delete a block and shift the cells below it up."""
        self.store.commit_pending()

        grid_range = block_to_grid_range(
            self.worksheet.id, start_row, start_col, num_rows, num_cols
        )
        body = {
            "requests": [
                {
                    "deleteRange": {
                        "range": grid_range.model_dump(),
                        "shiftDimension": "ROWS",
                    }
                }
            ]
        }

        self.store.execute(self.store.spreadsheet.batch_update, body)
        self.invalidate()


class GSheetStore:
    """All worksheets of one spreadsheet.

    Attributes:
        spreadsheet: The gspread spreadsheet.
        config: Retry settings.
        tables: Table handles already resolved, keyed by worksheet title.
    """

    def __init__(
        self,
        spreadsheet: gspread.Spreadsheet,
        config: GSheetStoreConfig | None = None,
    ) -> None:
        self.spreadsheet = spreadsheet
        self.config = config or GSheetStoreConfig()
        self.tables: dict[str, GSheetTable] = {}
        self._pending: list[dict[str, Any]] = []

    @classmethod
    def from_service_account(
        cls,
        key_path: Path,
        spreadsheet_id: str,
        config: GSheetStoreConfig | None = None,
    ) -> "GSheetStore":
        """Open a spreadsheet with a service account JSON key.

        Raises:
            FileNotFoundError: If the key file does not exist.
        """
        if not key_path.is_file():
            raise FileNotFoundError(f"Service account key does not exist: {key_path}")

        logger.info(f"Using key: {key_path.name}")
        client = gspread.service_account(filename=str(key_path))
        return cls(client.open_by_key(spreadsheet_id), config)

    def get_table_by_name(self, name: str) -> GSheetTable:
        if name not in self.tables:
            try:
                worksheet = self.execute(self.spreadsheet.worksheet, name)
            except WorksheetNotFound as e:
                raise TableNotFoundError(name) from e

            logger.info(f"Resolved worksheet {name!r} (id={worksheet.id})")
            self.tables[name] = GSheetTable(self, worksheet)

        return self.tables[name]

    @property
    def pending_writes(self) -> int:
        return len(self._pending)

    def queue_write(self, a1_range: str, values: list[list[Any]]) -> None:
        self._pending.append({"range": a1_range, "values": values})

    def commit_pending(self) -> dict[str, Any] | None:
        """Send every queued write in one batch update.

        Returns:
            The API response, or None if nothing was queued.

        Raises:
            APIError: If the API call fails after all retries.
        """
        if not self._pending:
            return None

        body: MutableMapping[str, Any] = {
            "valueInputOption": ValueInputOption.raw,
            "data": self._pending,
        }

        response = self.execute(self.spreadsheet.values_batch_update, body)
        logger.debug(f"Committed {len(self._pending)} block write(s)")
        self._pending = []
        return response

    def flush(self) -> None:
        """Commit queued writes and forget cached table sizes."""
        self.commit_pending()
        for table in self.tables.values():
            table.invalidate()

    def is_rate_limit_error(self, error: APIError) -> bool:
        """Check if an API error is due to rate limiting."""
        response = getattr(error, "response", None)
        if response is None:
            return False

        if response.status_code in RATE_LIMIT_STATUS_CODES:
            return True

        error_message = str(error).lower()
        return any(keyword in error_message for keyword in RATE_LIMIT_KEYWORDS)

    def execute(self, operation: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """Run an API call, retrying rate-limit errors with exponential backoff.

        Raises:
            APIError: Immediately for other API errors, or once retries run out.
        """
        max_retries = self.config.max_retries

        for attempt in range(max_retries):
            try:
                return operation(*args, **kwargs)
            except APIError as e:
                if not self.is_rate_limit_error(e):
                    logger.error(f"API error (non-rate-limit): {e}")
                    raise

                logger.warning(
                    f"Rate limit error on attempt {attempt + 1}/{max_retries}: {e}"
                )
                if attempt == max_retries - 1:
                    logger.error("Max retries reached")
                    raise

                wait_time = self.config.backoff_base**attempt
                logger.info(f"Waiting {wait_time}s before retry...")
                time.sleep(wait_time)
