"""CSV-backed table store.

Each table is a ``<name>.csv`` file in one directory. Tables are read into
memory on first use; changes stay in memory until :meth:`CsvStore.flush`
writes the dirty tables back.

Example:
    >>> store = CsvStore(Path("data"))
    >>> people = store.get_table_by_name("people")   # data/people.csv
    >>> people.append_row(["Ann", "31"])
    >>> store.flush()
"""

import csv
import logging
from pathlib import Path

from sheet_query.shared.exceptions import TableNotFoundError

from .memory import InMemoryStore, InMemoryTable

logger = logging.getLogger(__name__)


class CsvStore(InMemoryStore):
    def __init__(self, directory: Path):
        """Initialize the store.

        Args:
            directory: Folder holding the CSV files.

        Raises:
            FileNotFoundError: If the directory does not exist.
        """
        super().__init__()
        self.directory = directory

        if not self.directory.is_dir():
            raise FileNotFoundError(f"Table directory does not exist: {self.directory}")

    def table_path(self, name: str) -> Path:
        return self.directory / f"{name}.csv"

    def get_table_by_name(self, name: str) -> InMemoryTable:
        if name not in self.tables:
            path = self.table_path(name)
            if not path.is_file():
                raise TableNotFoundError(name)

            with path.open("r", newline="", encoding="utf-8") as f:
                rows = list(csv.reader(f))

            logger.info(f"Loaded {len(rows)} row(s) from {path}")
            self.add_table(name, rows)

        return self.tables[name]

    def create_table(self, name: str, headings: list[str]) -> InMemoryTable:
        """Create a new table file holding only the heading row.

        Raises:
            FileExistsError: If the file is already there.
        """
        path = self.table_path(name)
        if path.exists():
            raise FileExistsError(f"Table already exists: {path}")

        table = self.add_table(name, [headings])
        self.__write_table(table)
        return table

    def flush(self) -> None:
        for table in self.tables.values():
            if table.dirty:
                self.__write_table(table)
        super().flush()

    def __write_table(self, table: InMemoryTable) -> None:
        path = self.table_path(table.name)
        rows = table.rows[: table.last_row()]

        with path.open("w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerows(rows)

        logger.debug(f"Wrote {len(rows)} row(s) to {path}")
