"""
Keyed table sink for cleaned records.

Cleaned records can be upserted into an SQLite table keyed by URL. When no
destination is configured the pipeline uses ``NullTableSink`` and nothing
is persisted.
"""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional, Protocol, Sequence, Union, runtime_checkable

from .data_models import DEFAULT_TAG_SEPARATOR, PocketItem
from ..utils.error_handler import DatabaseError


@runtime_checkable
class TableSink(Protocol):
    """Write-only store that upserts records by URL."""

    def upsert_batch(self, items: Sequence[PocketItem]) -> int:
        """
        Insert or replace every record in one batch.

        Returns:
            Number of records written
        """
        ...


class NullTableSink:
    """Sink used when no destination path is configured."""

    def upsert_batch(self, items: Sequence[PocketItem]) -> int:
        return 0


class SQLiteTableSink:
    """
    Upserts cleaned records into an SQLite table.

    The table is created on first use. Re-running with overlapping URLs
    replaces the stored rows, so the last write wins.

    Example:
        >>> sink = SQLiteTableSink(Path("pocket.db"))
        >>> sink.upsert_batch(items)
    """

    SCHEMA = """
    CREATE TABLE IF NOT EXISTS {table} (
        url TEXT PRIMARY KEY,
        title TEXT,
        added TEXT,
        tags TEXT
    );
    """

    UPSERT = "INSERT OR REPLACE INTO {table} (url, title, added, tags) VALUES (?, ?, ?, ?)"

    def __init__(
        self,
        db_path: Union[str, Path],
        table_name: str = "pocket_items",
        tag_separator: str = DEFAULT_TAG_SEPARATOR,
    ):
        """
        Initialize the sink.

        Args:
            db_path: Path to SQLite database file; created if absent
            table_name: Table to upsert into (plain identifier)
            tag_separator: Separator used to store the tag list as text
        """
        self.db_path = Path(db_path)
        self.table_name = table_name
        self.tag_separator = tag_separator
        self.logger = logging.getLogger(__name__)

    @contextmanager
    def _get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Get database connection."""
        conn = None
        try:
            conn = sqlite3.connect(str(self.db_path))
            yield conn
        finally:
            if conn:
                conn.close()

    def _ensure_table(self, conn: sqlite3.Connection) -> None:
        conn.executescript(self.SCHEMA.format(table=self.table_name))

    def upsert_batch(self, items: Sequence[PocketItem]) -> int:
        """
        Insert or replace every record inside one transaction.

        Raises:
            DatabaseError: If the database cannot be opened or written; the
                batch is rolled back
        """
        params = [
            (item.url, item.title, item.added, item.tags_string(self.tag_separator))
            for item in items
        ]

        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            with self._get_connection() as conn:
                self._ensure_table(conn)
                # Connection as context manager commits, or rolls back on error
                with conn:
                    conn.executemany(self.UPSERT.format(table=self.table_name), params)
        except (sqlite3.Error, OSError) as e:
            self.logger.error(f"Failed to upsert into {self.db_path}: {e}")
            raise DatabaseError(f"Could not write to database {self.db_path}: {e}") from e

        self.logger.info(
            f"Upserted {len(params)} records into {self.db_path}:{self.table_name}"
        )
        return len(params)


def create_table_sink(
    destination: Optional[Union[str, Path]],
    table_name: str = "pocket_items",
    tag_separator: str = DEFAULT_TAG_SEPARATOR,
) -> TableSink:
    """Build the sink for an optional destination path."""
    if destination is None:
        return NullTableSink()
    return SQLiteTableSink(destination, table_name, tag_separator)
