"""SQLite connection management and batched writes.

The connection runs with ``isolation_level=None`` so transactions are
opened and closed explicitly: one :class:`Batch` is one transaction.
"""

import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Generator, List, Optional, Sequence, Tuple, Union

from ..errors import StorageError
from .init import SCHEMAS, TABLE_COLUMNS


@dataclass
class BatchResult:
    """Outcome of one batch: rows written and rows skipped."""

    inserted: int = 0
    failures: List[Tuple[Any, Exception]] = field(default_factory=list)


def _check_identifiers(table: str, *columns: str) -> None:
    known = TABLE_COLUMNS.get(table)
    if known is None:
        raise ValueError(f"Unknown table: {table}")
    for column in columns:
        if column not in known:
            raise ValueError(f"Unknown column {column!r} for table {table}")


class Batch:
    """A transaction wrapping one parameterized insert, executed per row."""

    def __init__(self, database: "Database", table: str, columns: Sequence[str]) -> None:
        _check_identifiers(table, *columns)
        self._database = database
        self.table = table
        placeholders = ", ".join("?" for _ in columns)
        self.sql = f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})"
        self._width = len(columns)
        self.result = BatchResult()

    def begin(self) -> None:
        """Open the transaction and compile the insert statement."""
        try:
            self._database.execute("BEGIN")
        except sqlite3.Error as e:
            raise StorageError(f"Failed to begin transaction: {e}") from e
        try:
            # EXPLAIN compiles the statement without running it
            self._database.execute(f"EXPLAIN {self.sql}", [None] * self._width)
        except sqlite3.Error as e:
            self.rollback()
            raise StorageError(f"Failed to prepare statement on '{self.table}': {e}") from e

    def insert_row(self, values: Sequence[Any], key: Any = None) -> Optional[Exception]:
        """Insert one row.

        Constraint violations only fail this row: the error is recorded and
        returned, and the transaction stays usable. Any other database error
        is raised as :class:`StorageError`.
        """
        try:
            self._database.execute(self.sql, values)
        except sqlite3.IntegrityError as e:
            self.result.failures.append((key if key is not None else values[0], e))
            return e
        except sqlite3.Error as e:
            raise StorageError(f"Failed to insert into '{self.table}': {e}") from e
        self.result.inserted += 1
        return None

    def skip_row(self, key: Any, error: Exception) -> None:
        """Record a row that never reached the database."""
        self.result.failures.append((key, error))

    def commit(self) -> None:
        try:
            self._database.execute("COMMIT")
        except sqlite3.Error as e:
            self.rollback()
            raise StorageError(f"Failed to commit transaction: {e}") from e

    def rollback(self) -> None:
        if self._database.in_transaction:
            self._database.execute("ROLLBACK")


class Database:
    """Exclusive handle on the crawl database file."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        try:
            self._conn = sqlite3.connect(str(self.path), isolation_level=None)
        except sqlite3.Error as e:
            raise StorageError(f"Failed to open database {self.path}: {e}") from e

    @property
    def in_transaction(self) -> bool:
        return self._conn.in_transaction

    def execute(self, sql: str, params: Sequence[Any] = ()) -> sqlite3.Cursor:
        return self._conn.execute(sql, params)

    def close(self) -> None:
        self._conn.close()

    def ensure_schema(self, name: str) -> None:
        """Create the named schema if it does not exist."""
        try:
            statements = SCHEMAS[name]
        except KeyError:
            raise ValueError(f"Unknown schema: {name}") from None
        try:
            for statement in statements:
                self.execute(statement)
        except sqlite3.Error as e:
            raise StorageError(f"Failed to create '{name}' schema: {e}") from e

    @contextmanager
    def batch(self, table: str, columns: Sequence[str]) -> Generator[Batch, None, None]:
        """Run inserts in one transaction, committed when the block exits."""
        batch = Batch(self, table, columns)
        batch.begin()
        try:
            yield batch
        except BaseException:
            batch.rollback()
            raise
        batch.commit()

    def query_distinct(self, table: str, column: str) -> List[Any]:
        """Distinct values of one column, in no particular order."""
        _check_identifiers(table, column)
        try:
            rows = self.execute(f"SELECT DISTINCT {column} FROM {table}").fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to read {table}.{column}: {e}") from e
        return [row[0] for row in rows]

    def update_by_key(
        self,
        table: str,
        key_column: str,
        key_value: Any,
        column: str,
        value: Any,
    ) -> int:
        """Set one column on the rows matching a key; returns the affected row count."""
        _check_identifiers(table, key_column, column)
        try:
            cursor = self.execute(
                f"UPDATE {table} SET {column} = ? WHERE {key_column} = ?",
                (value, key_value),
            )
        except sqlite3.Error as e:
            raise StorageError(f"Failed to update {table}.{column}: {e}") from e
        return cursor.rowcount

    def count(self, table: str) -> int:
        _check_identifiers(table, "ID")
        try:
            return self.execute(f"SELECT COUNT(ID) FROM {table}").fetchone()[0]
        except sqlite3.Error as e:
            raise StorageError(f"Failed to count {table}: {e}") from e


@contextmanager
def get_connection(path: Union[str, Path]) -> Generator[Database, None, None]:
    """Open the database file for the duration of the block."""
    database = Database(path)
    try:
        yield database
    finally:
        database.close()
