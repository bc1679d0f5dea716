"""SQLite symbol index store."""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Sequence

from rustdex.errors import IndexNotBuiltError, NotFoundError
from rustdex.models import EntryKind, IndexEntry, Location

LOGGER = logging.getLogger(__name__)

TABLE_NAME = "searchIndex"


class SQLiteIndexStore:
    """Persistence layer for the docset symbol index.

    The ``searchIndex`` table is owned by :meth:`rebuild`, which drops and
    recreates it on every run. Until the first rebuild the table does not exist
    and the store reports itself as not indexed.
    """

    def __init__(self, db_path: Path) -> None:
        self.db_path = Path(db_path)
        self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA journal_mode=WAL;")
        self._conn.execute("PRAGMA synchronous=NORMAL;")

    @property
    def connection(self) -> sqlite3.Connection:
        return self._conn

    def close(self) -> None:
        self._conn.close()

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        try:
            yield self._conn
            self._conn.commit()
        except Exception:
            self._conn.rollback()
            raise

    def is_indexed(self) -> bool:
        row = self._conn.execute(
            "SELECT name FROM sqlite_master WHERE type = 'table' AND name = ?",
            (TABLE_NAME,),
        ).fetchone()
        return row is not None

    def rebuild(self, entries: Iterable[IndexEntry]) -> int:
        """Replace the whole index with ``entries`` and return the stored row count.

        Entries repeating an existing ``(name, type, path)`` are dropped. A failed
        rebuild leaves the previous index in place.
        """
        rows = [(entry.name, str(entry.kind), str(entry.location)) for entry in entries]

        with self.transaction() as conn:
            # sqlite3 does not open a transaction for DDL on its own.
            if not conn.in_transaction:
                conn.execute("BEGIN")
            conn.execute(f"DROP TABLE IF EXISTS {TABLE_NAME}")
            conn.execute(
                f"""
                CREATE TABLE {TABLE_NAME} (
                    id INTEGER PRIMARY KEY,
                    name TEXT,
                    type TEXT,
                    path TEXT
                )
                """
            )
            conn.execute(f"CREATE UNIQUE INDEX anchor ON {TABLE_NAME} (name, type, path)")
            conn.executemany(
                f"INSERT OR IGNORE INTO {TABLE_NAME} (name, type, path) VALUES (?, ?, ?)",
                rows,
            )

        stored = self.count()
        if stored < len(rows):
            LOGGER.warning("Dropped %d duplicate index entries", len(rows) - stored)
        return stored

    def count(self) -> int:
        if not self.is_indexed():
            return 0
        return self._conn.execute(f"SELECT COUNT(*) FROM {TABLE_NAME}").fetchone()[0]

    def get_stats(self) -> Dict[str, int]:
        """Number of stored entries per kind."""
        if not self.is_indexed():
            return {}
        rows = self._conn.execute(
            f"SELECT type, COUNT(*) AS total FROM {TABLE_NAME} GROUP BY type ORDER BY type"
        ).fetchall()
        return {row["type"]: row["total"] for row in rows}

    def lookup(self, location: Location | str) -> sqlite3.Row:
        """Return the ``name`` and ``type`` stored for an exact location."""
        if not self.is_indexed():
            raise IndexNotBuiltError()
        row = self._conn.execute(
            f"SELECT name, type FROM {TABLE_NAME} WHERE path = ? ORDER BY id LIMIT 1",
            (str(location),),
        ).fetchone()
        if row is None:
            raise NotFoundError(f"no indexed item at {location}")
        return row

    def list_entries(self) -> List[IndexEntry]:
        if not self.is_indexed():
            return []
        rows = self._conn.execute(f"SELECT name, type, path FROM {TABLE_NAME} ORDER BY id").fetchall()
        return [_row_to_entry(row) for row in rows]

    def search(
        self,
        fuzzy_query: str,
        exact_query: str,
        kinds: Sequence[EntryKind],
        *,
        limit: int | None = None,
    ) -> List[IndexEntry]:
        """Run a ranked ``LIKE`` query over names and paths.

        Rows are ordered by match tier, then by name and path length.
        """
        if not self.is_indexed() or not kinds:
            return []

        params: Dict[str, object] = {
            "fuzzy_query": fuzzy_query,
            "exact_query": exact_query,
            "limit": -1 if limit is None else limit,
        }
        placeholders = []
        for position, kind in enumerate(kinds):
            params[f"kind{position}"] = str(kind)
            placeholders.append(f":kind{position}")
        kind_list = ", ".join(placeholders)

        rows = self._conn.execute(
            f"""
            SELECT name, type, path
            FROM {TABLE_NAME}
            WHERE (name LIKE :fuzzy_query OR path LIKE :fuzzy_query)
                AND type IN ({kind_list})
            ORDER BY
                CASE
                    WHEN name = :exact_query THEN 0
                    WHEN path = :exact_query THEN 1
                    WHEN name LIKE '%' || :exact_query THEN 2
                    WHEN name LIKE :exact_query || '%' THEN 3
                    WHEN path LIKE '%' || :exact_query THEN 4
                    WHEN path LIKE :exact_query || '%' THEN 5
                    ELSE 6
                END,
                length(name),
                length(path),
                id
            LIMIT :limit
            """,
            params,
        ).fetchall()
        return [_row_to_entry(row) for row in rows]


def _row_to_entry(row: sqlite3.Row) -> IndexEntry:
    return IndexEntry(
        name=row["name"],
        kind=EntryKind(row["type"]),
        location=Location.parse(row["path"]),
    )
