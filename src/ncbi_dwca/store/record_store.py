"""Disk-backed store of merged taxon records.

The taxdump references a few million taxon ids, each touched by several
files. Records live in an SQLite table keyed by taxon id; a bounded
write-back cache keeps the working set in memory so every row does not
round-trip through the database.

Key features:
- ``get_or_create`` is the only way to obtain a mutable record
- records evicted from the cache are written back in batches
- ``values_by_key`` enumerates in ascending key order for reproducible export
"""

from __future__ import annotations

import logging
import sqlite3
from collections import OrderedDict
from collections.abc import Iterator
from pathlib import Path
from types import TracebackType

from ncbi_dwca.dump.models import TaxonRecord

logger = logging.getLogger(__name__)

DEFAULT_STORE_FILENAME = "records.sqlite"
DEFAULT_CACHE_SIZE = 250_000
FETCH_BATCH_SIZE = 10_000


class RecordStore:
    """Taxon id -> TaxonRecord, persisted in SQLite.

    Opening a store always starts from an empty table: runs are not
    resumable.

    Example:
        >>> import tempfile
        >>> with tempfile.TemporaryDirectory() as tmpdir:
        ...     with RecordStore(Path(tmpdir) / "records.sqlite") as store:
        ...         store.get_or_create(9606).rank = "species"
        ...         print(store.get_or_create(9606).rank)
        species
    """

    def __init__(self, path: Path | str, cache_size: int = DEFAULT_CACHE_SIZE) -> None:
        """Open (and reset) the store.

        Args:
            path: SQLite database file
            cache_size: Maximum number of records held in memory
        """
        if cache_size < 1:
            raise ValueError(f"cache_size must be positive, got {cache_size}")

        self.path = Path(path)
        self.cache_size = cache_size
        # Records written back per eviction
        self._evict_batch = max(1, cache_size // 10)
        self._cache: OrderedDict[int, TaxonRecord] = OrderedDict()
        self._count = 0

        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._conn: sqlite3.Connection | None = sqlite3.connect(str(self.path))
        self._conn.execute("PRAGMA journal_mode = OFF")
        self._conn.execute("PRAGMA synchronous = OFF")
        self._conn.execute("DROP TABLE IF EXISTS records")
        self._conn.execute("CREATE TABLE records (key INTEGER PRIMARY KEY, data TEXT NOT NULL)")
        self._conn.commit()
        logger.debug(f"Opened record store at {self.path}")

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise RuntimeError(f"Record store {self.path} is closed")
        return self._conn

    def _load(self, key: int) -> TaxonRecord | None:
        row = self._connection().execute("SELECT data FROM records WHERE key = ?", (key,)).fetchone()
        if row is None:
            return None
        return TaxonRecord.model_validate_json(row[0])

    def _write(self, records: list[TaxonRecord]) -> None:
        if not records:
            return
        conn = self._connection()
        conn.executemany(
            "INSERT OR REPLACE INTO records (key, data) VALUES (?, ?)",
            [(record.key, record.model_dump_json()) for record in records],
        )
        conn.commit()

    def _remember(self, record: TaxonRecord) -> None:
        self._cache[record.key] = record
        if len(self._cache) > self.cache_size:
            count = min(self._evict_batch, len(self._cache))
            self._write([self._cache.popitem(last=False)[1] for _ in range(count)])

    def get_or_create(self, key: int) -> TaxonRecord:
        """Return the record for ``key``, creating an empty one if unseen.

        The returned record is a live handle: changes made to it are kept.

        Args:
            key: NCBI taxon id

        Returns:
            Mutable record for ``key``
        """
        record = self._cache.get(key)
        if record is not None:
            self._cache.move_to_end(key)
            return record

        record = self._load(key)
        if record is None:
            record = TaxonRecord(key=key)
            self._count += 1
        self._remember(record)
        return record

    def get(self, key: int) -> TaxonRecord | None:
        """Return the record for ``key`` without creating it.

        Records that are not cached are returned as detached copies.
        """
        record = self._cache.get(key)
        if record is not None:
            return record
        return self._load(key)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, int):
            return False
        if key in self._cache:
            return True
        row = self._connection().execute("SELECT 1 FROM records WHERE key = ?", (key,)).fetchone()
        return row is not None

    def __len__(self) -> int:
        return self._count

    def flush(self) -> None:
        """Write every cached record back to the database."""
        self._write(list(self._cache.values()))

    def _iter_query(self, sql: str) -> Iterator[TaxonRecord]:
        self.flush()
        cursor = self._connection().execute(sql)
        while True:
            rows = cursor.fetchmany(FETCH_BATCH_SIZE)
            if not rows:
                break
            for (data,) in rows:
                yield TaxonRecord.model_validate_json(data)

    def values(self) -> Iterator[TaxonRecord]:
        """Yield all records in storage order (no ordering guarantee)."""
        return self._iter_query("SELECT data FROM records")

    def values_by_key(self) -> Iterator[TaxonRecord]:
        """Yield all records in ascending key order."""
        return self._iter_query("SELECT data FROM records ORDER BY key")

    def close(self) -> None:
        """Flush and close the database connection."""
        if self._conn is None:
            return
        self.flush()
        self._cache.clear()
        self._conn.close()
        self._conn = None
        logger.debug(f"Closed record store at {self.path}")

    def __enter__(self) -> RecordStore:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
