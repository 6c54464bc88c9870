"""Record store module for ncbi-dwca.

Provides an SQLite backed taxon record store with get-or-create upserts.
"""

from ncbi_dwca.store.record_store import (
    DEFAULT_CACHE_SIZE,
    DEFAULT_STORE_FILENAME,
    RecordStore,
)

__all__ = [
    "DEFAULT_CACHE_SIZE",
    "DEFAULT_STORE_FILENAME",
    "RecordStore",
]
