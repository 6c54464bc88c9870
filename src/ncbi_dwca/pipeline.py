"""Build a Darwin Core archive from the NCBI taxdump.

Steps:
1. Recreate the output directory
2. Download new_taxdump.zip (unless a local archive is given)
3. Stream every dump file into the record store
4. Export the Darwin Core tables and meta.xml
5. Zip the output directory into ncbi.zip

A failure in any step propagates and no archive is written. The name class
catalog is logged whether the run succeeds or not.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from ncbi_dwca.clients.taxdump import TaxdumpClient
from ncbi_dwca.dump.catalog import TypeCatalog
from ncbi_dwca.dump.classification import DEFAULT_NAME_RULES, NameRule
from ncbi_dwca.dump.ingest import DumpIngester, IngestStats
from ncbi_dwca.export.archive import zip_directory
from ncbi_dwca.export.writer import DwcaExporter, ExportStats
from ncbi_dwca.store.record_store import DEFAULT_CACHE_SIZE, DEFAULT_STORE_FILENAME, RecordStore

logger = logging.getLogger(__name__)

ARCHIVE_FILENAME = "ncbi.zip"
DUMP_FILENAME = "new_taxdump.zip"


@dataclass
class BuildResult:
    """Outcome of a successful build."""

    archive: Path
    records: int
    ingest: IngestStats
    export: ExportStats
    catalog: TypeCatalog


def prepare_output_dir(output_dir: Path) -> None:
    """Start from an empty output directory."""
    if output_dir.exists():
        logger.warning(f"Removing existing output directory {output_dir}")
        shutil.rmtree(output_dir)
    output_dir.mkdir(parents=True)


def build_archive(
    output_dir: Path | str,
    source: Path | str | None = None,
    client: TaxdumpClient | None = None,
    rules: Mapping[str, NameRule] = DEFAULT_NAME_RULES,
    cache_size: int = DEFAULT_CACHE_SIZE,
) -> BuildResult:
    """Convert the taxdump into ``<output_dir>/ncbi.zip``.

    Args:
        output_dir: Directory for the export; emptied first
        source: Local taxdump zip; downloaded when not given
        client: Download client (a default one is created when needed)
        rules: Name class rule table
        cache_size: Records kept in memory by the store

    Returns:
        Paths and counts of the build
    """
    output_dir = Path(output_dir)
    prepare_output_dir(output_dir)

    catalog = TypeCatalog()
    store = RecordStore(output_dir / DEFAULT_STORE_FILENAME, cache_size=cache_size)
    try:
        downloaded = None
        if source is None:
            http = client or TaxdumpClient()
            try:
                downloaded = http.download(output_dir / DUMP_FILENAME)
            finally:
                if client is None:
                    http.close()
            source = downloaded

        ingester = DumpIngester(store, catalog, rules)
        ingest_stats = ingester.ingest_archive(source)
        if ingest_stats.skipped_citation_tokens:
            logger.warning(f"Skipped {ingest_stats.skipped_citation_tokens:,} malformed citation taxon ids")
        if downloaded is not None:
            downloaded.unlink()

        export_stats = DwcaExporter(output_dir).export(store)
        records = len(store)
        store.close()

        archive = zip_directory(
            output_dir,
            output_dir / ARCHIVE_FILENAME,
            exclude=(DEFAULT_STORE_FILENAME, DUMP_FILENAME),
        )
        logger.info("done.")
    finally:
        catalog.report(logger)
        store.close()

    return BuildResult(
        archive=archive,
        records=records,
        ingest=ingest_stats,
        export=export_stats,
        catalog=catalog,
    )
