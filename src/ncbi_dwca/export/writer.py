"""
Darwin Core text exporter for merged taxon records.

Writes four headerless, tab-separated tables described by the bundled
``meta.xml``:

- taxa.txt: taxonID, parentNameUsageID, acceptedNameUsageID, taxonRank,
  scientificName, taxonRemarks
- vernacular.txt: taxonID, vernacularName
- typematerial.txt: taxonID, bibliographicCitation, typeStatus
- citations.txt: taxonID, identifier, bibliographicCitation

Synonyms become extra taxa.txt rows with the synthetic id ``<key>-s<n>``
pointing to their accepted taxon.
"""

from __future__ import annotations

import logging
import shutil
from contextlib import ExitStack
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import IO, TYPE_CHECKING

if TYPE_CHECKING:
    from ncbi_dwca.dump.models import TaxonRecord
    from ncbi_dwca.store.record_store import RecordStore

logger = logging.getLogger(__name__)

TAXA_FILE = "taxa.txt"
VERNACULAR_FILE = "vernacular.txt"
TYPE_MATERIAL_FILE = "typematerial.txt"
CITATIONS_FILE = "citations.txt"
META_FILE = "meta.xml"

TABLE_COLUMNS: dict[str, int] = {
    TAXA_FILE: 6,
    VERNACULAR_FILE: 2,
    TYPE_MATERIAL_FILE: 3,
    CITATIONS_FILE: 3,
}

# Characters that would break the row/column structure
_LAYOUT_CHARS = str.maketrans({"\t": " ", "\r": " ", "\n": " "})


def format_value(value: object) -> str:
    """
    Render one field: None becomes an empty string.

    Examples
    --------
    >>> format_value(None)
    ''
    >>> format_value(9606)
    '9606'
    >>> format_value("line\\tbreak")
    'line break'
    """
    if value is None:
        return ""
    return str(value).translate(_LAYOUT_CHARS)


def format_row(*values: object) -> str:
    """
    Render a tab-separated, newline-terminated row.

    Examples
    --------
    >>> format_row(9606, None, "Homo sapiens")
    '9606\\t\\tHomo sapiens\\n'
    """
    return "\t".join(format_value(value) for value in values) + "\n"


def synonym_key(key: int, position: int) -> str:
    """
    Synthetic taxonID of the ``position``-th (1-based) synonym of ``key``.

    Examples
    --------
    >>> synonym_key(9606, 2)
    '9606-s2'
    """
    return f"{key}-s{position}"


@dataclass
class ExportStats:
    """Row counts written per table."""

    taxa: int = 0
    synonyms: int = 0
    vernacular: int = 0
    type_material: int = 0
    citations: int = 0


class DwcaExporter:
    """Write merged records as Darwin Core text files.

    Records are always written in ascending key order so identical input
    produces byte-identical files.
    """

    def __init__(self, output_dir: Path | str) -> None:
        self.output_dir = Path(output_dir)

    def export(self, store: RecordStore) -> ExportStats:
        """Write all tables and the metadata descriptor.

        Args:
            store: Fully populated record store

        Returns:
            Number of rows written per table
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"Writing DwC text files to {self.output_dir}")
        stats = ExportStats()

        with ExitStack() as stack:
            files = {
                name: stack.enter_context((self.output_dir / name).open("w", encoding="utf-8", newline=""))
                for name in TABLE_COLUMNS
            }
            for record in store.values_by_key():
                self.write_record(record, files, stats)

        self.copy_metadata()
        logger.info(
            f"Exported {stats.taxa:,} taxa, {stats.synonyms:,} synonyms, "
            f"{stats.vernacular:,} vernacular names, {stats.type_material:,} type material "
            f"and {stats.citations:,} citations"
        )
        return stats

    def write_record(self, record: TaxonRecord, files: dict[str, IO[str]], stats: ExportStats) -> None:
        """Write every row derived from one record."""
        files[TAXA_FILE].write(
            format_row(record.key, record.parent_key, None, record.rank, record.name, record.comments)
        )
        stats.taxa += 1

        for vernacular_name in record.vernacular:
            files[VERNACULAR_FILE].write(format_row(record.key, vernacular_name))
            stats.vernacular += 1

        for type_material in record.type_material:
            files[TYPE_MATERIAL_FILE].write(format_row(record.key, type_material.citation, type_material.status))
            stats.type_material += 1

        for citation in record.citations:
            files[CITATIONS_FILE].write(format_row(record.key, citation.identifier, citation.citation))
            stats.citations += 1

        for position, synonym in enumerate(record.synonyms, start=1):
            files[TAXA_FILE].write(format_row(synonym_key(record.key, position), None, record.key, None, synonym, None))
            stats.synonyms += 1

    def copy_metadata(self) -> Path:
        """Copy the bundled meta.xml descriptor into the output directory."""
        target = self.output_dir / META_FILE
        source = resources.files("ncbi_dwca.export").joinpath(META_FILE)
        with source.open("rb") as src, target.open("wb") as dst:
            shutil.copyfileobj(src, dst)
        return target
