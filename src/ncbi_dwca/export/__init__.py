"""Darwin Core text export and archive packaging."""

from ncbi_dwca.export.archive import zip_directory
from ncbi_dwca.export.writer import (
    DwcaExporter,
    ExportStats,
    format_row,
    synonym_key,
)

__all__ = [
    "DwcaExporter",
    "ExportStats",
    "format_row",
    "synonym_key",
    "zip_directory",
]
