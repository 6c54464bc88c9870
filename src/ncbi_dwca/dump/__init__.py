"""Taxdump reading: tokenizer, record models, name rules and row handlers."""

from ncbi_dwca.dump.catalog import TypeCatalog
from ncbi_dwca.dump.classification import (
    AUTHORITY_AS_SYNONYM_RULES,
    DEFAULT_NAME_RULES,
    NAME_RULE_TABLES,
    NameEffect,
    NameRule,
    apply_name,
)
from ncbi_dwca.dump.errors import DumpFormatError
from ncbi_dwca.dump.ingest import DumpIngester, IngestStats
from ncbi_dwca.dump.models import Citation, TaxonRecord, TypeMaterial
from ncbi_dwca.dump.tokenizer import field, split_row

__all__ = [
    # Data models
    "Citation",
    "TaxonRecord",
    "TypeMaterial",
    # Name classification
    "AUTHORITY_AS_SYNONYM_RULES",
    "DEFAULT_NAME_RULES",
    "NAME_RULE_TABLES",
    "NameEffect",
    "NameRule",
    "apply_name",
    # Ingestion
    "DumpFormatError",
    "DumpIngester",
    "IngestStats",
    "TypeCatalog",
    "field",
    "split_row",
]
