"""Row handlers for the taxdump files.

Each handler consumes the tokenized rows of one dump file and merges them
into the record store. Column positions follow the new_taxdump layout:

- nodes.dmp: tax_id | parent tax_id | rank | ... | hidden (10) | ... | comments (12)
- names.dmp: tax_id | name_txt | unique name | name class
- typematerial.dmp: tax_id | tax_name | type | identifier
- citations.dmp: cit_id | cit_key | medline_id | pubmed_id | url | text | taxid_list
- host.dmp: tax_id | potential_hosts
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import TYPE_CHECKING

from ncbi_dwca.dump.classification import DEFAULT_NAME_RULES, NameEffect, NameRule, apply_name
from ncbi_dwca.dump.errors import DumpFormatError
from ncbi_dwca.dump.models import Citation, TypeMaterial
from ncbi_dwca.dump.tokenizer import field, parse_int, parse_taxon_id, split_ids

if TYPE_CHECKING:
    from ncbi_dwca.dump.catalog import TypeCatalog
    from ncbi_dwca.store.record_store import RecordStore

logger = logging.getLogger(__name__)

# Backslash escapes used in citations.dmp text: \\ and \"
CITATION_ESCAPE_PATTERN = re.compile(r'\\([\\"])')


def unescape_citation(text: str | None) -> str | None:
    r"""Undo the backslash escaping of citation text.

    Examples:
        >>> unescape_citation('Smith J. \\"On newts\\"')
        'Smith J. "On newts"'
        >>> unescape_citation("a\\\\b")
        'a\\b'
    """
    if text is None:
        return None
    return CITATION_ESCAPE_PATTERN.sub(r"\1", text)


class RowHandler:
    """Base class for per-file row handlers.

    Subclasses set ``member`` and implement ``handle``. ``rows`` counts the
    rows passed to the handler.
    """

    member = ""

    def __init__(self, store: RecordStore) -> None:
        self.store = store
        self.rows = 0

    def __call__(self, row: list[str], line_number: int) -> None:
        self.rows += 1
        self.handle(row, line_number)

    def handle(self, row: list[str], line_number: int) -> None:
        raise NotImplementedError

    def _int(self, row: list[str], index: int, what: str, line_number: int) -> int:
        try:
            return parse_int(field(row, index), what)
        except ValueError as e:
            raise DumpFormatError(self.member, line_number, str(e)) from e

    def _key(self, row: list[str], index: int, what: str, line_number: int) -> int:
        try:
            return parse_taxon_id(field(row, index), what)
        except ValueError as e:
            raise DumpFormatError(self.member, line_number, str(e)) from e


class NodeHandler(RowHandler):
    """nodes.dmp: parent, rank, hidden flag and comments of each taxon."""

    member = "nodes.dmp"

    def handle(self, row: list[str], line_number: int) -> None:
        key = self._key(row, 0, "taxon id", line_number)
        parent_index = 1 if field(row, 1) else 0
        parent_key = self._key(row, parent_index, "parent taxon id", line_number)
        hidden = self._int(row, 10, "hidden flag", line_number) == 1

        record = self.store.get_or_create(key)
        record.parent_key = parent_key
        record.rank = field(row, 2)
        record.hidden = hidden
        record.comments = field(row, 12)


class NameHandler(RowHandler):
    """names.dmp: primary name, synonyms and vernacular names.

    Every row is also recorded in the run's type catalog, including rows
    whose class has no merge effect. ``ignored`` counts rows that left their
    record unchanged.
    """

    member = "names.dmp"

    def __init__(
        self,
        store: RecordStore,
        catalog: TypeCatalog,
        rules: Mapping[str, NameRule] = DEFAULT_NAME_RULES,
    ) -> None:
        super().__init__(store)
        self.catalog = catalog
        self.rules = rules
        self.ignored = 0

    def handle(self, row: list[str], line_number: int) -> None:
        key = self._key(row, 0, "taxon id", line_number)
        name_class = field(row, 3)
        self.catalog.record(name_class, row)

        record = self.store.get_or_create(key)
        if apply_name(record, name_class, field(row, 1), self.rules) is NameEffect.IGNORE:
            self.ignored += 1


class TypeMaterialHandler(RowHandler):
    """typematerial.dmp: type specimen citations, duplicates kept."""

    member = "typematerial.dmp"

    def handle(self, row: list[str], line_number: int) -> None:
        key = self._key(row, 0, "taxon id", line_number)
        record = self.store.get_or_create(key)
        record.type_material.append(TypeMaterial(citation=field(row, 1), status=field(row, 2)))


class CitationHandler(RowHandler):
    """citations.dmp: references attached to every listed taxon.

    Taxon ids that are not integers in the 32-bit range are logged and
    skipped; the other ids on the row still get the citation.
    """

    member = "citations.dmp"

    def __init__(self, store: RecordStore) -> None:
        super().__init__(store)
        self.skipped_tokens = 0

    def handle(self, row: list[str], line_number: int) -> None:
        medline_id = field(row, 2)
        pubmed_id = field(row, 3)
        url = field(row, 4)
        text = unescape_citation(field(row, 5))

        for token in split_ids(field(row, 6)):
            try:
                key = parse_taxon_id(token)
            except ValueError:
                logger.warning(f"Bad citation taxonID value {token!r} at {self.member}:{line_number}")
                self.skipped_tokens += 1
                continue

            record = self.store.get_or_create(key)
            record.citations.append(Citation(citation=text, medline_id=medline_id, pubmed_id=pubmed_id, url=url))


class HostHandler(RowHandler):
    """host.dmp: accepted but not merged into the records."""

    member = "host.dmp"

    def handle(self, row: list[str], line_number: int) -> None:
        pass
