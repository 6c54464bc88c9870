"""Stream taxdump archive members through their row handlers.

Members are processed one at a time, in archive order. Each member is read
line by line so memory use does not depend on file size.
"""

from __future__ import annotations

import io
import logging
import zipfile
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, TYPE_CHECKING

from ncbi_dwca.dump.catalog import TypeCatalog
from ncbi_dwca.dump.classification import DEFAULT_NAME_RULES, NameRule
from ncbi_dwca.dump.handlers import (
    CitationHandler,
    HostHandler,
    NameHandler,
    NodeHandler,
    RowHandler,
    TypeMaterialHandler,
)
from ncbi_dwca.dump.tokenizer import split_row

if TYPE_CHECKING:
    from ncbi_dwca.store.record_store import RecordStore

logger = logging.getLogger(__name__)

TAXA = "nodes.dmp"
NAMES = "names.dmp"
CITATIONS = "citations.dmp"
TYPES = "typematerial.dmp"
HOST = "host.dmp"

PROGRESS_INTERVAL = 25_000


@dataclass
class IngestStats:
    """Row counts of one ingest run.

    Attributes:
        rows: Member file name -> rows handled
        skipped_members: Archive members without a handler
        skipped_citation_tokens: Malformed taxon ids dropped from citations.dmp
    """

    rows: dict[str, int] = field(default_factory=dict)
    skipped_members: list[str] = field(default_factory=list)
    skipped_citation_tokens: int = 0

    @property
    def total_rows(self) -> int:
        return sum(self.rows.values())


class DumpIngester:
    """Dispatch taxdump members to their handlers.

    Example:
        >>> import io, tempfile
        >>> from ncbi_dwca.store.record_store import RecordStore
        >>> with tempfile.TemporaryDirectory() as tmpdir:
        ...     with RecordStore(Path(tmpdir) / "records.sqlite") as store:
        ...         ingester = DumpIngester(store)
        ...         ingester.ingest_stream("names.dmp", io.BytesIO(b"9606|human||common name|\\n"))
        ...         print(store.get_or_create(9606).vernacular)
        1
        ['human']
    """

    def __init__(
        self,
        store: RecordStore,
        catalog: TypeCatalog | None = None,
        rules: Mapping[str, NameRule] = DEFAULT_NAME_RULES,
    ) -> None:
        self.store = store
        self.catalog = catalog if catalog is not None else TypeCatalog()
        self.citations = CitationHandler(store)
        self.handlers: dict[str, RowHandler] = {
            TAXA: NodeHandler(store),
            NAMES: NameHandler(store, self.catalog, rules),
            TYPES: TypeMaterialHandler(store),
            CITATIONS: self.citations,
            HOST: HostHandler(store),
        }
        self.stats = IngestStats()

    def handler_for(self, member_name: str) -> RowHandler | None:
        """Return the handler for an archive member, matched case-insensitively."""
        return self.handlers.get(member_name.lower())

    def ingest_lines(self, member_name: str, lines: Iterable[str]) -> int:
        """Feed text lines of one member to its handler.

        Args:
            member_name: Dump file name, e.g. ``names.dmp``
            lines: Text lines of that file

        Returns:
            Number of non-empty rows handled, or 0 for unknown members
        """
        handler = self.handler_for(member_name)
        if handler is None:
            logger.debug(f"No handler for archive member {member_name}, skipping")
            self.stats.skipped_members.append(member_name)
            return 0

        logger.info(f"*** {member_name} ***")
        counter = 0
        for line_number, line in enumerate(lines, start=1):
            row = split_row(line)
            if not row:
                continue
            handler(row, line_number)
            counter += 1
            if counter % PROGRESS_INTERVAL == 0:
                logger.info(f"Processed {counter:,} {member_name} records")

        logger.info(f"Finished {member_name}: {counter:,} records")
        self.stats.rows[member_name] = self.stats.rows.get(member_name, 0) + counter
        self.stats.skipped_citation_tokens = self.citations.skipped_tokens
        return counter

    def ingest_stream(self, member_name: str, stream: IO[bytes]) -> int:
        """Decode a UTF-8 byte stream and ingest its lines.

        Undecodable bytes become U+FFFD instead of aborting the member.
        """
        with io.TextIOWrapper(stream, encoding="utf-8", errors="replace") as text:
            return self.ingest_lines(member_name, text)

    def ingest_archive(self, archive_path: Path | str) -> IngestStats:
        """Ingest every member of a taxdump zip archive.

        Members without a handler are recorded in ``skipped_members`` unread.

        Args:
            archive_path: Path to new_taxdump.zip

        Returns:
            Row counts per member
        """
        archive_path = Path(archive_path)
        logger.info(f"Reading taxdump archive {archive_path}")
        with zipfile.ZipFile(archive_path) as archive:
            for info in archive.infolist():
                if info.is_dir():
                    continue
                with archive.open(info) as stream:
                    self.ingest_stream(info.filename, stream)
        return self.stats
