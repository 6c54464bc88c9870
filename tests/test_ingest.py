"""Tests for archive ingestion and handler dispatch."""

import io
from collections.abc import Callable
from pathlib import Path

import pytest

from ncbi_dwca.dump.catalog import TypeCatalog
from ncbi_dwca.dump.classification import AUTHORITY_AS_SYNONYM_RULES
from ncbi_dwca.dump.errors import DumpFormatError
from ncbi_dwca.dump.ingest import PROGRESS_INTERVAL, DumpIngester
from ncbi_dwca.store.record_store import RecordStore


class TestIngestStream:
    """Tests for DumpIngester.ingest_stream and ingest_lines."""

    def test_blank_lines_skipped(self, store: RecordStore) -> None:
        """Test that blank lines are not passed to handlers."""
        ingester = DumpIngester(store)
        data = b"\n9606|human||common name|\n   \n9606|man||common name|\n"
        assert ingester.ingest_stream("names.dmp", io.BytesIO(data)) == 2
        assert store.get_or_create(9606).vernacular == ["human", "man"]

    def test_invalid_utf8_replaced(self, store: RecordStore) -> None:
        """Test that an undecodable byte does not stop the member."""
        ingester = DumpIngester(store)
        data = b"9606|Caf\xe9||common name|\n9605|Homo||scientific name|\n"
        assert ingester.ingest_stream("names.dmp", io.BytesIO(data)) == 2
        assert store.get_or_create(9606).vernacular == ["Caf\ufffd"]
        assert store.get_or_create(9605).name == "Homo"

    def test_member_names_case_insensitive(self, store: RecordStore) -> None:
        """Test exact, case-insensitive member matching."""
        ingester = DumpIngester(store)
        assert ingester.handler_for("NODES.DMP") is ingester.handlers["nodes.dmp"]
        assert ingester.handler_for("Names.Dmp") is ingester.handlers["names.dmp"]
        assert ingester.handler_for("nodes.dmp.bak") is None
        assert ingester.handler_for("delnodes.dmp") is None

    def test_unknown_member(self, store: RecordStore) -> None:
        """Test that unknown members are skipped."""
        ingester = DumpIngester(store)
        assert ingester.ingest_lines("readme.txt", ["hello|world|"]) == 0
        assert ingester.stats.skipped_members == ["readme.txt"]
        assert len(store) == 0

    def test_fatal_error_reports_line(self, store: RecordStore) -> None:
        """Test that a bad node row aborts with its line number."""
        ingester = DumpIngester(store)
        lines = ["1||no rank|a|b|c|d|e|f|g|0|h|", "", "oops|1|species|"]
        with pytest.raises(DumpFormatError, match="nodes.dmp:3: invalid taxon id"):
            ingester.ingest_lines("nodes.dmp", lines)

    def test_line_numbers_count_blank_lines(self, store: RecordStore) -> None:
        """Test that line numbers refer to the physical line."""
        ingester = DumpIngester(store)
        lines = ["", "", "abc|x||synonym|"]
        with pytest.raises(DumpFormatError, match="names.dmp:3"):
            ingester.ingest_lines("names.dmp", lines)

    def test_progress_logged(self, store: RecordStore, caplog: pytest.LogCaptureFixture) -> None:
        """Test periodic progress messages."""
        ingester = DumpIngester(store)
        lines = (f"{i}|x||acronym|" for i in range(PROGRESS_INTERVAL))
        with caplog.at_level("INFO", logger="ncbi_dwca.dump.ingest"):
            ingester.ingest_lines("names.dmp", lines)
        assert f"Processed {PROGRESS_INTERVAL:,} names.dmp records" in caplog.text

    def test_custom_rules(self, store: RecordStore) -> None:
        """Test that the rule table is passed to the name handler."""
        ingester = DumpIngester(store, rules=AUTHORITY_AS_SYNONYM_RULES)
        ingester.ingest_lines("names.dmp", ["5|Foo||scientific name|", "5|Foo Bar, 1900||authority|"])
        record = store.get_or_create(5)
        assert record.name == "Foo"
        assert record.synonyms == ["Foo Bar, 1900"]


class TestIngestArchive:
    """Tests for DumpIngester.ingest_archive."""

    def test_full_archive(self, store: RecordStore, make_taxdump: Callable[..., Path]) -> None:
        """Test merging all dump files into one record per key."""
        catalog = TypeCatalog()
        ingester = DumpIngester(store, catalog)
        stats = ingester.ingest_archive(make_taxdump())

        assert stats.rows == {
            "nodes.dmp": 3,
            "names.dmp": 7,
            "typematerial.dmp": 1,
            "citations.dmp": 2,
            "host.dmp": 1,
        }
        assert stats.total_rows == 14
        assert stats.skipped_citation_tokens == 1
        assert len(store) == 3

        human = store.get_or_create(9606)
        assert human.parent_key == 9605
        assert human.rank == "species"
        assert human.name == "Homo sapiens"
        assert human.comments == "Homo sapiens comment"
        assert human.vernacular == ["human"]
        assert human.synonyms == ["Homo sapiens neanderthalensis"]
        assert human.type_material[0].status == "neotype"
        assert [c.identifier for c in human.citations] == ["pubmed:8118397", "https://example.org/ref"]
        assert human.citations[0].citation == 'Smith J. "Primates" 1990'

        root = store.get_or_create(1)
        assert root.parent_key == 1
        assert root.synonyms == ["all"]

        assert "scientific name" in catalog
        assert "authority" in catalog

    def test_order_independent(
        self, tmp_path: Path, make_taxdump: Callable[..., Path], taxdump_members: dict[str, str]
    ) -> None:
        """Test that member order does not change the merged records."""
        forward = make_taxdump(taxdump_members, name="forward.zip")
        backward = make_taxdump(dict(reversed(list(taxdump_members.items()))), name="backward.zip")

        dumps = []
        for index, archive in enumerate((forward, backward)):
            with RecordStore(tmp_path / f"records{index}.sqlite") as store:
                DumpIngester(store).ingest_archive(archive)
                dumps.append([record.model_dump() for record in store.values_by_key()])
        assert dumps[0] == dumps[1]

    def test_unrelated_members_skipped(self, store: RecordStore, make_taxdump: Callable[..., Path]) -> None:
        """Test that other taxdump files are ignored."""
        archive = make_taxdump({"readme.txt": "hello\n", "merged.dmp": "12\t|\t34\t|\n", "NAMES.DMP": "3|x||synonym|\n"})
        stats = DumpIngester(store).ingest_archive(archive)
        assert stats.skipped_members == ["readme.txt", "merged.dmp"]
        assert stats.rows == {"NAMES.DMP": 1}
        assert store.get_or_create(3).synonyms == ["x"]

    def test_missing_archive(self, store: RecordStore, tmp_path: Path) -> None:
        """Test that a missing archive is a fatal IO error."""
        with pytest.raises(FileNotFoundError):
            DumpIngester(store).ingest_archive(tmp_path / "nope.zip")
