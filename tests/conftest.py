"""Pytest configuration for ncbi-dwca tests.

Provides a fresh record store per test and a helper that writes small
taxdump archives in the new_taxdump layout.
"""

import zipfile
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from ncbi_dwca.store.record_store import RecordStore

# 9606 node row with the comment in column 12
NODE_9606 = "9606\t|\t9605\t|\tspecies\t|\tHS\t|\t5\t|\t1\t|\t1\t|\t1\t|\t2\t|\t1\t|\t0\t|\t1\t|\tHomo sapiens comment\t|\n"
NODE_9605 = "9605\t|\t207598\t|\tgenus\t|\t\t|\t5\t|\t1\t|\t1\t|\t1\t|\t2\t|\t1\t|\t0\t|\t1\t|\t\t|\n"
NODE_ROOT = "1\t|\t\t|\tno rank\t|\t\t|\t8\t|\t0\t|\t1\t|\t0\t|\t0\t|\t0\t|\t0\t|\t0\t|\t\t|\n"

NAMES = (
    "9606\t|\tHomo sapiens\t|\t\t|\tscientific name\t|\n"
    "9606\t|\tHomo sapiens Linnaeus, 1758\t|\t\t|\tauthority\t|\n"
    "9606\t|\thuman\t|\t\t|\tgenbank common name\t|\n"
    "9606\t|\tHomo sapiens neanderthalensis\t|\t\t|\tsynonym\t|\n"
    "9605\t|\tHomo\t|\t\t|\tscientific name\t|\n"
    "1\t|\troot\t|\t\t|\tscientific name\t|\n"
    "1\t|\tall\t|\t\t|\tsynonym\t|\n"
)

TYPE_MATERIAL = "9606\t|\tHomo sapiens\t|\tneotype\t|\tNHMUK 1\t|\n"

CITATIONS = (
    '1\t|\tSmith 1990\t|\t0\t|\t8118397\t|\t\t|\tSmith J. \\"Primates\\" 1990\t|\t9606 9605 \t|\n'
    "2\t|\tBroken\t|\t0\t|\t0\t|\thttps://example.org/ref\t|\tBroken ref\t|\tabc 9606\t|\n"
)

HOST = "9606\t|\tvertebrates\t|\n"

DEFAULT_MEMBERS = {
    "nodes.dmp": NODE_ROOT + NODE_9605 + NODE_9606,
    "names.dmp": NAMES,
    "typematerial.dmp": TYPE_MATERIAL,
    "citations.dmp": CITATIONS,
    "host.dmp": HOST,
}


@pytest.fixture
def store(tmp_path: Path) -> Generator[RecordStore, None, None]:
    """Empty record store in a temporary directory."""
    with RecordStore(tmp_path / "records.sqlite") as record_store:
        yield record_store


@pytest.fixture
def make_taxdump(tmp_path: Path) -> Callable[..., Path]:
    """Return a factory writing a taxdump zip from member name -> text."""

    def _make(members: dict[str, str] | None = None, name: str = "new_taxdump.zip") -> Path:
        path = tmp_path / name
        with zipfile.ZipFile(path, "w") as archive:
            for member, text in (members if members is not None else DEFAULT_MEMBERS).items():
                archive.writestr(member, text.encode("utf-8"))
        return path

    return _make


@pytest.fixture
def taxdump_members() -> dict[str, str]:
    """Member name -> text of the default sample taxdump."""
    return dict(DEFAULT_MEMBERS)
