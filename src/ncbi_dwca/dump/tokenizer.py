"""Line tokenizer for NCBI taxdump ``.dmp`` files.

Taxdump rows are fields separated by ``|`` with tabs around the separator,
and every line ends in a trailing ``\\t|``::

    9606\t|\tHomo sapiens\t|\t\t|\tscientific name\t|

See: https://ftp.ncbi.nlm.nih.gov/pub/taxonomy/new_taxdump/taxdump_readme.txt
"""

from __future__ import annotations

import re

# Separator with arbitrary whitespace on either side
SPLITTER = re.compile(r"\s*\|\s*")

# Separator for the taxon id list in citations.dmp
SPACE = re.compile(r"\s+")

# NCBI taxon ids are signed 32-bit integers
MAX_TAXON_ID = 2**31 - 1


def split_row(line: str) -> list[str]:
    """Split one dump line into trimmed fields.

    Trailing empty fields are dropped, so the closing ``|`` of a taxdump line
    does not produce an extra column.

    Args:
        line: Raw line, with or without its line terminator

    Returns:
        List of field values; empty for blank lines

    Examples:
        >>> split_row("9606\\t|\\thuman\\t|\\t\\t|\\tcommon name\\t|\\n")
        ['9606', 'human', '', 'common name']
        >>> split_row("   ")
        []
    """
    line = line.rstrip("\r\n")
    if not line.strip():
        return []

    fields = [value.strip() for value in SPLITTER.split(line)]
    while fields and not fields[-1]:
        fields.pop()
    return fields


def field(row: list[str], index: int) -> str | None:
    """Return the field at ``index`` or None when the row is shorter.

    Examples:
        >>> field(["1", "root"], 1)
        'root'
        >>> field(["1", "root"], 12) is None
        True
    """
    return row[index] if len(row) > index else None


def split_ids(value: str | None) -> list[str]:
    """Split a whitespace-separated id list, ignoring blank tokens."""
    if not value:
        return []
    return [token for token in SPACE.split(value) if token]


def parse_int(value: str | None, what: str) -> int:
    """Parse an integer field.

    Args:
        value: Field value (may be None when the column is missing)
        what: Column description used in the error message

    Returns:
        Parsed integer

    Raises:
        ValueError: If the value is missing or not an integer
    """
    if value is None:
        raise ValueError(f"missing {what}")
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"invalid {what}: {value!r}") from None


def parse_taxon_id(value: str | None, what: str = "taxon id") -> int:
    """Parse a taxon id, which must fit a signed 32-bit integer.

    Examples:
        >>> parse_taxon_id("9606")
        9606
        >>> parse_taxon_id("99999999999")
        Traceback (most recent call last):
        ...
        ValueError: taxon id out of range: '99999999999'

    Raises:
        ValueError: If the value is missing, not an integer or out of range
    """
    key = parse_int(value, what)
    if not 0 <= key <= MAX_TAXON_ID:
        raise ValueError(f"{what} out of range: {value!r}")
    return key
