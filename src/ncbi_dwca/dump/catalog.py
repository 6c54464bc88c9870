"""Catalog of name classes seen during a run.

Diagnostics only: the catalog lives for one run, keeps one example row per
name class and is reported when the run ends. It is never stored with the
taxon records.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

logger = logging.getLogger(__name__)


class TypeCatalog:
    """Name class label -> last example row.

    Example:
        >>> catalog = TypeCatalog()
        >>> catalog.record("common name", ["9606", "human", "", "common name"])
        >>> catalog["common name"]
        '9606 | human |  | common name'
    """

    def __init__(self) -> None:
        self._examples: dict[str, str] = {}

    def record(self, label: str | None, row: list[str]) -> None:
        """Remember ``row`` as the example for ``label``."""
        self._examples[label or ""] = " | ".join(row)

    def __getitem__(self, label: str) -> str:
        return self._examples[label]

    def __contains__(self, label: object) -> bool:
        return label in self._examples

    def __len__(self) -> int:
        return len(self._examples)

    def items(self) -> Iterator[tuple[str, str]]:
        """Yield (label, example) pairs sorted by label."""
        yield from sorted(self._examples.items())

    def report(self, log: logging.Logger | None = None) -> None:
        """Log every encountered class with its example row."""
        log = log or logger
        log.info(f"All {len(self)} encountered types:")
        for label, example in self.items():
            log.info(f"  {label} -> {example}")
