#!/usr/bin/env python3
"""Build a Darwin Core archive from the NCBI taxonomy dump.

Downloads new_taxdump.zip, merges nodes, names, type material and citations
into one record per taxon, and writes:

- taxa.txt, vernacular.txt, typematerial.txt, citations.txt
- meta.xml
- ncbi.zip containing all of the above

Usage:
    uv run ncbi-dwca --output output
"""

import logging
from pathlib import Path

import click

from ncbi_dwca.dump.classification import NAME_RULE_TABLES
from ncbi_dwca.pipeline import build_archive

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_DIR = Path("output")


@click.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    default=DEFAULT_OUTPUT_DIR,
    show_default=True,
    help="Output directory (recreated on every run)",
)
@click.option(
    "--name-rules",
    type=click.Choice(sorted(NAME_RULE_TABLES)),
    default="default",
    show_default=True,
    help="How authority names are treated: as primary names or as synonyms",
)
def main(output: Path, name_rules: str) -> None:
    """Convert the NCBI taxdump into a Darwin Core archive."""
    click.echo("=" * 60)
    click.echo("NCBI taxdump -> Darwin Core archive")
    click.echo("=" * 60)

    result = build_archive(output, rules=NAME_RULE_TABLES[name_rules])

    click.echo()
    click.echo("Summary:")
    for member, rows in result.ingest.rows.items():
        click.echo(f"  {member + ':':<20} {rows:,} rows")
    click.echo(f"  Skipped citation ids: {result.ingest.skipped_citation_tokens:,}")
    click.echo(f"  Taxon records:        {result.records:,}")
    click.echo(f"  Synonym rows:         {result.export.synonyms:,}")
    click.echo(f"  Vernacular rows:      {result.export.vernacular:,}")
    click.echo(f"  Type material rows:   {result.export.type_material:,}")
    click.echo(f"  Citation rows:        {result.export.citations:,}")
    click.echo(f"  Name classes seen:    {len(result.catalog):,}")
    click.echo()
    click.echo(f"Output: {result.archive}")


if __name__ == "__main__":
    main()
