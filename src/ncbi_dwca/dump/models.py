"""Aggregate taxon record models.

One ``TaxonRecord`` collects everything the taxdump files say about a single
NCBI taxon id: the node row, its names, type material and citations.
"""

from pydantic import BaseModel, Field

# NCBI writes 0 in the medline/pubmed columns when there is no id
MISSING_ID_VALUES = frozenset({"", "0"})


def _present(value: str | None) -> str | None:
    if value is None or value.strip() in MISSING_ID_VALUES:
        return None
    return value.strip()


class TypeMaterial(BaseModel):
    """Type specimen citation for a taxon."""

    citation: str | None = None
    status: str | None = None


class Citation(BaseModel):
    """
    A bibliographic reference attached to a taxon.

    Examples
    --------
    >>> Citation(pubmed_id="8118397", url="https://example.org/ref").identifier
    'https://example.org/ref'
    >>> Citation(medline_id="94113218", pubmed_id="8118397").identifier
    'pubmed:8118397'
    >>> Citation(medline_id="94113218", pubmed_id="0").identifier
    'medline:94113218'
    >>> Citation(citation="Smith 1990").identifier is None
    True
    """

    citation: str | None = None
    medline_id: str | None = None
    pubmed_id: str | None = None
    url: str | None = None

    @property
    def identifier(self) -> str | None:
        """Preferred identifier: url, then pubmed, then medline."""
        url = _present(self.url)
        if url:
            return url
        pubmed_id = _present(self.pubmed_id)
        if pubmed_id:
            return f"pubmed:{pubmed_id}"
        medline_id = _present(self.medline_id)
        if medline_id:
            return f"medline:{medline_id}"
        return None


class TaxonRecord(BaseModel):
    """
    Merged view of one NCBI taxon.

    ``name_priority`` remembers the priority of the name class that set
    ``name`` so a lower or equal priority class cannot replace it. It is not
    exported.
    """

    key: int = Field(..., description="NCBI taxon id")
    parent_key: int | None = Field(None, description="Parent taxon id, self for the root")
    hidden: bool = False
    rank: str | None = None
    name: str | None = None
    name_priority: int = 0
    comments: str | None = None
    synonyms: list[str] = Field(default_factory=list)
    vernacular: list[str] = Field(default_factory=list)
    type_material: list[TypeMaterial] = Field(default_factory=list)
    citations: list[Citation] = Field(default_factory=list)
