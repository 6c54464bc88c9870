"""Name class rules for names.dmp rows.

names.dmp labels every name with a free-text class. The rules below decide
what each class contributes to the merged taxon record. Two historical
variants of the converter disagreed on ``authority`` names, so both are kept
as tables rather than code paths.

Observed classes (label -> example row):

    acronym -> 2760819 | EV-C117 |  | acronym
    in-part -> 2203421 | Dictyocheirospora sp. YJ-2018a |  | in-part
    includes -> 2762514 | Fomitiporia sp. 7 GAS-2016 |  | includes
    common name -> 2759916 | Unterstein's newt |  | common name
    genbank common name -> 2762440 | Mohawk Dunes fringe-toed lizard |  | genbank common name
    blast name -> 2558200 | hawks & eagles |  | blast name
    scientific name -> 2763003 | Agrypninae incertae sedis |  | scientific name
    synonym -> 2762697 | Pterocarya insignis |  | synonym
    type material -> 2762514 | BAFC 24382 | BAFC 24382 <holotype> | type material
    genbank synonym -> 2653933 | Citrobacter sp. 6106 |  | genbank synonym
    authority -> 2762697 | Pterocarya macroptera var. insignis (Rehder & E.H.Wilson) W.E.Manning, 1975 |  | authority
    genbank acronym -> 2758139 | BatPyV5b-1 |  | genbank acronym
    equivalent name -> 2761759 | Rubus pirifolius var. permollis |  | equivalent name
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ncbi_dwca.dump.models import TaxonRecord


class NameEffect(Enum):
    """What a name row contributes to its taxon record."""

    PRIMARY = "primary"
    SYNONYM = "synonym"
    VERNACULAR = "vernacular"
    IGNORE = "ignore"


@dataclass(frozen=True)
class NameRule:
    """Effect of one name class.

    Attributes:
        effect: Merge effect of rows with this class
        priority: For PRIMARY rules, a row sets the record name only when its
            priority is strictly greater than the priority that set the
            current name
    """

    effect: NameEffect
    priority: int = 0


SCIENTIFIC_NAME = "scientific name"
AUTHORITY = "authority"

_IGNORED = NameRule(NameEffect.IGNORE)
_SYNONYM = NameRule(NameEffect.SYNONYM)
_VERNACULAR = NameRule(NameEffect.VERNACULAR)

# Scientific names beat authority strings; the first name of a class wins
DEFAULT_NAME_RULES: Mapping[str, NameRule] = {
    SCIENTIFIC_NAME: NameRule(NameEffect.PRIMARY, priority=2),
    AUTHORITY: NameRule(NameEffect.PRIMARY, priority=1),
    "synonym": _SYNONYM,
    "equivalent name": _SYNONYM,
    "misnomer": _SYNONYM,
    "misspelling": _SYNONYM,
    "common name": _VERNACULAR,
    "genbank common name": _VERNACULAR,
    "acronym": _IGNORED,
    "in-part": _IGNORED,
    "includes": _IGNORED,
    "blast name": _IGNORED,
    "genbank synonym": _IGNORED,
    "genbank acronym": _IGNORED,
    "type material": _IGNORED,
}

# Concept names such as "Phenylobacterium Lingens et al. 1985 emend. Abraham et al. 2008"
# listed as synonyms instead of competing for the primary name
AUTHORITY_AS_SYNONYM_RULES: Mapping[str, NameRule] = {
    **DEFAULT_NAME_RULES,
    AUTHORITY: _SYNONYM,
}

NAME_RULE_TABLES: dict[str, Mapping[str, NameRule]] = {
    "default": DEFAULT_NAME_RULES,
    "authority-as-synonym": AUTHORITY_AS_SYNONYM_RULES,
}


def apply_name(
    record: TaxonRecord,
    name_class: str | None,
    name: str | None,
    rules: Mapping[str, NameRule] = DEFAULT_NAME_RULES,
) -> NameEffect:
    """Merge one classified name into a record.

    Unknown classes and rows without a name text leave the record untouched.

    Args:
        record: Record to update in place
        name_class: Class label from names.dmp column 3
        name: Name text from names.dmp column 1
        rules: Class label -> rule table

    Returns:
        The effect that was applied (IGNORE when nothing changed)
    """
    rule = rules.get(name_class) if name_class else None
    if rule is None or not name:
        return NameEffect.IGNORE

    if rule.effect is NameEffect.PRIMARY:
        if rule.priority <= record.name_priority:
            return NameEffect.IGNORE
        record.name = name
        record.name_priority = rule.priority
    elif rule.effect is NameEffect.SYNONYM:
        record.synonyms.append(name)
    elif rule.effect is NameEffect.VERNACULAR:
        record.vernacular.append(name)
    return rule.effect
