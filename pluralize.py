"""English and French noun pluralization for labels."""

from __future__ import annotations

import re
from typing import Callable

IRREGULAR_EN = {
    "person": "people",
    "man": "men",
    "woman": "women",
    "child": "children",
    "mouse": "mice",
    "goose": "geese",
    "tooth": "teeth",
    "foot": "feet",
    "cactus": "cacti",
    "nucleus": "nuclei",
    "radius": "radii",
    "analysis": "analyses",
    "axis": "axes",
}

RULES_EN = [
    (re.compile(r"([^aeiou])y$", re.I), r"\1ies"),
    (re.compile(r"(s|sh|ch|x|z)$", re.I), r"\1es"),
    (re.compile(r"(?:f|fe)$", re.I), "ves"),
    (re.compile(r"([aeiou]o)$", re.I), r"\1s"),
    (re.compile(r"o$", re.I), "oes"),
    (re.compile(r"us$", re.I), "i"),
    (re.compile(r"is$", re.I), "es"),
]

IRREGULAR_FR = {
    "travail": "travaux",
    "vitrail": "vitraux",
    "bail": "baux",
    "corail": "coraux",
    "émail": "émaux",
    "fermail": "fermeaux",
    "soupirail": "soupiraux",
    # -eu/-eau/-au words taking -s
    "bleu": "bleus",
    "pneu": "pneus",
    "landau": "landaus",
    "sarrau": "sarraus",
}

# -al words taking -s
AL_TO_S_FR = {"bal", "carnaval", "chacal", "festival", "récital", "régal", "cal", "caracal"}


def _rule_fr_invariable(w: str) -> str | None:
    return w if re.search(r"[sxz]$", w, re.I) else None


def _rule_fr_al(w: str) -> str | None:
    if re.search(r"al$", w, re.I) and w.lower() not in AL_TO_S_FR:
        return re.sub(r"al$", "aux", w, flags=re.I)
    return None


def _rule_fr_suffix(suffix: str, plural: str) -> Callable[[str], str | None]:
    pattern = re.compile(suffix + "$", re.I)

    def rule(w: str) -> str | None:
        return pattern.sub(plural, w) if pattern.search(w) else None

    return rule


RULES_FR: list[Callable[[str], str | None]] = [
    _rule_fr_invariable,
    _rule_fr_al,
    _rule_fr_suffix("eau", "eaux"),
    _rule_fr_suffix("eu", "eux"),
    _rule_fr_suffix("au", "aux"),
    _rule_fr_suffix("ail", "ails"),
]


def _match_case(src: str, dst: str) -> str:
    """Carry the casing of src over to dst (CITY -> CITIES, City -> Cities)."""
    if src == src.upper():
        return dst.upper()
    if src[0] == src[0].upper():
        return dst[0].upper() + dst[1:]
    return dst


def _plural_en(word: str, irregulars: dict[str, str] | None) -> str:
    irregular = {**IRREGULAR_EN, **(irregulars or {})}
    if word.lower() in irregular:
        return _match_case(word, irregular[word.lower()])
    for pattern, replacement in RULES_EN:
        if pattern.search(word):
            return pattern.sub(replacement, word)
    return word + "s"


def _plural_fr(word: str, irregulars: dict[str, str] | None) -> str:
    irregular = {**IRREGULAR_FR, **(irregulars or {})}
    if word.lower() in irregular:
        return _match_case(word, irregular[word.lower()])
    for rule in RULES_FR:
        if (out := rule(word)) is not None:
            return out
    return word + "s"


def pluralize(
    word: str,
    locale: str = "en",
    count: int | None = None,
    inclusive: bool = False,
    irregulars: dict[str, str] | None = None,
) -> str:
    """Pluralize a word, or pick singular/plural when count is given.

    pluralize("item", count=1)                 -> "item"
    pluralize("entrée", "fr", count=3, inclusive=True) -> "3 entrées"
    pluralize("cheval", "fr")                  -> "chevaux"
    """
    if locale == "fr":
        plural = _plural_fr(word, irregulars)
    else:
        plural = _plural_en(word, irregulars)

    if count is None:
        return plural

    chosen = word if count == 1 else plural
    return f"{count} {chosen}" if inclusive else chosen
