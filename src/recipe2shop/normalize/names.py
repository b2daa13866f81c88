"""Ingredient name, unit and category canonicalization for merge keys."""

import re
import unicodedata

DEFAULT_CATEGORY = "Other"
DEFAULT_UNIT = "piece"

_NON_ALNUM = re.compile(r"[^a-z0-9 ]+")
_WHITESPACE = re.compile(r"\s+")


def normalize_name(raw: str | None) -> str:
    """
    Normalize an ingredient name for merge-key comparison.

    - Lowercase and strip diacritics ("Crème" -> "creme")
    - Replace punctuation runs with a single space
    - Collapse whitespace and trim
    - Naive singularization: drop one trailing "s" on names longer than 3 chars
    """
    if not raw:
        return ""

    decomposed = unicodedata.normalize("NFD", raw.strip().lower())
    no_accents = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    cleaned = _NON_ALNUM.sub(" ", no_accents)
    cleaned = _WHITESPACE.sub(" ", cleaned).strip()

    if cleaned.endswith("s") and len(cleaned) > 3:
        return cleaned[:-1]
    return cleaned


def normalize_unit(raw: str | None) -> str:
    """Return "piece" for a blank unit, otherwise the unit verbatim."""
    if raw is None or not raw.strip():
        return DEFAULT_UNIT
    return raw


def normalize_category(raw: str | None) -> str:
    """Return "Other" for a blank category, otherwise the category verbatim."""
    if raw is None or not raw.strip():
        return DEFAULT_CATEGORY
    return raw


def merge_unit(raw: str | None, case_sensitive: bool = True) -> str:
    """
    Unit as compared inside a merge key.

    Case-sensitive comparison uses the normalized unit literally, so "G" and
    "g" stay separate items. Otherwise the unit is trimmed and lowercased.
    """
    unit = normalize_unit(raw)
    if case_sensitive:
        return unit
    return unit.strip().lower()


def merge_key(
    name: str | None,
    unit: str | None,
    category: str | None,
    case_sensitive_units: bool = True,
) -> str:
    """Build the key identifying one logical shopping item."""
    return "|".join(
        (
            normalize_name(name),
            merge_unit(unit, case_sensitive=case_sensitive_units),
            normalize_category(category),
        )
    )
