"""Text matching rules for debtor and instrument search"""

import unicodedata
from typing import Optional
from legal_collections.domain.models import SearchTarget
from legal_collections.domain.exceptions import ValidationError


def fold_text(value: Optional[str]) -> str:
    """Lower-case and strip accents so 'López' and 'lopez' compare equal"""
    if not value:
        return ""
    decomposed = unicodedata.normalize("NFKD", value)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold()


def matches(query: str, *fields: Optional[str]) -> bool:
    """True when the folded query is a substring of any folded field"""
    needle = fold_text(query)
    return any(needle in fold_text(field) for field in fields)


def parse_search_request(query: Optional[str], target: Optional[str]) -> tuple[str, SearchTarget]:
    """Validate raw search parameters"""
    if query is None or not query.strip():
        raise ValidationError("Search query 'q' is required")

    try:
        search_target = SearchTarget((target or "").strip().lower())
    except ValueError:
        raise ValidationError("Search type must be 'debtors' or 'instruments'")

    return query.strip(), search_target
