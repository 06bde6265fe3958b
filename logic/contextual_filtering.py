"""Faceted wardrobe filtering for the wardrobe view."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

from models.wardrobe_item import ClothingItem

ALL = "All"
EXACT_FACETS = ("category", "fit", "classification")
SUBSTRING_FACETS = ("color", "style")


@dataclass(frozen=True)
class FilteringResult:
    """Captures the outcome of one filtering pass."""

    items: List[ClothingItem]
    applied: Dict[str, str]


def _active(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    if not text or text == ALL:
        return None
    return text


def filter_wardrobe(items: List[ClothingItem], filters: Mapping[str, Optional[str]] | None) -> FilteringResult:
    """Apply exact category/fit/classification and substring color/style facets.

    ``"All"``, empty strings and missing keys leave a facet open. Items with no
    value for an active facet never match it.
    """

    filters = filters or {}
    applied = {
        facet: value
        for facet in EXACT_FACETS + SUBSTRING_FACETS
        if (value := _active(filters.get(facet))) is not None
    }

    def matches(item: ClothingItem) -> bool:
        for facet, wanted in applied.items():
            actual = getattr(item, facet)
            if actual is None:
                return False
            if facet in EXACT_FACETS and actual != wanted:
                return False
            if facet in SUBSTRING_FACETS and wanted.lower() not in actual.lower():
                return False
        return True

    return FilteringResult(items=[item for item in items if matches(item)], applied=applied)


__all__ = ["FilteringResult", "filter_wardrobe", "ALL"]
