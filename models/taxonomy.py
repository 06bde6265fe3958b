"""Canonical enumerations for wardrobe items and outfit suggestions.

Category, fit and classification labels are shared by the upload flow, the
classification schema sent to Gemini and the wardrobe filters, so validation
lives here rather than in each caller.
"""

from typing import List, Optional

CATEGORIES: List[str] = ["Tops", "Bottoms", "Dresses", "Outerwear", "Shoes", "Accessories"]
FITS: List[str] = ["Tailored", "Oversized", "Relaxed", "Slim", "Petite"]
CLASSIFICATIONS: List[str] = ["Basic", "Statement"]
OUTFIT_TYPES: List[str] = ["Classic", "Practical", "Bold"]
EVENT_SOURCES: List[str] = ["local", "google"]

MAX_INSPIRATION_IMAGES = 6
MIN_WARDROBE_FOR_STYLING = 2


def _match_label(value: str, allowed: List[str]) -> Optional[str]:
    key = value.strip().lower()
    for label in allowed:
        if label.lower() == key:
            return label
    return None


def validate_category(value: str) -> str:
    """Return the canonical category label.

    Raises a :class:`ValueError` if the category is not part of the taxonomy.
    """

    label = _match_label(str(value), CATEGORIES)
    if label is None:
        raise ValueError(f"Unsupported category '{value}'. Allowed: {CATEGORIES}")
    return label


def validate_classification(value: str) -> str:
    label = _match_label(str(value), CLASSIFICATIONS)
    if label is None:
        raise ValueError(f"Unsupported classification '{value}'. Allowed: {CLASSIFICATIONS}")
    return label


def validate_fit(value: str) -> str:
    label = _match_label(str(value), FITS)
    if label is None:
        raise ValueError(f"Unsupported fit '{value}'. Allowed: {FITS}")
    return label


def validate_outfit_type(value: str) -> str:
    label = _match_label(str(value), OUTFIT_TYPES)
    if label is None:
        raise ValueError(f"Unsupported outfit type '{value}'. Allowed: {OUTFIT_TYPES}")
    return label


def validate_event_source(value: str) -> str:
    label = _match_label(str(value), EVENT_SOURCES)
    if label is None:
        raise ValueError(f"Unsupported event source '{value}'. Allowed: {EVENT_SOURCES}")
    return label


__all__ = [
    "CATEGORIES",
    "FITS",
    "CLASSIFICATIONS",
    "OUTFIT_TYPES",
    "EVENT_SOURCES",
    "MAX_INSPIRATION_IMAGES",
    "MIN_WARDROBE_FOR_STYLING",
    "validate_category",
    "validate_classification",
    "validate_fit",
    "validate_outfit_type",
    "validate_event_source",
]
