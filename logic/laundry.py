"""Rewear / laundry-cycle heuristic.

The status strings are advisory text for the stylist model. Nothing here
removes items from a request unless the caller opts into
:func:`is_available` filtering.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

from models.wardrobe_item import ClothingItem

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400

STATUS_CLEAN = "clean"
STATUS_WORN_TODAY = "worn today, avoid unless explicitly requested"
STATUS_WORN_YESTERDAY = "worn yesterday, strictly avoid for Tops category"
STATUS_IN_LAUNDRY = "likely still in laundry"

_UNAVAILABLE = {STATUS_WORN_TODAY, STATUS_IN_LAUNDRY}


def days_since(now: float, last_worn: float) -> int:
    """Whole days elapsed; timestamps in the future count as today."""

    return max(0, int((now - last_worn) // SECONDS_PER_DAY))


def rewear_status(now: float, last_worn: Optional[float], laundry_cycle_days: int) -> str:
    if last_worn is None:
        return STATUS_CLEAN
    elapsed = days_since(now, last_worn)
    if elapsed == 0:
        return STATUS_WORN_TODAY
    if elapsed == 1:
        return STATUS_WORN_YESTERDAY
    if elapsed < laundry_cycle_days:
        return STATUS_IN_LAUNDRY
    return STATUS_CLEAN


def is_available(item: ClothingItem, now: float, laundry_cycle_days: int) -> bool:
    """Strict reading of the heuristic used when laundry filtering is enforced.

    Yesterday's pieces stay available because the rule only bars them as tops,
    which the model is told per item.
    """

    return rewear_status(now, item.last_worn, laundry_cycle_days) not in _UNAVAILABLE


def available_items(
    items: Sequence[ClothingItem], now: float, laundry_cycle_days: int
) -> List[ClothingItem]:
    kept = [item for item in items if is_available(item, now, laundry_cycle_days)]
    if len(kept) != len(items):
        logger.info("Laundry filter removed %d of %d items", len(items) - len(kept), len(items))
    return kept


def annotate(items: Iterable[ClothingItem], now: float, laundry_cycle_days: int) -> List[Optional[str]]:
    """Status per item, ``None`` where the item was never logged as worn."""

    return [
        rewear_status(now, item.last_worn, laundry_cycle_days) if item.last_worn is not None else None
        for item in items
    ]


__all__ = [
    "STATUS_CLEAN",
    "STATUS_WORN_TODAY",
    "STATUS_WORN_YESTERDAY",
    "STATUS_IN_LAUNDRY",
    "days_since",
    "rewear_status",
    "is_available",
    "available_items",
    "annotate",
]
