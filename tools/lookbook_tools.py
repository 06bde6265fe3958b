"""Lookbook operations: saving, rating and filtering kept outfits."""

from __future__ import annotations

import time
from typing import Dict, List, Optional

from memory.account_store import AccountRecord
from models.outfit import OutfitRating, OutfitSuggestion, SavedOutfit
from models.wardrobe_item import new_id
from tools.observability import instrument_tool

ALL_OCCASIONS = "All"
_SUGGESTION_FIELDS = tuple(OutfitSuggestion.__dataclass_fields__)


class UnknownOutfitError(KeyError):
    """Raised when an outfit id is not in the lookbook."""


class LookbookTools:
    @instrument_tool("save_outfit")
    def save_outfit(
        self,
        record: AccountRecord,
        suggestion: OutfitSuggestion,
        occasion: str = "",
        rating: Optional[Dict[str, object]] = None,
        now: Optional[float] = None,
    ) -> SavedOutfit:
        """Keep a suggestion, newest first. The occasion falls back to the current event."""

        saved = SavedOutfit(
            **{name: getattr(suggestion, name) for name in _SUGGESTION_FIELDS},
            outfit_id=new_id(),
            timestamp=time.time() if now is None else float(now),
            occasion_category=occasion or record.context.event or "Daily",
            rating=OutfitRating(**rating) if rating else None,
        )
        record.saved_outfits.insert(0, saved)
        return saved

    def get_outfit(self, record: AccountRecord, outfit_id: str) -> SavedOutfit:
        for outfit in record.saved_outfits:
            if outfit.outfit_id == outfit_id:
                return outfit
        raise UnknownOutfitError(outfit_id)

    @instrument_tool("rate_outfit")
    def rate_outfit(self, record: AccountRecord, outfit_id: str, rating: Dict[str, object]) -> SavedOutfit:
        outfit = self.get_outfit(record, outfit_id)
        outfit.rating = OutfitRating(**rating)
        return outfit

    @instrument_tool("remove_outfit")
    def remove_outfit(self, record: AccountRecord, outfit_id: str) -> bool:
        before = len(record.saved_outfits)
        record.saved_outfits = [outfit for outfit in record.saved_outfits if outfit.outfit_id != outfit_id]
        for event in record.calendar:
            if event.outfit_id == outfit_id:
                event.outfit_id = None
        return len(record.saved_outfits) < before

    def occasions(self, record: AccountRecord) -> List[str]:
        """``All`` followed by each occasion once, in lookbook order."""

        seen: List[str] = []
        for outfit in record.saved_outfits:
            if outfit.occasion_category not in seen:
                seen.append(outfit.occasion_category)
        return [ALL_OCCASIONS, *seen]

    def filter_by_occasion(self, record: AccountRecord, occasion: Optional[str] = None) -> List[SavedOutfit]:
        if not occasion or occasion == ALL_OCCASIONS:
            return list(record.saved_outfits)
        return [outfit for outfit in record.saved_outfits if outfit.occasion_category == occasion]


__all__ = ["LookbookTools", "UnknownOutfitError", "ALL_OCCASIONS"]
