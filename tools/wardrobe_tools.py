"""Wardrobe and inspiration operations over an account record."""

from __future__ import annotations

import time
from typing import Any, Dict, List, Optional

from agents.clothing_classifier import ClothingClassifierAgent
from logic.contextual_filtering import filter_wardrobe
from memory.account_store import AccountRecord
from models.taxonomy import MAX_INSPIRATION_IMAGES
from models.wardrobe_item import ClothingItem, InspirationImage, from_raw_metadata, new_id
from tools.observability import instrument_tool

_METADATA_FIELDS = ("name", "category", "color", "fit", "classification", "style", "material")


class UnknownItemError(KeyError):
    """Raised when an item id is not in the wardrobe."""


class WardrobeTools:
    """Mutates the record in place; callers persist it afterwards."""

    def __init__(self, classifier: Optional[ClothingClassifierAgent] = None) -> None:
        self.classifier = classifier

    @instrument_tool("add_wardrobe_item")
    def add_item(
        self,
        record: AccountRecord,
        image: str,
        metadata: Optional[Dict[str, Any]] = None,
        auto_classify: bool = True,
    ) -> ClothingItem:
        """Add an upload at the front of the wardrobe.

        Explicit metadata wins over the classifier's guess, which only fills
        the gaps.
        """

        explicit = {key: value for key, value in (metadata or {}).items() if value not in (None, "")}
        guessed: Dict[str, Any] = {}
        if auto_classify and self.classifier is not None:
            guessed = self.classifier.classify(image).model_dump(exclude_none=True)
        merged = {key: explicit.get(key, guessed.get(key)) for key in _METADATA_FIELDS}
        merged["category"] = merged["category"] or "Tops"
        item = from_raw_metadata({**merged, "item_id": new_id(), "image": image})
        record.wardrobe.insert(0, item)
        return item

    def get_item(self, record: AccountRecord, item_id: str) -> ClothingItem:
        for item in record.wardrobe:
            if item.item_id == item_id:
                return item
        raise UnknownItemError(item_id)

    @instrument_tool("remove_wardrobe_item")
    def remove_item(self, record: AccountRecord, item_id: str) -> bool:
        before = len(record.wardrobe)
        record.wardrobe = [item for item in record.wardrobe if item.item_id != item_id]
        return len(record.wardrobe) < before

    @instrument_tool("log_item_worn")
    def log_worn(self, record: AccountRecord, item_id: str, now: Optional[float] = None) -> ClothingItem:
        item = self.get_item(record, item_id)
        item.last_worn = time.time() if now is None else float(now)
        return item

    def filter_items(self, record: AccountRecord, filters: Optional[Dict[str, Optional[str]]] = None) -> List[ClothingItem]:
        return filter_wardrobe(record.wardrobe, filters).items

    @instrument_tool("add_inspiration_image")
    def add_inspiration(self, record: AccountRecord, image: str) -> InspirationImage:
        """Append an inspiration photo, keeping only the most recent ones."""

        if not image:
            raise ValueError("Inspiration image payload is empty")
        inspiration = InspirationImage(image_id=new_id(), image=image)
        record.inspiration = [*record.inspiration, inspiration][-MAX_INSPIRATION_IMAGES:]
        return inspiration

    @instrument_tool("remove_inspiration_image")
    def remove_inspiration(self, record: AccountRecord, image_id: str) -> bool:
        before = len(record.inspiration)
        record.inspiration = [image for image in record.inspiration if image.image_id != image_id]
        return len(record.inspiration) < before


__all__ = ["WardrobeTools", "UnknownItemError"]
