"""Wardrobe item data model and helpers."""

from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from models.taxonomy import validate_category, validate_classification, validate_fit


def _clean_optional(value: Any) -> Optional[str]:
    """Collapse blank strings to ``None`` so filters and prompts skip them."""

    if value is None:
        return None
    text = str(value).strip()
    return text or None


def new_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclass
class ClothingItem:
    """One catalogued clothing photograph with its metadata."""

    item_id: str
    image: str
    category: str
    name: str
    color: Optional[str] = None
    fit: Optional[str] = None
    classification: Optional[str] = None
    style: Optional[str] = None
    material: Optional[str] = None
    last_worn: Optional[float] = None

    def __post_init__(self) -> None:
        self.category = validate_category(self.category)
        self.name = str(self.name).strip() or "New Item"
        self.color = _clean_optional(self.color)
        self.fit = _clean_optional(self.fit)
        if self.fit is not None:
            self.fit = validate_fit(self.fit)
        self.style = _clean_optional(self.style)
        self.material = _clean_optional(self.material)
        if self.classification is not None:
            self.classification = validate_classification(self.classification)
        if self.last_worn is not None:
            self.last_worn = float(self.last_worn)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class InspirationImage:
    """A mood/reference photo; never treated as wearable inventory."""

    image_id: str
    image: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def from_raw_metadata(metadata: Dict[str, Any]) -> ClothingItem:
    """Factory to build a :class:`ClothingItem` from loose upload or import metadata."""

    required_fields = ["image", "category"]
    missing = [field for field in required_fields if not metadata.get(field)]
    if missing:
        raise ValueError(f"Missing required fields for ClothingItem: {missing}")

    return ClothingItem(
        item_id=str(metadata.get("item_id") or new_id()),
        image=str(metadata["image"]),
        category=str(metadata["category"]),
        name=str(metadata.get("name") or "New Item"),
        color=metadata.get("color"),
        fit=metadata.get("fit"),
        classification=metadata.get("classification"),
        style=metadata.get("style"),
        material=metadata.get("material"),
        last_worn=metadata.get("last_worn"),
    )


def inspiration_from_dict(data: Dict[str, Any]) -> InspirationImage:
    if not data.get("image"):
        raise ValueError("Inspiration image payload is empty")
    return InspirationImage(image_id=str(data.get("image_id") or new_id()), image=str(data["image"]))


__all__ = ["ClothingItem", "InspirationImage", "from_raw_metadata", "inspiration_from_dict", "new_id"]
