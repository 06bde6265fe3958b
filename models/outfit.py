"""Outfit suggestion and lookbook schemas."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from models.taxonomy import validate_outfit_type


@dataclass
class GroundingSource:
    title: str
    uri: str


@dataclass
class OutfitSuggestion:
    """One look assembled from wardrobe item ids."""

    title: str
    description: str
    fashion_guideline: str
    trend_factor: str
    identity_match: str
    proportion_note: str
    outfit_type: str
    items: List[str] = field(default_factory=list)
    sources: List[GroundingSource] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.outfit_type = validate_outfit_type(self.outfit_type)
        self.items = [str(item_id) for item_id in self.items]
        self.sources = [
            source if isinstance(source, GroundingSource) else GroundingSource(**source)
            for source in self.sources
        ]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _check_score(name: str, value: int) -> int:
    score = int(value)
    if not 1 <= score <= 5:
        raise ValueError(f"{name} rating must be between 1 and 5, got {value}")
    return score


@dataclass
class OutfitRating:
    comfort: int = 3
    style: int = 3
    notes: str = ""

    def __post_init__(self) -> None:
        self.comfort = _check_score("comfort", self.comfort)
        self.style = _check_score("style", self.style)


@dataclass
class SavedOutfit(OutfitSuggestion):
    """A suggestion the user kept in the lookbook."""

    outfit_id: str = ""
    timestamp: float = 0.0
    occasion_category: str = "Daily"
    rating: Optional[OutfitRating] = None

    def __post_init__(self) -> None:
        super().__post_init__()
        if isinstance(self.rating, dict):
            self.rating = OutfitRating(**self.rating)
        self.occasion_category = str(self.occasion_category).strip() or "Daily"


def suggestion_from_dict(data: Dict[str, Any]) -> OutfitSuggestion:
    return OutfitSuggestion(
        title=data["title"],
        description=data["description"],
        fashion_guideline=data.get("fashion_guideline", ""),
        trend_factor=data.get("trend_factor", ""),
        identity_match=data.get("identity_match", ""),
        proportion_note=data.get("proportion_note", ""),
        outfit_type=data["outfit_type"],
        items=list(data.get("items", [])),
        sources=list(data.get("sources", [])),
    )


def saved_outfit_from_dict(data: Dict[str, Any]) -> SavedOutfit:
    base = suggestion_from_dict(data)
    return SavedOutfit(
        **base.__dict__,
        outfit_id=str(data["outfit_id"]),
        timestamp=float(data.get("timestamp", 0.0)),
        occasion_category=data.get("occasion_category", "Daily"),
        rating=data.get("rating"),
    )


def resolve_outfit_items(outfit: OutfitSuggestion, wardrobe_ids: Iterable[str]) -> List[str]:
    """Return only the item ids that still exist in the wardrobe, in outfit order."""

    current = set(wardrobe_ids)
    return [item_id for item_id in outfit.items if item_id in current]


__all__ = [
    "GroundingSource",
    "OutfitSuggestion",
    "OutfitRating",
    "SavedOutfit",
    "suggestion_from_dict",
    "saved_outfit_from_dict",
    "resolve_outfit_items",
]
