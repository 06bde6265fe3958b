"""Model package exports."""

from models.taxonomy import *  # noqa: F401,F403
from models.outfit import GroundingSource, OutfitRating, OutfitSuggestion, SavedOutfit
from models.planner import DailyContext, PlannerEvent
from models.style_profile import BodyAnalysis, StyleProfile
from models.wardrobe_item import ClothingItem, InspirationImage, from_raw_metadata

__all__ = [
    "BodyAnalysis",
    "ClothingItem",
    "DailyContext",
    "GroundingSource",
    "InspirationImage",
    "OutfitRating",
    "OutfitSuggestion",
    "PlannerEvent",
    "SavedOutfit",
    "StyleProfile",
    "from_raw_metadata",
]
