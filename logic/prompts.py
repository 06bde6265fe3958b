"""System instructions and per-item descriptors for the Gemini calls."""

from __future__ import annotations

from typing import List, Optional, Sequence

from logic.safety import system_instruction
from models.style_profile import StyleProfile
from models.taxonomy import CATEGORIES, CLASSIFICATIONS, OUTFIT_TYPES
from models.wardrobe_item import ClothingItem

WARDROBE_SENTINEL = "--- END OF WARDROBE ---"
INSPIRATION_SENTINEL = "--- END OF INSPIRATION ---"

DRESS_CODE_RULES: List[str] = [
    "Black tie / gala: floor-length gowns or formal floor-length separates only; never knee-length or shorter.",
    "Cocktail / semi-formal: knee-length to midi dresses or elevated separates; no floor-length gowns, no denim.",
    "Business / office: tailored separates or a knee-length sheath; hemlines at or below the knee.",
    "Smart casual: polished separates; a statement shoe or jacket is allowed, athletic pieces are not.",
    "Casual / daily: separates and relaxed dresses; prioritise comfort and the weather.",
]

COMPOSITION_RULES: List[str] = [
    "Rule of thirds: break the silhouette at roughly one third / two thirds (tuck, belt, cropped layer) rather than halving the body.",
    "Basic/statement pairing: use at most ONE piece classified as Statement per outfit unless the user explicitly asks for a maximalist look; build the rest from Basic pieces.",
    "Color harmony: combine colors as monochrome, analogous or a single complementary accent against neutrals; never more than three dominant colors.",
    "Respect each item's rewear status: avoid pieces worn today, never use yesterday's top again, and skip items likely still in the laundry.",
]


def _body_guidance(profile: StyleProfile) -> str:
    analysis = profile.ai_analysis
    if analysis is not None:
        return (
            f"- Body shape: {analysis.body_shape}\n"
            f"- Proportions: {analysis.proportions}\n"
            f"- Height: {analysis.height_estimate}\n"
            f"- Focus: {analysis.suggested_focus}"
        )
    return (
        f"- Body shape: {profile.body_type or 'Not specified'}\n"
        f"- Height: {profile.height or 'Not specified'}\n"
        f"- Preferred silhouettes: {profile.silhouettes or 'Tailored and Balanced'}"
    )


def stylist_system_instruction(profile: StyleProfile, trend_url: Optional[str] = None) -> str:
    """Build the outfit generation instruction for one profile and optional trend board."""

    dress_code = "\n".join(f"- {rule}" for rule in DRESS_CODE_RULES)
    composition = "\n".join(f"- {rule}" for rule in COMPOSITION_RULES)
    sections = [
        system_instruction("a wardrobe stylist"),
        "Provide THREE distinct outfit options from the user's WARDROBE that strictly adhere to their style DNA.",
        f"DRESS CODE RULES:\n{dress_code}",
        f"COMPOSITION RULES:\n{composition}",
        f"BODY ARCHITECTURE:\n{_body_guidance(profile)}\n"
        "Choose lengths, rises and volumes that balance these proportions and explain the choice in proportionNote.",
        "STYLE DNA (hard constraints):\n"
        f"- Core aesthetic: {profile.aesthetic or 'Sophisticated and Timeless'}\n"
        f"- Preferred silhouettes: {profile.silhouettes or 'Tailored and Balanced'}\n"
        f"- Signature colors: {profile.signature_colors or 'Neutral and Cohesive'}\n"
        f"- Forbidden styles/items: {profile.forbidden or 'None'}. Never include a forbidden item, under any circumstance.",
        "CATEGORIES (one outfit each):\n"
        "1. \"Classic\": elegant and timeless, the purest form of the profile.\n"
        "2. \"Practical\": weather and comfort optimised, still stylish.\n"
        "3. \"Bold\": fashion-forward, experimenting with the profile in new ways.",
    ]
    if trend_url:
        sections.append(
            f"TREND REFERENCE: research the aesthetic on {trend_url}, identify its recurring themes "
            "(palette, silhouettes, textures, styling tricks) and recreate that visual DNA with the user's wardrobe."
        )
    sections.append(
        "The \"items\" array of each outfit must contain the numeric indices (as strings) of WARDROBE items, "
        f"which appear in the same order as the wardrobe images before '{WARDROBE_SENTINEL}'. "
        f"The \"type\" must be one of {OUTFIT_TYPES}."
    )
    return "\n\n".join(sections)


def describe_item(index: int, item: ClothingItem, status: Optional[str] = None) -> str:
    """Text block announcing one wardrobe item to the model."""

    lines = [
        f"ITEM {index}: {item.name}",
        f"Category: {item.category}",
        f"Color: {item.color or 'Unspecified'}",
        f"Material: {item.material or 'Unspecified'}",
        f"Fit: {item.fit or 'Unspecified'}",
        f"Classification: {item.classification or 'Basic'}",
        f"Style: {item.style or 'Unspecified'}",
    ]
    if status is not None:
        lines.append(f"Rewear status: {status}")
    return "\n".join(lines)


def describe_wardrobe(items: Sequence[ClothingItem], statuses: Sequence[Optional[str]]) -> List[str]:
    return [describe_item(index, item, status) for index, (item, status) in enumerate(zip(items, statuses))]


def classification_instruction() -> str:
    return (
        f"{system_instruction('a wardrobe cataloguer')}\n\n"
        "Identify the single clothing item in the photo. "
        f"Category must be one of {CATEGORIES}; classification must be one of {CLASSIFICATIONS} "
        "(Statement for bold prints, colors or shapes that dominate an outfit). "
        "Give a short display name, the main color, and the fit, style and material when visible."
    )


def body_analysis_instruction() -> str:
    return (
        f"{system_instruction('a proportion analyst')}\n\n"
        "Study this full-length photo and describe the body shape, the proportions "
        "(torso to leg ratio, shoulder to hip balance), an estimated height range and the "
        "styling focus that would best balance the frame. Use neutral, professional language."
    )


__all__ = [
    "WARDROBE_SENTINEL",
    "INSPIRATION_SENTINEL",
    "DRESS_CODE_RULES",
    "COMPOSITION_RULES",
    "stylist_system_instruction",
    "describe_item",
    "describe_wardrobe",
    "classification_instruction",
    "body_analysis_instruction",
]
