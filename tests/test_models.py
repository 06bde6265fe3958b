"""Taxonomy validation, model coercion and prompt rendering."""

import pytest

from logic.context_synthesizer import situational_prompt, trend_reference
from logic.prompts import describe_item
from models.outfit import SavedOutfit, resolve_outfit_items, saved_outfit_from_dict
from models.planner import DailyContext, PlannerEvent
from models.style_profile import BodyAnalysis, StyleProfile, profile_from_dict
from models.taxonomy import validate_category, validate_outfit_type
from models.wardrobe_item import ClothingItem, from_raw_metadata


def test_taxonomy_is_case_insensitive() -> None:
    assert validate_category("  outerwear ") == "Outerwear"
    assert validate_outfit_type("BOLD") == "Bold"
    with pytest.raises(ValueError):
        validate_category("Hats")


def test_clothing_item_cleans_metadata() -> None:
    item = ClothingItem(item_id="x", image="data:,", category="tops", name="  ", color="  ", classification="statement")

    assert item.category == "Tops"
    assert item.name == "New Item"
    assert item.color is None
    assert item.classification == "Statement"


def test_clothing_item_fit_is_validated() -> None:
    assert ClothingItem(item_id="x", image="data:,", category="Tops", fit=" slim ").fit == "Slim"
    assert ClothingItem(item_id="x", image="data:,", category="Tops", fit="  ").fit is None
    with pytest.raises(ValueError):
        ClothingItem(item_id="x", image="data:,", category="Tops", fit="baggy")


def test_raw_metadata_requires_image_and_category() -> None:
    with pytest.raises(ValueError):
        from_raw_metadata({"category": "Tops"})
    assert from_raw_metadata({"image": "abc", "category": "Shoes"}).item_id


def test_profile_analysis_mirrors_editable_fields() -> None:
    profile = StyleProfile(body_type="Rectangle")
    profile.apply_analysis(BodyAnalysis("Pear", "Wider hips", "Structured shoulders", "160cm"), photo="data:photo")

    assert profile.body_type == "Pear"
    assert profile.height == "160cm"
    assert profile.analysis_photo == "data:photo"


def test_profile_from_dict_ignores_unknown_keys() -> None:
    profile = profile_from_dict({"aesthetic": "Boho", "legacy_field": 1, "ai_analysis": None})

    assert profile.aesthetic == "Boho"
    with pytest.raises(ValueError):
        StyleProfile(laundry_cycle_days=0)


def test_comfort_is_clamped() -> None:
    assert DailyContext(comfort=14).comfort == 10
    assert DailyContext(comfort=-2).comfort == 1


def test_situational_prompt_defaults() -> None:
    prompt = situational_prompt(DailyContext(weather="Rainy, 12C", comfort=8))

    assert prompt.splitlines() == [
        "COMFORT RATING: 8/10",
        "LOCATION: Unknown",
        "WEATHER: Rainy, 12C",
        "EVENT: Daily Life",
        "VIBE: Sophisticated",
        "COLOR PREF: Balanced",
    ]


def test_trend_reference_prefers_request_board() -> None:
    profile = StyleProfile(pinterest_profile="https://pinterest.com/ada")

    assert trend_reference(DailyContext(pinterest_url=" https://pinterest.com/board "), profile) == "https://pinterest.com/board"
    assert trend_reference(DailyContext(), profile) == "https://pinterest.com/ada"
    assert trend_reference(DailyContext(), StyleProfile()) is None


def test_describe_item_lists_unknown_attributes() -> None:
    item = ClothingItem(item_id="x", image="i", category="Shoes", name="Loafers")

    text = describe_item(3, item)

    assert text.splitlines()[0] == "ITEM 3: Loafers"
    assert "Material: Unspecified" in text and "Classification: Basic" in text


def test_saved_outfit_round_trip_and_resolution() -> None:
    data = {
        "title": "Look",
        "description": "d",
        "outfit_type": "classic",
        "items": ["a", "gone", "b"],
        "sources": [{"title": "Vogue", "uri": "https://vogue.com"}],
        "outfit_id": "o1",
        "rating": {"comfort": 2, "style": 4, "notes": ""},
    }

    outfit = saved_outfit_from_dict(data)

    assert isinstance(outfit, SavedOutfit)
    assert outfit.outfit_type == "Classic"
    assert outfit.sources[0].uri == "https://vogue.com"
    assert outfit.occasion_category == "Daily"
    assert resolve_outfit_items(outfit, ["b", "a"]) == ["a", "b"]


def test_planner_event_source_validated() -> None:
    with pytest.raises(ValueError):
        PlannerEvent(event_id="e", date="2026-10-18", title="t", source="outlook")
