"""Wardrobe, lookbook and planner tools operating on an account record."""

from datetime import date

import pytest

from agents.clothing_classifier import ClothingClassifierAgent
from conftest import data_url, fake_response, make_item
from models.outfit import OutfitSuggestion
from models.planner import PlannerEvent
from tools.lookbook_tools import ALL_OCCASIONS, LookbookTools, UnknownOutfitError
from tools.planner_tools import PlannerTools, UnknownEventError
from tools.wardrobe_tools import UnknownItemError, WardrobeTools


def _suggestion(items, title="Brunch"):
    return OutfitSuggestion(
        title=title,
        description="Knit and denim",
        fashion_guideline="Half tuck",
        trend_factor="Soft tailoring",
        identity_match="Neutral palette",
        proportion_note="Cropped knit shortens the torso",
        outfit_type="Practical",
        items=items,
    )


def test_upload_prefers_explicit_metadata(config, factory, client, record) -> None:
    factory.response = fake_response(
        {"category": "Dresses", "name": "Slip Dress", "color": "black", "classification": "Statement", "fit": "Slim"}
    )
    tools = WardrobeTools(ClothingClassifierAgent(config, client=client))

    item = tools.add_item(record, data_url(b"dress"), {"name": "Evening Slip", "color": "", "material": "satin"})

    assert item.name == "Evening Slip"
    assert item.color == "black"
    assert item.category == "Dresses" and item.classification == "Statement"
    assert item.material == "satin"
    assert record.wardrobe[0] is item


def test_upload_without_classifier_defaults_to_tops(record) -> None:
    tools = WardrobeTools()

    first = tools.add_item(record, data_url(b"one"))
    second = tools.add_item(record, data_url(b"two"), {"category": "shoes"})

    assert first.category == "Tops" and first.name == "New Item"
    assert second.category == "Shoes"
    assert [item.item_id for item in record.wardrobe] == [second.item_id, first.item_id]
    assert first.item_id != second.item_id


def test_upload_skips_classifier_when_disabled(config, factory, client, record) -> None:
    tools = WardrobeTools(ClothingClassifierAgent(config, client=client))

    tools.add_item(record, data_url(b"x"), {"category": "Bottoms"}, auto_classify=False)

    assert factory.requests == []


def test_log_worn_and_remove(record) -> None:
    tools = WardrobeTools()
    record.wardrobe = [make_item("a"), make_item("b")]

    assert tools.log_worn(record, "b", now=1_000.0).last_worn == 1_000.0
    assert tools.remove_item(record, "a") is True
    assert tools.remove_item(record, "a") is False
    with pytest.raises(UnknownItemError):
        tools.log_worn(record, "a")


def test_wardrobe_filters(record) -> None:
    record.wardrobe = [
        make_item("blazer", category="Outerwear", color="Navy Blue", fit="Tailored", style="Classic"),
        make_item("tee", color="white", fit="Relaxed"),
        make_item("scarf", category="Accessories", color="navy", classification="Statement"),
        make_item("plain", color=None),
    ]
    tools = WardrobeTools()

    def ids(filters):
        return [item.item_id for item in tools.filter_items(record, filters)]

    assert ids({"category": "All", "color": ""}) == ["blazer", "tee", "scarf", "plain"]
    assert ids({"color": "NAVY"}) == ["blazer", "scarf"]
    assert ids({"fit": "Tailored"}) == ["blazer"]
    assert ids({"classification": "Statement"}) == ["scarf"]
    assert ids({"style": "class"}) == ["blazer"]
    assert ids({"category": "Tops", "color": "white"}) == ["tee"]


def test_inspiration_keeps_most_recent_six(record) -> None:
    tools = WardrobeTools()
    added = [tools.add_inspiration(record, data_url(str(n).encode())) for n in range(8)]

    assert [image.image_id for image in record.inspiration] == [image.image_id for image in added[2:]]
    assert tools.remove_inspiration(record, added[-1].image_id) is True
    assert len(record.inspiration) == 5
    with pytest.raises(ValueError):
        tools.add_inspiration(record, "")


def test_save_outfit_defaults_occasion_from_context(record) -> None:
    lookbook = LookbookTools()
    record.context.event = "Gallery Opening"

    from_context = lookbook.save_outfit(record, _suggestion(["a"]), now=10.0)
    explicit = lookbook.save_outfit(record, _suggestion(["b"]), occasion="Work", rating={"comfort": 5, "style": 4})
    record.context.event = ""
    fallback = lookbook.save_outfit(record, _suggestion(["c"]))

    assert from_context.occasion_category == "Gallery Opening"
    assert from_context.timestamp == 10.0
    assert explicit.rating.comfort == 5
    assert fallback.occasion_category == "Daily"
    assert [outfit.outfit_id for outfit in record.saved_outfits] == [
        fallback.outfit_id,
        explicit.outfit_id,
        from_context.outfit_id,
    ]
    assert lookbook.occasions(record) == [ALL_OCCASIONS, "Daily", "Work", "Gallery Opening"]
    assert lookbook.filter_by_occasion(record, "Work") == [explicit]
    assert len(lookbook.filter_by_occasion(record, ALL_OCCASIONS)) == 3


def test_rating_bounds_enforced(record) -> None:
    lookbook = LookbookTools()
    saved = lookbook.save_outfit(record, _suggestion(["a"]))

    assert lookbook.rate_outfit(record, saved.outfit_id, {"comfort": 1, "style": 5, "notes": "Tight"}).rating.notes == "Tight"
    with pytest.raises(ValueError):
        lookbook.rate_outfit(record, saved.outfit_id, {"comfort": 6, "style": 3})
    with pytest.raises(UnknownOutfitError):
        lookbook.rate_outfit(record, "missing", {"comfort": 3, "style": 3})


def test_planner_links_and_unlinks_outfits(record) -> None:
    lookbook = LookbookTools()
    planner = PlannerTools(lookbook)
    saved = lookbook.save_outfit(record, _suggestion(["a"]))

    later = planner.add_event(record, "2026-11-02", "Wedding", outfit_id=saved.outfit_id)
    earlier = planner.add_event(record, date(2026, 10, 30), "  ", description="Office party")

    assert [event.event_id for event in record.calendar] == [earlier.event_id, later.event_id]
    assert earlier.title == "Style request"
    assert planner.link_outfit(record, earlier.event_id, saved.outfit_id).outfit_id == saved.outfit_id
    assert planner.link_outfit(record, earlier.event_id, None).outfit_id is None
    with pytest.raises(UnknownOutfitError):
        planner.add_event(record, "2026-11-03", "Gala", outfit_id="nope")
    with pytest.raises(UnknownEventError):
        planner.link_outfit(record, "nope", None)

    lookbook.remove_outfit(record, saved.outfit_id)
    assert planner.get_event(record, later.event_id).outfit_id is None


def test_planner_range_and_removal(record) -> None:
    planner = PlannerTools()
    planner.add_event(record, "2026-10-01", "A")
    middle = planner.add_event(record, "2026-10-15T09:30:00", "B")
    planner.add_event(record, "2026-11-01", "C")

    assert middle.date == "2026-10-15"
    assert [event.title for event in planner.events_between(record, date(2026, 10, 1), date(2026, 10, 31))] == ["A", "B"]
    assert planner.remove_event(record, middle.event_id) is True
    assert planner.remove_event(record, middle.event_id) is False


def test_invalid_event_date_rejected(record) -> None:
    with pytest.raises(ValueError):
        PlannerTools().add_event(record, "next tuesday", "Brunch")


def test_merge_external_replaces_synced_events(record) -> None:
    planner = PlannerTools()
    local = planner.add_event(record, "2026-10-20", "Local dinner")
    first_sync = [PlannerEvent(event_id="google-1", date="2026-10-19", title="Standup", source="google")]
    planner.merge_external(record, first_sync)
    second_sync = [PlannerEvent(event_id="google-2", date="2026-10-21", title="Offsite", source="google")]

    merged = planner.merge_external(record, second_sync)

    assert [event.event_id for event in merged] == [local.event_id, "google-2"]
