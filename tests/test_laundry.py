"""Rewear status heuristic coverage."""

import pytest

from conftest import make_item
from logic import laundry

DAY = laundry.SECONDS_PER_DAY
NOW = 1_760_000_000.0


def test_never_worn_is_clean() -> None:
    assert laundry.rewear_status(NOW, None, 7) == laundry.STATUS_CLEAN


@pytest.mark.parametrize(
    "days_ago, expected",
    [
        (0, laundry.STATUS_WORN_TODAY),
        (0.9, laundry.STATUS_WORN_TODAY),
        (1, laundry.STATUS_WORN_YESTERDAY),
        (1.5, laundry.STATUS_WORN_YESTERDAY),
        (2, laundry.STATUS_IN_LAUNDRY),
        (6, laundry.STATUS_IN_LAUNDRY),
        (7, laundry.STATUS_CLEAN),
        (30, laundry.STATUS_CLEAN),
    ],
)
def test_status_follows_cycle_of_seven(days_ago: float, expected: str) -> None:
    assert laundry.rewear_status(NOW, NOW - days_ago * DAY, 7) == expected


def test_short_cycle_skips_laundry_state() -> None:
    """With a two day cycle, day two is already clean."""

    assert laundry.rewear_status(NOW, NOW - 2 * DAY, 2) == laundry.STATUS_CLEAN
    assert laundry.rewear_status(NOW, NOW - 1 * DAY, 2) == laundry.STATUS_WORN_YESTERDAY


def test_future_timestamp_counts_as_today() -> None:
    assert laundry.days_since(NOW, NOW + 3 * DAY) == 0
    assert laundry.rewear_status(NOW, NOW + 3 * DAY, 7) == laundry.STATUS_WORN_TODAY


def test_annotate_only_labels_logged_items() -> None:
    items = [make_item("a"), make_item("b", last_worn=NOW - 3 * DAY)]
    assert laundry.annotate(items, NOW, 7) == [None, laundry.STATUS_IN_LAUNDRY]


def test_available_items_keeps_clean_and_yesterday() -> None:
    items = [
        make_item("clean"),
        make_item("today", last_worn=NOW),
        make_item("yesterday", last_worn=NOW - DAY),
        make_item("laundry", last_worn=NOW - 4 * DAY),
        make_item("washed", last_worn=NOW - 8 * DAY),
    ]
    kept = [item.item_id for item in laundry.available_items(items, NOW, 7)]
    assert kept == ["clean", "yesterday", "washed"]
