"""Turns the daily context into the situational prompt sent after the images."""

from __future__ import annotations

from typing import Optional

from models.planner import DailyContext
from models.style_profile import StyleProfile


def situational_prompt(context: DailyContext) -> str:
    """Render the context block with the defaults the stylist expects."""

    return "\n".join(
        [
            f"COMFORT RATING: {context.comfort}/10",
            f"LOCATION: {context.location or 'Unknown'}",
            f"WEATHER: {context.weather or 'Unspecified'}",
            f"EVENT: {context.event or 'Daily Life'}",
            f"VIBE: {context.vibe or 'Sophisticated'}",
            f"COLOR PREF: {context.color or 'Balanced'}",
        ]
    )


def trend_reference(context: DailyContext, profile: StyleProfile) -> Optional[str]:
    """The per-request board wins over the board saved on the profile."""

    url = (context.pinterest_url or "").strip() or (profile.pinterest_profile or "").strip()
    return url or None


__all__ = ["situational_prompt", "trend_reference"]
