"""Planner entries and the situational context used for styling."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import Any, Dict, Optional

from models.taxonomy import validate_event_source


@dataclass
class PlannerEvent:
    """A dated style request, optionally linked to a lookbook outfit."""

    event_id: str
    date: str
    title: str
    description: Optional[str] = None
    outfit_id: Optional[str] = None
    source: str = "local"

    def __post_init__(self) -> None:
        if isinstance(self.date, date):
            self.date = self.date.isoformat()
        # Validates the ISO format and normalizes datetimes to their date part.
        self.date = date.fromisoformat(str(self.date)[:10]).isoformat()
        self.source = validate_event_source(self.source)

    @property
    def day(self) -> date:
        return date.fromisoformat(self.date)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class DailyContext:
    event: str = ""
    weather: str = ""
    location: str = ""
    vibe: str = ""
    color: str = ""
    comfort: int = 5
    pinterest_url: str = ""

    def __post_init__(self) -> None:
        self.comfort = max(1, min(10, int(self.comfort)))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


_CONTEXT_FIELDS = set(DailyContext.__dataclass_fields__)


def context_from_dict(data: Dict[str, Any] | None) -> DailyContext:
    data = data or {}
    return DailyContext(**{key: value for key, value in data.items() if key in _CONTEXT_FIELDS})


def event_from_dict(data: Dict[str, Any]) -> PlannerEvent:
    return PlannerEvent(
        event_id=str(data["event_id"]),
        date=data["date"],
        title=str(data.get("title") or "Untitled event"),
        description=data.get("description"),
        outfit_id=data.get("outfit_id"),
        source=data.get("source", "local"),
    )


__all__ = ["PlannerEvent", "DailyContext", "context_from_dict", "event_from_dict"]
