"""Style planner: dated requests, outfit links and external calendar merges."""

from __future__ import annotations

from datetime import date
from typing import List, Optional, Sequence

from memory.account_store import AccountRecord
from models.planner import PlannerEvent
from models.wardrobe_item import new_id
from tools.lookbook_tools import LookbookTools
from tools.observability import instrument_tool


class UnknownEventError(KeyError):
    """Raised when an event id is not in the planner."""


class PlannerTools:
    def __init__(self, lookbook: Optional[LookbookTools] = None) -> None:
        self.lookbook = lookbook or LookbookTools()

    @instrument_tool("add_planner_event")
    def add_event(
        self,
        record: AccountRecord,
        day: date | str,
        title: str,
        description: Optional[str] = None,
        outfit_id: Optional[str] = None,
    ) -> PlannerEvent:
        if outfit_id:
            self.lookbook.get_outfit(record, outfit_id)
        event = PlannerEvent(
            event_id=new_id(),
            date=day,
            title=title.strip() or "Style request",
            description=description,
            outfit_id=outfit_id,
        )
        record.calendar.append(event)
        record.calendar.sort(key=lambda entry: entry.date)
        return event

    def get_event(self, record: AccountRecord, event_id: str) -> PlannerEvent:
        for event in record.calendar:
            if event.event_id == event_id:
                return event
        raise UnknownEventError(event_id)

    @instrument_tool("remove_planner_event")
    def remove_event(self, record: AccountRecord, event_id: str) -> bool:
        before = len(record.calendar)
        record.calendar = [event for event in record.calendar if event.event_id != event_id]
        return len(record.calendar) < before

    @instrument_tool("link_planner_outfit")
    def link_outfit(self, record: AccountRecord, event_id: str, outfit_id: Optional[str]) -> PlannerEvent:
        """Attach a lookbook outfit to an event, or clear the link with ``None``."""

        event = self.get_event(record, event_id)
        if outfit_id:
            self.lookbook.get_outfit(record, outfit_id)
        event.outfit_id = outfit_id or None
        return event

    def events_between(self, record: AccountRecord, start: date, end: date) -> List[PlannerEvent]:
        return [event for event in record.calendar if start <= event.day <= end]

    @instrument_tool("merge_external_events")
    def merge_external(self, record: AccountRecord, events: Sequence[PlannerEvent]) -> List[PlannerEvent]:
        """Replace every previously synced event with ``events``; local entries stay."""

        local = [event for event in record.calendar if event.source == "local"]
        record.calendar = sorted([*local, *events], key=lambda entry: entry.date)
        return record.calendar


__all__ = ["PlannerTools", "UnknownEventError"]
