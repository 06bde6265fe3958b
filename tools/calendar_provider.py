"""Read-only external calendar providers feeding the style planner."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import List

import google.auth
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
import requests

from models.planner import PlannerEvent

LOGGER = logging.getLogger(__name__)
SCOPES = ["https://www.googleapis.com/auth/calendar.readonly"]
SYNC_WINDOW_DAYS = 7


class CalendarSyncError(RuntimeError):
    """Raised when the external calendar cannot be read."""


@dataclass
class CalendarEvent:
    """Minimal external event payload."""

    event_id: str
    title: str
    start_time: datetime
    end_time: datetime
    description: str | None = None
    is_all_day: bool = False

    def to_planner_event(self) -> PlannerEvent:
        return PlannerEvent(
            event_id=f"google-{self.event_id}",
            date=self.start_time.date().isoformat(),
            title=self.title,
            description=self.description,
            source="google",
        )


class CalendarProvider(ABC):
    """Abstract calendar provider interface."""

    @abstractmethod
    def get_events(self, start_date: date, end_date: date, access_token: str | None = None) -> List[CalendarEvent]:
        """Fetch events in the inclusive date range."""

    def upcoming_events(
        self, today: date | None = None, access_token: str | None = None, days: int = SYNC_WINDOW_DAYS
    ) -> List[PlannerEvent]:
        """Events for the ``days`` calendar days starting today, as planner entries."""

        start = today or date.today()
        events = self.get_events(start, start + timedelta(days=days - 1), access_token=access_token)
        return [event.to_planner_event() for event in events]


class GoogleCalendarProvider(CalendarProvider):
    """Google Calendar provider using a stored access token, a credentials file or ADC."""

    def __init__(
        self,
        calendar_id: str | None = None,
        credentials_path: str | None = None,
        timeout_seconds: float = 5.0,
    ) -> None:
        self.calendar_id = calendar_id or "primary"
        self.credentials_path = credentials_path
        self.timeout_seconds = timeout_seconds

    def _get_credentials(self, access_token: str | None):
        if access_token:
            return Credentials(token=access_token)
        if self.credentials_path:
            credentials, _ = google.auth.load_credentials_from_file(self.credentials_path, scopes=SCOPES)
        else:
            credentials, _ = google.auth.default(scopes=SCOPES)
        if not credentials.valid:
            credentials.refresh(Request())
        return credentials

    def _parse_datetime(self, raw: str | None) -> datetime:
        if not raw:
            raise ValueError("Missing datetime value from calendar event")
        return datetime.fromisoformat(raw.replace("Z", "+00:00"))

    def _coerce_event(self, payload: dict) -> CalendarEvent:
        start_info = payload.get("start", {})
        end_info = payload.get("end", {})
        return CalendarEvent(
            event_id=str(payload.get("id") or ""),
            title=payload.get("summary") or "Untitled event",
            start_time=self._parse_datetime(start_info.get("dateTime") or start_info.get("date")),
            end_time=self._parse_datetime(end_info.get("dateTime") or end_info.get("date")),
            description=payload.get("description"),
            is_all_day="date" in start_info,
        )

    def get_events(self, start_date: date, end_date: date, access_token: str | None = None) -> List[CalendarEvent]:
        if start_date > end_date:
            raise ValueError("start_date must be on or before end_date")

        LOGGER.info("Fetching calendar events", extra={"start_date": str(start_date), "end_date": str(end_date)})
        try:
            credentials = self._get_credentials(access_token)
        except Exception as exc:  # noqa: BLE001
            LOGGER.error("Failed to acquire Google credentials", exc_info=exc)
            raise CalendarSyncError("Google credentials are unavailable") from exc

        params = {
            "timeMin": datetime.combine(start_date, datetime.min.time()).isoformat() + "Z",
            "timeMax": datetime.combine(end_date, datetime.max.time()).isoformat() + "Z",
            "singleEvents": "true",
            "orderBy": "startTime",
            "maxResults": 50,
        }
        headers = {"Authorization": f"Bearer {credentials.token}"}
        url = f"https://www.googleapis.com/calendar/v3/calendars/{self.calendar_id}/events"

        try:
            response = requests.get(url, headers=headers, params=params, timeout=self.timeout_seconds)
            response.raise_for_status()
            payload = response.json()
        except requests.Timeout as exc:
            LOGGER.error("Google Calendar request timed out")
            raise CalendarSyncError("Google Calendar request timed out") from exc
        except (requests.RequestException, ValueError) as exc:
            LOGGER.error("Calendar API unreachable", exc_info=exc)
            raise CalendarSyncError("Google Calendar is unreachable") from exc

        events: List[CalendarEvent] = []
        for item in payload.get("items", []):
            try:
                events.append(self._coerce_event(item))
            except ValueError as exc:
                LOGGER.warning("Skipping malformed calendar event", exc_info=exc)
        return events


class MockCalendarProvider(CalendarProvider):
    """Offline deterministic calendar provider for tests."""

    def __init__(self, events: List[CalendarEvent] | None = None) -> None:
        self._events = events or []

    def get_events(self, start_date: date, end_date: date, access_token: str | None = None) -> List[CalendarEvent]:
        return [event for event in self._events if start_date <= event.start_time.date() <= end_date]


__all__ = ["CalendarEvent", "CalendarSyncError", "CalendarProvider", "GoogleCalendarProvider", "MockCalendarProvider"]
