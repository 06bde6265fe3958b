"""External calendar and reverse geocoding adapters with HTTP stubbed out."""

from datetime import date, datetime, timedelta
from types import SimpleNamespace

import pytest
import requests

from tools import calendar_provider, geocoding
from tools.calendar_provider import CalendarEvent, CalendarSyncError, GoogleCalendarProvider, MockCalendarProvider
from tools.geocoding import GeocodingError, reverse_geocode


class _Response:
    def __init__(self, payload, status_code: int = 200) -> None:
        self._payload = payload
        self.status_code = status_code

    def json(self):
        return self._payload

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}")


def test_google_provider_maps_events(monkeypatch) -> None:
    calls = []

    def fake_get(url, headers=None, params=None, timeout=None):
        calls.append(SimpleNamespace(url=url, headers=headers, params=params, timeout=timeout))
        return _Response(
            {
                "items": [
                    {
                        "id": "abc",
                        "summary": "Board meeting",
                        "description": "Quarterly review",
                        "start": {"dateTime": "2026-10-19T09:00:00Z"},
                        "end": {"dateTime": "2026-10-19T10:00:00Z"},
                    },
                    {"id": "day", "start": {"date": "2026-10-21"}, "end": {"date": "2026-10-22"}},
                    {"id": "broken", "summary": "No times"},
                ]
            }
        )

    monkeypatch.setattr(calendar_provider.requests, "get", fake_get)
    provider = GoogleCalendarProvider(calendar_id="team@example.com", timeout_seconds=3.0)

    events = provider.upcoming_events(today=date(2026, 10, 18), access_token="ya29.token")

    assert [(event.event_id, event.date, event.title, event.source) for event in events] == [
        ("google-abc", "2026-10-19", "Board meeting", "google"),
        ("google-day", "2026-10-21", "Untitled event", "google"),
    ]
    assert calls[0].headers == {"Authorization": "Bearer ya29.token"}
    assert calls[0].url.endswith("/calendars/team@example.com/events")
    assert calls[0].params["timeMin"].startswith("2026-10-18T00:00:00")
    assert calls[0].params["timeMax"].startswith("2026-10-24T23:59:59")
    assert calls[0].timeout == 3.0


@pytest.mark.parametrize("error", [requests.Timeout("slow"), requests.ConnectionError("offline")])
def test_google_provider_raises_on_network_errors(monkeypatch, error) -> None:
    def fake_get(*args, **kwargs):
        raise error

    monkeypatch.setattr(calendar_provider.requests, "get", fake_get)

    with pytest.raises(CalendarSyncError):
        GoogleCalendarProvider().get_events(date(2026, 10, 18), date(2026, 10, 25), access_token="t")


def test_google_provider_raises_on_http_error(monkeypatch) -> None:
    monkeypatch.setattr(calendar_provider.requests, "get", lambda *a, **k: _Response({}, status_code=401))

    with pytest.raises(CalendarSyncError):
        GoogleCalendarProvider().get_events(date(2026, 10, 18), date(2026, 10, 25), access_token="t")


def test_google_provider_raises_without_credentials(monkeypatch) -> None:
    def no_credentials(*args, **kwargs):
        raise RuntimeError("no application default credentials")

    monkeypatch.setattr(calendar_provider.google.auth, "default", no_credentials)

    with pytest.raises(CalendarSyncError):
        GoogleCalendarProvider().get_events(date(2026, 10, 18), date(2026, 10, 25))


def test_google_provider_rejects_inverted_range() -> None:
    with pytest.raises(ValueError):
        GoogleCalendarProvider().get_events(date(2026, 10, 25), date(2026, 10, 18), access_token="t")


def test_mock_provider_filters_window() -> None:
    provider = MockCalendarProvider(
        [
            CalendarEvent("in", "Lunch", datetime(2026, 10, 20, 12), datetime(2026, 10, 20, 13)),
            CalendarEvent("out", "Trip", datetime(2026, 11, 20, 12), datetime(2026, 11, 21, 13)),
        ]
    )

    assert [event.event_id for event in provider.upcoming_events(today=date(2026, 10, 18))] == ["google-in"]


def test_upcoming_events_covers_seven_days_from_today() -> None:
    start = datetime(2026, 10, 18, 9)
    provider = MockCalendarProvider(
        [
            CalendarEvent(f"d{offset}", "Standup", start + timedelta(days=offset), start + timedelta(days=offset, hours=1))
            for offset in range(9)
        ]
    )

    dates = [event.date for event in provider.upcoming_events(today=date(2026, 10, 18))]

    assert len(dates) == 7
    assert dates[0] == "2026-10-18"
    assert dates[-1] == "2026-10-24"


def test_reverse_geocode_prefers_city(monkeypatch) -> None:
    seen = {}

    def fake_get(url, params=None, timeout=None):
        seen.update(url=url, params=params)
        return _Response({"city": "", "locality": "Montmartre", "principalSubdivision": "Ile-de-France"})

    monkeypatch.setattr(geocoding.requests, "get", fake_get)

    assert reverse_geocode(48.88, 2.34, url="https://geo.test/reverse") == "Montmartre"
    assert seen["url"] == "https://geo.test/reverse"
    assert seen["params"]["latitude"] == 48.88


@pytest.mark.parametrize(
    "response",
    [_Response({}, status_code=503), _Response({"countryName": "Nowhere"})],
)
def test_reverse_geocode_failures(monkeypatch, response) -> None:
    monkeypatch.setattr(geocoding.requests, "get", lambda *a, **k: response)

    with pytest.raises(GeocodingError):
        reverse_geocode(10.0, 10.0)


def test_reverse_geocode_network_error(monkeypatch) -> None:
    def fake_get(*args, **kwargs):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(geocoding.requests, "get", fake_get)

    with pytest.raises(GeocodingError):
        reverse_geocode(10.0, 10.0)


def test_reverse_geocode_unreadable_body(monkeypatch) -> None:
    class _HtmlResponse(_Response):
        def json(self):
            raise ValueError("Expecting value: line 1 column 1 (char 0)")

    monkeypatch.setattr(geocoding.requests, "get", lambda *a, **k: _HtmlResponse(None))

    with pytest.raises(GeocodingError):
        reverse_geocode(10.0, 10.0)


def test_reverse_geocode_validates_coordinates() -> None:
    with pytest.raises(ValueError):
        reverse_geocode(91.0, 0.0)
