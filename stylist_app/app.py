"""Application wiring for the wardrobe stylist."""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from datetime import date
from typing import Any, Dict, Iterator, Optional

import google.generativeai as genai

from agents.body_analyzer import AnalysisFailedError, BodyAnalyzerAgent
from agents.clothing_classifier import ClothingClassifierAgent
from agents.outfit_generator import InsufficientWardrobeError, OutfitGeneratorAgent, StylingFailedError
from logic.context_synthesizer import situational_prompt, trend_reference
from memory.account_store import (
    AccountManager,
    AccountRecord,
    AccountStore,
    JSONAccountStore,
    SQLiteAccountStore,
)
from models.outfit import SavedOutfit, resolve_outfit_items, suggestion_from_dict
from models.planner import context_from_dict
from models.style_profile import profile_from_dict
from stylist_app.config import StylistConfig
from stylist_app.logging_config import configure_logging, get_logger, log_event, operation_context
from tools.calendar_provider import CalendarProvider, CalendarSyncError, GoogleCalendarProvider
from tools.gemini_client import GeminiClient, ModelFactory
from tools.geocoding import reverse_geocode
from tools.lookbook_tools import LookbookTools
from tools.planner_tools import PlannerTools
from tools.wardrobe_tools import WardrobeTools

LOGGER = get_logger(__name__)


class GenerationInProgressError(RuntimeError):
    """Raised when an account already has an outfit request in flight."""


class WardrobeStylistApp:
    """Wires together stores, Gemini agents and the wardrobe/lookbook/planner tools."""

    def __init__(
        self,
        config: StylistConfig | None = None,
        *,
        model_factory: ModelFactory | None = None,
        store: AccountStore | None = None,
        calendar_provider: CalendarProvider | None = None,
    ) -> None:
        self.config = config or StylistConfig.from_env()
        configure_logging()
        if self.config.api_key:
            genai.configure(api_key=self.config.api_key)

        self.accounts = AccountManager(
            store=store or self._build_account_store(),
            default_laundry_cycle_days=self.config.default_laundry_cycle_days,
        )
        self.gemini = GeminiClient(self.config, model_factory=model_factory)
        self.outfit_generator = OutfitGeneratorAgent(self.config, client=self.gemini)
        self.classifier = ClothingClassifierAgent(self.config, client=self.gemini)
        self.body_analyzer = BodyAnalyzerAgent(self.config, client=self.gemini)
        self.calendar_provider = calendar_provider or GoogleCalendarProvider(
            calendar_id=self.config.calendar_id,
            credentials_path=self.config.google_credentials_path,
        )

        self.wardrobe = WardrobeTools(classifier=self.classifier)
        self.lookbook = LookbookTools()
        self.planner = PlannerTools(lookbook=self.lookbook)

        self._in_flight: set[str] = set()
        self._in_flight_lock = threading.Lock()
        self._account_locks: Dict[str, threading.Lock] = {}
        self._account_locks_guard = threading.Lock()

    def _build_account_store(self) -> AccountStore:
        if self.config.account_store_backend.lower() == "sqlite":
            return SQLiteAccountStore(self.config.account_store_path or "data/accounts.db")
        return JSONAccountStore(self.config.account_store_path or "data/accounts")

    def _account_lock(self, email: str) -> threading.Lock:
        key = (email or "").strip().lower()
        with self._account_locks_guard:
            return self._account_locks.setdefault(key, threading.Lock())

    @contextmanager
    def _editing(self, email: str) -> Iterator[AccountRecord]:
        """Load a record, let the caller mutate it, and save it, all under the account lock.

        Nothing is saved when the body raises.
        """

        with self._account_lock(email):
            record = self.accounts.load(email)
            yield record
            self.accounts.save(record)

    @contextmanager
    def _generation_slot(self, email: str) -> Iterator[None]:
        with self._in_flight_lock:
            if email in self._in_flight:
                raise GenerationInProgressError("An outfit request is already running for this account.")
            self._in_flight.add(email)
        try:
            yield
        finally:
            with self._in_flight_lock:
                self._in_flight.discard(email)

    @staticmethod
    def _summary(record: AccountRecord) -> Dict[str, Any]:
        return {
            "email": record.email,
            "name": record.name,
            "wardrobe_count": len(record.wardrobe),
            "saved_outfit_count": len(record.saved_outfits),
            "calendar_connected": bool(record.calendar_token),
            "last_active": record.last_active,
        }

    # Accounts

    def register(self, email: str, password: str, name: str = "") -> Dict[str, Any]:
        with self._account_lock(email):
            record = self.accounts.register(email, password, name)
        log_event(LOGGER, logging.INFO, "account_registered", email=record.email)
        return {"status": "ok", "account": self._summary(record)}

    def login(self, email: str, password: str) -> Dict[str, Any]:
        with self._account_lock(email):
            record = self.accounts.authenticate(email, password)
        return {"status": "ok", "account": self._summary(record)}

    def get_state(self, email: str) -> Dict[str, Any]:
        record = self.accounts.load(email)
        return {"status": "ok", "account": self._summary(record), **record.state_dict()}

    # Wardrobe

    def upload_item(
        self,
        email: str,
        image: str,
        metadata: Optional[Dict[str, Any]] = None,
        auto_classify: bool = True,
    ) -> Dict[str, Any]:
        with self._editing(email) as record:
            item = self.wardrobe.add_item(record, image, metadata=metadata, auto_classify=auto_classify)
        return {"status": "ok", "item": item.to_dict()}

    def remove_item(self, email: str, item_id: str) -> Dict[str, Any]:
        with self._editing(email) as record:
            removed = self.wardrobe.remove_item(record, item_id)
        return {"status": "ok", "removed": removed}

    def log_worn(self, email: str, item_id: str, now: Optional[float] = None) -> Dict[str, Any]:
        with self._editing(email) as record:
            item = self.wardrobe.log_worn(record, item_id, now=now)
        return {"status": "ok", "item": item.to_dict()}

    def list_wardrobe(self, email: str, filters: Optional[Dict[str, Optional[str]]] = None) -> Dict[str, Any]:
        record = self.accounts.load(email)
        items = self.wardrobe.filter_items(record, filters)
        return {"status": "ok", "items": [item.to_dict() for item in items]}

    def add_inspiration(self, email: str, image: str) -> Dict[str, Any]:
        with self._editing(email) as record:
            inspiration = self.wardrobe.add_inspiration(record, image)
        return {"status": "ok", "image": inspiration.to_dict(), "count": len(record.inspiration)}

    def remove_inspiration(self, email: str, image_id: str) -> Dict[str, Any]:
        with self._editing(email) as record:
            removed = self.wardrobe.remove_inspiration(record, image_id)
        return {"status": "ok", "removed": removed}

    # Profile and context

    def update_profile(self, email: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        with self._editing(email) as record:
            record.profile = profile_from_dict({**record.profile.to_dict(), **updates})
        return {"status": "ok", "profile": record.profile.to_dict()}

    def update_context(self, email: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        with self._editing(email) as record:
            record.context = context_from_dict({**record.context.to_dict(), **updates})
        return {"status": "ok", "context": record.context.to_dict()}

    def analyze_body(self, email: str, image: str) -> Dict[str, Any]:
        self.accounts.load(email)
        try:
            analysis = self.body_analyzer.analyze(image)
        except AnalysisFailedError as exc:
            return {"status": "error", "message": str(exc)}
        with self._editing(email) as record:
            record.profile.apply_analysis(analysis, photo=image)
        return {"status": "ok", "profile": record.profile.to_dict()}

    # Styling

    def generate_outfits(
        self,
        email: str,
        context_updates: Optional[Dict[str, Any]] = None,
        now: Optional[float] = None,
    ) -> Dict[str, Any]:
        """Run one styling request; nothing is stored from the model on failure."""

        if context_updates:
            self.update_context(email, context_updates)
        record = self.accounts.load(email)

        with operation_context("app:generate_outfits", LOGGER) as correlation_id:
            try:
                with self._generation_slot(record.email):
                    suggestions = self.outfit_generator.generate_outfits(
                        record.wardrobe,
                        record.inspiration,
                        situational_prompt(record.context),
                        record.profile,
                        trend_url=trend_reference(record.context, record.profile),
                        now=now,
                    )
            except GenerationInProgressError as exc:
                return {"status": "busy", "message": str(exc)}
            except (InsufficientWardrobeError, StylingFailedError) as exc:
                log_event(
                    LOGGER,
                    logging.WARNING,
                    "app_styling_failed",
                    correlation_id=correlation_id,
                    reason=type(exc).__name__,
                )
                return {"status": "error", "message": str(exc)}

            log_event(
                LOGGER,
                logging.INFO,
                "app_call_completed",
                method="generate_outfits",
                correlation_id=correlation_id,
                outfit_count=len(suggestions),
            )
            return {"status": "ok", "suggestions": [suggestion.to_dict() for suggestion in suggestions]}

    # Lookbook

    def save_outfit(
        self,
        email: str,
        suggestion: Dict[str, Any],
        occasion: str = "",
        rating: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        with self._editing(email) as record:
            saved = self.lookbook.save_outfit(record, suggestion_from_dict(suggestion), occasion=occasion, rating=rating)
        return {"status": "ok", "outfit": saved.to_dict()}

    def rate_outfit(self, email: str, outfit_id: str, rating: Dict[str, Any]) -> Dict[str, Any]:
        with self._editing(email) as record:
            outfit = self.lookbook.rate_outfit(record, outfit_id, rating)
        return {"status": "ok", "outfit": outfit.to_dict()}

    def remove_outfit(self, email: str, outfit_id: str) -> Dict[str, Any]:
        with self._editing(email) as record:
            removed = self.lookbook.remove_outfit(record, outfit_id)
        return {"status": "ok", "removed": removed}

    def lookbook_view(self, email: str, occasion: Optional[str] = None) -> Dict[str, Any]:
        """Saved outfits for one occasion, with items resolved against the current wardrobe."""

        record = self.accounts.load(email)
        wardrobe_ids = [item.item_id for item in record.wardrobe]

        def render(outfit: SavedOutfit) -> Dict[str, Any]:
            return {**outfit.to_dict(), "items": resolve_outfit_items(outfit, wardrobe_ids)}

        return {
            "status": "ok",
            "occasions": self.lookbook.occasions(record),
            "outfits": [render(outfit) for outfit in self.lookbook.filter_by_occasion(record, occasion)],
        }

    # Planner

    def add_event(
        self,
        email: str,
        day: date | str,
        title: str,
        description: Optional[str] = None,
        outfit_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        with self._editing(email) as record:
            event = self.planner.add_event(record, day, title, description=description, outfit_id=outfit_id)
        return {"status": "ok", "event": event.to_dict()}

    def remove_event(self, email: str, event_id: str) -> Dict[str, Any]:
        with self._editing(email) as record:
            removed = self.planner.remove_event(record, event_id)
        return {"status": "ok", "removed": removed}

    def link_outfit(self, email: str, event_id: str, outfit_id: Optional[str]) -> Dict[str, Any]:
        with self._editing(email) as record:
            event = self.planner.link_outfit(record, event_id, outfit_id)
        return {"status": "ok", "event": event.to_dict()}

    def list_events(self, email: str, start: Optional[date] = None, end: Optional[date] = None) -> Dict[str, Any]:
        record = self.accounts.load(email)
        events = record.calendar if start is None or end is None else self.planner.events_between(record, start, end)
        return {"status": "ok", "events": [event.to_dict() for event in events]}

    def connect_calendar(self, email: str, access_token: Optional[str]) -> Dict[str, Any]:
        with self._editing(email) as record:
            record.calendar_token = access_token or None
        return {"status": "ok", "account": self._summary(record)}

    def sync_calendar(self, email: str, today: Optional[date] = None) -> Dict[str, Any]:
        """Replace synced events with the provider's next week; keep them when the provider fails."""

        token = self.accounts.load(email).calendar_token
        if not token:
            return {"status": "error", "message": "Connect a calendar before syncing."}
        try:
            external = self.calendar_provider.upcoming_events(today=today, access_token=token)
        except CalendarSyncError as exc:
            log_event(LOGGER, logging.WARNING, "calendar_sync_failed", reason=str(exc))
            return {"status": "unavailable", "message": str(exc)}
        with self._editing(email) as record:
            events = self.planner.merge_external(record, external)
        return {
            "status": "ok",
            "synced": len(external),
            "events": [event.to_dict() for event in events],
        }

    # Backup

    def export_account(self, email: str) -> Dict[str, Any]:
        return {"status": "ok", "document": self.accounts.export_account(email)}

    def import_account(self, email: str, document: Dict[str, Any]) -> Dict[str, Any]:
        with self._account_lock(email):
            record = self.accounts.import_account(email, document)
        return {"status": "ok", "account": self._summary(record)}

    # Location

    def detect_location(self, latitude: float, longitude: float) -> Dict[str, Any]:
        city = reverse_geocode(latitude, longitude, url=self.config.geocode_url)
        return {"status": "ok", "location": city}

    def set_location_from_coordinates(self, email: str, latitude: float, longitude: float) -> Dict[str, Any]:
        location = self.detect_location(latitude, longitude)["location"]
        return self.update_context(email, {"location": location})


__all__ = ["WardrobeStylistApp", "GenerationInProgressError"]
