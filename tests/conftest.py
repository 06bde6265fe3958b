"""Shared fakes for the Gemini SDK and account fixtures."""

from __future__ import annotations

import base64
import json
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest

from memory.account_store import AccountManager, AccountRecord, JSONAccountStore
from models.wardrobe_item import ClothingItem
from stylist_app.config import StylistConfig
from tools.gemini_client import GeminiClient


def data_url(payload: bytes = b"fake-image-bytes", mime: str = "image/png") -> str:
    return f"data:{mime};base64,{base64.b64encode(payload).decode()}"


def fake_response(payload: Any, sources: Optional[List[Dict[str, str]]] = None) -> SimpleNamespace:
    text = payload if isinstance(payload, str) else json.dumps(payload)
    chunks = [SimpleNamespace(web=SimpleNamespace(**source)) for source in (sources or [])]
    candidate = SimpleNamespace(grounding_metadata=SimpleNamespace(grounding_chunks=chunks))
    return SimpleNamespace(text=text, candidates=[candidate])


class FakeModel:
    def __init__(self, factory: "FakeModelFactory", **kwargs: Any) -> None:
        self.factory = factory
        self.kwargs = kwargs

    def generate_content(self, contents, generation_config=None, request_options=None):
        self.factory.requests.append(
            {
                "contents": contents,
                "generation_config": generation_config,
                "request_options": request_options,
                **self.kwargs,
            }
        )
        if self.factory.error is not None:
            raise self.factory.error
        return self.factory.response


class FakeModelFactory:
    """Stands in for ``genai.GenerativeModel``; records every request."""

    def __init__(self, response: Any = None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.requests: List[Dict[str, Any]] = []

    def __call__(self, **kwargs: Any) -> FakeModel:
        return FakeModel(self, **kwargs)

    @property
    def last_parts(self) -> List[Any]:
        return self.requests[-1]["contents"][0]["parts"]


def outfit_payload(items: List[str], outfit_type: str = "Classic", title: str = "Gallery Opening") -> Dict[str, Any]:
    return {
        "title": title,
        "description": "Crisp shirt with wide trousers.",
        "fashionGuideline": "Balance volume top and bottom.",
        "trendFactor": "Quiet luxury",
        "identityMatch": "Keeps to the neutral palette.",
        "proportionNote": "High rise lengthens the leg line.",
        "type": outfit_type,
        "items": items,
    }


def three_outfits(classic: List[str], practical: Optional[List[str]] = None, bold: Optional[List[str]] = None) -> Dict[str, Any]:
    """A well-formed response: one outfit per type, in Classic, Practical, Bold order."""

    return {
        "outfits": [
            outfit_payload(classic, "Classic"),
            outfit_payload(practical or ["0"], "Practical", title="Rainy Commute"),
            outfit_payload(bold or ["0"], "Bold", title="Color Clash"),
        ]
    }


def make_item(item_id: str, category: str = "Tops", **overrides: Any) -> ClothingItem:
    fields = {
        "item_id": item_id,
        "image": data_url(item_id.encode()),
        "category": category,
        "name": f"Piece {item_id}",
        "color": "navy",
        "classification": "Basic",
    }
    fields.update(overrides)
    return ClothingItem(**fields)


@pytest.fixture()
def config() -> StylistConfig:
    return StylistConfig(api_key=None, request_timeout_seconds=12.0, search_grounding=True)


@pytest.fixture()
def factory() -> FakeModelFactory:
    return FakeModelFactory()


@pytest.fixture()
def client(config: StylistConfig, factory: FakeModelFactory) -> GeminiClient:
    return GeminiClient(config, model_factory=factory)


@pytest.fixture()
def manager(tmp_path) -> AccountManager:
    return AccountManager(JSONAccountStore(tmp_path / "accounts"))


@pytest.fixture()
def record(manager: AccountManager) -> AccountRecord:
    return manager.register("Ada@Example.com", "s3cret", "Ada")
