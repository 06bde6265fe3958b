"""Thin wrapper around ``google.generativeai`` for schema-constrained JSON calls."""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

import google.generativeai as genai

from models.outfit import GroundingSource
from stylist_app.config import StylistConfig

logger = logging.getLogger(__name__)

ModelFactory = Callable[..., Any]
SEARCH_TOOL = "google_search_retrieval"


class GeminiClient:
    """Builds a ``GenerativeModel`` per call so each request gets its own system instruction."""

    def __init__(self, config: StylistConfig, model_factory: Optional[ModelFactory] = None) -> None:
        self.config = config
        self.model_factory = model_factory or genai.GenerativeModel

    def generate_json(
        self,
        parts: Sequence[Any],
        *,
        system_instruction: str,
        response_schema: Dict[str, Any],
        use_search: bool = False,
    ) -> Any:
        """Send one user turn and return the raw SDK response."""

        model_kwargs: Dict[str, Any] = {
            "model_name": self.config.model,
            "system_instruction": system_instruction,
        }
        if use_search:
            model_kwargs["tools"] = SEARCH_TOOL
        model = self.model_factory(**model_kwargs)
        logger.debug("Calling %s with %d parts (search=%s)", self.config.model, len(parts), use_search)
        return model.generate_content(
            [{"role": "user", "parts": list(parts)}],
            generation_config={
                "response_mime_type": "application/json",
                "response_schema": response_schema,
            },
            request_options={"timeout": self.config.request_timeout_seconds},
        )


def response_json(response: Any) -> Dict[str, Any]:
    """Decode the JSON body of a response; raises ``ValueError`` when it is not an object."""

    text = getattr(response, "text", None)
    if not text:
        raise ValueError("Model returned an empty response")
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError("Model response is not a JSON object")
    return data


def extract_sources(response: Any) -> List[GroundingSource]:
    """Collect web citations from the first candidate, skipping chunks without a URI."""

    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []
    metadata = getattr(candidates[0], "grounding_metadata", None)
    chunks = getattr(metadata, "grounding_chunks", None) or []
    sources: List[GroundingSource] = []
    for chunk in chunks:
        web = getattr(chunk, "web", None)
        uri = (getattr(web, "uri", None) or "").strip()
        if not uri or uri == "#":
            continue
        title = (getattr(web, "title", None) or "").strip() or "Fashion Source"
        sources.append(GroundingSource(title=title, uri=uri))
    return sources


__all__ = ["GeminiClient", "ModelFactory", "response_json", "extract_sources", "SEARCH_TOOL"]
