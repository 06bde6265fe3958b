"""Outfit generator agent: multi-modal request in, typed outfit suggestions out."""
from __future__ import annotations

import logging
import time
from typing import Any, List, Optional, Sequence

from pydantic import ValidationError

from logic.laundry import annotate, available_items
from logic.prompts import (
    INSPIRATION_SENTINEL,
    WARDROBE_SENTINEL,
    describe_wardrobe,
    stylist_system_instruction,
)
from logic.validation import OUTFITS_RESPONSE_SCHEMA, OutfitsPayload
from models.outfit import OutfitSuggestion
from models.style_profile import StyleProfile
from models.taxonomy import MAX_INSPIRATION_IMAGES, MIN_WARDROBE_FOR_STYLING
from models.wardrobe_item import ClothingItem, InspirationImage
from stylist_app.config import StylistConfig
from stylist_app.logging_config import get_logger, log_event, operation_context
from tools.gemini_client import GeminiClient, extract_sources, response_json
from tools.image_parts import image_part

logger = get_logger(__name__)

STYLING_FAILED_MESSAGE = "Our stylist is gathering current trends. Please try again."
INSUFFICIENT_WARDROBE_MESSAGE = "Upload your clothing pieces first."


class InsufficientWardrobeError(ValueError):
    """Raised before any model call when the wardrobe cannot form an outfit."""

    def __init__(self, count: int) -> None:
        super().__init__(INSUFFICIENT_WARDROBE_MESSAGE)
        self.count = count


class StylingFailedError(RuntimeError):
    """Single user-facing failure for network, timeout, schema and parse errors."""

    def __init__(self, message: str = STYLING_FAILED_MESSAGE) -> None:
        super().__init__(message)


def resolve_item_indices(indices: Sequence[Any], wardrobe: Sequence[ClothingItem]) -> List[str]:
    """Map index strings to wardrobe item ids, silently dropping anything unresolvable."""

    resolved: List[str] = []
    for raw in indices:
        try:
            position = int(str(raw).strip())
        except ValueError:
            logger.debug("Dropping non-numeric item index %r", raw)
            continue
        if 0 <= position < len(wardrobe):
            resolved.append(wardrobe[position].item_id)
        else:
            logger.debug("Dropping out-of-range item index %d", position)
    return resolved


class OutfitGeneratorAgent:
    """Asks Gemini for Classic, Practical and Bold looks built from the wardrobe."""

    def __init__(self, config: StylistConfig, client: GeminiClient | None = None) -> None:
        self.config = config
        self.client = client or GeminiClient(config)

    def build_parts(
        self,
        wardrobe: Sequence[ClothingItem],
        inspiration: Sequence[InspirationImage],
        prompt: str,
        laundry_cycle_days: int,
        now: float,
    ) -> List[Any]:
        """Descriptors, wardrobe images, sentinel, inspiration images, sentinel, then the prompt."""

        statuses = annotate(wardrobe, now, laundry_cycle_days)
        parts: List[Any] = list(describe_wardrobe(wardrobe, statuses))
        parts.extend(image_part(item.image) for item in wardrobe)
        parts.append(WARDROBE_SENTINEL)
        parts.extend(image_part(image.image) for image in list(inspiration)[-MAX_INSPIRATION_IMAGES:])
        parts.append(INSPIRATION_SENTINEL)
        parts.append(prompt)
        return parts

    def generate_outfits(
        self,
        wardrobe: Sequence[ClothingItem],
        inspiration: Sequence[InspirationImage],
        prompt: str,
        profile: StyleProfile,
        trend_url: Optional[str] = None,
        now: Optional[float] = None,
    ) -> List[OutfitSuggestion]:
        """Return the suggestions; raise before calling out when the wardrobe is too small."""

        if len(wardrobe) < MIN_WARDROBE_FOR_STYLING:
            raise InsufficientWardrobeError(len(wardrobe))

        now = time.time() if now is None else now
        candidates = list(wardrobe)
        if self.config.enforce_laundry_filter:
            candidates = available_items(candidates, now, profile.laundry_cycle_days)
            if len(candidates) < MIN_WARDROBE_FOR_STYLING:
                raise InsufficientWardrobeError(len(candidates))

        with operation_context("agent:outfit_generator.generate", logger) as correlation_id:
            log_event(
                logger,
                logging.INFO,
                "agent_call_started",
                agent="outfit_generator",
                correlation_id=correlation_id,
                wardrobe_size=len(candidates),
                inspiration_size=min(len(inspiration), MAX_INSPIRATION_IMAGES),
                trend_reference=bool(trend_url),
            )
            try:
                parts = self.build_parts(candidates, inspiration, prompt, profile.laundry_cycle_days, now)
                response = self.client.generate_json(
                    parts,
                    system_instruction=stylist_system_instruction(profile, trend_url),
                    response_schema=OUTFITS_RESPONSE_SCHEMA,
                    use_search=self.config.search_grounding,
                )
                payload = OutfitsPayload.model_validate(response_json(response))
                sources = extract_sources(response)
            except (ValidationError, ValueError) as exc:
                log_event(
                    logger,
                    logging.WARNING,
                    "agent_response_invalid",
                    agent="outfit_generator",
                    correlation_id=correlation_id,
                    details=str(exc),
                )
                raise StylingFailedError() from exc
            except Exception as exc:  # noqa: BLE001
                log_event(
                    logger,
                    logging.ERROR,
                    "agent_call_failed",
                    agent="outfit_generator",
                    correlation_id=correlation_id,
                    exc_info=True,
                )
                raise StylingFailedError() from exc

            suggestions = [
                OutfitSuggestion(
                    title=outfit.title,
                    description=outfit.description,
                    fashion_guideline=outfit.fashion_guideline,
                    trend_factor=outfit.trend_factor,
                    identity_match=outfit.identity_match,
                    proportion_note=outfit.proportion_note,
                    outfit_type=outfit.outfit_type,
                    items=resolve_item_indices(outfit.items, candidates),
                    sources=list(sources),
                )
                for outfit in payload.outfits
            ]
            log_event(
                logger,
                logging.INFO,
                "agent_call_completed",
                agent="outfit_generator",
                correlation_id=correlation_id,
                outfit_count=len(suggestions),
                source_count=len(sources),
            )
            return suggestions


__all__ = [
    "OutfitGeneratorAgent",
    "InsufficientWardrobeError",
    "StylingFailedError",
    "resolve_item_indices",
    "STYLING_FAILED_MESSAGE",
    "INSUFFICIENT_WARDROBE_MESSAGE",
]
