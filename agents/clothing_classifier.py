"""Best-effort auto-classification of an uploaded clothing photo."""
from __future__ import annotations

import logging

from logic.prompts import classification_instruction
from logic.validation import CLASSIFICATION_RESPONSE_SCHEMA, FALLBACK_CLASSIFICATION, ClassificationPayload
from stylist_app.config import StylistConfig
from stylist_app.logging_config import get_logger, log_event, operation_context
from tools.gemini_client import GeminiClient, response_json
from tools.image_parts import image_part

logger = get_logger(__name__)


class ClothingClassifierAgent:
    """Guesses category, name and attributes; never blocks an upload."""

    def __init__(self, config: StylistConfig, client: GeminiClient | None = None) -> None:
        self.config = config
        self.client = client or GeminiClient(config)

    def classify(self, image: str) -> ClassificationPayload:
        with operation_context("agent:clothing_classifier.classify", logger) as correlation_id:
            try:
                response = self.client.generate_json(
                    [image_part(image), "Classify this clothing item."],
                    system_instruction=classification_instruction(),
                    response_schema=CLASSIFICATION_RESPONSE_SCHEMA,
                )
                result = ClassificationPayload.model_validate(response_json(response))
            except Exception as exc:  # noqa: BLE001
                log_event(
                    logger,
                    logging.WARNING,
                    "classification_fallback",
                    agent="clothing_classifier",
                    correlation_id=correlation_id,
                    reason=type(exc).__name__,
                )
                return FALLBACK_CLASSIFICATION.model_copy()

            log_event(
                logger,
                logging.INFO,
                "agent_call_completed",
                agent="clothing_classifier",
                correlation_id=correlation_id,
                category=result.category,
                classification=result.classification,
            )
            return result


__all__ = ["ClothingClassifierAgent"]
