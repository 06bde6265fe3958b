"""Body-architecture analysis from one full-length photo."""
from __future__ import annotations

import logging

from logic.prompts import body_analysis_instruction
from logic.validation import BODY_ANALYSIS_RESPONSE_SCHEMA, BodyAnalysisPayload
from models.style_profile import BodyAnalysis
from stylist_app.config import StylistConfig
from stylist_app.logging_config import get_logger, log_event, operation_context
from tools.gemini_client import GeminiClient, response_json
from tools.image_parts import image_part

logger = get_logger(__name__)

ANALYSIS_FAILED_MESSAGE = "Proportion analysis failed. Please use a clear full-length photo."


class AnalysisFailedError(RuntimeError):
    """Raised for any analysis failure; there is no fallback record."""

    def __init__(self, message: str = ANALYSIS_FAILED_MESSAGE) -> None:
        super().__init__(message)


class BodyAnalyzerAgent:
    def __init__(self, config: StylistConfig, client: GeminiClient | None = None) -> None:
        self.config = config
        self.client = client or GeminiClient(config)

    def analyze(self, image: str) -> BodyAnalysis:
        """Return the analysis or raise :class:`AnalysisFailedError`."""

        with operation_context("agent:body_analyzer.analyze", logger) as correlation_id:
            try:
                response = self.client.generate_json(
                    [image_part(image), "Analyze the body architecture in this photo."],
                    system_instruction=body_analysis_instruction(),
                    response_schema=BODY_ANALYSIS_RESPONSE_SCHEMA,
                )
                payload = BodyAnalysisPayload.model_validate(response_json(response))
            except Exception as exc:  # noqa: BLE001
                log_event(
                    logger,
                    logging.WARNING,
                    "agent_call_failed",
                    agent="body_analyzer",
                    correlation_id=correlation_id,
                    reason=type(exc).__name__,
                )
                raise AnalysisFailedError() from exc

            return BodyAnalysis(
                body_shape=payload.body_shape,
                proportions=payload.proportions,
                suggested_focus=payload.suggested_focus,
                height_estimate=payload.height_estimate,
            )


__all__ = ["BodyAnalyzerAgent", "AnalysisFailedError", "ANALYSIS_FAILED_MESSAGE"]
