"""Risk assessor: runs the safety re-extraction and hands both passes to the engine.

The re-extraction is the only slow, failure-prone step.  It is awaited under
a timeout and any failure degrades to an empty re-extraction plus a forced
review, so a result is always produced.  Caller cancellation propagates.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from typing import Mapping, Optional, Sequence

from clinical_risk.core.config import RiskAssessorConfig
from clinical_risk.exceptions import MissingDiagnosticFeedbackError
from clinical_risk.hooks.session_context import session_context
from clinical_risk.interfaces.reextraction import IRiskReExtractor
from clinical_risk.keywords.scanner import scan_keywords
from clinical_risk.models import (
    KeywordCheckResult,
    ReExtractionResponse,
    RiskAssessmentResult,
    RiskExtraction,
)
from clinical_risk.validation.engine import RiskValidationEngine

log = logging.getLogger(__name__)

REQUIRED_DIAGNOSTIC_KEYS: tuple[str, ...] = (
    "suicidal_ideation",
    "si_frequency",
    "self_harm",
    "homicidal_ideation",
    "risk_level_overall",
)


def missing_criteria_keys(criteria_used: Mapping[str, Sequence[str]]) -> list[str]:
    """Required keys with no non-blank criteria."""
    lowered = {k.lower(): v for k, v in criteria_used.items()}
    return [
        key
        for key in REQUIRED_DIAGNOSTIC_KEYS
        if not any(item and item.strip() for item in lowered.get(key, ()))
    ]


def missing_reasoning_keys(reasoning_used: Mapping[str, str]) -> list[str]:
    """Required keys with blank or missing reasoning."""
    lowered = {k.lower(): v for k, v in reasoning_used.items()}
    return [key for key in REQUIRED_DIAGNOSTIC_KEYS if not (lowered.get(key) or "").strip()]


class RiskAssessor:
    """Safety-critical second pass over the risk fields of one therapy note."""

    def __init__(
        self,
        reextractor: IRiskReExtractor,
        config: Optional[RiskAssessorConfig] = None,
    ) -> None:
        self._reextractor = reextractor
        self._config = config or RiskAssessorConfig()
        self._engine = RiskValidationEngine.from_config(self._config)

    @property
    def engine(self) -> RiskValidationEngine:
        return self._engine

    async def assess_note(
        self,
        original: RiskExtraction,
        note_text: str,
        *,
        session_id: str = "",
    ) -> RiskAssessmentResult:
        """Validate ``original`` against a fresh re-extraction of ``note_text``.

        Raises:
            MissingDiagnosticFeedbackError: When ``require_criteria_used`` is set
                and every attempt omitted required criteria/reasoning keys.
        """
        with session_context(session_id):
            log.info("Starting risk assessment for session %s", session_id)

            prior_reasons: list[str] = []
            force_review = False
            response = ReExtractionResponse(risk=original)

            if self._config.always_reextract:
                try:
                    response = await self._reextract(note_text)
                except Exception as exc:
                    if self._config.require_criteria_used and isinstance(exc, MissingDiagnosticFeedbackError):
                        raise
                    log.exception("Error during risk re-extraction for session %s", session_id)
                    response = ReExtractionResponse(risk=RiskExtraction())
                    prior_reasons.append(f"Re-extraction failed: {str(exc) or type(exc).__name__}")
                    force_review = True

            keywords = (
                scan_keywords(note_text)
                if self._engine.keyword_safety_net_enabled
                else KeywordCheckResult()
            )

            result = self._engine.validate(
                original,
                response.risk,
                keywords,
                prior_reasons=prior_reasons,
                force_review=force_review,
                criteria_used=response.criteria_used,
                reasoning_used=response.reasoning_used,
                criteria_validation_attempts_used=response.attempts_used,
                model_used=self._reextractor.model_name if self._config.always_reextract else "",
            )

            log.info(
                "Risk assessment completed for session %s. RequiresReview: %s, RiskLevel: %s, Discrepancies: %d",
                session_id,
                result.requires_review,
                result.determined_risk_level.value,
                len(result.discrepancies),
            )
            return result

    async def _reextract(self, note_text: str) -> ReExtractionResponse:
        """Call the re-extractor, retrying while required diagnostics are missing."""
        attempts = max(1, self._config.criteria_validation_attempts)
        missing_criteria: list[str] = []
        missing_reasoning: list[str] = []

        for attempt in range(1, attempts + 1):
            response = await asyncio.wait_for(
                self._reextractor.reextract(note_text, retry_hint=attempt > 1),
                timeout=self._config.reextraction_timeout,
            )
            response = dataclasses.replace(response, attempts_used=attempt)

            if not self._config.require_criteria_used:
                return response

            missing_criteria = missing_criteria_keys(response.criteria_used)
            missing_reasoning = missing_reasoning_keys(response.reasoning_used)
            if not missing_criteria and not missing_reasoning:
                return response

            log.warning(
                "Re-extraction attempt %d/%d missing diagnostics: criteria=%s reasoning=%s",
                attempt,
                attempts,
                missing_criteria,
                missing_reasoning,
            )

        raise MissingDiagnosticFeedbackError(missing_criteria, missing_reasoning)
