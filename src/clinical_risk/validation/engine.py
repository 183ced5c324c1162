"""Risk validation engine: the fixed assessment pipeline.

``assess()`` runs discrepancy detection, conservative merge, escalation
detection, the keyword cross-check and the review rules, in that order, and
returns one immutable ``RiskAssessmentResult``.  It is pure computation with
no I/O, safe to call concurrently for different cases.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Mapping, Optional, Sequence

from clinical_risk.models import (
    KeywordCheckResult,
    RiskAssessmentResult,
    RiskExtraction,
    RiskLevelOverall,
)
from clinical_risk.validation.diagnostics import build_diagnostics
from clinical_risk.validation.discrepancy import find_discrepancies
from clinical_risk.validation.escalation import is_escalation
from clinical_risk.validation.keywords import check_keyword_mismatch
from clinical_risk.validation.merge import conservative_merge
from clinical_risk.validation.review import DEFAULT_CONFIDENCE_THRESHOLD, determine_review

if TYPE_CHECKING:
    from clinical_risk.core.config import RiskAssessorConfig

log = logging.getLogger(__name__)


def assess(
    original: RiskExtraction,
    re_extracted: RiskExtraction,
    keyword_matches: Optional[KeywordCheckResult] = None,
    confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
    *,
    prior_reasons: Sequence[str] = (),
    force_review: bool = False,
    use_conservative_merge: bool = True,
    criteria_used: Optional[Mapping[str, Sequence[str]]] = None,
    reasoning_used: Optional[Mapping[str, str]] = None,
    criteria_validation_attempts_used: int = 1,
    model_used: str = "",
) -> RiskAssessmentResult:
    """Reconcile two extraction passes into a final extraction and a review decision.

    Args:
        original: Broad first-pass extraction.
        re_extracted: Focused safety re-extraction (empty on upstream failure).
        keyword_matches: Keyword scan of the raw note; None means no scan ran.
        confidence_threshold: Critical findings below this confidence need review.
        prior_reasons: Reasons added upstream (e.g. a failed re-extraction);
            they lead the reason list.
        force_review: Upstream demand for review regardless of the rules.
        use_conservative_merge: When False the re-extraction is taken as final.
        criteria_used: Per-field criteria reported by the re-extraction.
        reasoning_used: Per-field reasoning reported by the re-extraction.
        criteria_validation_attempts_used: Re-extraction attempts spent.
        model_used: Model that produced the re-extraction.
    """
    keywords = keyword_matches or KeywordCheckResult()

    discrepancies = find_discrepancies(original, re_extracted, conservative=use_conservative_merge)
    final = conservative_merge(original, re_extracted) if use_conservative_merge else re_extracted
    escalation = is_escalation(original, re_extracted)
    keyword_reasons = check_keyword_mismatch(final, keywords)

    decision = determine_review(
        discrepancies,
        final,
        escalation=escalation,
        keyword_reasons=keyword_reasons,
        confidence_threshold=confidence_threshold,
    )

    diagnostics = build_diagnostics(
        original,
        re_extracted,
        final,
        discrepancies,
        keywords,
        criteria_used=criteria_used,
        reasoning_used=reasoning_used,
        criteria_validation_attempts_used=criteria_validation_attempts_used,
    )

    result = RiskAssessmentResult(
        original=original,
        re_extracted=re_extracted,
        final_extraction=final,
        discrepancies=tuple(discrepancies),
        keyword_matches=keywords,
        determined_risk_level=RiskLevelOverall.parse(final.risk_level_overall.value) or RiskLevelOverall.LOW,
        requires_review=force_review or decision.requires_review,
        review_reasons=(*prior_reasons, *decision.reasons),
        diagnostics=diagnostics,
        model_used=model_used,
    )

    log.debug(
        "Risk assessment computed: requires_review=%s risk_level=%s discrepancies=%d rules=%s",
        result.requires_review,
        result.determined_risk_level.value,
        len(result.discrepancies),
        ",".join(decision.triggered_rules) or "-",
    )
    return result


class RiskValidationEngine:
    """Runs ``assess()`` with thresholds and toggles taken from configuration."""

    def __init__(
        self,
        *,
        confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
        enable_keyword_safety_net: bool = True,
        use_conservative_merge: bool = True,
    ) -> None:
        self._threshold = confidence_threshold
        self._keyword_safety_net = enable_keyword_safety_net
        self._conservative_merge = use_conservative_merge

    @classmethod
    def from_config(cls, config: RiskAssessorConfig) -> RiskValidationEngine:
        return cls(
            confidence_threshold=config.confidence_threshold,
            enable_keyword_safety_net=config.enable_keyword_safety_net,
            use_conservative_merge=config.use_conservative_merge,
        )

    @property
    def confidence_threshold(self) -> float:
        return self._threshold

    @property
    def keyword_safety_net_enabled(self) -> bool:
        return self._keyword_safety_net

    def validate(
        self,
        original: RiskExtraction,
        re_extracted: RiskExtraction,
        keyword_matches: Optional[KeywordCheckResult] = None,
        **kwargs: object,
    ) -> RiskAssessmentResult:
        """Assess a pair of extractions; keyword matches are ignored when the safety net is off."""
        keywords = keyword_matches if self._keyword_safety_net else None
        return assess(
            original,
            re_extracted,
            keywords,
            self._threshold,
            use_conservative_merge=self._conservative_merge,
            **kwargs,  # type: ignore[arg-type]
        )
