"""Review-requirement rules: decide whether a human must look at the case.

Each rule is independent and order-free; ``requires_review`` is the OR of
all of them and every triggered rule contributes its reason(s) to the
decision.  Reasons are never deduplicated or truncated.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from clinical_risk.models import CriticalField, Discrepancy, RiskExtraction
from clinical_risk.severity import is_no_finding

DEFAULT_CONFIDENCE_THRESHOLD = 0.9

RULE_DISCREPANCY = "RR-001"
RULE_LOW_CONFIDENCE = "RR-002"
RULE_HIGH_RISK = "RR-003"
RULE_ESCALATION = "RR-004"
RULE_KEYWORD_MISMATCH = "RR-005"


@dataclass(frozen=True)
class ReviewDecision:
    """Outcome of the review rules with the reasons that produced it."""

    requires_review: bool
    reasons: tuple[str, ...] = ()
    triggered_rules: tuple[str, ...] = ()


def determine_review(
    discrepancies: Sequence[Discrepancy],
    final_extraction: RiskExtraction,
    *,
    escalation: bool,
    keyword_reasons: Sequence[str] = (),
    confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
) -> ReviewDecision:
    """Run all review rules and aggregate their reasons."""
    reasons: list[str] = []
    triggered: list[str] = []

    checks = [
        (RULE_DISCREPANCY, _check_discrepancies(discrepancies)),
        (RULE_LOW_CONFIDENCE, _check_low_confidence(final_extraction, confidence_threshold)),
        (RULE_HIGH_RISK, _check_high_risk(final_extraction)),
        (RULE_ESCALATION, _check_escalation(escalation)),
        (RULE_KEYWORD_MISMATCH, list(keyword_reasons)),
    ]

    for rule_id, rule_reasons in checks:
        if rule_reasons:
            triggered.append(rule_id)
            reasons.extend(rule_reasons)

    return ReviewDecision(
        requires_review=bool(triggered),
        reasons=tuple(reasons),
        triggered_rules=tuple(triggered),
    )


def has_low_confidence_finding(extraction: RiskExtraction, threshold: float) -> bool:
    """True when a critical field reports a finding with confidence under ``threshold``."""
    for which in CriticalField:
        risk_field = extraction.critical(which)
        if is_no_finding(which, risk_field.value):
            continue
        if risk_field.confidence < threshold:
            return True
    return False


def _check_discrepancies(discrepancies: Sequence[Discrepancy]) -> list[str]:
    if not discrepancies:
        return []
    names = ", ".join(d.field_name for d in discrepancies)
    return [f"Discrepancies found in {len(discrepancies)} field(s): {names}"]


def _check_low_confidence(extraction: RiskExtraction, threshold: float) -> list[str]:
    if not has_low_confidence_finding(extraction, threshold):
        return []
    return [f"One or more risk fields have confidence below {threshold:g} threshold"]


def _check_high_risk(extraction: RiskExtraction) -> list[str]:
    if not extraction.is_high_risk():
        return []
    return ["High-risk indicators detected"]


def _check_escalation(escalation: bool) -> list[str]:
    if not escalation:
        return []
    return ["Re-extraction identified higher risk level than original extraction"]
