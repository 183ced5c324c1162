"""Escalation: the safety re-extraction read a higher overall risk than the first pass."""

from __future__ import annotations

from clinical_risk.models import CriticalField, RiskExtraction
from clinical_risk.severity import severity


def is_escalation(original: RiskExtraction, re_extracted: RiskExtraction) -> bool:
    """True when the re-extracted overall risk level is strictly more severe."""
    which = CriticalField.RISK_LEVEL_OVERALL
    return severity(which, re_extracted.risk_level_overall.value) > severity(
        which, original.risk_level_overall.value
    )
