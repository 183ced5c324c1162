"""Validation module: discrepancy detection, conservative merge, review rules.

Factory function::

    from clinical_risk.validation import create_validation_engine
    engine = create_validation_engine(settings)
    result = engine.validate(original, re_extracted, keyword_matches)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from clinical_risk.validation.discrepancy import find_discrepancies
from clinical_risk.validation.engine import RiskValidationEngine, assess
from clinical_risk.validation.escalation import is_escalation
from clinical_risk.validation.keywords import check_keyword_mismatch
from clinical_risk.validation.merge import conservative_merge
from clinical_risk.validation.review import ReviewDecision, determine_review

if TYPE_CHECKING:
    from clinical_risk.core.config import AppSettings


def create_validation_engine(settings: AppSettings) -> RiskValidationEngine:
    """Create a RiskValidationEngine from application settings."""
    return RiskValidationEngine.from_config(settings.assessor)


__all__ = [
    "ReviewDecision",
    "RiskValidationEngine",
    "assess",
    "check_keyword_mismatch",
    "conservative_merge",
    "create_validation_engine",
    "determine_review",
    "find_discrepancies",
    "is_escalation",
]
