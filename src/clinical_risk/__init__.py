"""clinical-risk: validation and conservative merge of clinical risk extractions.

Core API::

    from clinical_risk import assess, scan_keywords

    result = assess(original, re_extracted, scan_keywords(note_text), 0.9)
    if result.requires_review:
        queue(result.review_reasons)

Orchestrated API (runs the safety re-extraction first)::

    from clinical_risk import RiskAssessor

    assessor = RiskAssessor(reextractor, settings.assessor)
    result = await assessor.assess_note(original, note_text, session_id="s-1")
"""

from __future__ import annotations

from clinical_risk.agents.risk_assessor import RiskAssessor
from clinical_risk.core.config import AppSettings, RiskAssessorConfig
from clinical_risk.exceptions import (
    ClinicalRiskError,
    ConfigurationError,
    ExtractionParseError,
    MissingDiagnosticFeedbackError,
    ReExtractionError,
)
from clinical_risk.interfaces.reextraction import IRiskReExtractor
from clinical_risk.keywords.scanner import scan_keywords
from clinical_risk.models import (
    Discrepancy,
    HomicidalIdeation,
    KeywordCheckResult,
    ReExtractionResponse,
    RiskAssessmentResult,
    RiskExtraction,
    RiskField,
    RiskLevelOverall,
    SafetyPlanStatus,
    SelfHarm,
    SiFrequency,
    SiIntensity,
    SourceSpan,
    SuicidalIdeation,
)
from clinical_risk.validation.engine import RiskValidationEngine, assess

__all__ = [
    # Core
    "assess",
    "RiskValidationEngine",
    "scan_keywords",
    # Orchestration
    "RiskAssessor",
    "IRiskReExtractor",
    "AppSettings",
    "RiskAssessorConfig",
    # Models
    "RiskExtraction",
    "RiskField",
    "SourceSpan",
    "KeywordCheckResult",
    "Discrepancy",
    "ReExtractionResponse",
    "RiskAssessmentResult",
    "SuicidalIdeation",
    "SiFrequency",
    "SiIntensity",
    "SelfHarm",
    "HomicidalIdeation",
    "SafetyPlanStatus",
    "RiskLevelOverall",
    # Errors
    "ClinicalRiskError",
    "ConfigurationError",
    "ExtractionParseError",
    "MissingDiagnosticFeedbackError",
    "ReExtractionError",
]
