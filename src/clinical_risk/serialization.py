"""Plain-dict mapping for extractions and assessment results.

Field mapping is an explicit table (``_FIELD_SPECS``) keyed by the names in
``RISK_FIELD_NAMES``: payload keys are the camelCase names the extraction
parser emits, and snake_case keys are accepted as well.  Each field is an
object of the form ``{"value": ..., "confidence": ..., "source": ...}``.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Optional

from clinical_risk.core.types import CriteriaMap, JsonDict, ReasoningMap
from clinical_risk.exceptions import ExtractionParseError
from clinical_risk.models import (
    RISK_FIELD_NAMES,
    CanonicalEnum,
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

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class _FieldSpec:
    key: str
    kind: str  # "enum" | "text" | "list" | "bool"
    enum_type: Optional[type[CanonicalEnum]] = None


_FIELD_SPECS: dict[str, _FieldSpec] = {
    "suicidal_ideation": _FieldSpec("suicidalIdeation", "enum", SuicidalIdeation),
    "si_frequency": _FieldSpec("siFrequency", "enum", SiFrequency),
    "si_intensity": _FieldSpec("siIntensity", "enum", SiIntensity),
    "self_harm": _FieldSpec("selfHarm", "enum", SelfHarm),
    "sh_recency": _FieldSpec("shRecency", "text"),
    "homicidal_ideation": _FieldSpec("homicidalIdeation", "enum", HomicidalIdeation),
    "hi_target": _FieldSpec("hiTarget", "text"),
    "safety_plan_status": _FieldSpec("safetyPlanStatus", "enum", SafetyPlanStatus),
    "protective_factors": _FieldSpec("protectiveFactors", "list"),
    "risk_factors": _FieldSpec("riskFactors", "list"),
    "means_restriction_discussed": _FieldSpec("meansRestrictionDiscussed", "bool"),
    "risk_level_overall": _FieldSpec("riskLevelOverall", "enum", RiskLevelOverall),
}

if set(_FIELD_SPECS) != set(RISK_FIELD_NAMES):
    raise RuntimeError("Serialization field specs out of sync with RISK_FIELD_NAMES")


# ── Parsing ──────────────────────────────────────────────────────────


def extraction_from_dict(payload: Any) -> RiskExtraction:
    """Build a RiskExtraction from a parsed JSON object.

    Missing fields stay empty; unrecognized enum tokens are logged and left
    absent rather than guessed.

    Raises:
        ExtractionParseError: If the payload or a field entry is not an object.
    """
    if not isinstance(payload, dict):
        raise ExtractionParseError(
            f"Expected a JSON object for a risk extraction, got {type(payload).__name__}",
            raw_payload=payload,
        )

    fields: dict[str, RiskField] = {}
    for name, spec in _FIELD_SPECS.items():
        element = payload.get(spec.key, payload.get(name))
        if element is None:
            continue
        if not isinstance(element, dict):
            raise ExtractionParseError(
                f"Field '{spec.key}' must be an object with value/confidence/source",
                raw_payload=payload,
            )
        fields[name] = _parse_field(name, spec, element)

    return RiskExtraction(**fields)


def reextraction_from_dict(payload: Any) -> ReExtractionResponse:
    """Parse a re-extraction payload including its ``criteria_used``/``reasoning_used`` maps."""
    risk = extraction_from_dict(payload)
    return ReExtractionResponse(
        risk=risk,
        criteria_used=_parse_criteria(payload.get("criteria_used")),
        reasoning_used=_parse_reasoning(payload.get("reasoning_used")),
    )


def parse_confidence(raw: Any) -> float:
    """Confidence from a number or numeric string; anything else scores 0."""
    if isinstance(raw, bool):
        return 0.0
    if isinstance(raw, (int, float)):
        value = float(raw)
    elif isinstance(raw, str):
        try:
            value = float(raw.strip())
        except ValueError:
            return 0.0
    else:
        return 0.0
    return value if math.isfinite(value) else 0.0


def _parse_field(name: str, spec: _FieldSpec, element: JsonDict) -> RiskField:
    return RiskField(
        value=_parse_value(name, spec, element.get("value")),
        confidence=parse_confidence(element.get("confidence")),
        source=_parse_source(element.get("source")),
    )


def _parse_value(name: str, spec: _FieldSpec, raw: Any) -> Any:
    if raw is None:
        return None
    if spec.kind == "enum":
        if not isinstance(raw, str) or not raw.strip():
            return None
        member = spec.enum_type.parse(raw)  # type: ignore[union-attr]
        if member is None:
            log.warning("Unrecognized %s token %r; treating field as absent", name, raw)
        return member
    if spec.kind == "text":
        return raw if isinstance(raw, str) else str(raw)
    if spec.kind == "list":
        if not isinstance(raw, list):
            return ()
        return tuple(item for item in raw if isinstance(item, str))
    return raw is True


def _parse_source(raw: Any) -> Optional[SourceSpan]:
    if isinstance(raw, str):
        return SourceSpan(text=raw)
    if not isinstance(raw, dict):
        return None
    return SourceSpan(
        text=str(raw.get("text") or ""),
        start_char=_as_int(raw.get("startChar", raw.get("start_char"))),
        end_char=_as_int(raw.get("endChar", raw.get("end_char"))),
        section=raw.get("section"),
    )


def _as_int(raw: Any) -> int:
    if isinstance(raw, bool):
        return 0
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float) and math.isfinite(raw):
        return int(raw)
    return 0


def _parse_criteria(raw: Any) -> CriteriaMap:
    result: CriteriaMap = {}
    if not isinstance(raw, dict):
        return result
    for key, value in raw.items():
        items = value if isinstance(value, list) else [value]
        cleaned = [item.strip() for item in items if isinstance(item, str) and item.strip()]
        if cleaned:
            result[key] = cleaned
    return result


def _parse_reasoning(raw: Any) -> ReasoningMap:
    if not isinstance(raw, dict):
        return {}
    return {k: v.strip() for k, v in raw.items() if isinstance(v, str) and v.strip()}


# ── Rendering ────────────────────────────────────────────────────────


def extraction_to_dict(extraction: RiskExtraction) -> JsonDict:
    """Render an extraction with the same camelCase keys it is parsed from."""
    return {spec.key: _field_to_dict(extraction.get(name)) for name, spec in _FIELD_SPECS.items()}


def keywords_to_dict(keywords: KeywordCheckResult) -> JsonDict:
    return {
        "suicidalMatches": list(keywords.suicidal_matches),
        "selfHarmMatches": list(keywords.self_harm_matches),
        "homicidalMatches": list(keywords.homicidal_matches),
        "allMatches": keywords.all_matches,
    }


def discrepancy_to_dict(discrepancy: Discrepancy) -> JsonDict:
    return {
        "fieldName": discrepancy.field_name,
        "originalValue": discrepancy.original_value,
        "originalConfidence": discrepancy.original_confidence,
        "reExtractedValue": discrepancy.re_extracted_value,
        "reExtractedConfidence": discrepancy.re_extracted_confidence,
        "resolvedValue": discrepancy.resolved_value,
        "resolutionReason": discrepancy.resolution_reason,
    }


def result_to_dict(result: RiskAssessmentResult) -> JsonDict:
    """Render the terminal assessment record for the review queue and storage."""
    diagnostics = result.diagnostics
    return {
        "original": extraction_to_dict(result.original),
        "reExtracted": extraction_to_dict(result.re_extracted),
        "finalExtraction": extraction_to_dict(result.final_extraction),
        "discrepancies": [discrepancy_to_dict(d) for d in result.discrepancies],
        "keywordMatches": keywords_to_dict(result.keyword_matches),
        "determinedRiskLevel": result.determined_risk_level.value,
        "requiresReview": result.requires_review,
        "reviewReasons": list(result.review_reasons),
        "modelUsed": result.model_used,
        "diagnostics": {
            "decisions": [
                {
                    "field": d.field,
                    "originalValue": d.original_value,
                    "reExtractedValue": d.re_extracted_value,
                    "finalValue": d.final_value,
                    "ruleApplied": d.rule_applied,
                    "originalSource": d.original_source,
                    "reExtractedSource": d.re_extracted_source,
                    "finalSource": d.final_source,
                    "criteriaUsed": list(d.criteria_used),
                    "reasoningUsed": d.reasoning_used,
                }
                for d in diagnostics.decisions
            ],
            "homicidalKeywordMatches": list(diagnostics.homicidal_keyword_matches),
            "criteriaValidationAttemptsUsed": diagnostics.criteria_validation_attempts_used,
        },
    }


def _field_to_dict(risk_field: RiskField) -> JsonDict:
    value = risk_field.value
    if isinstance(value, CanonicalEnum):
        value = value.value
    elif isinstance(value, tuple):
        value = list(value)

    source = None
    if risk_field.source is not None:
        source = {
            "text": risk_field.source.text,
            "startChar": risk_field.source.start_char,
            "endChar": risk_field.source.end_char,
            "section": risk_field.source.section,
        }
    return {"value": value, "confidence": risk_field.confidence, "source": source}
