"""Per-field decision diagnostics for the assessment audit trail."""

from __future__ import annotations

from typing import Mapping, Optional, Sequence

from clinical_risk.models import (
    CriticalField,
    Discrepancy,
    FieldDecision,
    KeywordCheckResult,
    RiskDiagnostics,
    RiskExtraction,
    RiskField,
)
from clinical_risk.severity import normalize

MAX_SOURCE_CHARS = 220
MAX_REASONING_CHARS = 320

# Diagnostic key -> critical field, or None for fields that never produce discrepancies.
DIAGNOSTIC_FIELDS: tuple[tuple[str, Optional[CriticalField]], ...] = (
    ("suicidal_ideation", CriticalField.SUICIDAL_IDEATION),
    ("si_frequency", None),
    ("self_harm", CriticalField.SELF_HARM),
    ("homicidal_ideation", CriticalField.HOMICIDAL_IDEATION),
    ("risk_level_overall", CriticalField.RISK_LEVEL_OVERALL),
)


def build_diagnostics(
    original: RiskExtraction,
    re_extracted: RiskExtraction,
    final: RiskExtraction,
    discrepancies: Sequence[Discrepancy],
    keywords: KeywordCheckResult,
    *,
    criteria_used: Optional[Mapping[str, Sequence[str]]] = None,
    reasoning_used: Optional[Mapping[str, str]] = None,
    criteria_validation_attempts_used: int = 1,
) -> RiskDiagnostics:
    """Describe how each tracked field was resolved."""
    criteria = {k.lower(): v for k, v in (criteria_used or {}).items()}
    reasoning = {k.lower(): v for k, v in (reasoning_used or {}).items()}
    discrepant = {d.field_name.lower() for d in discrepancies}

    decisions = []
    for key, which in DIAGNOSTIC_FIELDS:
        first = original.get(key)
        second = re_extracted.get(key)
        merged = final.get(key)
        had_discrepancy = which is not None and which.value.lower() in discrepant

        decisions.append(
            FieldDecision(
                field=key,
                original_value=_display(which, first),
                re_extracted_value=_display(which, second),
                final_value=_display(which, merged),
                rule_applied="conservative_merge" if had_discrepancy else "no_merge_change",
                original_source=normalize_source(first),
                re_extracted_source=normalize_source(second),
                final_source=normalize_source(merged),
                criteria_used=tuple(c.strip() for c in criteria.get(key, ()) if c and c.strip()),
                reasoning_used=normalize_reasoning(reasoning.get(key)),
            )
        )

    return RiskDiagnostics(
        decisions=tuple(decisions),
        homicidal_keyword_matches=tuple(keywords.homicidal_matches),
        criteria_validation_attempts_used=max(1, criteria_validation_attempts_used),
    )


def normalize_source(risk_field: RiskField) -> Optional[str]:
    """Trimmed source text, capped at ``MAX_SOURCE_CHARS``; None when blank."""
    if risk_field.source is None or not risk_field.source.text.strip():
        return None
    return risk_field.source.text.strip()[:MAX_SOURCE_CHARS]


def normalize_reasoning(text: Optional[str]) -> str:
    if not text or not text.strip():
        return ""
    return text.strip()[:MAX_REASONING_CHARS]


def _display(which: Optional[CriticalField], risk_field: RiskField) -> str:
    if which is not None:
        return normalize(which, risk_field.value)
    if risk_field.value is None:
        return ""
    return getattr(risk_field.value, "value", str(risk_field.value))
