"""Conservative merge: one final extraction from the two passes.

Every field of ``RiskExtraction`` has exactly one resolver in
``_FIELD_RESOLVERS``; the table is checked against ``RISK_FIELD_NAMES`` at
import so a new risk field cannot be merged silently by default.
"""

from __future__ import annotations

import dataclasses
from typing import Callable

from clinical_risk.models import (
    RISK_FIELD_NAMES,
    CanonicalEnum,
    CriticalField,
    RiskExtraction,
    RiskField,
    SiFrequency,
    SiIntensity,
)
from clinical_risk.severity import ordinal, severity

FieldResolver = Callable[[RiskField, RiskField], RiskField]


def _canonical(enum_type: type[CanonicalEnum], risk_field: RiskField) -> RiskField:
    """Replace a recognized string token with its enum member; unknown tokens stay as-is."""
    member = enum_type.parse(risk_field.value)
    if member is None or member is risk_field.value:
        return risk_field
    return dataclasses.replace(risk_field, value=member)


def _more_severe(which: CriticalField) -> FieldResolver:
    def resolver(first: RiskField, second: RiskField) -> RiskField:
        chosen = first if severity(which, first.value) >= severity(which, second.value) else second
        return _canonical(which.enum_type, chosen)

    return resolver


def _higher_ordinal(enum_type: type[CanonicalEnum]) -> FieldResolver:
    def resolver(first: RiskField, second: RiskField) -> RiskField:
        first, second = _canonical(enum_type, first), _canonical(enum_type, second)
        return first if _rank(first) >= _rank(second) else second

    return resolver


def _rank(risk_field: RiskField) -> int:
    # Unrecognized tokens rank with absent values.
    return ordinal(risk_field.value) if isinstance(risk_field.value, CanonicalEnum) else 0


def _non_empty_text(first: RiskField, second: RiskField) -> RiskField:
    if first.value and first.value.strip():
        return first
    if second.value and second.value.strip():
        return second
    return first


def _prefer_reported_re_extraction(first: RiskField, second: RiskField) -> RiskField:
    # The re-extraction is the more recent, safety-focused read.
    return second if second.confidence > 0 else first


def _union(first: RiskField, second: RiskField) -> RiskField:
    seen: set[str] = set()
    combined: list[str] = []
    for item in (*(first.value or ()), *(second.value or ())):
        key = item.casefold()
        if key in seen:
            continue
        seen.add(key)
        combined.append(item)
    return RiskField(
        value=tuple(combined),
        confidence=max(first.confidence, second.confidence),
        source=first.source or second.source,
    )


def _logical_or(first: RiskField, second: RiskField) -> RiskField:
    return RiskField(
        value=bool(first.value) or bool(second.value),
        confidence=max(first.confidence, second.confidence),
        source=first.source or second.source,
    )


_FIELD_RESOLVERS: dict[str, FieldResolver] = {
    "suicidal_ideation": _more_severe(CriticalField.SUICIDAL_IDEATION),
    "si_frequency": _higher_ordinal(SiFrequency),
    "si_intensity": _higher_ordinal(SiIntensity),
    "self_harm": _more_severe(CriticalField.SELF_HARM),
    "sh_recency": _non_empty_text,
    "homicidal_ideation": _more_severe(CriticalField.HOMICIDAL_IDEATION),
    "hi_target": _non_empty_text,
    "safety_plan_status": _prefer_reported_re_extraction,
    "protective_factors": _union,
    "risk_factors": _union,
    "means_restriction_discussed": _logical_or,
    "risk_level_overall": _more_severe(CriticalField.RISK_LEVEL_OVERALL),
}

if set(_FIELD_RESOLVERS) != set(RISK_FIELD_NAMES):
    _missing = sorted(set(RISK_FIELD_NAMES) - set(_FIELD_RESOLVERS))
    _extra = sorted(set(_FIELD_RESOLVERS) - set(RISK_FIELD_NAMES))
    raise RuntimeError(f"Merge resolvers out of sync with risk fields: missing={_missing} extra={_extra}")


def conservative_merge(original: RiskExtraction, re_extracted: RiskExtraction) -> RiskExtraction:
    """Merge two passes field by field, always keeping the more concerning reading."""
    merged = {
        name: resolver(original.get(name), re_extracted.get(name))
        for name, resolver in _FIELD_RESOLVERS.items()
    }
    return RiskExtraction(**merged)
