"""Severity model: a total order of clinical concern per risk field.

Each severity-ordered field maps its enum members to a non-negative integer,
strictly increasing with concern.  Absent values go through a single named
normalization step (:func:`normalize`) before they are scored, and an
unrecognized token is reported as an explicit :attr:`TokenClass.UNKNOWN`
case that scores the field's minimum.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Union

from clinical_risk.models import (
    CanonicalEnum,
    CriticalField,
    HomicidalIdeation,
    RiskLevelOverall,
    SelfHarm,
    SiFrequency,
    SiIntensity,
    SuicidalIdeation,
)

SeverityInput = Union[CanonicalEnum, str, None]

SEVERITY_ORDER: dict[CriticalField, dict[CanonicalEnum, int]] = {
    CriticalField.SUICIDAL_IDEATION: {
        SuicidalIdeation.NONE: 0,
        SuicidalIdeation.PASSIVE: 1,
        SuicidalIdeation.ACTIVE_NO_PLAN: 2,
        SuicidalIdeation.ACTIVE_WITH_PLAN: 3,
        SuicidalIdeation.ACTIVE_WITH_INTENT: 4,
    },
    CriticalField.SELF_HARM: {
        SelfHarm.NONE: 0,
        SelfHarm.HISTORICAL: 1,
        SelfHarm.RECENT: 2,
        SelfHarm.CURRENT: 3,
        SelfHarm.IMMINENT: 4,
    },
    CriticalField.HOMICIDAL_IDEATION: {
        HomicidalIdeation.NONE: 0,
        HomicidalIdeation.PASSIVE: 1,
        HomicidalIdeation.ACTIVE_NO_PLAN: 2,
        HomicidalIdeation.ACTIVE_WITH_PLAN: 3,
    },
    CriticalField.RISK_LEVEL_OVERALL: {
        RiskLevelOverall.LOW: 0,
        RiskLevelOverall.MODERATE: 1,
        RiskLevelOverall.HIGH: 2,
        RiskLevelOverall.IMMINENT: 3,
    },
}

# "No finding" default an absent value normalizes to.
NO_FINDING: dict[CriticalField, CanonicalEnum] = {
    CriticalField.SUICIDAL_IDEATION: SuicidalIdeation.NONE,
    CriticalField.SELF_HARM: SelfHarm.NONE,
    CriticalField.HOMICIDAL_IDEATION: HomicidalIdeation.NONE,
    CriticalField.RISK_LEVEL_OVERALL: RiskLevelOverall.LOW,
}

MIN_SEVERITY = 0


class TokenClass(str, Enum):
    """How a raw value was interpreted by the severity model."""

    KNOWN = "known"
    ABSENT = "absent"
    UNKNOWN = "unknown"


def resolve(field: CriticalField, value: SeverityInput) -> tuple[TokenClass, Optional[CanonicalEnum]]:
    """Interpret ``value`` for ``field``: a member, an absence, or an unknown token."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return TokenClass.ABSENT, None
    member = field.enum_type.parse(value)
    if member is None:
        return TokenClass.UNKNOWN, None
    return TokenClass.KNOWN, member


def classify_token(field: CriticalField, value: SeverityInput) -> TokenClass:
    """Return whether ``value`` is a known token, an absence, or an unrecognized token."""
    return resolve(field, value)[0]


def normalize(field: CriticalField, value: SeverityInput) -> str:
    """Canonical token for ``value``; absent values become the field's no-finding default.

    Unknown tokens are returned stripped but otherwise unchanged so the
    anomaly stays visible on discrepancy records.
    """
    kind, member = resolve(field, value)
    if kind is TokenClass.KNOWN:
        return member.value  # type: ignore[union-attr]
    if kind is TokenClass.ABSENT:
        return NO_FINDING[field].value
    return str(value).strip()


def severity(field: CriticalField, value: SeverityInput) -> int:
    """Severity score of ``value`` for ``field``.

    Absent and unrecognized values both score the minimum.
    """
    kind, member = resolve(field, value)
    if kind is not TokenClass.KNOWN:
        return MIN_SEVERITY
    return SEVERITY_ORDER[field][member]  # type: ignore[index]


def select_more_severe(field: CriticalField, first: SeverityInput, second: SeverityInput) -> str:
    """Normalized token of the more severe value; ties go to ``first``."""
    if severity(field, first) >= severity(field, second):
        return normalize(field, first)
    return normalize(field, second)


def is_no_finding(field: CriticalField, value: SeverityInput) -> bool:
    """True when ``value`` is at the field's lowest severity (absent included)."""
    return severity(field, value) == MIN_SEVERITY


def ordinal(value: Optional[Union[SiFrequency, SiIntensity]]) -> int:
    """Declaration-order rank for frequency/intensity, starting at 1; absent ranks 0."""
    if value is None:
        return 0
    return list(type(value)).index(value) + 1
