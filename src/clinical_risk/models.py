"""Risk-assessment domain models: enums, field wrappers and result records.

This is the **canonical** location for the clinical-risk data structures.
Every record here is a frozen dataclass: an extraction pass, once produced,
is never mutated, and neither is the assessment result built from it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


# ── Enums ────────────────────────────────────────────────────────────


class CanonicalEnum(str, Enum):
    """String enum whose values are the canonical PascalCase token names."""

    @classmethod
    def parse(cls, token: object) -> Optional[CanonicalEnum]:
        """Case-insensitive lookup of a canonical token; None when unrecognized."""
        if isinstance(token, cls):
            return token
        if not isinstance(token, str):
            return None
        wanted = token.strip().lower()
        for member in cls:
            if member.value.lower() == wanted:
                return member
        return None


class SuicidalIdeation(CanonicalEnum):
    NONE = "None"
    PASSIVE = "Passive"
    ACTIVE_NO_PLAN = "ActiveNoPlan"
    ACTIVE_WITH_PLAN = "ActiveWithPlan"
    ACTIVE_WITH_INTENT = "ActiveWithIntent"


class SiFrequency(CanonicalEnum):
    RARE = "Rare"
    OCCASIONAL = "Occasional"
    FREQUENT = "Frequent"
    CONSTANT = "Constant"


class SiIntensity(CanonicalEnum):
    FLEETING = "Fleeting"
    MILD = "Mild"
    MODERATE = "Moderate"
    SEVERE = "Severe"


class SelfHarm(CanonicalEnum):
    NONE = "None"
    HISTORICAL = "Historical"
    RECENT = "Recent"
    CURRENT = "Current"
    IMMINENT = "Imminent"


class HomicidalIdeation(CanonicalEnum):
    NONE = "None"
    PASSIVE = "Passive"
    ACTIVE_NO_PLAN = "ActiveNoPlan"
    ACTIVE_WITH_PLAN = "ActiveWithPlan"


class SafetyPlanStatus(CanonicalEnum):
    NOT_NEEDED = "NotNeeded"
    IN_PLACE = "InPlace"
    NEEDS_UPDATE = "NeedsUpdate"
    NEEDS_CREATION = "NeedsCreation"
    DECLINED = "Declined"


class RiskLevelOverall(CanonicalEnum):
    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"
    IMMINENT = "Imminent"


class CriticalField(str, Enum):
    """The four severity-ordered fields that can produce a discrepancy.

    Values are the field names reported on ``Discrepancy.field_name``.
    """

    SUICIDAL_IDEATION = "SuicidalIdeation"
    SELF_HARM = "SelfHarm"
    HOMICIDAL_IDEATION = "HomicidalIdeation"
    RISK_LEVEL_OVERALL = "RiskLevelOverall"

    @property
    def attr(self) -> str:
        """Attribute name of this field on ``RiskExtraction``."""
        return _CRITICAL_ATTRS[self]

    @property
    def enum_type(self) -> type[CanonicalEnum]:
        return _CRITICAL_ENUMS[self]


_CRITICAL_ATTRS: dict[CriticalField, str] = {
    CriticalField.SUICIDAL_IDEATION: "suicidal_ideation",
    CriticalField.SELF_HARM: "self_harm",
    CriticalField.HOMICIDAL_IDEATION: "homicidal_ideation",
    CriticalField.RISK_LEVEL_OVERALL: "risk_level_overall",
}

_CRITICAL_ENUMS: dict[CriticalField, type[CanonicalEnum]] = {
    CriticalField.SUICIDAL_IDEATION: SuicidalIdeation,
    CriticalField.SELF_HARM: SelfHarm,
    CriticalField.HOMICIDAL_IDEATION: HomicidalIdeation,
    CriticalField.RISK_LEVEL_OVERALL: RiskLevelOverall,
}


# ── Field wrappers ───────────────────────────────────────────────────


@dataclass(frozen=True)
class SourceSpan:
    """Location of the note text a value was extracted from."""

    text: str = ""
    start_char: int = 0
    end_char: int = 0
    section: Optional[str] = None


@dataclass(frozen=True)
class RiskField(Generic[T]):
    """A single extracted value with its confidence and source evidence.

    By convention ``confidence == 0`` means the value is absent: absence of
    evidence scores zero.
    """

    value: Optional[T] = None
    confidence: float = 0.0
    source: Optional[SourceSpan] = None

    def __post_init__(self) -> None:
        clamped = min(1.0, max(0.0, float(self.confidence)))
        if clamped != self.confidence:
            object.__setattr__(self, "confidence", clamped)

    @classmethod
    def empty(cls) -> RiskField[T]:
        return cls()

    @property
    def has_value(self) -> bool:
        return self.value is not None


# ── Extraction snapshot ──────────────────────────────────────────────

RISK_FIELD_NAMES: tuple[str, ...] = (
    "suicidal_ideation",
    "si_frequency",
    "si_intensity",
    "self_harm",
    "sh_recency",
    "homicidal_ideation",
    "hi_target",
    "safety_plan_status",
    "protective_factors",
    "risk_factors",
    "means_restriction_discussed",
    "risk_level_overall",
)


@dataclass(frozen=True)
class RiskExtraction:
    """One extraction pass over a note: the 12 risk fields.

    ``RiskExtraction()`` is the empty extraction, used in place of a
    re-extraction that failed upstream.
    """

    suicidal_ideation: RiskField[SuicidalIdeation] = field(default_factory=RiskField)
    si_frequency: RiskField[SiFrequency] = field(default_factory=RiskField)
    si_intensity: RiskField[SiIntensity] = field(default_factory=RiskField)
    self_harm: RiskField[SelfHarm] = field(default_factory=RiskField)
    sh_recency: RiskField[str] = field(default_factory=RiskField)
    homicidal_ideation: RiskField[HomicidalIdeation] = field(default_factory=RiskField)
    hi_target: RiskField[str] = field(default_factory=RiskField)
    safety_plan_status: RiskField[SafetyPlanStatus] = field(default_factory=RiskField)
    protective_factors: RiskField[tuple[str, ...]] = field(default_factory=RiskField)
    risk_factors: RiskField[tuple[str, ...]] = field(default_factory=RiskField)
    means_restriction_discussed: RiskField[bool] = field(default_factory=RiskField)
    risk_level_overall: RiskField[RiskLevelOverall] = field(default_factory=RiskField)

    def get(self, name: str) -> RiskField:
        """Return the named field; raises KeyError for names outside the field list."""
        if name not in RISK_FIELD_NAMES:
            raise KeyError(name)
        return getattr(self, name)

    def critical(self, which: CriticalField) -> RiskField:
        return getattr(self, which.attr)

    def is_high_risk(self) -> bool:
        """True when any ideation/self-harm field or the overall level is at its top tiers.

        String tokens are matched case-insensitively, the same as enum members.
        """
        return (
            SuicidalIdeation.parse(self.suicidal_ideation.value)
            in (SuicidalIdeation.ACTIVE_WITH_PLAN, SuicidalIdeation.ACTIVE_WITH_INTENT)
            or SelfHarm.parse(self.self_harm.value) in (SelfHarm.CURRENT, SelfHarm.IMMINENT)
            or HomicidalIdeation.parse(self.homicidal_ideation.value) is HomicidalIdeation.ACTIVE_WITH_PLAN
            or RiskLevelOverall.parse(self.risk_level_overall.value)
            in (RiskLevelOverall.HIGH, RiskLevelOverall.IMMINENT)
        )


# ── Keyword safety net ───────────────────────────────────────────────


@dataclass(frozen=True)
class KeywordCheckResult:
    """Danger keywords found in the raw note text, per risk category."""

    suicidal_matches: tuple[str, ...] = ()
    self_harm_matches: tuple[str, ...] = ()
    homicidal_matches: tuple[str, ...] = ()

    @property
    def has_any_matches(self) -> bool:
        return bool(self.suicidal_matches or self.self_harm_matches or self.homicidal_matches)

    @property
    def all_matches(self) -> list[str]:
        """All matches, prefixed with their category, e.g. ``'suicidal:suicide'``."""
        return (
            [f"suicidal:{k}" for k in self.suicidal_matches]
            + [f"self-harm:{k}" for k in self.self_harm_matches]
            + [f"homicidal:{k}" for k in self.homicidal_matches]
        )


# ── Assessment records ───────────────────────────────────────────────


@dataclass(frozen=True)
class Discrepancy:
    """A disagreement between the two passes on a severity-ordered field."""

    field_name: str
    original_value: str
    original_confidence: float
    re_extracted_value: str
    re_extracted_confidence: float
    resolved_value: str
    resolution_reason: str


@dataclass(frozen=True)
class FieldDecision:
    """How one risk field moved from the two passes to the final extraction."""

    field: str
    original_value: str
    re_extracted_value: str
    final_value: str
    rule_applied: str = "no_merge_change"
    original_source: Optional[str] = None
    re_extracted_source: Optional[str] = None
    final_source: Optional[str] = None
    criteria_used: tuple[str, ...] = ()
    reasoning_used: str = ""


@dataclass(frozen=True)
class RiskDiagnostics:
    """Structured per-field decision trail for auditors."""

    decisions: tuple[FieldDecision, ...] = ()
    homicidal_keyword_matches: tuple[str, ...] = ()
    criteria_validation_attempts_used: int = 1

    def decision_for(self, field_name: str) -> Optional[FieldDecision]:
        for decision in self.decisions:
            if decision.field == field_name:
                return decision
        return None


@dataclass(frozen=True)
class ReExtractionResponse:
    """What the focused safety re-extraction collaborator hands back."""

    risk: RiskExtraction
    criteria_used: dict[str, list[str]] = field(default_factory=dict)
    reasoning_used: dict[str, str] = field(default_factory=dict)
    attempts_used: int = 1


@dataclass(frozen=True)
class RiskAssessmentResult:
    """Terminal artifact of one assessment run.

    Consumed by the review queue (``requires_review``, ``review_reasons``,
    ``determined_risk_level``) and by storage (``final_extraction`` is the
    clinical record of truth).
    """

    original: RiskExtraction
    re_extracted: RiskExtraction
    final_extraction: RiskExtraction
    discrepancies: tuple[Discrepancy, ...] = ()
    keyword_matches: KeywordCheckResult = field(default_factory=KeywordCheckResult)
    determined_risk_level: RiskLevelOverall = RiskLevelOverall.LOW
    requires_review: bool = False
    review_reasons: tuple[str, ...] = ()
    diagnostics: RiskDiagnostics = field(default_factory=RiskDiagnostics)
    model_used: str = ""

    def discrepancy_for(self, field_name: str) -> Optional[Discrepancy]:
        for discrepancy in self.discrepancies:
            if discrepancy.field_name == field_name:
                return discrepancy
        return None
