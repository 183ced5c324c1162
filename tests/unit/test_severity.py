"""Tests for the severity model and its normalization step."""

from __future__ import annotations

import pytest

from clinical_risk.models import (
    CriticalField,
    HomicidalIdeation,
    RiskLevelOverall,
    SelfHarm,
    SiFrequency,
    SiIntensity,
    SuicidalIdeation,
)
from clinical_risk.severity import (
    MIN_SEVERITY,
    SEVERITY_ORDER,
    TokenClass,
    classify_token,
    is_no_finding,
    normalize,
    ordinal,
    select_more_severe,
    severity,
)


class TestSeverityOrder:
    @pytest.mark.parametrize(
        ("which", "enum_type"),
        [
            (CriticalField.SUICIDAL_IDEATION, SuicidalIdeation),
            (CriticalField.SELF_HARM, SelfHarm),
            (CriticalField.HOMICIDAL_IDEATION, HomicidalIdeation),
            (CriticalField.RISK_LEVEL_OVERALL, RiskLevelOverall),
        ],
    )
    def test_every_member_scored_strictly_increasing(self, which: CriticalField, enum_type: type) -> None:
        scores = [SEVERITY_ORDER[which][member] for member in enum_type]
        assert scores == sorted(scores)
        assert len(set(scores)) == len(scores)
        assert scores[0] == MIN_SEVERITY

    def test_suicidal_ideation_scale(self) -> None:
        which = CriticalField.SUICIDAL_IDEATION
        assert severity(which, SuicidalIdeation.NONE) == 0
        assert severity(which, SuicidalIdeation.PASSIVE) == 1
        assert severity(which, SuicidalIdeation.ACTIVE_WITH_INTENT) == 4

    def test_overall_scale(self) -> None:
        which = CriticalField.RISK_LEVEL_OVERALL
        assert severity(which, RiskLevelOverall.LOW) == 0
        assert severity(which, RiskLevelOverall.IMMINENT) == 3


class TestTokenHandling:
    def test_string_tokens_case_insensitive(self) -> None:
        assert severity(CriticalField.SELF_HARM, "current") == 3
        assert severity(CriticalField.SELF_HARM, " CURRENT ") == 3

    def test_unknown_token_scores_minimum(self) -> None:
        which = CriticalField.SUICIDAL_IDEATION
        assert severity(which, "Extreme") == MIN_SEVERITY
        assert classify_token(which, "Extreme") == TokenClass.UNKNOWN

    def test_absent_scores_minimum(self) -> None:
        which = CriticalField.HOMICIDAL_IDEATION
        assert severity(which, None) == MIN_SEVERITY
        assert classify_token(which, None) == TokenClass.ABSENT
        assert classify_token(which, "  ") == TokenClass.ABSENT

    def test_known_token(self) -> None:
        assert classify_token(CriticalField.RISK_LEVEL_OVERALL, "High") == TokenClass.KNOWN


class TestNormalize:
    def test_absent_ideation_becomes_none(self) -> None:
        assert normalize(CriticalField.SUICIDAL_IDEATION, None) == "None"
        assert normalize(CriticalField.SELF_HARM, None) == "None"
        assert normalize(CriticalField.HOMICIDAL_IDEATION, None) == "None"

    def test_absent_overall_becomes_low(self) -> None:
        assert normalize(CriticalField.RISK_LEVEL_OVERALL, None) == "Low"

    def test_canonical_casing(self) -> None:
        assert normalize(CriticalField.SUICIDAL_IDEATION, "activewithplan") == "ActiveWithPlan"

    def test_unknown_token_kept_visible(self) -> None:
        assert normalize(CriticalField.SELF_HARM, " Sometimes ") == "Sometimes"


class TestSelectMoreSevere:
    def test_higher_wins(self) -> None:
        which = CriticalField.SUICIDAL_IDEATION
        assert select_more_severe(which, SuicidalIdeation.NONE, SuicidalIdeation.ACTIVE_WITH_PLAN) == "ActiveWithPlan"
        assert select_more_severe(which, SuicidalIdeation.ACTIVE_WITH_PLAN, SuicidalIdeation.NONE) == "ActiveWithPlan"

    def test_tie_goes_to_first(self) -> None:
        # Absent and an unknown token both score zero; the first argument wins.
        which = CriticalField.SELF_HARM
        assert select_more_severe(which, None, "Bogus") == "None"
        assert select_more_severe(which, "Bogus", None) == "Bogus"

    def test_is_no_finding(self) -> None:
        assert is_no_finding(CriticalField.SELF_HARM, None)
        assert is_no_finding(CriticalField.SELF_HARM, SelfHarm.NONE)
        assert not is_no_finding(CriticalField.SELF_HARM, SelfHarm.HISTORICAL)


class TestOrdinal:
    def test_frequency_declaration_order(self) -> None:
        assert [ordinal(m) for m in SiFrequency] == [1, 2, 3, 4]

    def test_intensity_declaration_order(self) -> None:
        assert ordinal(SiIntensity.FLEETING) < ordinal(SiIntensity.MILD) < ordinal(SiIntensity.SEVERE)

    def test_absent_is_zero(self) -> None:
        assert ordinal(None) == 0
