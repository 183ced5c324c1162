"""Tests for discrepancy detection between the two extraction passes."""

from __future__ import annotations

from clinical_risk.models import (
    HomicidalIdeation,
    RiskExtraction,
    RiskField,
    RiskLevelOverall,
    SelfHarm,
    SuicidalIdeation,
)
from clinical_risk.validation.discrepancy import find_discrepancies
from tests.fakes.fake_extractions import make_extraction, no_risk_extraction


class TestFindDiscrepancies:
    def test_agreement_yields_empty_list(self) -> None:
        assert find_discrepancies(no_risk_extraction(), no_risk_extraction(0.7)) == []

    def test_absent_equals_no_finding_default(self) -> None:
        # Absent normalizes to None/Low, so explicit None/Low is not a disagreement.
        assert find_discrepancies(RiskExtraction(), no_risk_extraction()) == []

    def test_suicidal_ideation_mismatch(self) -> None:
        original = make_extraction(suicidal_ideation=(SuicidalIdeation.NONE, 0.95))
        re_extracted = make_extraction(suicidal_ideation=(SuicidalIdeation.ACTIVE_WITH_PLAN, 0.92))

        discrepancies = find_discrepancies(original, re_extracted)

        assert len(discrepancies) == 1
        d = discrepancies[0]
        assert d.field_name == "SuicidalIdeation"
        assert d.original_value == "None"
        assert d.original_confidence == 0.95
        assert d.re_extracted_value == "ActiveWithPlan"
        assert d.re_extracted_confidence == 0.92
        assert d.resolved_value == "ActiveWithPlan"
        assert d.resolution_reason == "Conservative merge: selected more severe value 'ActiveWithPlan'"

    def test_original_more_severe_is_kept(self) -> None:
        original = make_extraction(self_harm=(SelfHarm.CURRENT, 0.9))
        re_extracted = make_extraction(self_harm=(SelfHarm.HISTORICAL, 0.9))

        [d] = find_discrepancies(original, re_extracted)
        assert d.field_name == "SelfHarm"
        assert d.resolved_value == "Current"

    def test_absent_overall_reported_as_low(self) -> None:
        original = RiskExtraction()
        re_extracted = make_extraction(risk_level_overall=(RiskLevelOverall.MODERATE, 0.8))

        [d] = find_discrepancies(original, re_extracted)
        assert d.field_name == "RiskLevelOverall"
        assert d.original_value == "Low"
        assert d.original_confidence == 0.0
        assert d.resolved_value == "Moderate"

    def test_all_four_fields_in_fixed_order(self) -> None:
        original = no_risk_extraction()
        re_extracted = make_extraction(
            suicidal_ideation=(SuicidalIdeation.PASSIVE, 0.9),
            self_harm=(SelfHarm.HISTORICAL, 0.9),
            homicidal_ideation=(HomicidalIdeation.PASSIVE, 0.9),
            risk_level_overall=(RiskLevelOverall.MODERATE, 0.9),
        )

        names = [d.field_name for d in find_discrepancies(original, re_extracted)]
        assert names == ["SuicidalIdeation", "SelfHarm", "HomicidalIdeation", "RiskLevelOverall"]

    def test_non_ordered_fields_never_reported(self) -> None:
        original = make_extraction(hi_target=("neighbor", 0.9), means_restriction_discussed=(False, 0.9))
        re_extracted = make_extraction(hi_target=("", 0.0), means_restriction_discussed=(True, 0.9))
        assert find_discrepancies(original, re_extracted) == []

    def test_merge_disabled_resolves_to_re_extraction(self) -> None:
        original = make_extraction(suicidal_ideation=(SuicidalIdeation.ACTIVE_WITH_PLAN, 0.9))
        re_extracted = make_extraction(suicidal_ideation=(SuicidalIdeation.PASSIVE, 0.9))

        [d] = find_discrepancies(original, re_extracted, conservative=False)

        assert d.resolved_value == "Passive"
        assert d.resolution_reason == "Conservative merge disabled: kept re-extracted value 'Passive'"

    def test_string_tokens_compared_case_insensitively(self) -> None:
        original = RiskExtraction(self_harm=RiskField("recent", 0.9))
        re_extracted = make_extraction(self_harm=(SelfHarm.RECENT, 0.9))

        assert find_discrepancies(original, re_extracted) == []
