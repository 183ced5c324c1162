"""Tests for the keyword safety-net cross-check."""

from __future__ import annotations

from clinical_risk.models import (
    HomicidalIdeation,
    KeywordCheckResult,
    RiskExtraction,
    SelfHarm,
    SuicidalIdeation,
)
from clinical_risk.validation.keywords import check_keyword_mismatch
from tests.fakes.fake_extractions import make_extraction, no_risk_extraction


class TestCheckKeywordMismatch:
    def test_no_keywords_no_reasons(self) -> None:
        assert check_keyword_mismatch(no_risk_extraction(), KeywordCheckResult()) == []

    def test_suicidal_keywords_against_none(self) -> None:
        keywords = KeywordCheckResult(suicidal_matches=("suicide", "want to die"))
        reasons = check_keyword_mismatch(no_risk_extraction(), keywords)
        assert reasons == ["Suicidal keywords detected (suicide, want to die) but extraction shows 'None'"]

    def test_absent_value_counts_as_none(self) -> None:
        keywords = KeywordCheckResult(self_harm_matches=("cutting",))
        reasons = check_keyword_mismatch(RiskExtraction(), keywords)
        assert reasons == ["Self-harm keywords detected (cutting) but extraction shows 'None'"]

    def test_finding_present_suppresses_reason(self) -> None:
        final = make_extraction(suicidal_ideation=(SuicidalIdeation.PASSIVE, 0.9))
        keywords = KeywordCheckResult(suicidal_matches=("suicidal",))
        assert check_keyword_mismatch(final, keywords) == []

    def test_one_reason_per_category_in_order(self) -> None:
        keywords = KeywordCheckResult(
            suicidal_matches=("suicide",),
            self_harm_matches=("self harm",),
            homicidal_matches=("kill someone",),
        )
        reasons = check_keyword_mismatch(no_risk_extraction(), keywords)

        assert [r.split(" ")[0] for r in reasons] == ["Suicidal", "Self-harm", "Homicidal"]

    def test_only_mismatched_categories_reported(self) -> None:
        final = make_extraction(
            suicidal_ideation=(SuicidalIdeation.NONE, 0.9),
            self_harm=(SelfHarm.HISTORICAL, 0.9),
            homicidal_ideation=(HomicidalIdeation.NONE, 0.9),
        )
        keywords = KeywordCheckResult(self_harm_matches=("cutting",), homicidal_matches=("hurt them",))

        reasons = check_keyword_mismatch(final, keywords)

        assert reasons == ["Homicidal keywords detected (hurt them) but extraction shows 'None'"]
