"""Keyword safety-net cross-check against the merged extraction.

The scan itself happens outside the core (see ``clinical_risk.keywords``);
this module only decides whether its matches contradict the final values.
"""

from __future__ import annotations

from clinical_risk.models import CriticalField, KeywordCheckResult, RiskExtraction
from clinical_risk.severity import is_no_finding, normalize

_CATEGORIES: tuple[tuple[str, str, CriticalField], ...] = (
    ("Suicidal", "suicidal_matches", CriticalField.SUICIDAL_IDEATION),
    ("Self-harm", "self_harm_matches", CriticalField.SELF_HARM),
    ("Homicidal", "homicidal_matches", CriticalField.HOMICIDAL_IDEATION),
)


def check_keyword_mismatch(final_extraction: RiskExtraction, keywords: KeywordCheckResult) -> list[str]:
    """One reason per category whose keywords matched while the final value is still 'None'."""
    reasons: list[str] = []

    for label, matches_attr, which in _CATEGORIES:
        matches = getattr(keywords, matches_attr)
        if not matches:
            continue
        value = final_extraction.critical(which).value
        if not is_no_finding(which, value):
            continue
        reasons.append(
            f"{label} keywords detected ({', '.join(matches)}) "
            f"but extraction shows '{normalize(which, value)}'"
        )

    return reasons
