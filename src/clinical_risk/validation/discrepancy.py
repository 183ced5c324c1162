"""Discrepancy detection between the original and re-extracted passes."""

from __future__ import annotations

from clinical_risk.models import CriticalField, Discrepancy, RiskExtraction
from clinical_risk.severity import normalize, select_more_severe

RESOLUTION_TEMPLATE = "Conservative merge: selected more severe value '{value}'"
MERGE_DISABLED_TEMPLATE = "Conservative merge disabled: kept re-extracted value '{value}'"


def find_discrepancies(
    original: RiskExtraction,
    re_extracted: RiskExtraction,
    *,
    conservative: bool = True,
) -> list[Discrepancy]:
    """Compare the four severity-ordered fields and report every disagreement.

    Values are normalized before a case-insensitive comparison; the resolved
    value is the more severe of the two, ties going to ``original``.  With
    ``conservative=False`` the re-extracted value is the resolution, matching
    a final extraction that was taken from the re-extraction unmerged.
    """
    discrepancies: list[Discrepancy] = []

    for which in CriticalField:
        first = original.critical(which)
        second = re_extracted.critical(which)
        first_value = normalize(which, first.value)
        second_value = normalize(which, second.value)

        if first_value.lower() == second_value.lower():
            continue

        if conservative:
            resolved = select_more_severe(which, first.value, second.value)
            reason = RESOLUTION_TEMPLATE.format(value=resolved)
        else:
            resolved = second_value
            reason = MERGE_DISABLED_TEMPLATE.format(value=resolved)
        discrepancies.append(
            Discrepancy(
                field_name=which.value,
                original_value=first_value,
                original_confidence=first.confidence,
                re_extracted_value=second_value,
                re_extracted_confidence=second.confidence,
                resolved_value=resolved,
                resolution_reason=reason,
            )
        )

    return discrepancies
