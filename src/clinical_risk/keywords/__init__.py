"""Danger keyword scanner used as an independent safety net."""

from __future__ import annotations

from clinical_risk.keywords.scanner import (
    HOMICIDAL_KEYWORDS,
    SELF_HARM_KEYWORDS,
    SUICIDAL_KEYWORDS,
    scan_keywords,
)

__all__ = [
    "HOMICIDAL_KEYWORDS",
    "SELF_HARM_KEYWORDS",
    "SUICIDAL_KEYWORDS",
    "scan_keywords",
]
