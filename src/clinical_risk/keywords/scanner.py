"""Keyword scan of raw note text: regex word-boundary matching, no LLM calls.

Flags phrases that an extraction pass reporting 'None' should have caught.
"""

from __future__ import annotations

import re

from clinical_risk.models import KeywordCheckResult

SUICIDAL_KEYWORDS: tuple[str, ...] = (
    "suicide",
    "suicidal",
    "kill myself",
    "end my life",
    "not worth living",
    "want to die",
    "better off dead",
    "no reason to live",
    "end it all",
    "take my own life",
    "not be here",
    "not being here",
    "wouldn't wake up",
    "wish I was dead",
)

SELF_HARM_KEYWORDS: tuple[str, ...] = (
    "self-harm",
    "self harm",
    "cutting",
    "hurt myself",
    "burning myself",
    "scratching",
    "self-injury",
    "hurting myself",
    "harming myself",
    "cut myself",
    "burned myself",
    "attempted overdose",
    "overdose attempt",
    "overdosed",
)

HOMICIDAL_KEYWORDS: tuple[str, ...] = (
    "homicidal",
    "kill someone",
    "kill somebody",
    "hurt someone",
    "hurt somebody",
    "violent thoughts",
    "harm others",
    "harm other people",
    "kill them",
    "hurt them",
    "want to hurt others",
    "want to hurt someone",
    "want to hurt somebody",
    "thoughts of hurting others",
    "thoughts of hurting someone",
    "thoughts of hurting somebody",
    "thoughts of killing others",
    "thoughts of killing someone",
    "thoughts of killing somebody",
)


def _compile(keywords: tuple[str, ...]) -> list[tuple[str, re.Pattern[str]]]:
    # \b on both sides so "suicidal" does not match inside "antisuicidal"
    return [(kw, re.compile(rf"\b{re.escape(kw)}\b", re.IGNORECASE)) for kw in keywords]


_SUICIDAL = _compile(SUICIDAL_KEYWORDS)
_SELF_HARM = _compile(SELF_HARM_KEYWORDS)
_HOMICIDAL = _compile(HOMICIDAL_KEYWORDS)


def scan_keywords(note_text: str) -> KeywordCheckResult:
    """Return every keyword, per category, that appears in ``note_text``."""
    if not note_text or not note_text.strip():
        return KeywordCheckResult()

    return KeywordCheckResult(
        suicidal_matches=_matches(note_text, _SUICIDAL),
        self_harm_matches=_matches(note_text, _SELF_HARM),
        homicidal_matches=_matches(note_text, _HOMICIDAL),
    )


def _matches(text: str, patterns: list[tuple[str, re.Pattern[str]]]) -> tuple[str, ...]:
    return tuple(kw for kw, pattern in patterns if pattern.search(text))
