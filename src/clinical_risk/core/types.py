"""Shared type aliases."""

from __future__ import annotations

from typing import Any

# JSON-like dict as produced by the extraction parser
JsonDict = dict[str, Any]

# Per-field criteria / reasoning maps reported by the re-extraction
CriteriaMap = dict[str, list[str]]
ReasoningMap = dict[str, str]
