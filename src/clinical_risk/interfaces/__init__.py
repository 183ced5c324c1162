"""Collaborator protocols the risk assessor depends on but does not implement."""

from __future__ import annotations

from clinical_risk.interfaces.reextraction import IRiskReExtractor

__all__ = ["IRiskReExtractor"]
