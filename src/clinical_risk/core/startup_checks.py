"""Startup validation: fail-fast on critical misconfigurations."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from clinical_risk.exceptions import ConfigurationError

if TYPE_CHECKING:
    from clinical_risk.core.config import AppSettings

log = logging.getLogger(__name__)


def validate_settings(settings: AppSettings) -> None:
    """Validate application settings at startup. Raises ConfigurationError on fatal misconfig."""
    _check_independent_layer(settings)
    _check_safety_toggles(settings)


def _check_independent_layer(settings: AppSettings) -> None:
    """Reject settings that leave nothing to check the original extraction against."""
    assessor = settings.assessor
    if not assessor.always_reextract and not assessor.enable_keyword_safety_net:
        raise ConfigurationError(
            "CLINICAL_RISK_ASSESSOR_ALWAYS_REEXTRACT and CLINICAL_RISK_ASSESSOR_ENABLE_KEYWORD_SAFETY_NET "
            "are both false: no independent check of the original extraction remains. "
            "Enable at least one of them."
        )


def _check_safety_toggles(settings: AppSettings) -> None:
    """Warn when safety layers are switched off."""
    assessor = settings.assessor
    if not assessor.always_reextract:
        log.warning(
            "CLINICAL_RISK_ASSESSOR_ALWAYS_REEXTRACT=false: risk fields will not be "
            "independently re-extracted and no discrepancies can be detected."
        )
    if not assessor.enable_keyword_safety_net:
        log.warning("CLINICAL_RISK_ASSESSOR_ENABLE_KEYWORD_SAFETY_NET=false: keyword cross-check disabled.")
    if not assessor.use_conservative_merge:
        log.warning(
            "CLINICAL_RISK_ASSESSOR_USE_CONSERVATIVE_MERGE=false: the re-extraction is taken "
            "as final even when the original reported higher risk."
        )
