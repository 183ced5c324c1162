"""Nested pydantic-settings configuration for the application.

Each group reads its own ``CLINICAL_RISK_<GROUP>_*`` env vars::

    export CLINICAL_RISK_ASSESSOR_CONFIDENCE_THRESHOLD=0.85
    export CLINICAL_RISK_OBSERVABILITY_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class RiskAssessorConfig(BaseSettings):
    """Risk assessor behaviour.

    Env vars use ``CLINICAL_RISK_ASSESSOR_`` prefix.
    """

    model_config = {"env_prefix": "CLINICAL_RISK_ASSESSOR_"}

    confidence_threshold: float = Field(default=0.9, ge=0.0, le=1.0)
    always_reextract: bool = True
    enable_keyword_safety_net: bool = True
    use_conservative_merge: bool = True
    require_criteria_used: bool = True
    criteria_validation_attempts: int = Field(default=2, ge=1)
    reextraction_timeout: float = Field(default=60.0, gt=0.0)


class ObservabilityConfig(BaseSettings):
    """Logging configuration.

    Env vars use ``CLINICAL_RISK_OBSERVABILITY_`` prefix.  ``json_logs`` left
    unset picks JSON lines when stderr is not a terminal.
    """

    model_config = {"env_prefix": "CLINICAL_RISK_OBSERVABILITY_"}

    log_level: str = "INFO"
    json_logs: Optional[bool] = None


class AppSettings(BaseSettings):
    """Top-level application settings aggregating all sub-configs."""

    # Groups are built per AppSettings() so env vars are read at construction.
    assessor: RiskAssessorConfig = Field(default_factory=RiskAssessorConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)
