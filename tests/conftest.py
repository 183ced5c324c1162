"""Shared fixtures for clinical-risk tests."""

from __future__ import annotations

import logging
from typing import Iterator

import pytest
import structlog

from clinical_risk.core.config import RiskAssessorConfig
from clinical_risk.models import RiskExtraction
from tests.fakes.fake_extractions import no_risk_extraction


@pytest.fixture
def assessor_config() -> RiskAssessorConfig:
    """Default assessor settings with a short re-extraction timeout."""
    return RiskAssessorConfig(reextraction_timeout=1.0)


@pytest.fixture
def baseline() -> RiskExtraction:
    """Low-risk extraction reported with 0.95 confidence."""
    return no_risk_extraction()


@pytest.fixture
def sample_note() -> str:
    """Therapy note excerpt containing a suicidal keyword."""
    return (
        "Client reports low mood for two weeks. States they have thought about suicide "
        "but denies plan or intent. Protective factors: children, faith."
    )


@pytest.fixture
def restore_logging() -> Iterator[None]:
    """Undo root-logger and structlog changes made by ``setup_logging``."""
    root = logging.getLogger()
    package_logger = logging.getLogger("clinical_risk")
    handlers, level, package_level = list(root.handlers), root.level, package_logger.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    package_logger.setLevel(package_level)
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
