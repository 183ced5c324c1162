"""Exception hierarchy for clinical-risk."""


class ClinicalRiskError(Exception):
    """Base exception for all clinical-risk errors."""


class ReExtractionError(ClinicalRiskError):
    """Raised when the focused safety re-extraction call fails."""



class MissingDiagnosticFeedbackError(ReExtractionError):
    """Re-extraction omitted required criteria_used / reasoning_used keys."""

    def __init__(
        self,
        missing_criteria: list[str] | tuple[str, ...] = (),
        missing_reasoning: list[str] | tuple[str, ...] = (),
    ) -> None:
        self.missing_criteria = list(missing_criteria)
        self.missing_reasoning = list(missing_reasoning)
        super().__init__(
            "Missing required diagnostic feedback. "
            f"criteria_used: [{', '.join(self.missing_criteria)}], "
            f"reasoning_used: [{', '.join(self.missing_reasoning)}]"
        )


class ExtractionParseError(ClinicalRiskError):
    """An extraction payload could not be mapped onto a RiskExtraction."""

    def __init__(self, message: str, raw_payload: object = None) -> None:
        super().__init__(message)
        self.raw_payload = raw_payload


class ConfigurationError(ClinicalRiskError):
    """Raised when settings are invalid at startup."""
