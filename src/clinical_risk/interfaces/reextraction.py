"""Re-extraction protocol: the focused, safety-primed second LLM pass."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from clinical_risk.models import ReExtractionResponse


@runtime_checkable
class IRiskReExtractor(Protocol):
    """Protocol for the safety re-extraction collaborator.

    Implementations call a model over the raw note text and return the parsed
    extraction with the per-field ``criteria_used``/``reasoning_used`` maps.
    They may raise any exception; the assessor converts failures into a
    forced review.
    """

    @property
    def model_name(self) -> str:
        """Identifier of the model serving the re-extraction."""
        ...

    async def reextract(self, note_text: str, *, retry_hint: bool = False) -> ReExtractionResponse:
        """Re-extract the risk fields from ``note_text``.

        Args:
            note_text: Raw therapy note text.
            retry_hint: True on a repeat attempt after the previous response
                omitted required criteria/reasoning keys.
        """
        ...
