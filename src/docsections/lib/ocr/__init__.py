"""OCR fallback collaborators.

Any object with an async ``process(payload: bytes) -> OcrResult`` method can
serve as the OCR collaborator; DocumentAiOcrClient is the bundled one.
"""

from typing import Protocol

from docsections.lib.ocr.document_ai import DocumentAiOcrClient
from docsections.models.extraction import OcrResult


class OcrClient(Protocol):
    """Asynchronous OCR collaborator."""

    async def process(self, payload: bytes) -> OcrResult:
        """Return OCR text for the document, raising on failure."""
        ...


__all__ = [
    "DocumentAiOcrClient",
    "OcrClient",
]
