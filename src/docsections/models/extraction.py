"""Models describing extraction fallback outcomes and ingestion results."""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from docsections.models.document import PdfMetadata, Section


class ExtractionProvenance(str, Enum):
    """Which branch of the fallback coordinator produced the final text."""

    PRIMARY = "primary"
    OCR = "ocr"
    OCR_EMPTY = "ocr-empty"
    OCR_FAILED = "ocr-failed"


class OcrResult(BaseModel):
    """Text returned by the OCR collaborator."""

    text: str
    page_count: int = Field(default=0, ge=0)
    warnings: list[str] = Field(default_factory=list)
    raw_response: dict[str, Any] | None = Field(default=None, exclude=True)


class OcrSummary(BaseModel):
    """Short record of an attempted OCR fallback."""

    provider: Literal["documentai"] = "documentai"
    success: bool
    page_count: int = Field(default=0, ge=0)


class ExtractionOutcome(BaseModel):
    """Final text chosen by the coordinator plus its diagnostic record.

    Attributes:
        final_text: Text handed to normalization (may be empty)
        needs_fallback: True when the text is still insufficient
        provenance: Branch that produced final_text
        page_count: Page count from whichever source produced the text
        diagnostic: Human-readable description of what happened
        error: String form of the OCR failure, for logging
        ocr: Summary of the OCR attempt, None if OCR was not attempted
    """

    model_config = ConfigDict(frozen=True)

    final_text: str
    needs_fallback: bool
    provenance: ExtractionProvenance
    page_count: int | None = None
    diagnostic: str
    error: str | None = None
    ocr: OcrSummary | None = None


class IngestResult(BaseModel):
    """Everything the ingestion pipeline hands to a downstream consumer."""

    sections: list[Section]
    needs_fallback: bool
    page_count: int = Field(default=0, ge=0)
    diagnostic: str
    provenance: ExtractionProvenance
    metadata: PdfMetadata = Field(default_factory=PdfMetadata)
    ocr: OcrSummary | None = None
