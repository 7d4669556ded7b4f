"""Request/response models for the ingestion HTTP server."""

from enum import Enum

from pydantic import BaseModel, Field

from docsections.models.document import PdfMetadata, Section
from docsections.models.extraction import ExtractionProvenance, IngestResult, OcrSummary


class ServerState(str, Enum):
    """Lifecycle state of the ingestion server."""

    INITIALIZING = "initializing"
    READY = "ready"
    RUNNING = "running"
    SHUTTING_DOWN = "shutting_down"
    STOPPED = "stopped"


class HealthResponse(BaseModel):
    """Health check payload."""

    status: str
    ocr_enabled: bool
    uptime_seconds: float = Field(ge=0.0)


class ErrorResponse(BaseModel):
    """Error payload returned with 4xx/5xx responses."""

    error: str


class IngestResponse(BaseModel):
    """Successful ingestion payload.

    ``message`` is omitted from the JSON when the embedded text was used
    without any fallback.
    """

    metadata: PdfMetadata
    needs_ocr: bool
    sections: list[Section]
    provenance: ExtractionProvenance
    page_count: int = Field(ge=0)
    ocr: OcrSummary | None = None
    message: str | None = None

    @classmethod
    def from_result(cls, result: IngestResult) -> "IngestResponse":
        """Build the response body from a pipeline result."""
        message = (
            None if result.provenance is ExtractionProvenance.PRIMARY else result.diagnostic
        )
        return cls(
            metadata=result.metadata,
            needs_ocr=result.needs_fallback,
            sections=result.sections,
            provenance=result.provenance,
            page_count=result.page_count,
            ocr=result.ocr,
            message=message,
        )
