"""Extraction fallback coordination and end-to-end document ingestion.

The coordinator is a small state machine:

    PRIMARY ──(text sufficient)──────────────────────────► RESOLVED
       │
       └─(text insufficient)─► FALLBACK_ATTEMPTED ─(OCR)─► RESOLVED

Every branch resolves to concrete text plus a needs_fallback flag. OCR
failures, including timeouts, are logged and recorded in the outcome; they
are never raised to the caller. Cancellation is not caught, so cancelling an
ingest() task aborts the in-flight OCR request.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import TYPE_CHECKING

from docsections.config.defaults import MIN_EMBEDDED_TEXT_CHARACTERS
from docsections.lib.line_classifier import DEFAULT_HEURISTICS, is_page_marker
from docsections.lib.logging_config import get_logger
from docsections.lib.pdf_processor import PdfTextExtractor
from docsections.lib.section_assembler import normalize
from docsections.lib.sufficiency import is_insufficient
from docsections.models.document import ParsedPdf, RawText, TextSource
from docsections.models.extraction import (
    ExtractionOutcome,
    ExtractionProvenance,
    IngestResult,
    OcrSummary,
)

if TYPE_CHECKING:
    from docsections.lib.ocr import OcrClient
    from docsections.lib.pdf_processor import PrimaryExtractor
    from docsections.models.config import HeadingHeuristics, IngestConfig

logger = get_logger(__name__)

INSUFFICIENT_TEXT_MESSAGE = "Embedded text insufficient. OCR fallback required."
PRIMARY_TEXT_MESSAGE = "Embedded text extracted; no OCR fallback needed."
OCR_SUCCESS_MESSAGE = "Text extracted via Document AI OCR ({page_count} pages)."
OCR_EMPTY_MESSAGE = "Document AI OCR did not detect readable text."
OCR_FAILED_MESSAGE = "OCR fallback failed. Please try again later."
OCR_NOT_CONFIGURED_MESSAGE = "OCR fallback is not configured."


class CoordinatorState(str, Enum):
    """States of the extraction fallback state machine."""

    PRIMARY = "primary"
    FALLBACK_ATTEMPTED = "fallback_attempted"
    RESOLVED = "resolved"


class ExtractionCoordinator:
    """Choose between embedded text and an OCR fallback.

    One coordinator can serve many documents concurrently; it keeps no
    per-document state beyond the local variables of resolve().

    Attributes:
        ocr_client: OCR collaborator, None to disable the fallback
        min_text_characters: Sufficiency floor for embedded text
        ocr_timeout: Seconds allowed for the OCR call, None for no limit
    """

    def __init__(
        self,
        ocr_client: OcrClient | None = None,
        min_text_characters: int = MIN_EMBEDDED_TEXT_CHARACTERS,
        ocr_timeout: float | None = None,
    ) -> None:
        """Initialize the coordinator.

        Args:
            ocr_client: OCR collaborator (default: None, fallback disabled)
            min_text_characters: Sufficiency floor (default: 25)
            ocr_timeout: Timeout in seconds for the OCR call (default: None)
        """
        self.ocr_client = ocr_client
        self.min_text_characters = min_text_characters
        self.ocr_timeout = ocr_timeout

    def needs_fallback(self, text: str) -> bool:
        """Return True if text is below the sufficiency floor.

        Page footers added by the extractor are not counted, so a scan with
        only footer lines still falls back to OCR.
        """
        content = "\n".join(
            line for line in text.split("\n") if not is_page_marker(line)
        )
        return is_insufficient(content, self.min_text_characters)

    async def resolve(self, payload: bytes, primary: RawText) -> ExtractionOutcome:
        """Run the fallback state machine for one document.

        Args:
            payload: Original document bytes, sent to OCR if needed
            primary: Text from the primary extractor

        Returns:
            ExtractionOutcome describing the chosen text.
        """
        state = CoordinatorState.PRIMARY

        if not self.needs_fallback(primary.text):
            logger.debug("Embedded text sufficient (%d chars)", len(primary.text))
            return self._resolved(
                state,
                final=primary,
                provenance=ExtractionProvenance.PRIMARY,
                diagnostic=PRIMARY_TEXT_MESSAGE,
                needs_fallback=False,
            )

        logger.info(INSUFFICIENT_TEXT_MESSAGE)
        state = CoordinatorState.FALLBACK_ATTEMPTED

        if self.ocr_client is None:
            logger.warning("Embedded text insufficient and no OCR client configured")
            return self._resolved(
                state,
                final=primary,
                provenance=ExtractionProvenance.OCR_FAILED,
                diagnostic=OCR_NOT_CONFIGURED_MESSAGE,
                ocr=OcrSummary(success=False, page_count=0),
            )

        try:
            if self.ocr_timeout is None:
                result = await self.ocr_client.process(payload)
            else:
                result = await asyncio.wait_for(
                    self.ocr_client.process(payload), timeout=self.ocr_timeout
                )
        except Exception as e:
            # TimeoutError from wait_for lands here too
            logger.error("Document AI OCR failed: %s", e, exc_info=True)
            return self._resolved(
                state,
                final=primary,
                provenance=ExtractionProvenance.OCR_FAILED,
                diagnostic=OCR_FAILED_MESSAGE,
                error=str(e) or type(e).__name__,
                ocr=OcrSummary(success=False, page_count=0),
            )

        summary = OcrSummary(success=bool(result.text), page_count=result.page_count)

        if not result.text:
            logger.warning(OCR_EMPTY_MESSAGE)
            return self._resolved(
                state,
                final=primary,
                provenance=ExtractionProvenance.OCR_EMPTY,
                diagnostic=OCR_EMPTY_MESSAGE,
                ocr=summary,
            )

        fallback = RawText(
            text=result.text,
            source=TextSource.FALLBACK,
            page_count=result.page_count,
        )
        return self._resolved(
            state,
            final=fallback,
            provenance=ExtractionProvenance.OCR,
            diagnostic=OCR_SUCCESS_MESSAGE.format(page_count=result.page_count),
            needs_fallback=False,
            ocr=summary,
        )

    def _resolved(
        self,
        state: CoordinatorState,
        final: RawText,
        provenance: ExtractionProvenance,
        diagnostic: str,
        needs_fallback: bool = True,
        error: str | None = None,
        ocr: OcrSummary | None = None,
    ) -> ExtractionOutcome:
        """Build the outcome for the RESOLVED state."""
        logger.debug(
            "Extraction %s -> %s via %s",
            state.value,
            CoordinatorState.RESOLVED.value,
            provenance.value,
        )
        return ExtractionOutcome(
            final_text=final.text,
            needs_fallback=needs_fallback,
            provenance=provenance,
            page_count=final.page_count,
            diagnostic=diagnostic,
            error=error,
            ocr=ocr,
        )


class DocumentIngestor:
    """Full pipeline: primary extraction, OCR fallback, section recovery.

    Attributes:
        extractor: Primary extractor (default: pdfminer-backed)
        coordinator: Extraction fallback coordinator
        heuristics: Heading thresholds used by normalization
    """

    def __init__(
        self,
        extractor: PrimaryExtractor | None = None,
        coordinator: ExtractionCoordinator | None = None,
        heuristics: HeadingHeuristics = DEFAULT_HEURISTICS,
    ) -> None:
        """Initialize the ingestor.

        Args:
            extractor: Primary extractor (default: PdfTextExtractor())
            coordinator: Coordinator (default: one without OCR)
            heuristics: Heading thresholds (default: reference values)
        """
        self.extractor = extractor or PdfTextExtractor()
        self.coordinator = coordinator or ExtractionCoordinator()
        self.heuristics = heuristics

    @classmethod
    def from_config(
        cls,
        config: IngestConfig,
        ocr_client: OcrClient | None = None,
        extractor: PrimaryExtractor | None = None,
    ) -> DocumentIngestor:
        """Build an ingestor from resolved configuration.

        Args:
            config: Resolved ingestion settings
            ocr_client: OCR collaborator; the caller owns its lifecycle
            extractor: Primary extractor override
        """
        coordinator = ExtractionCoordinator(
            ocr_client=ocr_client,
            min_text_characters=config.min_text_characters,
            ocr_timeout=config.ocr_timeout,
        )
        return cls(
            extractor=extractor,
            coordinator=coordinator,
            heuristics=config.heuristics,
        )

    async def extract_primary(self, payload: bytes) -> ParsedPdf:
        """Run the blocking primary extractor in a worker thread.

        Extractor failures are logged and treated as an empty extraction so
        the document still goes through the fallback path.
        """
        try:
            return await asyncio.to_thread(self.extractor.extract, payload)
        except Exception:
            logger.error("Primary extraction failed", exc_info=True)
            return ParsedPdf.empty()

    async def ingest(self, payload: bytes) -> IngestResult:
        """Ingest one document.

        Args:
            payload: Document bytes

        Returns:
            IngestResult with sections and the fallback diagnostic.
        """
        parsed = await self.extract_primary(payload)
        outcome = await self.coordinator.resolve(payload, parsed.to_raw_text())
        sections = normalize(outcome.final_text, heuristics=self.heuristics)

        page_count = outcome.page_count
        if page_count is None:
            page_count = parsed.metadata.page_count

        logger.info(
            "Ingested document: %d sections, provenance=%s, needs_fallback=%s",
            len(sections),
            outcome.provenance.value,
            outcome.needs_fallback,
        )
        return IngestResult(
            sections=sections,
            needs_fallback=outcome.needs_fallback,
            page_count=page_count,
            diagnostic=outcome.diagnostic,
            provenance=outcome.provenance,
            metadata=parsed.metadata,
            ocr=outcome.ocr,
        )


async def ingest(
    payload: bytes,
    ocr_client: OcrClient | None = None,
    extractor: PrimaryExtractor | None = None,
    ocr_timeout: float | None = None,
) -> IngestResult:
    """Ingest a document with default settings.

    Args:
        payload: Document bytes
        ocr_client: Optional OCR collaborator
        extractor: Optional primary extractor
        ocr_timeout: Optional OCR timeout in seconds

    Returns:
        IngestResult for the document.
    """
    ingestor = DocumentIngestor(
        extractor=extractor,
        coordinator=ExtractionCoordinator(ocr_client=ocr_client, ocr_timeout=ocr_timeout),
    )
    return await ingestor.ingest(payload)
