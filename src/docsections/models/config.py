"""Configuration models for the ingestion pipeline."""

from pydantic import BaseModel, ConfigDict, Field

from docsections.config.defaults import (
    CAPITALIZED_WORD_RATIO,
    DOCUMENT_AI_DEFAULTS,
    MAX_HEADING_LENGTH,
    MIN_CAPITALIZED_WORDS,
    MIN_EMBEDDED_TEXT_CHARACTERS,
    SENTENCE_HEADING_UPPERCASE_RATIO,
    UPPERCASE_HEADING_RATIO,
)


class HeadingHeuristics(BaseModel):
    """Thresholds used by the line classifier to spot heading lines.

    Attributes:
        max_length: Lines longer than this are never headings
        uppercase_ratio: Uppercase share of letters that makes a heading
        sentence_uppercase_ratio: Uppercase share required when the line ends
            in sentence punctuation (``.``, ``?`` or ``!``)
        capitalized_word_ratio: Share of capitalized words for multi-word titles
        min_capitalized_words: Lower bound on capitalized words for multi-word
            titles
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    max_length: int = Field(default=MAX_HEADING_LENGTH, gt=0)
    uppercase_ratio: float = Field(default=UPPERCASE_HEADING_RATIO, ge=0.0, le=1.0)
    sentence_uppercase_ratio: float = Field(
        default=SENTENCE_HEADING_UPPERCASE_RATIO, ge=0.0, le=1.0
    )
    capitalized_word_ratio: float = Field(
        default=CAPITALIZED_WORD_RATIO, ge=0.0, le=1.0
    )
    min_capitalized_words: int = Field(default=MIN_CAPITALIZED_WORDS, ge=1)


class OcrConfig(BaseModel):
    """Document AI processor settings.

    Attributes:
        project_id: Google Cloud project hosting the processor
        location: Processor region (``us``, ``eu``)
        processor_id: Document AI processor identifier
        timeout: Per-request timeout in seconds
        endpoint: Full ``:process`` URL override, mainly for testing
    """

    model_config = ConfigDict(extra="forbid")

    project_id: str = Field(min_length=1)
    location: str = Field(default=str(DOCUMENT_AI_DEFAULTS["location"]), min_length=1)
    processor_id: str = Field(min_length=1)
    timeout: float = Field(default=float(DOCUMENT_AI_DEFAULTS["timeout"]), gt=0)
    endpoint: str | None = None

    @property
    def process_url(self) -> str:
        """Return the Document AI ``:process`` URL for this processor."""
        if self.endpoint:
            return self.endpoint
        return (
            f"https://{self.location}-documentai.googleapis.com/v1/"
            f"projects/{self.project_id}/locations/{self.location}/"
            f"processors/{self.processor_id}:process"
        )


class IngestConfig(BaseModel):
    """Top-level settings for one ingestion pipeline.

    Attributes:
        min_text_characters: Sufficiency floor for embedded text
        ocr_timeout: Upper bound in seconds on the whole OCR fallback call
        heuristics: Heading detection thresholds
        ocr: OCR processor settings, None when OCR is not configured
    """

    model_config = ConfigDict(extra="forbid")

    min_text_characters: int = Field(default=MIN_EMBEDDED_TEXT_CHARACTERS, ge=1)
    ocr_timeout: float | None = Field(default=None, gt=0)
    heuristics: HeadingHeuristics = Field(default_factory=HeadingHeuristics)
    ocr: OcrConfig | None = None
