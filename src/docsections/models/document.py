"""Document value objects produced by extraction and normalization."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class TextSource(str, Enum):
    """Which extraction path produced a piece of raw text."""

    PRIMARY = "primary"
    FALLBACK = "fallback"


class RawText(BaseModel):
    """Immutable extraction result with its provenance tag."""

    model_config = ConfigDict(frozen=True)

    text: str
    source: TextSource
    page_count: int | None = Field(default=None, ge=0)


class PdfMetadata(BaseModel):
    """Metadata read from a PDF's document information dictionary."""

    title: str | None = None
    author: str | None = None
    creator: str | None = None
    producer: str | None = None
    subject: str | None = None
    keywords: str | None = None
    creation_date: datetime | None = None
    modification_date: datetime | None = None
    page_count: int = Field(default=0, ge=0)


class ParsedPdf(BaseModel):
    """Text and metadata returned by the primary extractor."""

    text: str
    metadata: PdfMetadata = Field(default_factory=PdfMetadata)

    @classmethod
    def empty(cls) -> "ParsedPdf":
        """Return the result used when extraction fails."""
        return cls(text="", metadata=PdfMetadata(page_count=0))

    def to_raw_text(self) -> RawText:
        """Tag this extraction as primary raw text."""
        return RawText(
            text=self.text,
            source=TextSource.PRIMARY,
            page_count=self.metadata.page_count,
        )


class Section(BaseModel):
    """A heading plus the body text that follows it.

    Attributes:
        heading: Section title, "Document" when body text precedes any heading
        body: Non-empty body with at most one blank line between paragraphs
    """

    model_config = ConfigDict(frozen=True)

    heading: str
    body: str


SectionSequence = list[Section]
