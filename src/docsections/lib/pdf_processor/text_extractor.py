"""Primary PDF text extraction using pdfminer.

Text is read page by page from pdfminer's layout analysis. Lines inside a
text box are kept together and text boxes are separated by a blank line, so
visually separated headings remain separated in the output. Each page is
followed by a footer line ``-- <page> of <total> --``; the line classifier
recognizes and drops these footers, but they let it treat a page break as a
blank line.

Failures never propagate: an unreadable PDF yields empty text and a page
count of zero, which the sufficiency check then routes to OCR.
"""

import re
from datetime import datetime, timedelta, timezone
from io import BytesIO
from typing import Any, Protocol

from pdfminer.high_level import extract_pages
from pdfminer.layout import LAParams, LTTextContainer, LTTextLine
from pdfminer.pdfdocument import PDFDocument
from pdfminer.pdfpage import PDFPage
from pdfminer.pdfparser import PDFParser
from pdfminer.pdftypes import resolve1
from pdfminer.psparser import PSLiteral
from pdfminer.utils import decode_text

from docsections.lib.logging_config import get_logger
from docsections.models.document import ParsedPdf, PdfMetadata

logger = get_logger(__name__)

_PDF_DATE = re.compile(
    r"^(?:D:)?(?P<year>\d{4})(?P<month>\d{2})?(?P<day>\d{2})?"
    r"(?P<hour>\d{2})?(?P<minute>\d{2})?(?P<second>\d{2})?"
    r"(?P<tz>[Zz]|[+\-]\d{2}'?\d{2}'?)?"
)

# Info dictionary key -> PdfMetadata field
_INFO_FIELDS = {
    "Title": "title",
    "Author": "author",
    "Creator": "creator",
    "Producer": "producer",
    "Subject": "subject",
    "Keywords": "keywords",
}


class PrimaryExtractor(Protocol):
    """Anything that can turn document bytes into text and metadata."""

    def extract(self, payload: bytes) -> ParsedPdf:
        """Extract text and metadata, returning an empty result on failure."""
        ...


def page_footer(page_number: int, total_pages: int) -> str:
    """Return the footer line appended after each page."""
    return f"-- {page_number} of {total_pages} --"


def parse_pdf_date(value: str | None) -> datetime | None:
    """Parse a PDF date string such as ``D:20240131120000+01'00'``.

    Args:
        value: Raw date string from the info dictionary

    Returns:
        Timezone-aware datetime when an offset is present, naive otherwise;
        None if the string cannot be parsed.
    """
    if not value:
        return None

    match = _PDF_DATE.match(value.strip())
    if match is None:
        return None

    parts = match.groupdict()
    try:
        parsed = datetime(
            int(parts["year"]),
            int(parts["month"] or 1),
            int(parts["day"] or 1),
            int(parts["hour"] or 0),
            int(parts["minute"] or 0),
            int(parts["second"] or 0),
        )
    except ValueError:
        return None

    tz = parts["tz"]
    if not tz:
        return parsed
    if tz in ("Z", "z"):
        return parsed.replace(tzinfo=timezone.utc)

    digits = tz[1:].replace("'", "")
    offset = timedelta(hours=int(digits[:2]), minutes=int(digits[2:4] or 0))
    if tz[0] == "-":
        offset = -offset
    return parsed.replace(tzinfo=timezone(offset))


def _decode_info_value(value: Any) -> str | None:
    """Decode an info dictionary entry into a stripped string."""
    value = resolve1(value)
    if value is None:
        return None
    if isinstance(value, bytes):
        text = decode_text(value)
    elif isinstance(value, PSLiteral):
        text = str(value.name)
    else:
        text = str(value)
    text = text.replace("\x00", "").strip()
    return text or None


def _read_metadata(payload: bytes) -> PdfMetadata:
    """Read the info dictionary and page count."""
    parser = PDFParser(BytesIO(payload))
    document = PDFDocument(parser)

    info: dict[str, Any] = {}
    for entry in document.info:
        info.update(resolve1(entry) or {})

    fields: dict[str, Any] = {
        field: _decode_info_value(info.get(key)) for key, field in _INFO_FIELDS.items()
    }
    fields["creation_date"] = parse_pdf_date(_decode_info_value(info.get("CreationDate")))
    fields["modification_date"] = parse_pdf_date(_decode_info_value(info.get("ModDate")))
    fields["page_count"] = sum(1 for _ in PDFPage.create_pages(document))

    return PdfMetadata(**fields)


def _extract_page_texts(
    payload: bytes,
    page_numbers: list[int] | None = None,
) -> list[str]:
    """Extract the text of each page.

    Args:
        payload: PDF bytes
        page_numbers: 0-indexed pages to read, None for all

    Returns:
        One string per page, text boxes separated by blank lines.
    """
    pages: list[str] = []

    for page_layout in extract_pages(
        BytesIO(payload), page_numbers=page_numbers, laparams=LAParams()
    ):
        blocks: list[str] = []
        for element in page_layout:
            if not isinstance(element, LTTextContainer):
                continue
            lines = [
                text_line.get_text().strip()
                for text_line in element
                if isinstance(text_line, LTTextLine)
            ]
            block = "\n".join(line for line in lines if line)
            if block:
                blocks.append(block)
        pages.append("\n\n".join(blocks))

    return pages


def extract_pdf_text(
    payload: bytes,
    page_numbers: list[int] | None = None,
) -> ParsedPdf:
    """Extract text and metadata from a PDF.

    Args:
        payload: PDF file contents
        page_numbers: Optional 0-indexed pages to extract (default: all)

    Returns:
        ParsedPdf with trimmed text. On any parser failure the error is
        logged and an empty result (no text, zero pages) is returned.
    """
    try:
        metadata = _read_metadata(payload)
        page_texts = _extract_page_texts(payload, page_numbers)
    except Exception:
        logger.error("Failed to extract PDF text", exc_info=True)
        return ParsedPdf.empty()

    total = len(page_texts)
    chunks: list[str] = []
    for index, page_text in enumerate(page_texts, start=1):
        chunks.append(page_text)
        chunks.append(page_footer(index, total))

    text = "\n\n".join(chunks).strip()
    logger.debug(
        "Extracted %d characters from %d pages (document has %d)",
        len(text),
        total,
        metadata.page_count,
    )
    return ParsedPdf(text=text, metadata=metadata)


class PdfTextExtractor:
    """PrimaryExtractor backed by pdfminer.

    Attributes:
        page_numbers: Optional 0-indexed pages to restrict extraction to
    """

    def __init__(self, page_numbers: list[int] | None = None) -> None:
        """Create an extractor, optionally limited to some pages."""
        self.page_numbers = page_numbers

    def extract(self, payload: bytes) -> ParsedPdf:
        """Extract text and metadata from PDF bytes."""
        return extract_pdf_text(payload, self.page_numbers)
