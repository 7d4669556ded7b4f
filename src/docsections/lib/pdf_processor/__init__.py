"""PDF processing utilities for docsections.

- **Text Extraction**: Page-by-page text extraction using pdfminer, with a
  ``-- n of m --`` footer after every page and metadata from the document
  information dictionary.

Example:
    from docsections.lib.pdf_processor import extract_pdf_text

    parsed = extract_pdf_text(Path("lesson.pdf").read_bytes())
    print(parsed.metadata.page_count, parsed.text[:200])

Functions:
    extract_pdf_text: Extract PDF text and metadata, never raising
"""

from docsections.lib.pdf_processor.text_extractor import (
    PdfTextExtractor,
    PrimaryExtractor,
    extract_pdf_text,
)

__all__ = [
    "PdfTextExtractor",
    "PrimaryExtractor",
    "extract_pdf_text",
]
