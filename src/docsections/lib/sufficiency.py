"""Decide whether extracted text carries enough signal to skip OCR."""

import re

from docsections.config.defaults import MIN_EMBEDDED_TEXT_CHARACTERS

_WHITESPACE = re.compile(r"\s+")


def compact_length(text: str) -> int:
    """Return the number of non-whitespace characters in text."""
    return len(_WHITESPACE.sub("", text))


def is_insufficient(
    text: str,
    min_characters: int = MIN_EMBEDDED_TEXT_CHARACTERS,
) -> bool:
    """Check whether text is too thin to use without an OCR fallback.

    Near-empty extractions such as stray page numbers fall below the floor,
    while genuinely short content passes.

    Args:
        text: Candidate extraction
        min_characters: Minimum whitespace-free length (default: 25)

    Returns:
        True if the fallback extractor should be tried.
    """
    length = compact_length(text)
    if length == 0:
        return True
    return length < min_characters
