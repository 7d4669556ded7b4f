"""Whitespace normalization for extracted document text."""

import re

_LINE_BREAKS = re.compile(r"\r\n?")
_HORIZONTAL_SPACE = re.compile(r"[\u00a0\t]")
_TRAILING_SPACE_BEFORE_BREAK = re.compile(r"[ \t]+\n")
_TRAILING_SPACE_PER_LINE = re.compile(r"[ \t]+$", re.MULTILINE)
_BLANK_LINE_RUNS = re.compile(r"\n{3,}")


def sanitize(text: str) -> str:
    """Normalize line endings and whitespace in raw extracted text.

    CRLF and CR become LF, non-breaking spaces and tabs become plain spaces,
    trailing spaces before a line break are dropped, runs of three or more
    line breaks collapse to two, and the result is trimmed.

    Args:
        text: Raw text from an extractor

    Returns:
        Sanitized text, never longer than the input.
    """
    value = _LINE_BREAKS.sub("\n", text)
    value = _HORIZONTAL_SPACE.sub(" ", value)
    value = _TRAILING_SPACE_BEFORE_BREAK.sub("\n", value)
    value = _BLANK_LINE_RUNS.sub("\n\n", value)
    return value.strip()


def has_content(lines: list[str]) -> bool:
    """Return True if any line contains non-whitespace characters."""
    return any(line.strip() for line in lines)


def collapse_lines(lines: list[str]) -> str:
    """Join body lines into a finalized section body.

    Args:
        lines: Body lines, with empty strings marking paragraph breaks

    Returns:
        Joined text with at most one blank line between paragraphs, no
        trailing spaces on any line, trimmed overall.
    """
    value = "\n".join(lines)
    value = _BLANK_LINE_RUNS.sub("\n\n", value)
    value = _TRAILING_SPACE_PER_LINE.sub("", value)
    return value.strip()
