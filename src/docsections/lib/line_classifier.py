"""Per-line classification for unstructured document text.

Extracted PDF text carries no markup, so heading structure is recovered from
casing and position alone. Each predicate below is an independent pure
function; classify_line() combines them in a fixed order:

1. Blank lines
2. Page footers of the form ``-- 3 of 10 --`` (discarded downstream)
3. Heading candidates (only directly after a blank line)
4. Bullet and numbered list items (normalized to ``- item``)
5. Plain text
"""

import math
import re
from dataclasses import dataclass
from enum import Enum

from docsections.models.config import HeadingHeuristics

PAGE_MARKER_PATTERN = re.compile(r"^--\s*\d+\s+of\s+\d+\s*--$", re.IGNORECASE)
NUMBERED_BULLET_PATTERN = re.compile(r"^\d+[.)]\s+")
BULLET_PREFIX_PATTERN = re.compile(
    r"^\s*[-*·‒–—−•●▪◦◉◍"
    r"○‣▸▹▶►▻➤➔→■□"
    r"◆◇⁃∙]+[ \t]*"
)

_NON_ASCII_LETTERS = re.compile(r"[^A-Za-z]")
_NON_UPPERCASE = re.compile(r"[^A-Z]")
_CAPITALIZED_WORD = re.compile(r"^[A-Z0-9]")
_SINGLE_WORD_TITLE = re.compile(r"^[A-Z][A-Za-z0-9\-()/:%]*$")
_MULTI_WORD_TITLE = re.compile(r"^[A-Za-z0-9\s,'&\-()/:%]+$")
_UPPERCASE_TITLE = re.compile(r"^[A-Z0-9\s,'&\-()/:%]+$")
_SENTENCE_END = re.compile(r"[.?!]$")
_WHITESPACE = re.compile(r"\s+")

BULLET_MARKER = "- "

DEFAULT_HEURISTICS = HeadingHeuristics()


class LineKind(str, Enum):
    """Discrete classification of one physical line."""

    BLANK = "blank"
    PAGE_MARKER = "page_marker"
    HEADING = "heading"
    BULLET = "bullet"
    TEXT = "text"


@dataclass(frozen=True)
class ClassifiedLine:
    """A trimmed input line with its kind and normalized value.

    Attributes:
        raw: The trimmed source line
        kind: Classification result
        value: Normalized heading text for HEADING, bullet-normalized text for
            BULLET (empty when nothing follows the bullet glyph), the line
            itself for TEXT, and an empty string otherwise
    """

    raw: str
    kind: LineKind
    value: str = ""

    @property
    def is_empty(self) -> bool:
        """True if the line contributes nothing to a section body."""
        return not self.value


def is_page_marker(line: str) -> bool:
    """Check for a page footer such as ``-- 2 of 7 --``."""
    return PAGE_MARKER_PATTERN.match(line.strip()) is not None


def is_bullet_line(line: str) -> bool:
    """Check for a bullet glyph or a ``1.`` / ``2)`` numbered prefix."""
    return (
        BULLET_PREFIX_PATTERN.match(line) is not None
        or NUMBERED_BULLET_PATTERN.match(line) is not None
    )


def normalize_bullet_line(line: str) -> str:
    """Replace any bullet or number prefix with a canonical ``- `` marker.

    Args:
        line: A single line of text

    Returns:
        ``- item`` for list items, an empty string when the bullet has no
        text after it, and the trimmed line otherwise.
    """
    if BULLET_PREFIX_PATTERN.match(line):
        stripped = BULLET_PREFIX_PATTERN.sub("", line, count=1).strip()
        return f"{BULLET_MARKER}{stripped}" if stripped else ""

    if NUMBERED_BULLET_PATTERN.match(line):
        stripped = NUMBERED_BULLET_PATTERN.sub("", line, count=1).strip()
        return f"{BULLET_MARKER}{stripped}"

    return line.strip()


def uppercase_ratio(line: str) -> float | None:
    """Return uppercase letters divided by ASCII letters, None if no letters."""
    letters = _NON_ASCII_LETTERS.sub("", line)
    if not letters:
        return None
    return len(_NON_UPPERCASE.sub("", letters)) / len(letters)


def is_single_word_title(line: str) -> bool:
    """Check for one capitalized word such as ``Overview`` or ``Step-2``."""
    return len(line.split()) == 1 and _SINGLE_WORD_TITLE.match(line) is not None


def is_multi_word_title(
    line: str,
    heuristics: HeadingHeuristics = DEFAULT_HEURISTICS,
) -> bool:
    """Check for a title-cased phrase such as ``Cell Structure and Function``.

    Every character must come from the title alphabet and enough words must
    start with an uppercase letter or digit.
    """
    words = line.split()
    if len(words) <= 1 or _MULTI_WORD_TITLE.match(line) is None:
        return False

    capitalized = sum(1 for word in words if _CAPITALIZED_WORD.match(word))
    required = max(
        heuristics.min_capitalized_words,
        math.ceil(len(words) * heuristics.capitalized_word_ratio),
    )
    return capitalized >= required


def is_heading_candidate(
    line: str,
    previous_line_was_blank: bool,
    heuristics: HeadingHeuristics = DEFAULT_HEURISTICS,
) -> bool:
    """Decide whether a trimmed line starts a new section.

    Headings must follow a blank line, fit within the length limit, not be
    list items, and contain at least one letter. Lines ending in sentence
    punctuation only qualify when almost entirely uppercase.

    Args:
        line: Trimmed, non-empty line
        previous_line_was_blank: Whether the preceding line was blank or a
            page marker
        heuristics: Thresholds to apply

    Returns:
        True if the line should be treated as a heading.
    """
    if not previous_line_was_blank:
        return False

    if len(line) > heuristics.max_length:
        return False

    if is_bullet_line(line):
        return False

    ratio = uppercase_ratio(line)
    if ratio is None:
        return False

    if _SENTENCE_END.search(line):
        return ratio >= heuristics.sentence_uppercase_ratio

    return (
        ratio >= heuristics.uppercase_ratio
        or is_single_word_title(line)
        or is_multi_word_title(line, heuristics)
        or line.endswith(":")
    )


def normalize_heading(line: str) -> str:
    """Turn a heading line into display form.

    All-caps headings are title-cased word by word; words of three characters
    or fewer, and words without letters, stay uppercase. Anything else is
    returned with whitespace collapsed.

    Example:
        >>> normalize_heading("BIOLOGY UNIT")
        'Biology Unit'
        >>> normalize_heading("THE CELL AND DNA")
        'THE Cell AND DNA'
    """
    trimmed = _WHITESPACE.sub(" ", line.strip())

    if not (_UPPERCASE_TITLE.match(trimmed) and trimmed == trimmed.upper()):
        return trimmed

    words: list[str] = []
    for word in trimmed.lower().split(" "):
        if len(word) <= 3 or word == word.upper():
            words.append(word.upper())
        else:
            words.append(word[:1].upper() + word[1:])
    return " ".join(words)


def classify_line(
    line: str,
    previous_line_was_blank: bool,
    heuristics: HeadingHeuristics = DEFAULT_HEURISTICS,
) -> ClassifiedLine:
    """Classify one physical line.

    Args:
        line: Raw line (trimmed here)
        previous_line_was_blank: Blank status of the preceding line
        heuristics: Heading thresholds

    Returns:
        ClassifiedLine with kind and normalized value.
    """
    trimmed = line.strip()

    if not trimmed:
        return ClassifiedLine(raw=trimmed, kind=LineKind.BLANK)

    if is_page_marker(trimmed):
        return ClassifiedLine(raw=trimmed, kind=LineKind.PAGE_MARKER)

    if is_heading_candidate(trimmed, previous_line_was_blank, heuristics):
        return ClassifiedLine(
            raw=trimmed, kind=LineKind.HEADING, value=normalize_heading(trimmed)
        )

    if is_bullet_line(trimmed):
        return ClassifiedLine(
            raw=trimmed, kind=LineKind.BULLET, value=normalize_bullet_line(trimmed)
        )

    return ClassifiedLine(raw=trimmed, kind=LineKind.TEXT, value=trimmed)
