"""Assemble classified lines into an ordered sequence of titled sections.

The assembler makes one forward pass over the sanitized text. It keeps the
currently open section, whether the previous line was blank (headings must
follow a blank line) and whether any meaningful line was seen at all.

Example:
    >>> sections = normalize("BIOLOGY UNIT\\nLESSON PLAN\\n\\nTopics\\nDNA\\n")
    >>> [(s.heading, s.body) for s in sections]
    [('Biology Unit', 'LESSON PLAN'), ('Topics', 'DNA')]
"""

from dataclasses import dataclass, field

from docsections.config.defaults import DEFAULT_SECTION_HEADING
from docsections.lib.line_classifier import (
    DEFAULT_HEURISTICS,
    ClassifiedLine,
    LineKind,
    classify_line,
    is_page_marker,
)
from docsections.lib.logging_config import get_logger
from docsections.lib.sanitizer import collapse_lines, has_content, sanitize
from docsections.models.config import HeadingHeuristics
from docsections.models.document import Section

logger = get_logger(__name__)


@dataclass
class _OpenSection:
    """Section under construction."""

    heading: str
    lines: list[str] = field(default_factory=list)

    def has_content(self) -> bool:
        return has_content(self.lines)

    def close(self) -> Section:
        return Section(heading=self.heading, body=collapse_lines(self.lines))


class SectionAssembler:
    """Single-pass builder turning classified lines into sections.

    Instances hold per-document state and are not reused across documents;
    normalize() creates a fresh one for every call.

    Attributes:
        heuristics: Heading thresholds passed to the line classifier
        default_heading: Heading for content that precedes any heading line
    """

    def __init__(
        self,
        heuristics: HeadingHeuristics = DEFAULT_HEURISTICS,
        default_heading: str = DEFAULT_SECTION_HEADING,
    ) -> None:
        """Initialize an empty assembler.

        Args:
            heuristics: Heading thresholds (default: reference values)
            default_heading: Sentinel heading (default: "Document")
        """
        self.heuristics = heuristics
        self.default_heading = default_heading
        self.sections: list[Section] = []
        self._current: _OpenSection | None = None
        self._previous_line_was_blank = True
        self._encountered_meaningful_line = False

    def feed(self, line: str) -> ClassifiedLine:
        """Classify one physical line and apply it to the open section.

        Args:
            line: A line of sanitized text

        Returns:
            The classification that was applied.
        """
        classified = classify_line(line, self._previous_line_was_blank, self.heuristics)

        if classified.kind is LineKind.BLANK:
            if self._current is not None and self._current.has_content():
                self._current.lines.append("")
            self._previous_line_was_blank = True
            return classified

        if classified.kind is LineKind.PAGE_MARKER:
            self._previous_line_was_blank = True
            return classified

        self._encountered_meaningful_line = True

        if classified.kind is LineKind.HEADING:
            self._emit_current()
            self._current = _OpenSection(heading=classified.value)
            self._previous_line_was_blank = False
            return classified

        if classified.is_empty:
            # A bullet glyph with nothing after it acts as a blank line
            self._previous_line_was_blank = True
            return classified

        if self._current is None:
            self._current = _OpenSection(heading=self.default_heading)

        self._current.lines.append(classified.value)
        self._previous_line_was_blank = False
        return classified

    def finish(self, sanitized: str) -> list[Section]:
        """Close the open section and apply the single-section fallback.

        Args:
            sanitized: The full sanitized text, used only when no section
                could be formed from a document that had meaningful lines

        Returns:
            The ordered sections.
        """
        self._emit_current()

        if not self.sections and self._encountered_meaningful_line:
            lines = self._current.lines if self._current is not None else []
            if not lines:
                lines = [
                    line for line in sanitized.split("\n") if not is_page_marker(line)
                ]
            logger.debug(
                "No section carried body text, wrapping document in '%s'",
                self.default_heading,
            )
            self.sections.append(
                Section(heading=self.default_heading, body=collapse_lines(lines))
            )

        return self.sections

    def _emit_current(self) -> None:
        """Append the open section if it has body text; drop it otherwise."""
        if self._current is not None and self._current.has_content():
            self.sections.append(self._current.close())
        elif self._current is not None:
            logger.debug("Dropping heading without body: '%s'", self._current.heading)


def normalize(
    text: str,
    heuristics: HeadingHeuristics = DEFAULT_HEURISTICS,
    default_heading: str = DEFAULT_SECTION_HEADING,
) -> list[Section]:
    """Convert raw extracted text into structured sections.

    Args:
        text: Raw text from any extractor
        heuristics: Heading thresholds (default: reference values)
        default_heading: Heading for leading body text (default: "Document")

    Returns:
        Sections in document order. Empty if the sanitized text is empty or
        contains only page markers.
    """
    sanitized = sanitize(text)
    if not sanitized:
        return []

    assembler = SectionAssembler(heuristics=heuristics, default_heading=default_heading)
    for line in sanitized.split("\n"):
        assembler.feed(line)

    sections = assembler.finish(sanitized)
    logger.debug("Normalized %d characters into %d sections", len(text), len(sections))
    return sections
