"""Heading-driven segmentation of literature text into titled sections."""

import logging
import re
from pathlib import Path

from pydantic import BaseModel, Field

from litparse.exceptions import BoundaryNotFoundError
from litparse.models.document import Book, Section
from litparse.models.rules import Heading, HeadingRule, SegmentationRules

logger = logging.getLogger(__name__)

# Titles made only of symbols are OCR artifacts, never real headings.
NOISE_TITLE = re.compile(r"^[\W_]+$")

# Inline reference markers such as "[12]".
FOOTNOTE_MARKER = re.compile(r"\[\d+\]")


class SegmentationResult(BaseModel):
    """Outcome of segmenting one source text.

    ``books`` is set for works grouped into books, ``chapters`` otherwise.
    Line numbers are 1-based; ``end_line`` is the first line excluded from
    the body (one past the last line when there is no footer).
    """

    chapters: list[Section] = Field(default_factory=list)
    books: list[Book] | None = None
    start_line: int = 1
    end_line: int = 1
    primary_count: int = 0
    fallback_count: int | None = None
    used_fallback: bool = False
    low_yield: bool = False

    @property
    def sections(self) -> list[Section]:
        if self.books is not None:
            return [section for book in self.books for section in book.chapters]
        return list(self.chapters)

    @property
    def section_count(self) -> int:
        return len(self.sections)


class _Walk:
    """State of a single forward pass over the body lines."""

    def __init__(
        self,
        rules: SegmentationRules,
        headings: list[HeadingRule],
        first_line_number: int,
    ) -> None:
        self._rules = rules
        self._headings = headings
        self._first_line_number = first_line_number
        self._group_books = any(rule.kind == "book" for rule in headings)

        self.chapters: list[Section] = []
        self.books: list[Book] = []
        self.dropped_lines = 0

        self._book: Book | None = None
        self._part = ""
        self._section = ""
        self._awaiting_title = False
        self._title: str | None = None
        self._opened_at = 0
        self._buffer: list[str] = []
        self._fired: dict[int, int] = {}

    @property
    def section_count(self) -> int:
        return len(self.chapters) + sum(len(book.chapters) for book in self.books)

    def run(self, lines: list[str]) -> "_Walk":
        for offset, raw in enumerate(lines):
            self._feed(raw, self._first_line_number + offset)
        self._close_section()
        self._close_book()
        return self

    def _feed(self, raw: str, line_number: int) -> None:
        line = raw.strip()

        if not line:
            # Blank lines separate paragraphs, but never lead a section.
            if not self._rules.skip_blank_lines and self._title is not None and self._buffer:
                self._buffer.append("")
            return

        heading = self._classify(line, line_number)
        if heading is not None:
            self._apply(heading)
            return

        if self._rules.is_noise(line):
            return

        if self._awaiting_title:
            self._awaiting_title = False
            self._open(self._compose(line), line_number)
            return

        if self._title is None:
            self.dropped_lines += 1
            return

        self._buffer.append(raw if self._rules.preserve_indentation else line)

    def _classify(self, line: str, line_number: int) -> Heading | None:
        for index, rule in enumerate(self._headings):
            if rule.once and self._fired.get(index):
                continue
            if not rule.matches(line):
                continue

            fired = self._fired.get(index, 0) + 1
            self._fired[index] = fired
            title = rule.title.replace("{n}", str(fired)) if rule.title else line
            return Heading(
                kind=rule.kind,
                title=title,
                line=line,
                line_number=line_number,
                keep_line=rule.keep_line,
                title_from_next_line=rule.title_from_next_line,
            )
        return None

    def _apply(self, heading: Heading) -> None:
        self._close_section()
        self._awaiting_title = False

        if heading.kind == "book":
            self._close_book()
            self._book = Book(title=heading.title)
            self._part = ""
            self._section = ""
            return

        if heading.kind == "part":
            self._part = heading.title
            self._section = ""
        elif heading.kind == "section":
            self._section = heading.title

        if heading.title_from_next_line:
            self._awaiting_title = True
            return

        if heading.kind == "part":
            title = heading.title
        elif heading.kind == "section":
            title = f"{self._part}: {heading.title}" if self._part else heading.title
        else:
            title = self._compose(heading.title)

        self._open(title, heading.line_number)
        if heading.keep_line:
            self._buffer.append(heading.line)

    def _compose(self, text: str) -> str:
        if self._part and self._section:
            return f"{self._part} - {self._section}: {text}"
        if self._part:
            return f"{self._part}: {text}"
        return text

    def begin(self, title: str, line_number: int) -> None:
        """Open a section before the first body line, e.g. from a titled start marker."""
        self._open(title, line_number)

    def _open(self, title: str, line_number: int) -> None:
        self._title = title
        self._opened_at = line_number
        self._buffer = []

    def _close_section(self) -> None:
        if self._title is None:
            return

        content = "\n".join(self._buffer).strip()
        if self._rules.strip_footnote_markers:
            content = FOOTNOTE_MARKER.sub("", content)
        section = Section(title=self._title, content=content)

        if not self._group_books:
            self.chapters.append(section)
        elif self._book is None:
            logger.warning(
                "Dropping section %r at line %d: it precedes the first book heading",
                self._title,
                self._opened_at,
            )
        else:
            self._book.chapters.append(section)

        self._title = None
        self._buffer = []

    def _close_book(self) -> None:
        if self._book is not None:
            self.books.append(self._book)
            self._book = None


class DocumentSegmenter:
    """Partitions a source text into titled sections.

    Strategy:
    1. Cut the body out of the source using the start and end boundary rules
    2. Walk the body once with the primary heading rules
    3. If that yields fewer than ``min_sections`` sections, walk again with
       the fallback rules and keep whichever pass found more
    4. Drop sections too short to be real content or with noise titles

    Args:
        rules: The rule set for the work being parsed.
    """

    def __init__(self, rules: SegmentationRules) -> None:
        self._rules = rules

    @property
    def rules(self) -> SegmentationRules:
        return self._rules

    def segment(
        self, lines: list[str], source: str | Path | None = None
    ) -> SegmentationResult:
        """Segment source lines into sections (and books, when grouped).

        Args:
            lines: Logical lines of the source text.
            source: Source path, used in diagnostics only.

        Returns:
            The SegmentationResult. An empty section list is a valid result.

        Raises:
            BoundaryNotFoundError: If a start rule is configured and never matches.
        """
        start, end = self.find_body(lines, source)
        opening = self._rules.match_start(lines[start].strip()) if self._rules.start else None
        body_from = start
        if opening is not None and (opening.title or not opening.keep_line):
            body_from = start + 1
        body = lines[body_from:end]
        logger.debug("Body spans lines %d-%d of %s", body_from + 1, end, source or "<text>")

        opening_title = opening.title if opening is not None else None
        primary = self._walk(self._rules.headings, body, body_from, opening_title)
        chosen = primary
        fallback_count: int | None = None
        logger.debug(
            "Primary pass: %d sections, %d lines before the first heading",
            primary.section_count,
            primary.dropped_lines,
        )

        if primary.section_count < self._rules.min_sections and self._rules.fallback_headings:
            logger.info(
                "Primary rules found %d sections (minimum %d), trying fallback rules",
                primary.section_count,
                self._rules.min_sections,
            )
            fallback = self._walk(self._rules.fallback_headings, body, body_from, opening_title)
            fallback_count = fallback.section_count
            if fallback.section_count > primary.section_count:
                chosen = fallback

        used_fallback = chosen is not primary
        if not used_fallback and self._rules.groups_books:
            books: list[Book] | None = self._filter_books(chosen.books)
            chapters: list[Section] = []
        else:
            books = None
            chapters = self._filter_sections(chosen.chapters)

        result = SegmentationResult(
            chapters=chapters,
            books=books,
            start_line=start + 1,
            end_line=end + 1,
            primary_count=primary.section_count,
            fallback_count=fallback_count,
            used_fallback=used_fallback,
        )
        result.low_yield = result.section_count < self._rules.min_sections

        if result.low_yield:
            logger.warning(
                "Low yield for %s: %d sections after filtering (minimum %d); "
                "the heading rules may not fit this source",
                source or "<text>",
                result.section_count,
                self._rules.min_sections,
            )
        else:
            logger.info(
                "Segmented %s into %d sections%s",
                source or "<text>",
                result.section_count,
                " using fallback rules" if used_fallback else "",
            )

        return result

    def find_body(
        self, lines: list[str], source: str | Path | None = None
    ) -> tuple[int, int]:
        """Locate the body between the front matter and the footer.

        The start line is the earliest line matching any start rule. It is
        the marker line itself, whether or not the marker is kept as body.

        Args:
            lines: Logical lines of the source text.
            source: Source path, used in diagnostics only.

        Returns:
            ``(start, end)`` as 0-based indices; ``end`` is exclusive.

        Raises:
            BoundaryNotFoundError: If no start rule ever matches.
        """
        start = 0
        if self._rules.start:
            found = next(
                (i for i, line in enumerate(lines) if self._rules.match_start(line.strip())),
                None,
            )
            if found is None:
                markers = " or ".join(rule.describe() for rule in self._rules.start)
                raise BoundaryNotFoundError(markers, file_path=source)
            start = found

        end = len(lines)
        if self._rules.end is not None:
            search_from = start + 1 if self._rules.start else start
            for index in range(search_from, len(lines)):
                if self._rules.end.matches(lines[index].strip()):
                    end = index
                    break
            else:
                logger.debug("No end marker in %s, body runs to end of input", source or "<text>")

        return start, end

    def _walk(
        self,
        headings: list[HeadingRule],
        body: list[str],
        body_from: int,
        opening_title: str | None,
    ) -> _Walk:
        walk = _Walk(self._rules, headings, body_from + 1)
        if opening_title:
            # The consumed start marker is the section's own line
            walk.begin(opening_title, body_from)
        return walk.run(body)

    def _keep(self, section: Section) -> bool:
        # Only content strictly longer than the minimum counts as a real section
        if len(section.content) <= self._rules.min_content_length:
            return False
        return not NOISE_TITLE.match(section.title)

    def _filter_sections(self, sections: list[Section]) -> list[Section]:
        kept = [section for section in sections if self._keep(section)]
        if len(kept) < len(sections):
            logger.debug("Filtered out %d short or noise sections", len(sections) - len(kept))
        return kept

    def _filter_books(self, books: list[Book]) -> list[Book]:
        filtered: list[Book] = []
        for book in books:
            chapters = self._filter_sections(book.chapters)
            if chapters:
                filtered.append(Book(title=book.title, chapters=chapters))
            else:
                logger.info("Dropping book %r: no sections left after filtering", book.title)
        return filtered
