"""Declarative rule models driving the document segmenter."""

from __future__ import annotations

import re
from typing import Literal

from pydantic import BaseModel, Field, PrivateAttr, field_validator, model_validator

HeadingKind = Literal["book", "part", "section", "chapter", "titled-section"]

# Context markers: they set the outer/inner title that later headings compose with.
CONTEXT_KINDS: frozenset[str] = frozenset({"part", "section"})


def _compile(pattern: str | None) -> re.Pattern[str] | None:
    return re.compile(pattern) if pattern else None


def _check_pattern(value: str | None) -> str | None:
    if value:
        try:
            re.compile(value)
        except re.error as exc:
            raise ValueError(f"Invalid regular expression {value!r}: {exc}") from exc
    return value


class LineMatcher(BaseModel):
    """Matches a trimmed line by exact text, substring or regex.

    A line matches when any configured criterion matches. A matcher with
    no criteria never matches.
    """

    pattern: str | None = None
    contains: list[str] = Field(default_factory=list)
    equals: list[str] = Field(default_factory=list)

    _regex: re.Pattern[str] | None = PrivateAttr(default=None)

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, value: str | None) -> str | None:
        return _check_pattern(value)

    def model_post_init(self, __context: object) -> None:
        self._regex = _compile(self.pattern)

    def matches(self, line: str) -> bool:
        if line in self.equals:
            return True
        if any(fragment in line for fragment in self.contains):
            return True
        return bool(self._regex and self._regex.search(line))

    def describe(self) -> str:
        """Human-readable summary used in diagnostics."""
        parts = [repr(value) for value in self.equals + self.contains]
        if self.pattern:
            parts.append(f"/{self.pattern}/")
        return " or ".join(parts) or "<empty>"


class BoundaryRule(LineMatcher):
    """Marks where the body of a work begins or ends."""


class StartRule(BoundaryRule):
    """Marks where the body begins and what becomes of the marker line.

    By default the marker line is the first body line, so it may itself be
    a heading. With ``keep_line`` off it is consumed. With ``title`` set it
    is consumed and opens a section with that title.
    """

    keep_line: bool = True
    title: str | None = None


class HeadingRule(LineMatcher):
    """Classifies a trimmed line as a structural heading.

    ``title`` overrides the heading text; ``{n}`` in it is replaced by how
    many times the rule has fired (1-based). ``exclude`` lists substrings
    that veto a match, e.g. an all-caps author byline.
    """

    kind: HeadingKind
    min_length: int = 0
    max_length: int | None = None
    exclude: list[str] = Field(default_factory=list)
    title: str | None = None
    keep_line: bool = False
    once: bool = False
    title_from_next_line: bool = False

    @model_validator(mode="after")
    def check_options(self) -> HeadingRule:
        if not (self.pattern or self.contains or self.equals):
            raise ValueError("A heading rule needs a pattern, contains or equals")
        if self.title_from_next_line and self.kind not in CONTEXT_KINDS:
            raise ValueError("title_from_next_line only applies to part and section rules")
        if self.max_length is not None and self.max_length < self.min_length:
            raise ValueError("max_length must not be below min_length")
        return self

    def matches(self, line: str) -> bool:
        if len(line) < self.min_length:
            return False
        if self.max_length is not None and len(line) > self.max_length:
            return False
        if any(fragment in line for fragment in self.exclude):
            return False
        return super().matches(line)


class Heading(BaseModel):
    """A line classified as a heading. Only used during a walk."""

    kind: HeadingKind
    title: str
    line: str
    line_number: int
    keep_line: bool = False
    title_from_next_line: bool = False


class SegmentationRules(BaseModel):
    """Complete rule set for segmenting one work."""

    start: list[StartRule] = Field(default_factory=list)
    end: BoundaryRule | None = None
    headings: list[HeadingRule] = Field(default_factory=list)
    fallback_headings: list[HeadingRule] = Field(default_factory=list)
    noise_patterns: list[str] = Field(default_factory=list)
    min_sections: int = 5
    min_content_length: int = 100
    skip_blank_lines: bool = False
    preserve_indentation: bool = True
    strip_footnote_markers: bool = False

    _noise: list[re.Pattern[str]] = PrivateAttr(default_factory=list)

    @field_validator("start", mode="before")
    @classmethod
    def start_as_list(cls, value: object) -> object:
        # A single start marker may be given without a list
        if value is None:
            return []
        if isinstance(value, (dict, BaseModel)):
            return [value]
        return value

    @field_validator("noise_patterns")
    @classmethod
    def check_noise_patterns(cls, value: list[str]) -> list[str]:
        for pattern in value:
            _check_pattern(pattern)
        return value

    @field_validator("fallback_headings")
    @classmethod
    def fallback_is_flat(cls, value: list[HeadingRule]) -> list[HeadingRule]:
        if any(rule.kind == "book" for rule in value):
            raise ValueError("Fallback headings cannot group into books")
        return value

    def model_post_init(self, __context: object) -> None:
        self._noise = [re.compile(pattern) for pattern in self.noise_patterns]

    @property
    def groups_books(self) -> bool:
        """Whether the primary rules split the work into books."""
        return any(rule.kind == "book" for rule in self.headings)

    def match_start(self, line: str) -> StartRule | None:
        """Return the first start rule matching a trimmed line, if any."""
        return next((rule for rule in self.start if rule.matches(line)), None)

    def is_noise(self, line: str) -> bool:
        return any(regex.search(line) for regex in self._noise)
