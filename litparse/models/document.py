"""Output document models written to JSON for the literature import."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Section(BaseModel):
    """A titled chapter of a work and its body text.

    ``word_count`` and ``estimated_reading_time`` are only filled in when
    the work profile asks for statistics; otherwise they stay out of the
    JSON output.
    """

    model_config = ConfigDict(populate_by_name=True)

    title: str
    content: str
    word_count: int | None = Field(default=None, alias="wordCount")
    estimated_reading_time: int | None = Field(default=None, alias="estimatedReadingTime")


class Book(BaseModel):
    """Top-level division of a multi-volume work."""

    title: str
    chapters: list[Section] = Field(default_factory=list)


class DocumentMetadata(BaseModel):
    """Run statistics attached to a Document."""

    model_config = ConfigDict(populate_by_name=True)

    original_format: str = Field(default="txt", alias="originalFormat")
    parse_date: datetime = Field(default_factory=datetime.now, alias="parseDate")
    word_count: int = Field(default=0, alias="wordCount")
    estimated_reading_time: int = Field(default=0, alias="estimatedReadingTime")


class Document(BaseModel):
    """Root of the parsed output.

    Exactly one of ``chapters`` (flat works) or ``books`` (works with a
    book division) is set.
    """

    title: str
    author: str | None = None
    year: int | None = None
    chapters: list[Section] | None = None
    books: list[Book] | None = None
    metadata: DocumentMetadata | None = None

    @property
    def sections(self) -> list[Section]:
        """All sections in document order, across books if present."""
        if self.books is not None:
            return [section for book in self.books for section in book.chapters]
        return list(self.chapters or [])

    def to_json_dict(self) -> dict:
        """Serialize with the camelCase keys the import step expects."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
