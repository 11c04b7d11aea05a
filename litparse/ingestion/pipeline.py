"""End-to-end parsing of one configured literary work."""

import logging
import math
from pathlib import Path

from pydantic import BaseModel

from litparse.config import AppConfig, WorkConfig
from litparse.exceptions import UnknownWorkError
from litparse.ingestion.reader import SourceReader
from litparse.ingestion.segmenter import DocumentSegmenter, SegmentationResult
from litparse.ingestion.writer import write_document
from litparse.models.document import Document, DocumentMetadata, Section

logger = logging.getLogger(__name__)


def count_words(text: str) -> int:
    """Count whitespace-separated words."""
    return len(text.split())


def estimate_reading_time(word_count: int, words_per_minute: int = 200) -> int:
    """Estimate reading time in whole minutes, rounded up."""
    return math.ceil(word_count / words_per_minute)


class ParseOutcome(BaseModel):
    """What a single work run produced."""

    work_key: str
    document: Document
    result: SegmentationResult
    output_path: str


class WorkParser:
    """Reads, segments and writes configured literary works.

    Each work resolves its sources and output path against the configured
    literature directory.

    Args:
        config: Loaded application configuration.
        reader: Source reader; a default SourceReader when omitted.
    """

    def __init__(self, config: AppConfig, reader: SourceReader | None = None) -> None:
        self._config = config
        self._reader = reader or SourceReader()

    def work(self, work_key: str) -> WorkConfig:
        """Look up a work profile by key.

        Raises:
            UnknownWorkError: If no profile has that key.
        """
        try:
            return self._config.works[work_key]
        except KeyError:
            raise UnknownWorkError(work_key, sorted(self._config.works)) from None

    def parse(self, work_key: str) -> ParseOutcome:
        """Parse one work and write its JSON document.

        Args:
            work_key: Key of the work in the configuration.

        Returns:
            The ParseOutcome with the written document.

        Raises:
            UnknownWorkError: If the work is not configured.
            SourceNotFoundError: If a source file is missing.
            BoundaryNotFoundError: If the start marker is missing.
            WriteFailureError: If the output cannot be written.
        """
        work = self.work(work_key)
        base_dir = Path(self._config.storage.literature_dir)
        sources = work.source_paths(base_dir)

        logger.info("Parsing %s from %s", work.title, ", ".join(str(s) for s in sources))
        lines = self._reader.read_lines(sources)

        segmenter = DocumentSegmenter(work.rules)
        result = segmenter.segment(lines, source=" + ".join(str(s) for s in sources))
        document = self.build_document(work, result)

        output_path = write_document(
            document, work.output_path(base_dir), indent=self._config.output.indent
        )
        for index, section in enumerate(document.sections, start=1):
            logger.debug("%d. %s", index, section.title)

        return ParseOutcome(
            work_key=work_key,
            document=document,
            result=result,
            output_path=str(output_path),
        )

    def build_document(self, work: WorkConfig, result: SegmentationResult) -> Document:
        """Assemble the output Document for a segmentation result."""
        document = Document(
            title=work.title,
            author=work.author,
            year=work.year,
            chapters=result.chapters if result.books is None else None,
            books=result.books,
        )
        if work.include_statistics:
            self._add_statistics(document)
        return document

    def _add_statistics(self, document: Document) -> None:
        wpm = self._config.output.words_per_minute
        total_words = 0
        for section in document.sections:
            self._annotate(section, wpm)
            total_words += section.word_count or 0

        document.metadata = DocumentMetadata(
            word_count=total_words,
            estimated_reading_time=estimate_reading_time(total_words, wpm),
        )

    @staticmethod
    def _annotate(section: Section, words_per_minute: int) -> None:
        section.word_count = count_words(section.content)
        section.estimated_reading_time = estimate_reading_time(
            section.word_count, words_per_minute
        )
