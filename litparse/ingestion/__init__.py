"""Literature ingestion: reading, segmenting and writing."""

from litparse.ingestion.pipeline import ParseOutcome, WorkParser
from litparse.ingestion.reader import SourceReader
from litparse.ingestion.segmenter import DocumentSegmenter, SegmentationResult
from litparse.ingestion.writer import write_document

__all__ = [
    "DocumentSegmenter",
    "ParseOutcome",
    "SegmentationResult",
    "SourceReader",
    "WorkParser",
    "write_document",
]
