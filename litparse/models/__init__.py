"""Data models for the literature parser."""

from litparse.models.document import Book, Document, DocumentMetadata, Section
from litparse.models.rules import (
    BoundaryRule,
    Heading,
    HeadingRule,
    LineMatcher,
    SegmentationRules,
    StartRule,
)

__all__ = [
    "Book",
    "BoundaryRule",
    "Document",
    "DocumentMetadata",
    "Heading",
    "HeadingRule",
    "LineMatcher",
    "Section",
    "SegmentationRules",
    "StartRule",
]
