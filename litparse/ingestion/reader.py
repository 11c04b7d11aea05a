"""Source text reader with encoding detection."""

import logging
import re
from pathlib import Path

import chardet

from litparse.exceptions import SourceNotFoundError

logger = logging.getLogger(__name__)

LINE_BREAK = re.compile(r"\r\n|\r|\n")


def split_lines(text: str) -> list[str]:
    """Split text into logical lines, normalizing all line endings."""
    if not text:
        return []
    return LINE_BREAK.split(text)


class SourceReader:
    """Reads plain-text literature sources into logical lines.

    Multi-volume works are read in order and joined as one text.
    """

    def read_lines(self, paths: list[str | Path]) -> list[str]:
        """Read one or more source files as a single sequence of lines.

        Args:
            paths: Source files, in reading order.

        Returns:
            The lines of all files, in order.

        Raises:
            SourceNotFoundError: If any file is missing or unreadable.
        """
        texts = [self.read_text(path) for path in paths]
        return split_lines("\n".join(texts))

    def read_text(self, file_path: str | Path) -> str:
        """Read a text file with encoding detection.

        Tries UTF-8 first, then uses chardet for fallback detection.

        Args:
            file_path: Path to the text file.

        Returns:
            The file content as a string.

        Raises:
            SourceNotFoundError: If the file is missing or unreadable.
        """
        path = Path(file_path)
        if not path.is_file():
            raise SourceNotFoundError("Source file not found", file_path=path)

        try:
            raw_bytes = path.read_bytes()
        except OSError as exc:
            raise SourceNotFoundError(f"Source file unreadable: {exc}", file_path=path) from exc

        logger.debug("Read %d bytes from %s", len(raw_bytes), path)
        return self._decode(raw_bytes, path)

    def _decode(self, raw_bytes: bytes, file_path: Path) -> str:
        # Try UTF-8 first; the BOM variant covers files saved by Windows editors
        try:
            return raw_bytes.decode("utf-8-sig")
        except UnicodeDecodeError:
            pass

        # Fallback to encoding detection
        detected = chardet.detect(raw_bytes)
        encoding = detected.get("encoding") or "utf-8"
        confidence = detected.get("confidence") or 0

        if confidence < 0.7:
            logger.warning(
                "Low confidence encoding detection for %s: %s (%.0f%%)",
                file_path,
                encoding,
                confidence * 100,
            )

        try:
            return raw_bytes.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            # Last resort: Windows-1252, common for older Gutenberg transcriptions
            try:
                return raw_bytes.decode("windows-1252")
            except UnicodeDecodeError:
                logger.error("Failed to decode file: %s", file_path)
                return raw_bytes.decode("utf-8", errors="replace")
