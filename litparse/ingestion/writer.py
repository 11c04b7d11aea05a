"""Atomic JSON output for parsed documents."""

import json
import logging
import os
import stat
import tempfile
from pathlib import Path

from litparse.exceptions import WriteFailureError
from litparse.models.document import Document

logger = logging.getLogger(__name__)


def render_document(document: Document, indent: int = 2) -> str:
    """Render a Document as human-readable JSON.

    Key order follows the model field order so successive runs diff cleanly.
    """
    return json.dumps(document.to_json_dict(), indent=indent, ensure_ascii=False) + "\n"


def _target_mode(path: Path) -> int:
    """Permission bits for the output: the existing file's, else the umask default."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def write_document(document: Document, output_path: str | Path, indent: int = 2) -> Path:
    """Write a Document to disk atomically.

    The JSON is written to a temporary file in the destination directory
    and renamed over the target, so readers never see a partial document.
    The target keeps its permissions; a new file gets the umask default
    rather than the owner-only mode of the temporary file.

    Args:
        document: The document to write.
        output_path: Destination JSON file.
        indent: JSON indentation width.

    Returns:
        The path written.

    Raises:
        WriteFailureError: If the directory or file cannot be written.
    """
    path = Path(output_path)
    payload = render_document(document, indent=indent)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=str(path.parent), suffix=".json.tmp")
    except OSError as exc:
        raise WriteFailureError(f"Cannot write output: {exc}", file_path=path) from exc

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
        os.chmod(tmp_path, _target_mode(path))
        os.replace(tmp_path, str(path))
    except OSError as exc:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass  # cleanup failure should not mask the original exception
        raise WriteFailureError(f"Cannot write output: {exc}", file_path=path) from exc

    logger.info("Wrote %s (%d bytes)", path, len(payload.encode("utf-8")))
    return path
