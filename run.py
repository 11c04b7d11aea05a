"""Entry point for the literature parser.

Usage:
    python run.py                     parse every configured work
    python run.py institutes ...      parse the named works
"""

import logging
import os
import sys

from litparse.config import load_config
from litparse.exceptions import SegmentationError
from litparse.ingestion.pipeline import WorkParser

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Parse the named works (or all of them) and write their JSON documents."""
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = load_config()
    work_keys = list(sys.argv[1:] if argv is None else argv) or list(config.works)

    if not work_keys:
        logger.error("No works configured")
        return 1

    parser = WorkParser(config)
    failed = 0
    for work_key in work_keys:
        try:
            outcome = parser.parse(work_key)
        except SegmentationError as exc:
            logger.error("%s: %s", work_key, exc)
            failed += 1
            continue

        result = outcome.result
        print(
            f"{outcome.document.title}: {result.section_count} sections"
            f"{' (fallback rules)' if result.used_fallback else ''}"
            f"{' - LOW YIELD, check heading rules' if result.low_yield else ''}"
            f" -> {outcome.output_path}"
        )

    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
