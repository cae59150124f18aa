"""termedit CLI entry point.

Allows running via `python -m termedit` and provides the console script
defined in `pyproject.toml`.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import default_log_path
from .version import get_version_string

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s - %(message)s"
LOG_LEVELS = ["debug", "info", "warning", "error"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="termedit", description="termedit: terminal line editor")
    parser.add_argument("path", help="File to edit (created on save if missing)")
    parser.add_argument("-f", "--log-file", type=Path, default=None,
                        help="Log file (default: platform log directory)")
    parser.add_argument("-l", "--log-level", default="info", choices=LOG_LEVELS)
    parser.add_argument("-V", "--version", action="version", version=get_version_string())
    return parser


def configure_logging(log_file: Path, level: str) -> None:
    """Send log records to a file; the terminal is owned by the editor."""
    log_file.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=str(log_file),
        level=getattr(logging, level.upper()),
        format=LOG_FORMAT,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_file or default_log_path(), args.log_level)

    # Lazy import to avoid importing terminal deps for --help
    from .buffer import TextBuffer
    from .config import load_render_config
    from .editor import run_editor

    try:
        buffer = TextBuffer.load(args.path)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Could not load {args.path}: {e}")
        print(f"Error loading file: {e}", file=sys.stderr)
        return 1

    logger.info(f"Opened {args.path}")
    errors = run_editor(buffer, load_render_config())
    if buffer.modified:
        logger.info(f"Exited with unsaved changes in {args.path}")
    for error in errors:
        print(f"Input error: {error}", file=sys.stderr)
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
