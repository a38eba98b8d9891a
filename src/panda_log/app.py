"""
Command-line entry point.

Parses options into the global configuration, sets up logging, and runs the
Qt event loop with a LogViewerWindow. Files named on the command line are
opened as tabs.
"""

import argparse
import logging
import sys
from typing import List, Optional

from panda_log.core.log_utils import default_log_file_path, setup_logging
from panda_log.protocols import PandaLogConfig, set_config

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="panda-log",
        description="Tail and filter log files in a tabbed window.",
    )
    parser.add_argument("files", nargs="*", help="Log files to open")
    parser.add_argument("--log-level", default="INFO", help="Application log level (default: INFO)")
    parser.add_argument("--log-file", default=None, help="Write the application log to this file")
    parser.add_argument(
        "--log-to-default-file", action="store_true",
        help="Write the application log to the default log directory",
    )
    parser.add_argument(
        "--poll-interval-ms", type=int, default=0,
        help="Also poll files at this interval (for network file systems)",
    )
    parser.add_argument(
        "--async-load-threshold", type=int, default=None, metavar="BYTES",
        help="Read files at least this large on a background thread",
    )
    parser.add_argument(
        "--hold-partial-lines", action="store_true",
        help="Wait for a newline before showing an incomplete final line",
    )
    parser.add_argument("--no-follow", action="store_true", help="Open tabs with follow-tail off")
    return parser


def config_from_args(args: argparse.Namespace) -> PandaLogConfig:
    """Translate parsed options into a PandaLogConfig."""
    if args.poll_interval_ms < 0:
        raise ValueError("--poll-interval-ms must not be negative")
    return PandaLogConfig(
        follow_tail_default=not args.no_follow,
        poll_interval_ms=args.poll_interval_ms,
        async_load_threshold_bytes=args.async_load_threshold,
        hold_partial_lines=args.hold_partial_lines,
        log_level=args.log_level.upper(),
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Run the application. Returns the Qt exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = config_from_args(args)
    except ValueError as e:
        parser.error(str(e))
    set_config(config)

    log_file = args.log_file or (default_log_file_path() if args.log_to_default_file else None)
    try:
        setup_logging(config.log_level, log_file)
    except ValueError as e:
        parser.error(str(e))

    # Imported late so --help works without a display
    from PyQt6.QtWidgets import QApplication
    from panda_log.windows import LogViewerWindow

    app = QApplication.instance() or QApplication(sys.argv[:1])
    app.setApplicationName("Panda Log")

    window = LogViewerWindow()
    if args.files:
        window.open_paths(args.files)
    window.show()

    logger.info("Panda Log started")
    return app.exec()
