import argparse
import sys
from pathlib import Path
from typing import List, Optional

import requests

from . import __version__
from .client import PinboardClient
from .config import Settings, parse_limit
from .env import load_env
from .errors import ConfigError
from .logger import get_logger
from .pagination import RunState
from .runner import RunSummary, build_runner
from .titles import TitleResolver
from .updater import RecordUpdater


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pintitles",
        description="Replace Pinboard bookmark titles that are just the URL with the page's <title>",
    )
    parser.add_argument("limit", nargs="?", help="Stop after examining this many bookmarks (positive integer)")
    parser.add_argument("--token", help="Pinboard API token (or set PINBOARD_TOKEN)")
    parser.add_argument("--delay", type=int, dest="delay_ms", help="Milliseconds to wait between listing requests (default 0)")
    parser.add_argument("--page-size", type=int, help="Posts per listing request (default 100)")
    parser.add_argument("--timeout", type=int, dest="title_timeout_ms", help="Title fetch timeout in milliseconds (default 3000)")
    parser.add_argument("--dry-run", action="store_true", help="Look up titles but don't update bookmarks")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING or ERROR (default INFO)")
    parser.add_argument("--log-dir", help="Directory for log files (default logs/)")
    parser.add_argument("--no-log-file", action="store_true", help="Only log to the console")
    parser.add_argument("--version", action="version", version=__version__)
    return parser


def run(settings: Settings, session: Optional[requests.Session] = None) -> RunSummary:
    """Run one full repair pass and return its summary."""
    logger = get_logger()
    session = session or requests.Session()
    client = PinboardClient(settings, session=session, logger=logger)
    resolver = TitleResolver(
        session=session,
        timeout_ms=settings.title_timeout_ms,
        max_bytes=settings.max_title_bytes,
        logger=logger,
    )
    runner = build_runner(settings, client, resolver, RecordUpdater(client), logger=logger)
    state = RunState(page_size=settings.page_size, limit=settings.limit)
    with client:
        summary = runner.run(state)
    logger.log_metrics_summary()
    return summary


def main(argv: Optional[List[str]] = None) -> int:
    # Load .env if present (PINBOARD_TOKEN, PINTITLES_*)
    load_env()
    args = build_parser().parse_args(argv)

    try:
        settings = Settings.from_env(
            token=args.token,
            limit=parse_limit(args.limit),
            page_size=args.page_size,
            delay_ms=args.delay_ms,
            title_timeout_ms=args.title_timeout_ms,
            dry_run=args.dry_run or None,
            log_level=args.log_level,
        )
    except ConfigError as e:
        print(str(e), file=sys.stderr)
        return 1

    get_logger(
        level=settings.log_level,
        log_dir=Path(args.log_dir) if args.log_dir else None,
        enable_file=not args.no_log_file,
    )
    return run(settings).exit_status


if __name__ == "__main__":
    sys.exit(main())
