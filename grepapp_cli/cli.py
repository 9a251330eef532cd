"""Command-line interface for grepapp-cli."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from .config import resolve_settings
from .grepapp import ConfigurationError, GrepAppClient, GrepAppError, NetworkError, ProtocolError
from .render import write_results
from .search import run_search
from .types import SearchQuery

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="grepapp", description="Search code on grep.app")
    parser.add_argument("-q", "--query", default="", help="Query string, required")
    parser.add_argument(
        "-c", "--case-sensitive", action="store_true", help="Case sensitive search"
    )
    parser.add_argument(
        "-r", "--regex", action="store_true", help="Use regex query. Cannot be used with -w"
    )
    parser.add_argument(
        "-w", "--words", action="store_true", help="Search whole words. Cannot be used with -r"
    )
    parser.add_argument("-frepo", "--frepo", default="", help="Filter repository")
    parser.add_argument("-fpath", "--fpath", default="", help="Filter path")
    parser.add_argument(
        "-flang",
        "--flang",
        default="",
        help="Filter language (eg. Python,C,Java). Use comma for multiple values",
    )
    parser.add_argument("-json", "--json", action="store_true", help="JSON output")
    parser.add_argument(
        "-m",
        "--monochrome",
        action="store_true",
        help="Monochrome output; lines differing only in highlighting are merged",
    )
    parser.add_argument("--pages", type=int, help="Maximum number of pages to fetch (default: 100)")
    parser.add_argument("--delay", type=float, help="Seconds to wait before each request (default: 1)")
    parser.add_argument("--base-url", help="grep.app base URL")
    parser.add_argument(
        "--stop-early",
        action="store_true",
        help="Stop once a page adds no new files and all matches were paged through",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    try:
        return _handle_search(args)
    except (NetworkError, ProtocolError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    except GrepAppError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


def _handle_search(args: argparse.Namespace) -> int:
    query = _build_query(args)
    if not args.json:
        raise ConfigurationError("JSON output is required, pass --json")
    settings = resolve_settings(
        base_url=args.base_url,
        page_cap=args.pages,
        delay=args.delay,
    )

    client = GrepAppClient(
        base_url=settings.base_url,
        user_agent=settings.user_agent,
        timeout=settings.timeout,
    )
    try:
        results = run_search(
            client,
            query,
            page_cap=settings.page_cap,
            delay=settings.delay,
            stop_when_exhausted=args.stop_early,
        )
    finally:
        client.close()

    write_results(results, monochrome=args.monochrome)
    return 0


def _build_query(args: argparse.Namespace) -> SearchQuery:
    if not args.query:
        raise ConfigurationError("Query string is required")
    query = SearchQuery(
        args.query,
        case_sensitive=args.case_sensitive,
        use_regex=args.regex,
        whole_words=args.words,
        repo_filter=args.frepo,
        path_filter=args.fpath,
        lang_filter=args.flang,
    )
    if query.has_mode_conflict:
        logger.warning("-r and -w cannot be combined; searching in regex mode")
    return query


if __name__ == "__main__":
    sys.exit(main())
