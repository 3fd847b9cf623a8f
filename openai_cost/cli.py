#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
openai-cost – CLI

Flow:
- Parses and validates the query options.
- Reads the admin key from OPENAI_ADMIN_KEY.
- Fetches one page (or every page with --fetch-all) from /organization/costs.
- Prints a text report, or the page document as JSON with --json.
"""

import argparse
import logging
import sys
from datetime import datetime, timedelta, timezone
from importlib import metadata
from typing import List, Optional, Sequence

from rich.console import Console

from .api.client import CostClient
from .config import (
    ADMIN_KEY_ENV,
    API_BASE_URL,
    DAYS_AGO_THRESHOLD,
    DEFAULT_BUCKET_WIDTH,
    DEFAULT_LIMIT,
    DEFAULT_LOG_LEVEL,
    GROUP_BY_FIELDS,
    LOG_FORMAT,
    MAX_LIMIT,
    MIN_LIMIT,
    SUPPORTED_BUCKET_WIDTHS,
)
from .models.costs import CostBucket
from .models.errors import ErrorKind, OpenAICostError
from .models.query import CostQueryParameters, split_csv
from .reporting.format import render_report
from .reporting.json_output import render_json
from .utils.trace import PageTrace

console = Console()
err_console = Console(stderr=True)
logger = logging.getLogger("openai_cost")


def _tool_version() -> str:
    try:
        return metadata.version("openai-cost")
    except metadata.PackageNotFoundError:
        return "dev"


# --------------------------------------------------------------------
# Argument parsing
# --------------------------------------------------------------------
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="openai-cost",
        description=(
            "Query OpenAI organization usage costs.\n\n"
            f"Requires an admin API key in the {ADMIN_KEY_ENV} environment variable."
        ),
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "-s",
        "--start-time",
        type=int,
        required=True,
        help=(
            f"Start time as a Unix timestamp, or a number of days ago when below "
            f"{DAYS_AGO_THRESHOLD} (e.g. 7 for 7 days ago)."
        ),
    )
    parser.add_argument(
        "-e",
        "--end-time",
        type=int,
        default=None,
        help="End time as a Unix timestamp (optional).",
    )
    parser.add_argument(
        "-b",
        "--bucket-width",
        default=DEFAULT_BUCKET_WIDTH,
        help="Bucket width. The costs endpoint currently only accepts '1d'.",
    )
    parser.add_argument(
        "-l",
        "--limit",
        type=int,
        default=DEFAULT_LIMIT,
        help=f"Maximum number of buckets per page ({MIN_LIMIT}-{MAX_LIMIT}).",
    )
    parser.add_argument(
        "--group-by",
        default=None,
        help="Group by fields (comma-separated: " + ", ".join(GROUP_BY_FIELDS) + ").",
    )
    parser.add_argument(
        "--project-ids",
        default=None,
        help="Project IDs to filter by (comma-separated).",
    )
    parser.add_argument(
        "--page",
        default=None,
        help="Continue from a cursor printed by a previous run ('Next page: ...').",
    )
    parser.add_argument(
        "--fetch-all",
        action="store_true",
        help="Fetch all pages automatically.",
    )
    parser.add_argument(
        "--max-pages",
        type=int,
        default=None,
        help="With --fetch-all, stop after this many pages.",
    )
    parser.add_argument("--verbose", action="store_true", help="Show detailed output.")
    parser.add_argument("--json", action="store_true", help="Output as JSON.")
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Show debug output for each page fetch (same as --log-level DEBUG).",
    )
    parser.add_argument(
        "--log-level",
        choices=["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"],
        default=DEFAULT_LOG_LEVEL.upper(),
        help="Logging level for internal messages (written to stderr).",
    )
    parser.add_argument(
        "--trace-path",
        default=None,
        help="If given, append a JSONL trace of every page fetch to this file.",
    )
    parser.add_argument(
        "--base-url",
        default=API_BASE_URL,
        help="API base URL.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {_tool_version()}")
    return parser


def resolve_start_time(value: int, now: Optional[datetime] = None) -> datetime:
    """Small values are days ago, anything else is a Unix timestamp."""
    if value < DAYS_AGO_THRESHOLD:
        now = now or datetime.now(timezone.utc)
        return now - timedelta(days=value)
    return datetime.fromtimestamp(value, tz=timezone.utc)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Only '1d' is accepted by the server today; reject early with a clear message.
    if args.bucket_width not in SUPPORTED_BUCKET_WIDTHS:
        parser.error(
            f"Invalid bucket width: '{args.bucket_width}'. "
            f"The API currently only supports {', '.join(SUPPORTED_BUCKET_WIDTHS)} for this endpoint."
        )
    if not MIN_LIMIT <= args.limit <= MAX_LIMIT:
        parser.error(f"Limit must be between {MIN_LIMIT} and {MAX_LIMIT}")
    if args.start_time < 0:
        parser.error("Invalid start time. Use a Unix timestamp or a number of days ago.")
    if args.max_pages is not None and args.max_pages < 1:
        parser.error("--max-pages must be at least 1")

    args.group_by = list(split_csv(args.group_by))
    unknown = [g for g in args.group_by if g.lower() not in GROUP_BY_FIELDS]
    if unknown:
        parser.error(
            f"Unsupported group-by field(s): {', '.join(unknown)}. "
            f"Choose from: {', '.join(GROUP_BY_FIELDS)}"
        )
    args.project_ids = list(split_csv(args.project_ids))
    return args


def build_query(args: argparse.Namespace) -> CostQueryParameters:
    return CostQueryParameters(
        start_time=resolve_start_time(args.start_time),
        bucket_width=args.bucket_width,
        end_time=datetime.fromtimestamp(args.end_time, tz=timezone.utc) if args.end_time is not None else None,
        group_by=args.group_by,
        limit=args.limit,
        page=args.page,
        project_ids=args.project_ids,
    )


# --------------------------------------------------------------------
# Output
# --------------------------------------------------------------------
def _emit(text: str) -> None:
    console.print(text, markup=False, emoji=False, highlight=False, soft_wrap=True)


def display_results(
    args: argparse.Namespace,
    buckets: List[CostBucket],
    has_more: bool,
    next_page: Optional[str],
) -> None:
    if args.json:
        _emit(render_json(buckets, has_more=has_more, next_page=next_page))
    else:
        _emit(
            render_report(
                buckets,
                group_by=args.group_by,
                verbose=args.verbose,
                has_more=has_more,
                next_page=next_page,
            )
        )


def _report_error(ex: OpenAICostError, debug: bool) -> None:
    err_console.print(f"Error: {ex.describe()}", markup=False, emoji=False, highlight=False, soft_wrap=True)
    if ex.kind is ErrorKind.DECODE_FAILURE and ex.raw_body is not None and debug:
        err_console.print("Raw response body:", markup=False)
        err_console.print(ex.raw_body, markup=False, emoji=False, highlight=False, soft_wrap=True)


# --------------------------------------------------------------------
# Main
# --------------------------------------------------------------------
def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    debug = args.debug or args.log_level.upper() == "DEBUG"

    logging.basicConfig(
        level=logging.DEBUG if debug else getattr(logging, args.log_level.upper(), logging.WARNING),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
    )
    logger.debug("CLI arguments: %s", args)

    params = build_query(args)
    trace = PageTrace(args.trace_path) if args.trace_path else None

    try:
        with CostClient.from_env(base_url=args.base_url, trace=trace) as client:
            if args.fetch_all:
                response = client.collect_pages(params, max_pages=args.max_pages)
            else:
                response = client.fetch_page(params)
    except OpenAICostError as ex:
        logger.debug("Request failed: %r", ex)
        _report_error(ex, debug)
        sys.exit(1)

    buckets = list(response.data)
    logger.info("Fetched %d buckets", len(buckets))
    display_results(args, buckets, response.has_more, response.next_page)


if __name__ == "__main__":
    main()
