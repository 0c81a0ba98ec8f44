#!/usr/bin/env python3
from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from dotenv import load_dotenv

from uncss.config import Settings, split_names
from uncss.loader import PageLoader
from uncss.log import error, set_verbose
from uncss.orchestrator import run
from uncss.report import print_unused, write_dump


def build_parser(defaults: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="uncss-scan",
        description="List CSS rules that match no element on any of the given pages.",
    )
    parser.add_argument("urls", nargs="*", help="Page URLs to analyze (blank entries are ignored)")
    parser.add_argument("--output", default=defaults.output, help="JSON dump of every rule (env UNCSS_OUTPUT, default output.json)")
    parser.add_argument("--no-dump", action="store_true", help="Do not write the JSON dump")
    parser.add_argument("--timeout", type=float, default=defaults.timeout, help="Per-request timeout in seconds (env UNCSS_TIMEOUT)")
    parser.add_argument("--max-workers", type=int, default=defaults.max_workers, help="Cap on concurrent pages, 0 = one thread per URL (env UNCSS_MAX_WORKERS)")
    parser.add_argument("--user-agent", default=defaults.user_agent, help="User-Agent header (env UNCSS_USER_AGENT)")
    parser.add_argument(
        "--exclude-stylesheet",
        action="append",
        default=[],
        metavar="NAME",
        help="Stylesheet file name never fetched; repeatable (env UNCSS_EXCLUDE_STYLESHEETS, comma-separated)",
    )
    parser.add_argument("--quiet", action="store_true", help="Suppress [LOG] progress lines")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    defaults = Settings.from_env()
    args = build_parser(defaults).parse_args(argv)
    set_verbose(not args.quiet)

    if args.max_workers < 0:
        raise SystemExit("--max-workers must be >= 0")

    excluded = list(defaults.excluded_stylesheets)
    for name in args.exclude_stylesheet:
        excluded.extend(split_names(name))
    settings = Settings(
        output=args.output,
        timeout=args.timeout,
        max_workers=args.max_workers,
        user_agent=args.user_agent,
        excluded_stylesheets=tuple(excluded),
    )

    report = run(args.urls, load_document=PageLoader(settings), max_workers=settings.max_workers or None)

    print_unused(report.unused)
    print(
        f"[UNCSS] unused={len(report.unused)}/{len(report.records)} used={report.used_count} "
        f"pages={len(report.pages)} failed={len(report.failed_urls)}",
        file=sys.stderr,
    )

    if not args.no_dump:
        try:
            out = write_dump(report.records, settings.output)
        except OSError as e:
            error(f"Could not write {settings.output}: {e}")
            raise SystemExit(1)
        print(f"[UNCSS] Dump written: {out}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
