#!/usr/bin/env python
"""Run a recommendation-readiness check on a saved homepage snapshot.

Fetching is out of scope here: save the page first (curl, browser
"save as", a crawler), then point this script at the file.

Usage:
    python scripts/run_snapshot_analysis.py homepage.html --url https://acme.com
    python scripts/run_snapshot_analysis.py homepage.html --url https://acme.com \\
        --page https://acme.com/pricing=pricing.html --json
"""

import argparse
import json
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, ".")


def _read(path: str) -> str:
    return Path(path).read_text(encoding="utf-8", errors="replace")


def _parse_page(value: str) -> tuple[str, str]:
    url, sep, path = value.rpartition("=")
    if not sep or not url:
        raise argparse.ArgumentTypeError(f"Expected URL=PATH, got {value!r}")
    return url, path


def main() -> int:
    from defaultanswer.logging import bind_scan_context, setup_logging
    from defaultanswer.pipeline import (
        PageSnapshot,
        analyze_site,
        analyze_snapshot,
        build_readiness_report,
    )

    parser = argparse.ArgumentParser(
        description="Score a saved homepage snapshot for recommendation readiness"
    )
    parser.add_argument("html_file", help="Saved homepage HTML")
    parser.add_argument("--url", required=True, help="URL the snapshot was fetched from")
    parser.add_argument(
        "--status-code",
        type=int,
        default=200,
        help="HTTP status of the fetch",
    )
    parser.add_argument(
        "--page",
        action="append",
        default=[],
        type=_parse_page,
        metavar="URL=PATH",
        help="Secondary page of the same site (repeatable)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the report as JSON",
    )
    parser.add_argument("--log-level", default=None, help="Override the configured log level")
    args = parser.parse_args()

    setup_logging(level=args.log_level)
    bind_scan_context(url=args.url, pages=len(args.page) + 1)

    homepage = PageSnapshot(
        url=args.url, html=_read(args.html_file), status_code=args.status_code
    )
    if args.page:
        pages = [homepage] + [PageSnapshot(url=url, html=_read(path)) for url, path in args.page]
        analysis = analyze_site(pages)
    else:
        analysis = analyze_snapshot(homepage)

    report = build_readiness_report(analysis)

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        print(report.show_the_math())

    return 0 if analysis.is_usable else 1


if __name__ == "__main__":
    sys.exit(main())
