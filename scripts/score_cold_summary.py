#!/usr/bin/env python
"""Grade saved cold-summary responses.

Each file holds one model response to the cold-summary prompt. With more
than one file the runs are aggregated and a representative run is picked.

Usage:
    python scripts/score_cold_summary.py run1.txt run2.txt run3.txt --mode snapshot
    python scripts/score_cold_summary.py --print-prompt https://acme.com
"""

import argparse
import json
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, ".")


def main() -> int:
    from defaultanswer.fixes.playbook import build_cold_fix_playbook
    from defaultanswer.logging import bind_scan_context, setup_logging
    from defaultanswer.observation.aggregate import ColdSummaryRun, build_multi_run
    from defaultanswer.observation.cold_summary import analyze_cold_summary
    from defaultanswer.observation.prompts import ColdSummaryMode, build_cold_summary_messages

    parser = argparse.ArgumentParser(description="Grade cold-summary model responses")
    parser.add_argument("responses", nargs="*", help="Files holding raw model responses")
    parser.add_argument(
        "--mode",
        choices=[mode.value for mode in ColdSummaryMode],
        default=ColdSummaryMode.URL_ONLY.value,
        help="Prompt variant the responses were produced with",
    )
    parser.add_argument("--model", default="unknown", help="Model that produced the responses")
    parser.add_argument(
        "--print-prompt",
        metavar="URL",
        help="Print the URL-only prompt messages for URL and exit",
    )
    parser.add_argument("--log-level", default=None, help="Override the configured log level")
    args = parser.parse_args()

    setup_logging(level=args.log_level)
    mode = ColdSummaryMode(args.mode)
    bind_scan_context(model=args.model, mode=mode.value)

    if args.print_prompt:
        messages = build_cold_summary_messages(args.print_prompt)
        print(json.dumps(messages.to_dict(), indent=2))
        return 0

    if not args.responses:
        parser.error("at least one response file is required")

    runs = []
    for path in args.responses:
        text = Path(path).read_text(encoding="utf-8", errors="replace")
        runs.append(ColdSummaryRun(raw_text=text, analysis=analyze_cold_summary(text, mode)))

    if len(runs) == 1:
        analysis = runs[0].analysis
        print(analysis.show_the_math())
        playbook = build_cold_fix_playbook(analysis, mode)
        print(json.dumps([item.to_dict() for item in playbook], indent=2))
        return 0

    multi_run = build_multi_run(runs, model=args.model, prompts_used=mode.value)
    print(json.dumps(multi_run.to_dict(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
