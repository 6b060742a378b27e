"""Command line entry point: summarize a ticket file into an HTML report."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from .config import Settings, setup_logging
from .pipeline import TicketSummarySession

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Summarize support tickets by team, category and priority")
    parser.add_argument("input_file", help="Path to a JSON, CSV or Excel file of tickets")
    parser.add_argument("--output", help="Write the HTML report to this path instead of stdout")
    parser.add_argument("--message", action="store_true", help="Print the outbound message envelope as JSON")
    args = parser.parse_args(argv)

    settings = Settings.from_env()
    setup_logging(settings.log_level)

    session = TicketSummarySession.from_file(args.input_file)
    if session.result.errors:
        logger.warning("%d tickets excluded due to data errors", session.result.rejected_count)

    if args.message:
        print(json.dumps(session.message(settings).to_dict(), indent=2))
        return 0

    html = session.html()
    if args.output:
        Path(args.output).write_text(html, encoding="utf-8")
        logger.info("Report written to %s", args.output)
    else:
        print(html)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
