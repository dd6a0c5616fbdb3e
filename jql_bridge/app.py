"""Command-line entry point: natural-language query in, formatted Jira results out."""

from __future__ import annotations

import argparse
import logging
import sys

from jql_bridge.analytics.pipeline import ProcessingOptions
from jql_bridge.core.config import DEFAULT_OUTPUT_FORMAT, load_settings
from jql_bridge.core.service import build_service
from jql_bridge.visual.formatters import FORMATTERS, format_result

logger = logging.getLogger(__name__)


class UsageError(Exception):
    pass


class _Parser(argparse.ArgumentParser):
    def error(self, message):
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        prog="jql-bridge",
        description="Translate a natural-language question into JQL, run it, and summarize the results.",
    )
    parser.add_argument("query", nargs="*", help="Free-text query, e.g. 'open bugs assigned to me'")
    parser.add_argument("--group-by", action="append", default=[], metavar="FIELD", help="Group by field (repeatable)")
    parser.add_argument("--calculate", action="append", default=[], metavar="NAME", help="Calculation (repeatable)")
    parser.add_argument("--aggregate", action="append", default=[], metavar="NAME", help="Aggregation (repeatable)")
    parser.add_argument(
        "--format",
        default=DEFAULT_OUTPUT_FORMAT,
        help=f"Output format ({', '.join(sorted(FORMATTERS))}); unknown names fall back to table",
    )
    parser.add_argument("--per-group", action="store_true", help="Attach aggregations to each group")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except UsageError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    text = " ".join(args.query).strip()
    if not text:
        parser.print_usage(sys.stderr)
        return 1
    options = ProcessingOptions(
        group_by=tuple(args.group_by),
        calculate=tuple(args.calculate),
        aggregate=tuple(args.aggregate),
        output_format=args.format,
    )
    try:
        settings = load_settings()
        settings.validate()
        service = build_service(settings)
        result, processed = service.run(text, options, per_group=args.per_group)
        output = format_result(result, processed, options.output_format)
    except Exception as exc:
        logger.debug("Query failed", exc_info=True)
        message = " ".join(str(exc).split()) or type(exc).__name__
        print(f"Error: {message}", file=sys.stderr)
        return 1
    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
