from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import TextIO

from battle_report.grammar.errors import ReportParseError
from battle_report.loader import REPORT_PATTERN, ReportLoadError, from_path, iter_report_paths
from battle_report.options import ParserOptions
from battle_report.web.api.mappers import build_report_response

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED_REPORTS = 1
EXIT_USAGE = 2


def _configure_logging(verbose: bool, quiet: bool) -> None:
    level = logging.INFO
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def run(
    paths: list[Path],
    *,
    options: ParserOptions,
    pattern: str = REPORT_PATTERN,
    indent: int | None = 2,
    fail_fast: bool = False,
    out: TextIO | None = None,
) -> int:
    """Parse every report under ``paths`` and write one JSON document per report.

    All paths are expanded before any report is parsed, so a missing path
    raises ReportLoadError without producing partial output.
    """
    if out is None:
        out = sys.stdout
    report_paths = list(iter_report_paths(paths, pattern))
    parsed = 0
    failed = 0
    for path in report_paths:
        try:
            report = from_path(path, options)
        except (ReportParseError, ReportLoadError) as exc:
            failed += 1
            logger.warning("%s: %s", path, exc)
            if fail_fast:
                break
            continue
        parsed += 1
        out.write(build_report_response(report).model_dump_json(by_alias=True, indent=indent))
        out.write("\n")

    logger.info("Parsed %d report(s), %d failed", parsed, failed)
    return EXIT_FAILED_REPORTS if failed else EXIT_OK


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="python -m battle_report",
        description="Parse battle report text exports into JSON.",
    )
    parser.add_argument("paths", nargs="+", type=Path, help="Report files or directories of reports.")
    parser.add_argument(
        "--pattern",
        default=REPORT_PATTERN,
        help="Glob used inside directories (default: %(default)s).",
    )
    parser.add_argument("--indent", type=int, default=2, help="JSON indent (default: %(default)s).")
    parser.add_argument(
        "--allow-empty-tables",
        action="store_true",
        help="Accept tables that declare 0 rows.",
    )
    parser.add_argument("--fail-fast", action="store_true", help="Stop at the first report that fails to parse.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output.")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only log errors.")
    args = parser.parse_args(argv)

    _configure_logging(args.verbose, args.quiet)
    options = ParserOptions(allow_empty_tables=args.allow_empty_tables)
    indent = args.indent if args.indent > 0 else None

    try:
        return run(args.paths, options=options, pattern=args.pattern, indent=indent, fail_fast=args.fail_fast)
    except ReportLoadError as exc:
        logger.error("%s", exc)
        return EXIT_USAGE
