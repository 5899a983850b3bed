from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

from battle_report.domain.report import BattleReport
from battle_report.grammar.report import parse_report
from battle_report.options import ParserOptions

logger = logging.getLogger(__name__)

REPORT_PATTERN = "*.report"


class ReportLoadError(ValueError):
    """A report file could not be read."""


def from_str(text: str, options: ParserOptions | None = None) -> BattleReport:
    return parse_report(text, options)


def from_bytes(data: bytes, options: ParserOptions | None = None) -> BattleReport:
    """Decode ``data`` as UTF-8, replacing invalid bytes, then parse it."""
    text = data.decode("utf-8", errors="replace")
    if "\ufffd" in text:
        logger.warning("Report contains invalid UTF-8; undecodable bytes were replaced")
    return parse_report(text, options)


def from_path(path: Path, options: ParserOptions | None = None) -> BattleReport:
    logger.debug("Reading report %s", path)
    try:
        data = path.read_bytes()
    except FileNotFoundError as exc:
        raise ReportLoadError(f"Report not found: {path}") from exc
    except IsADirectoryError as exc:
        raise ReportLoadError(f"Report path is a directory: {path}") from exc
    except OSError as exc:
        raise ReportLoadError(f"Could not read report {path}: {exc}") from exc
    return from_bytes(data, options)


def iter_report_paths(paths: list[Path], pattern: str = REPORT_PATTERN) -> Iterator[Path]:
    """Expand files and directories into report files, in a stable order.

    Directories are scanned (non-recursively) for ``pattern``; files are
    yielded as given.
    """
    for path in paths:
        if path.is_dir():
            yield from sorted(child for child in path.glob(pattern) if child.is_file())
        elif path.exists():
            yield path
        else:
            raise ReportLoadError(f"Report not found: {path}")
