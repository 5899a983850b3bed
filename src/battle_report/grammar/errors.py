"""Parse errors with positioned, rule-stack diagnostics."""

from __future__ import annotations

from contextlib import contextmanager
from enum import Enum
from typing import Iterator


class ErrorKind(str, Enum):
    STRUCTURAL = "structural"
    NUMERIC = "numeric"
    ALTERNATIVES = "alternatives"


class ReportParseError(ValueError):
    """A battle report did not match the grammar.

    ``rules`` is the stack of grammar rules active at the failure, outermost
    first. ``line``/``column`` are 1-based and only known once the error has
    been attached to the source text with :meth:`attach`.
    """

    def __init__(self, expected: str, offset: int, kind: ErrorKind = ErrorKind.STRUCTURAL) -> None:
        super().__init__(expected)
        self.expected = expected
        self.offset = offset
        self.kind = kind
        self.rules: list[str] = []
        self.line: int | None = None
        self.column: int | None = None
        self.excerpt: str | None = None

    def push(self, rule: str) -> None:
        self.rules.insert(0, rule)

    def attach(self, text: str) -> "ReportParseError":
        offset = min(self.offset, len(text))
        line_start = text.rfind("\n", 0, offset) + 1
        line_end = text.find("\n", offset)
        if line_end == -1:
            line_end = len(text)
        self.line = text.count("\n", 0, offset) + 1
        self.column = offset - line_start + 1
        self.excerpt = text[line_start:line_end].rstrip("\r")
        return self

    @property
    def trace(self) -> str:
        return " > ".join(self.rules)

    def __str__(self) -> str:
        where = f"offset {self.offset}"
        if self.line is not None:
            where = f"line {self.line}, column {self.column}"
        message = f"Error parsing battle report at {where}: expected {self.expected} ({self.kind.value})"
        if self.rules:
            message = f"{message}\n  in {self.trace}"
        if self.excerpt is not None and self.column is not None:
            message = f"{message}\n  | {self.excerpt}\n  | {' ' * (self.column - 1)}^"
        return message


@contextmanager
def context(rule: str) -> Iterator[None]:
    """Record ``rule`` on any parse error raised inside the block."""
    try:
        yield
    except ReportParseError as exc:
        exc.push(rule)
        raise
