"""Primitive parsers.

Every parser is a plain function taking an :class:`Input` and returning
``(value, remaining_input)``, or raising :class:`ReportParseError`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Sequence, TypeVar

from battle_report.domain.report import Reward
from battle_report.grammar.errors import ErrorKind, ReportParseError, context

T = TypeVar("T")

INDENT = "    "  # 4 spaces
MARKER = "\u00d7"  # ×

_DIGITS = re.compile(r"\d+")
_SPACES = re.compile(r" +")
_LINE_END = re.compile(r"\r?\n")
_BLANK_LINE = re.compile(r"[ \t]*\r?\n")
_TIMESTAMP = re.compile(r"(\d+):(\d{2})(?!\d)")
_BONUS_TERM = re.compile(r" \+ \(([^)\r\n]*)\)(\d+)")


@dataclass(frozen=True, slots=True)
class Input:
    """Immutable cursor over the report text."""

    text: str
    pos: int = 0

    @property
    def rest(self) -> str:
        return self.text[self.pos :]

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def startswith(self, prefix: str) -> bool:
        return self.text.startswith(prefix, self.pos)

    def advance(self, count: int) -> Input:
        return Input(self.text, self.pos + count)

    def at(self, pos: int) -> Input:
        return Input(self.text, pos)

    def match(self, pattern: re.Pattern[str]) -> re.Match[str] | None:
        return pattern.match(self.text, self.pos)

    def line_end(self) -> int:
        """Offset of the terminator ending the current line (or end of text)."""
        end = self.text.find("\n", self.pos)
        if end == -1:
            return len(self.text)
        if end > self.pos and self.text[end - 1] == "\r":
            return end - 1
        return end

    def is_blank_line(self) -> bool:
        return self.match(_BLANK_LINE) is not None

    def fail(self, expected: str, kind: ErrorKind = ErrorKind.STRUCTURAL) -> ReportParseError:
        return ReportParseError(expected, self.pos, kind)


Parser = Callable[[Input], tuple[T, Input]]


def literal(inp: Input, text: str) -> tuple[str, Input]:
    if not inp.startswith(text):
        raise inp.fail(repr(text))
    return text, inp.advance(len(text))


def number(inp: Input) -> tuple[int, Input]:
    match = inp.match(_DIGITS)
    if match is None:
        raise inp.fail("an integer", ErrorKind.NUMERIC)
    return int(match.group()), inp.at(match.end())


def percentage(inp: Input) -> tuple[int, Input]:
    value, rest = number(inp)
    if value > 100:
        raise inp.fail("a percentage between 0 and 100", ErrorKind.NUMERIC)
    _, rest = literal(rest, "%")
    return value, rest


def timestamp(inp: Input) -> tuple[int, Input]:
    """Parse ``H:MM`` into minutes since the start of the battle."""
    match = inp.match(_TIMESTAMP)
    if match is None:
        raise inp.fail("a timestamp (H:MM)", ErrorKind.NUMERIC)
    hours, minutes = int(match.group(1)), int(match.group(2))
    if minutes >= 60:
        raise inp.fail("a timestamp with minutes below 60", ErrorKind.NUMERIC)
    return hours * 60 + minutes, inp.at(match.end())


def spaces(inp: Input) -> tuple[None, Input]:
    match = inp.match(_SPACES)
    if match is None:
        raise inp.fail("spaces")
    return None, inp.at(match.end())


def row_separator(inp: Input) -> tuple[None, Input]:
    with context("row separator"):
        _, inp = literal(inp, INDENT)
    match = inp.match(_SPACES)
    return None, inp if match is None else inp.at(match.end())


def line_ending(inp: Input) -> tuple[None, Input]:
    match = inp.match(_LINE_END)
    if match is None:
        raise inp.fail("a line ending")
    return None, inp.at(match.end())


def row_ending(inp: Input) -> tuple[None, Input]:
    with context("row ending"):
        match = inp.match(_SPACES)
        if match is not None:
            inp = inp.at(match.end())
        return line_ending(inp)


def blank_line(inp: Input) -> tuple[None, Input]:
    match = inp.match(_BLANK_LINE)
    if match is None:
        raise inp.fail("a blank line")
    return None, inp.at(match.end())


def take_until(inp: Input, delimiter: str, *, what: str = "a name") -> tuple[str, Input]:
    """Consume text up to the next ``delimiter`` on the current line."""
    line_end = inp.line_end()
    found = inp.text.find(delimiter, inp.pos, line_end)
    if found == -1:
        raise inp.fail(f"{what} followed by {delimiter!r}")
    if found == inp.pos:
        raise inp.fail(what)
    return inp.text[inp.pos : found], inp.at(found)


def rest_of_line(inp: Input) -> tuple[str, Input]:
    """Everything up to (not including) the line terminator."""
    line_end = inp.line_end()
    return inp.text[inp.pos : line_end], inp.at(line_end)


def optional(inp: Input, parser: Parser[T]) -> tuple[T | None, Input]:
    try:
        return parser(inp)
    except ReportParseError:
        return None, inp


def alternatives(inp: Input, choices: Sequence[tuple[str, Parser[T]]]) -> tuple[T, Input]:
    """Try each named parser in order; the first success wins."""
    furthest: ReportParseError | None = None
    for _, parser in choices:
        try:
            return parser(inp)
        except ReportParseError as exc:
            if furthest is None or exc.offset > furthest.offset:
                furthest = exc
    names = " or ".join(name for name, _ in choices)
    if furthest is None:
        raise inp.fail(names, ErrorKind.ALTERNATIVES)
    error = ReportParseError(
        f"{names} (nearest miss: {furthest.expected})", furthest.offset, ErrorKind.ALTERNATIVES
    )
    raise error from furthest


def _simple_amount(inp: Input, unit: str) -> tuple[int, Input]:
    value, inp = number(inp)
    _, inp = literal(inp, f" {unit}")
    return value, inp


def _itemized_amount(inp: Input, unit: str) -> tuple[int, Input]:
    # "<base> + (<label>)<n> [+ (<label>)<n> ...] = <total> <unit>"; only the total is kept.
    _, inp = number(inp)
    terms = 0
    match = inp.match(_BONUS_TERM)
    while match is not None:
        inp = inp.at(match.end())
        terms += 1
        match = inp.match(_BONUS_TERM)
    if not terms:
        raise inp.fail("a bonus term ' + (<label>)<n>'")
    _, inp = literal(inp, " = ")
    return _simple_amount(inp, unit)


def _amount(inp: Input, unit: str) -> tuple[int, Input]:
    return alternatives(
        inp,
        [
            (f"'<n> {unit}'", lambda i: _simple_amount(i, unit)),
            (f"itemized '... = <n> {unit}'", lambda i: _itemized_amount(i, unit)),
        ],
    )


def silverlions(inp: Input) -> tuple[int, Input]:
    with context("silverlions"):
        return _amount(inp, "SL")


def research_points(inp: Input) -> tuple[int, Input]:
    with context("research points"):
        return _amount(inp, "RP")


def _spaced_research(inp: Input) -> tuple[int, Input]:
    _, inp = spaces(inp)
    return research_points(inp)


def reward(inp: Input) -> tuple[Reward, Input]:
    """Parse ``<SL shape>`` optionally followed by ``<RP shape>``.

    Examples::

        5820 SL     413 RP
        1000 SL
        505 SL    10 + (PA)10 + (Booster)10 + (Talismans)10 = 40 RP
    """
    with context("reward"):
        amount, inp = silverlions(inp)
        research, inp = optional(inp, _spaced_research)
        return Reward(silverlions=amount, research=research or 0), inp
