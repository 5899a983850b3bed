"""Generic table grammar: header, exactly N rows, blank line."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from battle_report.domain.report import Reward
from battle_report.grammar.errors import ReportParseError, context
from battle_report.grammar.primitives import (
    INDENT,
    MARKER,
    Input,
    Parser,
    blank_line,
    literal,
    number,
    optional,
    reward,
    row_ending,
    row_separator,
    take_until,
    timestamp,
)

RowT = TypeVar("RowT")


@dataclass(frozen=True, slots=True)
class TableHeader:
    name: str
    count: int
    total: Reward


@dataclass(frozen=True, slots=True)
class DetailRow:
    time: int
    vehicle: str
    enemy: str | None
    reward: Reward


@dataclass(frozen=True, slots=True)
class ShortRow:
    time: int
    label: str
    reward: Reward


@dataclass(frozen=True)
class Table(Generic[RowT]):
    header: TableHeader
    rows: tuple[RowT, ...]

    @property
    def name(self) -> str:
        return self.header.name


def table_header(inp: Input) -> tuple[TableHeader, Input]:
    """Parse a header line.

    Example::

        Destruction of ground vehicles and fleets     6    5820 SL     413 RP
    """
    with context("table header"):
        with context("table name"):
            name, inp = take_until(inp, INDENT, what="a table name")
            _, inp = row_separator(inp)
        with context("row count"):
            count, inp = number(inp)
            _, inp = row_separator(inp)
        with context("total reward"):
            total, inp = reward(inp)
            _, inp = row_ending(inp)
    return TableHeader(name=name, count=count, total=total), inp


def _reward_then_row_end(inp: Input) -> tuple[Reward, Input]:
    value, inp = reward(inp)
    _, inp = row_ending(inp)
    return value, inp


def _marker(inp: Input) -> tuple[None, Input]:
    _, inp = literal(inp, MARKER)
    return row_separator(inp)


def detail_row(inp: Input) -> tuple[DetailRow, Input]:
    """Parse an event row.

    Examples::

            7:13     Concept 3          M6A1            1010 SL    77 RP
            10:07    Wyvern S4          Pe-8            440 SL    11 + (Talismans)11 = 22 RP
            3:45    Concept 3    M36 GMC()     ×    505 SL    10 + (PA)10 = 20 RP
    """
    with context("time column"):
        _, inp = literal(inp, INDENT)
        time, inp = timestamp(inp)
        _, inp = row_separator(inp)
    with context("vehicle column"):
        vehicle, inp = take_until(inp, INDENT, what="a vehicle name")
        _, inp = row_separator(inp)

    # Self-directed categories have no opponent column.
    value, rest = optional(inp, _reward_then_row_end)
    if value is not None:
        return DetailRow(time=time, vehicle=vehicle, enemy=None, reward=value), rest

    with context("enemy vehicle column"):
        enemy, inp = take_until(inp, INDENT, what="an enemy vehicle name")
        _, inp = row_separator(inp)
    _, inp = optional(inp, _marker)
    with context("reward column"):
        value, inp = _reward_then_row_end(inp)
    return DetailRow(time=time, vehicle=vehicle, enemy=enemy, reward=value), inp


def short_row(inp: Input) -> tuple[ShortRow, Input]:
    """Parse an award or activity row.

    Example::

            13:55    The Best Squad           1000 SL    100 RP
    """
    with context("time column"):
        _, inp = literal(inp, INDENT)
        time, inp = timestamp(inp)
        _, inp = row_separator(inp)
    with context("label column"):
        label, inp = take_until(inp, INDENT, what="a label")
        _, inp = row_separator(inp)
    with context("reward column"):
        value, inp = _reward_then_row_end(inp)
    return ShortRow(time=time, label=label, reward=value), inp


def table_rows(
    inp: Input,
    name: str,
    count: int,
    row_parser: Parser[RowT],
    *,
    allow_empty: bool = False,
) -> tuple[tuple[RowT, ...], Input]:
    """Parse exactly ``count`` rows and the blank line closing the table."""
    if count == 0 and not allow_empty:
        raise inp.fail(f"at least one row in the {name!r} table (header declares 0)")
    rows: list[RowT] = []
    for index in range(count):
        if inp.at_end() or inp.is_blank_line() or not inp.startswith(INDENT):
            raise inp.fail(f"{count} rows in the {name!r} table, found {index}")
        with context(f"row {index + 1} of {count}"):
            row, inp = row_parser(inp)
        rows.append(row)
    if not inp.is_blank_line():
        if inp.startswith(INDENT):
            raise inp.fail(f"a blank line after {count} rows; the {name!r} table has more rows than declared")
        raise inp.fail(f"a blank line after the {name!r} table")
    _, inp = blank_line(inp)
    return tuple(rows), inp


def table(inp: Input, row_parser: Parser[RowT], *, allow_empty: bool = False) -> tuple[Table[RowT], Input]:
    """Parse a header followed by the declared number of rows.

    Example::

        Scouting of the enemy                         2     102 SL
            2:05    Concept 3    M36 GMC()       51 SL
            3:04    Concept 3    M36 GMC()       51 SL

    """
    header, inp = table_header(inp)
    with context(f"{header.name} rows"):
        rows, inp = table_rows(inp, header.name, header.count, row_parser, allow_empty=allow_empty)
    return Table(header=header, rows=rows), inp


def expect_header(inp: Input, name: str) -> tuple[TableHeader, Input]:
    """Parse a table header whose name must be exactly ``name``."""
    header, rest = table_header(inp)
    if header.name != name:
        raise ReportParseError(f"the {name!r} table header", inp.pos)
    return header, rest
