"""Section parsers, in the order sections appear in a report."""

from __future__ import annotations

import re

from battle_report.domain.report import (
    Award,
    BattleResult,
    Event,
    ModificationResearch,
    Reward,
    Vehicle,
    VehicleResearch,
)
from battle_report.grammar.errors import ErrorKind, context
from battle_report.grammar.primitives import (
    INDENT,
    Input,
    blank_line,
    line_ending,
    literal,
    number,
    percentage,
    research_points,
    rest_of_line,
    reward,
    row_ending,
    row_separator,
    take_until,
    timestamp,
)
from battle_report.grammar.tables import detail_row, expect_header, short_row, table, table_rows

AWARDS = "Awards"
ACTIVITY_TIME = "Activity Time"
TIME_PLAYED = "Time Played"
REWARD_FOR_WINNING = "Reward for winning"
OTHER_AWARDS = "Other awards"
RESEARCHED_UNIT = "Researched unit:"
RESEARCHING_PROGRESS = "Researching progress:"
USED_ITEMS = "Used items:"
SESSION = "Session: "

RESERVED_HEADERS = (AWARDS, ACTIVITY_TIME)

_LEADING_SPACES = re.compile(r"[ \t]*")
_KEYED_NAME = re.compile(r"(.+?): (?=\d)")
_SESSION_ID = re.compile(r"[0-9a-fA-F]+")
_TRAILING = re.compile(r"\s*\Z")


def result_line(inp: Input) -> tuple[tuple[BattleResult, str], Input]:
    """``Victory in the [Domination] Poland (winter) mission!`` plus a blank line."""
    with context("result line"):
        if inp.startswith("Victory"):
            result, inp = BattleResult.WIN, inp.advance(len("Victory"))
        elif inp.startswith("Defeat"):
            result, inp = BattleResult.LOSS, inp.advance(len("Defeat"))
        else:
            raise inp.fail("'Victory' or 'Defeat'", ErrorKind.ALTERNATIVES)
        _, inp = literal(inp, " in the ")
        mission, inp = take_until(inp, " mission!", what="a mission name")
        _, inp = literal(inp, " mission!")
        _, inp = line_ending(inp)
        _, inp = blank_line(inp)
    return (result, mission), inp


def _at_reserved_header(inp: Input) -> bool:
    return any(inp.startswith(f"{name}{INDENT}") for name in RESERVED_HEADERS)


def event_tables(inp: Input, *, allow_empty: bool = False) -> tuple[list[Event], Input]:
    """Zero or more reward-category tables, flattened in source order."""
    events: list[Event] = []
    with context("event tables"):
        while not _at_reserved_header(inp):
            parsed, inp = table(inp, detail_row, allow_empty=allow_empty)
            events.extend(
                Event(
                    time=row.time,
                    category=parsed.name,
                    vehicle=row.vehicle,
                    enemy=row.enemy,
                    reward=row.reward,
                )
                for row in parsed.rows
            )
    return events, inp


def awards_table(inp: Input, *, allow_empty: bool = False) -> tuple[list[Award], Input]:
    with context("awards"):
        header, inp = expect_header(inp, AWARDS)
        rows, inp = table_rows(inp, header.name, header.count, short_row, allow_empty=allow_empty)
    return [Award(time=row.time, name=row.label, reward=row.reward) for row in rows], inp


def _time_played_header(inp: Input) -> tuple[int, Input]:
    """``Time Played    3               1057 RP``; returns the declared row count."""
    with context("time played header"):
        _, inp = literal(inp, TIME_PLAYED)
        _, inp = row_separator(inp)
        count, inp = number(inp)
        _, inp = row_separator(inp)
        _, inp = research_points(inp)
        _, inp = row_ending(inp)
    return count, inp


def _time_played_row(inp: Input) -> tuple[tuple[str, int, int, int], Input]:
    """``    Concept 3          97%    8:21    680 RP``"""
    _, inp = literal(inp, INDENT)
    with context("vehicle column"):
        name, inp = take_until(inp, INDENT, what="a vehicle name")
        _, inp = row_separator(inp)
    with context("activity column"):
        activity, inp = percentage(inp)
        _, inp = row_separator(inp)
    with context("time played column"):
        played, inp = timestamp(inp)
        _, inp = row_separator(inp)
    with context("research column"):
        research, inp = research_points(inp)
        _, inp = row_ending(inp)
    return (name, activity, played, research), inp


def vehicle_tables(inp: Input, *, allow_empty: bool = False) -> tuple[list[Vehicle], Input]:
    """Parse the Activity Time / Time Played pair and join it row by row.

    Both tables list the same vehicles in the same order, so row ``i`` of one
    describes the same vehicle as row ``i`` of the other. The join is by
    position only; names are not compared.
    """
    with context("activity and time played"):
        with context("activity time"):
            header, inp = expect_header(inp, ACTIVITY_TIME)
            activity_rows, inp = table_rows(
                inp, header.name, header.count, short_row, allow_empty=allow_empty
            )
        with context("time played"):
            header_pos = inp
            count, inp = _time_played_header(inp)
            if count != len(activity_rows):
                raise header_pos.fail(
                    f"{len(activity_rows)} Time Played rows to match Activity Time, header declares {count}"
                )
            played_rows, inp = table_rows(inp, TIME_PLAYED, count, _time_played_row, allow_empty=allow_empty)

    vehicles = [
        Vehicle(
            name=name,
            activity=activity,
            time_played=played,
            reward=Reward(
                silverlions=activity_row.reward.silverlions,
                research=activity_row.reward.research + research,
            ),
        )
        for activity_row, (name, activity, played, research) in zip(activity_rows, played_rows, strict=True)
    ]
    return vehicles, inp


def _keyed_reward(inp: Input, label: str) -> tuple[Reward, Input]:
    _, inp = literal(inp, label)
    _, inp = row_separator(inp)
    value, inp = reward(inp)
    _, inp = row_ending(inp)
    _, inp = blank_line(inp)
    return value, inp


def reward_for_winning(inp: Input) -> tuple[Reward | None, Input]:
    if not inp.startswith(REWARD_FOR_WINNING):
        return None, inp
    with context("reward for winning"):
        return _keyed_reward(inp, REWARD_FOR_WINNING)


def other_awards(inp: Input) -> tuple[Reward, Input]:
    with context("other awards"):
        return _keyed_reward(inp, OTHER_AWARDS)


def earned(inp: Input) -> tuple[Reward, Input]:
    """``Earned: 16570 SL, 2115 CRP``"""
    with context("earned"):
        _, inp = literal(inp, "Earned: ")
        amount, inp = number(inp)
        _, inp = literal(inp, " SL, ")
        crp, inp = number(inp)
        _, inp = literal(inp, " CRP")
        _, inp = row_ending(inp)
    return Reward(silverlions=amount, research=crp), inp


def activity(inp: Input) -> tuple[int, Input]:
    with context("activity"):
        _, inp = literal(inp, "Activity: ")
        value, inp = percentage(inp)
        _, inp = row_ending(inp)
    return value, inp


def damaged_vehicles(inp: Input) -> tuple[list[str], Input]:
    """``Damaged Vehicles: Concept 3, Sherman Firefly``"""
    with context("damaged vehicles"):
        _, inp = literal(inp, "Damaged Vehicles: ")
        line, rest = rest_of_line(inp)
        names = [name.strip() for name in line.split(", ") if name.strip()]
        if not names:
            raise inp.fail("at least one vehicle name")
        _, inp = row_ending(rest)
    return names, inp


def _cost(inp: Input, label: str) -> tuple[int, Input]:
    _, inp = literal(inp, label)
    _, inp = literal(inp, "-")
    value, inp = number(inp)
    _, inp = literal(inp, " SL")
    _, inp = row_ending(inp)
    return value, inp


def repair_cost(inp: Input) -> tuple[int, Input]:
    with context("automatic repair"):
        return _cost(inp, "Automatic repair of all vehicles: ")


def ammo_and_crew_cost(inp: Input) -> tuple[int, Input]:
    with context("automatic purchasing"):
        return _cost(inp, 'Automatic purchasing of ammo and "Crew Replenishment": ')


def _block_header(inp: Input, label: str) -> Input:
    _, inp = literal(inp, label)
    _, inp = row_ending(inp)
    return inp


def _skip_indent(inp: Input) -> Input:
    match = inp.match(_LEADING_SPACES)
    return inp if match is None else inp.at(match.end())


def _keyed_research(inp: Input) -> tuple[str, int, Input]:
    """``<name>: <research points>`` up to the end of the line."""
    inp = _skip_indent(inp)
    match = inp.match(_KEYED_NAME)
    if match is None:
        raise inp.fail("'<name>: <n> RP'")
    name = match.group(1)
    research, inp = research_points(inp.at(match.end()))
    _, inp = row_ending(inp)
    return name, research, inp


def _block_lines(inp: Input, label: str) -> tuple[list[tuple[str, int, Input]], Input]:
    """Lines of a keyed block up to its closing blank line; at least one."""
    inp = _block_header(inp, label)
    lines: list[tuple[str, int, Input]] = []
    while not inp.is_blank_line():
        if inp.at_end():
            raise inp.fail(f"a blank line closing the {label!r} block")
        start = inp
        with context(f"line {len(lines) + 1}"):
            name, research, inp = _keyed_research(inp)
        lines.append((name, research, start))
    if not lines:
        raise inp.fail(f"at least one entry under {label!r}")
    _, inp = blank_line(inp)
    return lines, inp


def researched_units(inp: Input) -> tuple[list[VehicleResearch], Input]:
    """Optional block::

        Researched unit:
        Comet I: 1186 RP

    """
    if not inp.startswith(RESEARCHED_UNIT):
        return [], inp
    with context("researched units"):
        lines, inp = _block_lines(inp, RESEARCHED_UNIT)
    return [VehicleResearch(name=name, research=research) for name, research, _ in lines], inp


def researched_modifications(inp: Input) -> tuple[list[ModificationResearch], Input]:
    """Optional block::

        Researching progress:
        Concept 3 - Parts: 328 RP

    """
    if not inp.startswith(RESEARCHING_PROGRESS):
        return [], inp
    entries: list[ModificationResearch] = []
    with context("researched modifications"):
        lines, inp = _block_lines(inp, RESEARCHING_PROGRESS)
        for key, research, start in lines:
            vehicle, separator, modification = key.partition(" - ")
            if not separator or not vehicle.strip() or not modification.strip():
                raise _skip_indent(start).fail("'<vehicle> - <modification>: <n> RP'")
            entries.append(
                ModificationResearch(vehicle=vehicle.strip(), name=modification.strip(), research=research)
            )
    return entries, inp


def used_items(inp: Input) -> tuple[str | None, Input]:
    """Optional free text between ``Used items:`` and ``Session: ``."""
    if not inp.startswith(USED_ITEMS):
        return None, inp
    with context("used items"):
        _, body = literal(inp, USED_ITEMS)
        end = inp.text.find(SESSION, body.pos)
        if end == -1:
            raise body.fail(f"{SESSION!r} after the used items")
    return inp.text[body.pos : end].strip(), inp.at(end)


def session(inp: Input) -> tuple[str, Input]:
    with context("session"):
        _, inp = literal(inp, SESSION)
        match = inp.match(_SESSION_ID)
        if match is None:
            raise inp.fail("a hexadecimal session id")
        _, inp = row_ending(inp.at(match.end()))
    return match.group(), inp


def total(inp: Input) -> tuple[tuple[Reward, int | None], Input]:
    """``Total: 11350 SL, 2115 CRP, 3021 RP`` at the very end of the report.

    The CRP figure is optional and returned separately from the balance.
    """
    with context("total"):
        _, inp = literal(inp, "Total: ")
        amount, inp = number(inp)
        _, inp = literal(inp, " SL, ")
        value, inp = number(inp)
        crp = None
        if inp.startswith(" CRP"):
            crp = value
            _, inp = literal(inp, " CRP, ")
            value, inp = number(inp)
        _, inp = literal(inp, " RP")
        match = inp.match(_TRAILING)
        if match is None:
            raise inp.fail("end of report")
    return (Reward(silverlions=amount, research=value), crp), inp.at(match.end())
