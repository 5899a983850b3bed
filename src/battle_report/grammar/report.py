"""Top-level battle report grammar."""

from __future__ import annotations

from battle_report.domain.report import BattleReport
from battle_report.grammar import sections
from battle_report.grammar.errors import ReportParseError, context
from battle_report.grammar.primitives import Input, blank_line
from battle_report.options import ParserOptions


def parse_report(text: str, options: ParserOptions | None = None) -> BattleReport:
    """Parse a whole report.

    Raises ReportParseError, positioned against ``text``, on the first
    section that does not match. Nothing is returned for a partial parse.
    """
    options = options or ParserOptions()
    try:
        report, _ = battle_report(Input(text), options)
    except ReportParseError as exc:
        exc.attach(text)
        raise
    return report


def battle_report(inp: Input, options: ParserOptions) -> tuple[BattleReport, Input]:
    allow_empty = options.allow_empty_tables

    (result, mission_name), inp = sections.result_line(inp)
    events, inp = sections.event_tables(inp, allow_empty=allow_empty)
    awards, inp = sections.awards_table(inp, allow_empty=allow_empty)
    vehicles, inp = sections.vehicle_tables(inp, allow_empty=allow_empty)
    reward_for_winning, inp = sections.reward_for_winning(inp)
    other_awards, inp = sections.other_awards(inp)

    earned_rewards, inp = sections.earned(inp)
    activity, inp = sections.activity(inp)
    damaged_vehicles, inp = sections.damaged_vehicles(inp)
    repair_cost, inp = sections.repair_cost(inp)
    ammo_and_crew_cost, inp = sections.ammo_and_crew_cost(inp)
    with context("blank line after costs"):
        _, inp = blank_line(inp)

    vehicle_research, inp = sections.researched_units(inp)
    modification_research, inp = sections.researched_modifications(inp)
    used_items, inp = sections.used_items(inp)

    session_id, inp = sections.session(inp)
    (balance, total_crp), inp = sections.total(inp)

    report = BattleReport(
        session_id=session_id,
        result=result,
        mission_name=mission_name,
        events=tuple(events),
        awards=tuple(awards),
        reward_for_winning=reward_for_winning,
        other_awards=other_awards,
        vehicles=tuple(vehicles),
        activity=activity,
        damaged_vehicles=tuple(damaged_vehicles),
        repair_cost=repair_cost,
        ammo_and_crew_cost=ammo_and_crew_cost,
        vehicle_research=tuple(vehicle_research),
        modification_research=tuple(modification_research),
        earned_rewards=earned_rewards,
        balance=balance,
        total_crp=total_crp,
        used_items=used_items,
    )
    return report, inp
