from __future__ import annotations

import pytest
from hypothesis import given, settings

from battle_report.domain.report import BattleResult, EventKind, ModificationResearch, Reward, VehicleResearch
from battle_report.grammar.errors import ErrorKind, ReportParseError
from battle_report.grammar.report import parse_report
from battle_report.options import ParserOptions
from tests.helpers.factories import build_report, event_table, read_fixture, short_table
from tests.helpers.invariants import assert_report_well_formed
from tests.helpers.strategies import detail_rows_strategy


def test_parse_victory_fixture() -> None:
    report = parse_report(read_fixture("victory_poland.report"))

    assert report.result is BattleResult.WIN
    assert report.mission_name == "[Domination] Poland (winter)"
    assert report.session_id == "5c1f2e0003a4b6c"

    assert len(report.events) == 15
    assert report.events[0].category == "Destruction of ground vehicles and fleets"
    assert report.events[0].kind is EventKind.DESTRUCTION_OF_GROUND_VEHICLES_AND_FLEETS
    assert report.events[6].reward == Reward(440, 22)
    capture = report.events[-1]
    assert capture.kind is EventKind.CAPTURE_OF_ZONES
    assert capture.enemy is None

    assert len(report.awards) == 14
    assert [vehicle.name for vehicle in report.vehicles] == ["Concept 3", "Sherman Firefly", "Wyvern S4"]
    assert report.vehicles[0].reward == Reward(730, 748)
    assert report.vehicles[0].time_played == 501
    assert report.vehicles[2].reward == Reward(1900, 228)

    assert report.reward_for_winning == Reward(4390, 120)
    assert report.other_awards == Reward(5295, 115)
    assert report.earned_rewards == Reward(16570, 2115)
    assert report.activity == 87
    assert report.damaged_vehicles == ("Concept 3", "Sherman Firefly")
    assert report.repair_cost == 3580
    assert report.ammo_and_crew_cost == 1640

    assert report.vehicle_research == (VehicleResearch("Comet I", 1186),)
    assert report.modification_research == (
        ModificationResearch("Concept 3", "Parts", 328),
        ModificationResearch("Wyvern S4", "Engine", 192),
    )
    assert report.used_items == "Talisman (Wyvern S4)"
    assert report.balance == Reward(11350, 3021)
    assert report.total_crp == 2115
    assert_report_well_formed(report)


def test_parse_defeat_fixture() -> None:
    report = parse_report(read_fixture("defeat_minimal.report"))

    assert report.result is BattleResult.LOSS
    assert report.mission_name == "[Conquest #2] Kursk"
    assert len(report.events) == 1
    assert report.events[0].enemy == "Pz.IV H"
    assert report.reward_for_winning is None
    assert report.other_awards == Reward(0, 0)
    assert report.vehicles[0].reward == Reward(410, 227)
    assert report.vehicle_research == ()
    assert report.modification_research == ()
    assert report.used_items is None
    assert report.balance == Reward(310, 258)
    assert_report_well_formed(report)


def test_crlf_report_matches_lf_report() -> None:
    text = read_fixture("victory_poland.report")
    assert parse_report(text.replace("\n", "\r\n")) == parse_report(text)


def test_parse_is_deterministic() -> None:
    text = read_fixture("defeat_minimal.report")
    assert parse_report(text) == parse_report(text)


def test_built_default_report_parses() -> None:
    report = parse_report(build_report())
    assert report.events == ()
    assert len(report.awards) == 1
    assert len(report.vehicles) == 1
    assert_report_well_formed(report)


@given(rows=detail_rows_strategy(max_size=4))
@settings(max_examples=30)
def test_event_count_matches_declared_rows(rows) -> None:
    text = build_report(event_tables=[event_table("Destruction of aircraft", rows)])
    report = parse_report(text)
    assert len(report.events) == len(rows)
    assert all(event.kind is EventKind.DESTRUCTION_OF_AIRCRAFT for event in report.events)


def test_unknown_category_is_kept_without_kind() -> None:
    text = build_report(
        event_tables=[event_table("Hitting the enemy", [(60, "Concept 3", "M6A1", Reward(10, 1))])]
    )
    report = parse_report(text)
    assert report.events[0].category == "Hitting the enemy"
    assert report.events[0].kind is None


def test_missing_mission_suffix_reports_position() -> None:
    text = read_fixture("victory_poland.report").replace(" mission!", "", 1)
    with pytest.raises(ReportParseError) as excinfo:
        parse_report(text)
    error = excinfo.value
    assert error.kind is ErrorKind.STRUCTURAL
    assert "result line" in error.rules
    assert error.line == 1
    assert error.column == len("Victory in the ") + 1
    assert "line 1, column 16" in str(error)


def test_error_line_and_column_point_into_the_text() -> None:
    text = build_report(footer=(
        "Earned: 16570 SL, 2115 CRP\n"
        "Activity: 187%\n"
        "Damaged Vehicles: Concept 3\n"
        "Automatic repair of all vehicles: -3580 SL\n"
        'Automatic purchasing of ammo and "Crew Replenishment": -1640 SL\n'
        "\n"
    ))
    with pytest.raises(ReportParseError) as excinfo:
        parse_report(text)
    error = excinfo.value
    assert error.kind is ErrorKind.NUMERIC
    assert error.rules == ["activity"]
    assert error.excerpt == "Activity: 187%"
    assert error.column == len("Activity: ") + 1
    assert text.splitlines()[error.line - 1] == "Activity: 187%"


def test_empty_awards_table_is_policy_controlled() -> None:
    text = build_report(awards=short_table("Awards", []))
    with pytest.raises(ReportParseError) as excinfo:
        parse_report(text)
    assert "awards" in excinfo.value.rules

    report = parse_report(text, ParserOptions(allow_empty_tables=True))
    assert report.awards == ()


def test_missing_total_fails() -> None:
    text = read_fixture("defeat_minimal.report")
    text = text[: text.index("Total:")]
    with pytest.raises(ReportParseError) as excinfo:
        parse_report(text)
    assert excinfo.value.rules == ["total"]


def test_truncated_report_fails_without_partial_result() -> None:
    text = read_fixture("victory_poland.report")
    with pytest.raises(ReportParseError):
        parse_report(text[: text.index("Other awards")])
