from __future__ import annotations

import io
import json
import logging
import shutil
from pathlib import Path

import pytest

from battle_report import cli
from battle_report.loader import ReportLoadError
from battle_report.options import ParserOptions
from tests.helpers.factories import DATA_DIR


def _copy_fixtures(target: Path, *names: str) -> None:
    for name in names:
        shutil.copy(DATA_DIR / name, target / name)


def test_run_writes_one_json_document_per_report(tmp_path: Path) -> None:
    _copy_fixtures(tmp_path, "defeat_minimal.report", "victory_poland.report")
    out = io.StringIO()

    code = cli.run([tmp_path], options=ParserOptions(), indent=None, out=out)

    assert code == cli.EXIT_OK
    documents = [json.loads(line) for line in out.getvalue().splitlines()]
    assert [doc["missionName"] for doc in documents] == ["[Conquest #2] Kursk", "[Domination] Poland (winter)"]
    victory = documents[1]
    assert victory["result"] == "win"
    assert victory["totalCrp"] == 2115
    assert victory["vehicles"][0]["timePlayed"] == 501
    assert victory["events"][0]["kind"] == "destruction_of_ground_vehicles_and_fleets"


def test_run_counts_failures(tmp_path: Path) -> None:
    _copy_fixtures(tmp_path, "defeat_minimal.report")
    (tmp_path / "broken.report").write_text("Stalemate in the nowhere mission!\n\n", encoding="utf-8")
    out = io.StringIO()

    code = cli.run([tmp_path], options=ParserOptions(), indent=None, out=out)

    assert code == cli.EXIT_FAILED_REPORTS
    assert len(out.getvalue().splitlines()) == 1


def test_run_fail_fast_stops_at_first_failure(tmp_path: Path) -> None:
    (tmp_path / "a.report").write_text("garbage\n", encoding="utf-8")
    _copy_fixtures(tmp_path, "defeat_minimal.report")
    out = io.StringIO()

    code = cli.run([tmp_path], options=ParserOptions(), fail_fast=True, out=out)

    assert code == cli.EXIT_FAILED_REPORTS
    assert out.getvalue() == ""


def test_main_prints_json(capsys: pytest.CaptureFixture[str]) -> None:
    code = cli.main([str(DATA_DIR / "defeat_minimal.report"), "--indent", "0", "-q"])

    assert code == cli.EXIT_OK
    payload = json.loads(capsys.readouterr().out)
    assert payload["sessionId"] == "6a0b3c11f00d42e"
    assert payload["rewardForWinning"] is None


def test_main_missing_path_is_usage_error(tmp_path: Path) -> None:
    assert cli.main([str(tmp_path / "missing.report"), "-q"]) == cli.EXIT_USAGE


def test_missing_path_is_detected_before_any_output(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    present = DATA_DIR / "defeat_minimal.report"
    argv = [str(present), str(tmp_path / "missing.report"), str(present), "-q"]

    assert cli.main(argv) == cli.EXIT_USAGE
    assert capsys.readouterr().out == ""


def test_run_raises_for_missing_path_without_writing(tmp_path: Path) -> None:
    out = io.StringIO()
    with pytest.raises(ReportLoadError):
        cli.run(
            [DATA_DIR / "defeat_minimal.report", tmp_path / "missing.report"],
            options=ParserOptions(),
            out=out,
        )
    assert out.getvalue() == ""


def test_failures_are_logged_under_the_cli_module(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    (tmp_path / "broken.report").write_text("garbage\n", encoding="utf-8")

    with caplog.at_level(logging.WARNING, logger="battle_report.cli"):
        cli.run([tmp_path], options=ParserOptions(), out=io.StringIO())

    assert [record.name for record in caplog.records] == ["battle_report.cli"]
    assert "broken.report" in caplog.text
