"""
swimlane-layout — in-process CLI contracts

File: tests/unit/test_cli.py
Last updated: 2026-10-19

Purpose
- Exercise every ``swimlane`` subcommand through ``run_cli`` and the
  ``cli_entrypoint`` exit-code contract without spawning a process.

Functional requirements
- Tests run from an empty working directory so no ambient ``swimlane.toml``
  or ``SWIMLANE_*`` variable leaks in.
"""

from __future__ import annotations

import json
import logging
import os
from typing import TYPE_CHECKING

import pytest
import structlog

from swimlane_layout.cli import run_cli
from swimlane_layout.config import ConfigLoadError
from swimlane_layout.main import ExitCode, cli_entrypoint

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

ITEMS = [
    {"id": "plant", "name": "Plant", "category": "Actions", "sourceFile": "farm_actions.csv"},
    {
        "id": "water",
        "name": "Water",
        "category": "Actions",
        "sourceFile": "farm_actions.csv",
        "prerequisites": ["plant"],
    },
    {"id": "climb", "name": "Climb", "category": "Actions", "sourceFile": "tower_actions.csv"},
    {"id": "ore", "name": "Ore", "category": "Resources", "sourceFile": "mining.csv"},
]


@pytest.fixture(autouse=True)
def _isolated(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.chdir(tmp_path)
    for name in [key for key in os.environ if key.startswith("SWIMLANE_")]:
        monkeypatch.delenv(name)
    yield
    logger = logging.getLogger("swimlane_layout")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    structlog.reset_defaults()


def _write_items(tmp_path: Path, records: list[dict[str, object]] | None = None) -> str:
    path = tmp_path / "items.json"
    path.write_text(json.dumps(ITEMS if records is None else records), encoding="utf-8")
    return str(path)


@pytest.mark.unit
def test_layout_prints_a_lane_summary(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = run_cli(["layout", _write_items(tmp_path)])

    out = capsys.readouterr().out.splitlines()
    assert exit_code == 0
    assert out == [
        "Nodes: 3  Edges: 1  Lanes: 2",
        "- Farm: 2 nodes, y 25.0..105.0 (height 80.0)",
        "- Tower: 1 nodes, y 130.0..210.0 (height 80.0)",
        "No layout errors detected.",
    ]


@pytest.mark.unit
def test_layout_json_and_output_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    output = tmp_path / "out" / "graph.json"

    exit_code = run_cli(["layout", _write_items(tmp_path), "--json", "--output", str(output)])

    payload = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert [node["data"]["id"] for node in payload["nodes"]] == ["plant", "climb", "water"]
    assert json.loads(output.read_text(encoding="utf-8")) == payload


@pytest.mark.unit
def test_validate_passes_on_clean_input(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    exit_code = run_cli(["validate", _write_items(tmp_path)])

    out = capsys.readouterr().out
    assert exit_code == 0
    assert "[PASS] Boundary Compliance" in out
    assert "[FAIL]" not in out


@pytest.mark.unit
def test_validate_fails_on_cycles(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    records = [
        {"id": "a", "name": "A", "category": "Actions", "prerequisites": ["b"]},
        {"id": "b", "name": "B", "category": "Actions", "prerequisites": ["a"]},
    ]

    exit_code = run_cli(["validate", _write_items(tmp_path, records)])

    out = capsys.readouterr().out
    assert exit_code == 1
    assert "[FAIL] Prerequisite Edge Connections" in out
    assert "error: circular prerequisite a of b ignored (a -> b -> a)" in out
    assert "* Validation test failed: Prerequisite Edge Connections" in out


@pytest.mark.unit
def test_validate_json_with_automated_tests(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    exit_code = run_cli(["validate", _write_items(tmp_path), "--automated", "--json"])

    payload = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert payload["passed"] is True
    names = [result["testName"] for result in payload["results"]]
    assert len(names) == 7
    assert names[-2:] == ["Automated Boundary Tests", "Automated Performance Tests"]


@pytest.mark.unit
def test_validate_with_checks_disabled(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = run_cli(["validate", _write_items(tmp_path), "--profile", "fast"])

    out = capsys.readouterr().out
    assert exit_code == 0
    assert "No checks ran (validation.comprehensive is disabled)." in out


@pytest.mark.unit
def test_report_formats(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    items_path = _write_items(tmp_path)

    assert run_cli(["report", items_path, "--format", "csv"]) == 0
    csv_lines = capsys.readouterr().out.splitlines()
    assert csv_lines[0].startswith("Node ID,Node Name,Lane,Tier")
    assert len(csv_lines) == 4

    assert run_cli(["report", items_path]) == 0
    assert json.loads(capsys.readouterr().out)["summary"]["totalNodes"] == 3

    target = tmp_path / "report.txt"
    assert run_cli(["report", items_path, "--format", "text", "--output", str(target)]) == 0
    assert capsys.readouterr().out == ""
    assert target.read_text(encoding="utf-8").startswith("Swimlane validation report")


@pytest.mark.unit
def test_assignments_summary(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    records = [*ITEMS, {"id": "odd", "name": "Odd", "category": "Unlocks", "sourceFile": "x.csv"}]

    exit_code = run_cli(["assignments", _write_items(tmp_path, records)])

    out = capsys.readouterr().out.splitlines()
    assert exit_code == 0
    assert out == [
        "Items: 4",
        "- Farm: 2",
        "- Tower: 1",
        "- General: 1",
        "Fell back to default lane: odd",
    ]


@pytest.mark.unit
def test_assignments_count_items_the_way_layout_keeps_them(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    records = [
        *ITEMS,
        {"id": "plant", "name": "Plant", "category": "Actions", "sourceFile": "tower_actions.csv"},
        {"id": "anvil", "name": "", "category": "Actions", "sourceFile": "town_blacksmith.csv"},
    ]

    exit_code = run_cli(["assignments", _write_items(tmp_path, records)])

    out = capsys.readouterr().out.splitlines()
    assert exit_code == 0
    assert out == [
        "Items: 4",
        "- Farm: 2",
        "- Tower: 1",
        "- General: 1",
        "Fell back to default lane: anvil",
    ]


@pytest.mark.unit
def test_assignments_json(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = run_cli(["assignments", _write_items(tmp_path), "--json"])

    payload = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert payload["statistics"]["assignmentsByLane"] == {"Farm": 2, "Tower": 1}


@pytest.mark.unit
def test_monitor_exports_the_session(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = run_cli(["monitor", _write_items(tmp_path), "--profile", "debug"])

    payload = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert len(payload["laneAssignments"]) == 3
    assert len(payload["positionLog"]) == 3
    assert [element["lane"] for element in payload["visualBoundaries"]] == ["Farm", "Tower"]


@pytest.mark.unit
def test_config_reflects_profile_and_file(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    (tmp_path / "swimlane.toml").write_text("[layout]\ntier_width = 200\n", encoding="utf-8")

    exit_code = run_cli(["config", "--profile", "compact", "--json"])

    payload = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert payload["active_profile"] == "compact"
    assert payload["config"]["layout"]["tier_width"] == 200
    assert payload["config"]["layout"]["lane_padding"] == 10


@pytest.mark.unit
def test_config_text_output(capsys: pytest.CaptureFixture[str]) -> None:
    assert run_cli(["config"]) == 0

    out = capsys.readouterr().out
    assert out.startswith("Active profile: (default)\n")


@pytest.mark.unit
@pytest.mark.parametrize(
    ("argv", "exit_code", "message"),
    [
        (["layout", "missing.json"], 3, "item file not found"),
        (["layout", "items.txt"], 3, "unsupported item file type"),
        (["config", "--config", "absent.toml"], 2, "absent.toml"),
        (["config", "--profile", "nope"], 2, "nope"),
    ],
)
def test_failures_map_to_exit_codes(
    argv: list[str], exit_code: int, message: str, capsys: pytest.CaptureFixture[str]
) -> None:
    assert run_cli(argv) == exit_code

    err = capsys.readouterr().err
    assert err.startswith("error: ")
    assert message in err


@pytest.mark.unit
def test_invalid_item_json_is_an_input_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    bad = tmp_path / "items.json"
    bad.write_text("[{", encoding="utf-8")

    assert run_cli(["validate", str(bad)]) == 3
    assert "invalid JSON" in capsys.readouterr().err


@pytest.mark.unit
def test_entrypoint_normalizes_argparse_exits(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli_entrypoint(["--help"]) == ExitCode.SUCCESS
    assert "Common workflows" in capsys.readouterr().out
    assert cli_entrypoint(["layout"]) == ExitCode.CONFIG_ERROR


@pytest.mark.unit
def test_entrypoint_routes_unexpected_exceptions(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    def explode(argv: object) -> int:
        raise RuntimeError("boom")

    monkeypatch.setattr("swimlane_layout.cli.run_cli", explode)

    assert cli_entrypoint([]) == ExitCode.INTERNAL_ERROR
    assert "RuntimeError: boom" in capsys.readouterr().err


@pytest.mark.unit
def test_entrypoint_routes_chained_config_errors(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    def broken(argv: object) -> int:
        try:
            raise ConfigLoadError("bad toml")
        except ConfigLoadError as exc:
            raise RuntimeError("wrapped") from exc

    monkeypatch.setattr("swimlane_layout.cli.run_cli", broken)

    assert cli_entrypoint([]) == ExitCode.CONFIG_ERROR
    assert capsys.readouterr().err.strip() == "wrapped"
