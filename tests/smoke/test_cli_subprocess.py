"""
swimlane-layout — CLI subprocess smoke contracts

File: tests/smoke/test_cli_subprocess.py
Last updated: 2026-10-19

Purpose
- Run ``python -m swimlane_layout`` as a real process and check exit codes,
  stdout payloads and that log records stay on stderr.
"""

from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
SRC_PATH = PROJECT_ROOT / "src"

ITEMS = [
    {"id": "stall", "name": "Stall", "category": "Actions", "sourceFile": "vendors.csv"},
    {
        "id": "upgrade",
        "name": "Upgrade Stall",
        "category": "Actions",
        "sourceFile": "vendors.csv",
        "prerequisites": ["stall"],
    },
]


def _run_cli(cwd: Path, *args: str) -> subprocess.CompletedProcess[str]:
    env = {key: value for key, value in os.environ.items() if not key.startswith("SWIMLANE_")}
    existing_pythonpath = env.get("PYTHONPATH")
    src_pythonpath = str(SRC_PATH)
    env["PYTHONPATH"] = (
        src_pythonpath if not existing_pythonpath else f"{src_pythonpath}:{existing_pythonpath}"
    )
    return subprocess.run(
        [sys.executable, "-m", "swimlane_layout", *args],
        cwd=cwd,
        text=True,
        capture_output=True,
        check=False,
        env=env,
    )


@pytest.mark.smoke
def test_layout_json_round_trip(tmp_path: Path) -> None:
    items_path = tmp_path / "items.json"
    items_path.write_text(json.dumps(ITEMS), encoding="utf-8")

    result = _run_cli(tmp_path, "layout", str(items_path), "--json")

    assert result.returncode == 0, result.stderr
    payload = json.loads(result.stdout)
    assert [node["data"]["swimLane"] for node in payload["nodes"]] == ["Vendors", "Vendors"]
    assert payload["edges"][0]["data"]["id"] == "prereq-stall-to-upgrade"
    records = [json.loads(line) for line in result.stderr.splitlines() if line.startswith("{")]
    assert any(record["message"] == "layout_built" for record in records)


@pytest.mark.smoke
def test_yaml_validate_and_missing_file(tmp_path: Path) -> None:
    items_path = tmp_path / "items.yaml"
    items_path.write_text(
        "items:\n"
        "  - id: stall\n"
        "    name: Stall\n"
        "    category: Actions\n"
        "    sourceFile: vendors.csv\n",
        encoding="utf-8",
    )

    passed = _run_cli(tmp_path, "validate", str(items_path))
    missing = _run_cli(tmp_path, "validate", str(tmp_path / "absent.yaml"))

    assert passed.returncode == 0, passed.stderr
    assert "[PASS] Boundary Compliance" in passed.stdout
    assert missing.returncode == 3
    assert "item file not found" in missing.stderr


@pytest.mark.smoke
def test_usage_error_exits_with_config_error_code(tmp_path: Path) -> None:
    result = _run_cli(tmp_path, "report")

    assert result.returncode == 2
    assert "usage: swimlane report" in result.stderr
