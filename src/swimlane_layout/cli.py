"""Command-line interface router for swimlane-layout."""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final

from swimlane_layout.config import (
    ConfigLoadError,
    ConfigValidationError,
    load_config,
)
from swimlane_layout.domain.models import Item
from swimlane_layout.ingest import ItemLoadError, load_items
from swimlane_layout.layout.builder import LayoutSession
from swimlane_layout.observability.logging import setup_logging
from swimlane_layout.validation.reporter import export_csv, export_json, render_text

REPORT_FORMATS: Final[tuple[str, ...]] = ("json", "csv", "text")

EXIT_VALIDATION_FAILED: Final[int] = 1
EXIT_CONFIG_ERROR: Final[int] = 2
EXIT_INPUT_ERROR: Final[int] = 3


@dataclass(frozen=True, slots=True)
class CLIError(RuntimeError):
    """Typed CLI failure with an explicit process exit code."""

    message: str
    exit_code: int = 1

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="swimlane",
        description=(
            "swimlane-layout: deterministic swimlane layout for prerequisite trees.\n\n"
            "Common workflows:\n"
            "  swimlane layout items.json          Positioned graph for a renderer\n"
            "  swimlane validate items.yaml        Run structural checks\n"
            "  swimlane report items.json --format csv\n"
            "  swimlane assignments items.json     Lane assignment statistics\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help="Path to swimlane TOML config (default: ./swimlane.toml if present).",
    )
    common.add_argument(
        "--profile",
        default=None,
        help="Optional config profile overlay name (debug, fast, compact).",
    )
    common.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        default=False,
        help="Log at DEBUG level.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # layout --------------------------------------------------------------
    layout_parser = subparsers.add_parser(
        "layout",
        parents=[common],
        help="Compute the positioned graph",
        description="Build the swimlane layout and print a summary or the renderer payload.",
    )
    layout_parser.add_argument("items_path", help="JSON or YAML item file")
    layout_parser.add_argument(
        "--material-edges",
        action="store_true",
        help="Also emit producer to consumer material edges",
    )
    layout_parser.add_argument("--output", default=None, help="Write the JSON payload here")
    layout_parser.add_argument("--json", action="store_true", help="Emit deterministic JSON output")
    layout_parser.set_defaults(handler=_cmd_layout)

    # validate ------------------------------------------------------------
    validate_parser = subparsers.add_parser(
        "validate",
        parents=[common],
        help="Run structural checks; exit 1 on failure",
    )
    validate_parser.add_argument("items_path", help="JSON or YAML item file")
    validate_parser.add_argument(
        "--automated",
        action="store_true",
        help="Also run the automated boundary and performance tests",
    )
    validate_parser.add_argument(
        "--json", action="store_true", help="Emit deterministic JSON output"
    )
    validate_parser.set_defaults(handler=_cmd_validate)

    # report --------------------------------------------------------------
    report_parser = subparsers.add_parser(
        "report",
        parents=[common],
        help="Export the validation report",
    )
    report_parser.add_argument("items_path", help="JSON or YAML item file")
    report_parser.add_argument("--format", choices=REPORT_FORMATS, default="json")
    report_parser.add_argument("--output", default=None, help="Write the report here")
    report_parser.set_defaults(handler=_cmd_report)

    # assignments ---------------------------------------------------------
    assignments_parser = subparsers.add_parser(
        "assignments",
        parents=[common],
        help="Show lane assignment statistics and reasons",
    )
    assignments_parser.add_argument("items_path", help="JSON or YAML item file")
    assignments_parser.add_argument(
        "--json", action="store_true", help="Emit deterministic JSON output"
    )
    assignments_parser.set_defaults(handler=_cmd_assignments)

    # monitor -------------------------------------------------------------
    monitor_parser = subparsers.add_parser(
        "monitor",
        parents=[common],
        help="Build once with the debug monitor and export the session",
    )
    monitor_parser.add_argument("items_path", help="JSON or YAML item file")
    monitor_parser.set_defaults(handler=_cmd_monitor)

    # config --------------------------------------------------------------
    config_parser = subparsers.add_parser(
        "config",
        parents=[common],
        help="Show effective configuration",
        description=(
            "Display the effective config after merging defaults, file, env, and profile."
        ),
    )
    config_parser.add_argument("--json", action="store_true", help="Emit JSON output")
    config_parser.set_defaults(handler=_cmd_config)

    return parser


def run_cli(argv: Sequence[str] | None = None) -> int:
    """Parse argv, route to a command handler, and return process exit code."""

    parser = build_parser()
    namespace = parser.parse_args(list(argv) if argv is not None else None)
    handler = getattr(namespace, "handler", None)
    if not callable(handler):
        parser.print_help(sys.stderr)
        return EXIT_CONFIG_ERROR

    try:
        result = handler(namespace)
    except CLIError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return exc.exit_code
    return int(result)


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


def _cmd_layout(args: argparse.Namespace) -> int:
    session = _session(args)
    graph = session.build(_items(args), include_material_edges=_flag(args, "material_edges"))
    payload = graph.to_dict()

    output = _optional_str(getattr(args, "output", None))
    if output is not None:
        _write_text(output, json.dumps(payload, sort_keys=True, indent=2, ensure_ascii=False))

    if _flag(args, "json"):
        _emit_json(payload)
        return 0

    print(
        f"Nodes: {len(graph.nodes)}  Edges: {len(graph.edges)}  "
        f"Lanes: {len(graph.lane_boundaries)}"
    )
    for lane, boundary in graph.lane_boundaries.items():
        count = sum(1 for node in graph.nodes if node.lane == lane)
        print(
            f"- {lane}: {count} nodes, y {boundary.start_y:.1f}..{boundary.end_y:.1f} "
            f"(height {boundary.height:.1f})"
        )
    print(graph.error_recovery_report.summary)
    if output is not None:
        print(f"Payload written to {output}")
    return 0


def _cmd_validate(args: argparse.Namespace) -> int:
    session = _session(args)
    items = _items(args)
    graph = session.build(items)
    results = list(graph.validation_results)
    if _flag(args, "automated"):
        results.extend(session.run_automated_tests(items))
    passed = all(result.passed for result in results)

    if _flag(args, "json"):
        _emit_json(
            {
                "command": "validate",
                "passed": passed,
                "results": [result.to_dict() for result in results],
                "recommendations": list(graph.comprehensive_report.recommendations),
            }
        )
    else:
        for result in results:
            status = "PASS" if result.passed else "FAIL"
            print(f"[{status}] {result.test_name} ({result.duration_ms:.1f}ms)")
            if _flag(args, "verbose") or not result.passed:
                for issue in result.issues:
                    print(f"    {issue.severity.value}: {issue.message}")
        if not results:
            print("No checks ran (validation.comprehensive is disabled).")
        for line in graph.comprehensive_report.recommendations:
            print(f"* {line}")
    return 0 if passed else EXIT_VALIDATION_FAILED


def _cmd_report(args: argparse.Namespace) -> int:
    graph = _session(args).build(_items(args))
    fmt = str(getattr(args, "format", "json"))
    report = graph.comprehensive_report
    if fmt == "csv":
        text = export_csv(report)
    elif fmt == "text":
        text = render_text(report)
    else:
        text = export_json(report)

    output = _optional_str(getattr(args, "output", None))
    if output is not None:
        _write_text(output, text)
        return 0
    sys.stdout.write(text if text.endswith("\n") else text + "\n")
    return 0


def _cmd_assignments(args: argparse.Namespace) -> int:
    session = _session(args)
    if session.monitor is None:
        raise CLIError("debug monitor is not available", exit_code=EXIT_CONFIG_ERROR)
    stats = session.assignment_statistics(_items(args))

    if _flag(args, "json"):
        _emit_json({"command": "assignments", "statistics": stats.to_dict()})
        return 0

    print(f"Items: {stats.total_items}")
    for lane, count in stats.assignments_by_lane.items():
        print(f"- {lane}: {count}")
    if stats.unassigned_items:
        print(f"Fell back to default lane: {', '.join(stats.unassigned_items)}")
    if _flag(args, "verbose"):
        for item_id, reason in stats.assignment_reasons.items():
            print(f"  {item_id}: {reason}")
    return 0


def _cmd_monitor(args: argparse.Namespace) -> int:
    session = _session(args)
    if session.monitor is None:
        raise CLIError("debug monitor is not available", exit_code=EXIT_CONFIG_ERROR)
    session.monitor.start_session()
    session.build(_items(args))
    sys.stdout.write(session.monitor.export_monitoring_data() + "\n")
    return 0


def _cmd_config(args: argparse.Namespace) -> int:
    config = _load_effective_config(args)
    profile = _optional_str(getattr(args, "profile", None))
    payload: dict[str, object] = {
        "command": "config",
        "active_profile": profile,
        "config": config,
    }
    if _flag(args, "json"):
        _emit_json(payload)
        return 0
    print(f"Active profile: {profile or '(default)'}")
    print(json.dumps(config, indent=2, sort_keys=True, ensure_ascii=False))
    return 0


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _emit_json(payload: Mapping[str, object]) -> None:
    """Emit a JSON payload to stdout with deterministic formatting."""

    print(json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False))


def _load_effective_config(args: argparse.Namespace) -> dict[str, Any]:
    config_path = _optional_str(getattr(args, "config_path", None))
    profile = _optional_str(getattr(args, "profile", None))
    overrides: dict[str, object] = {}
    if _flag(args, "verbose"):
        overrides["observability.log_level"] = "DEBUG"

    try:
        return load_config(config_path, profile=profile, cli_overrides=overrides)
    except (ConfigLoadError, ConfigValidationError) as exc:
        raise CLIError(str(exc), exit_code=EXIT_CONFIG_ERROR) from exc


def _session(args: argparse.Namespace) -> LayoutSession:
    config = _load_effective_config(args)
    observability = config.get("observability")
    setup_logging(observability if isinstance(observability, Mapping) else None)
    return LayoutSession.from_config(config)


def _items(args: argparse.Namespace) -> tuple[Item, ...]:
    path = _optional_str(getattr(args, "items_path", None))
    if path is None:
        raise CLIError("an item file is required", exit_code=EXIT_INPUT_ERROR)
    try:
        return load_items(path)
    except ItemLoadError as exc:
        raise CLIError(str(exc), exit_code=EXIT_INPUT_ERROR) from exc


def _write_text(path: str, text: str) -> None:
    target = Path(path).expanduser()
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text if text.endswith("\n") else text + "\n", encoding="utf-8")
    except OSError as exc:
        raise CLIError(f"unable to write {target}: {exc}", exit_code=EXIT_INPUT_ERROR) from exc


def _flag(args: argparse.Namespace, name: str) -> bool:
    return bool(getattr(args, name, False))


def _optional_str(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped or None


__all__ = ["CLIError", "build_parser", "run_cli"]
