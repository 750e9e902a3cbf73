"""
swimlane-layout — configuration schema and validation.

File: src/swimlane_layout/config/schema.py
Last updated: 2026-10-19

Purpose
- Define authoritative configuration defaults and strict validation rules.

What should be included in this file
- Schema versioning and migration guidance.
- Validation rules for required fields, types, enums, and numeric constraints.
- Cross-field rules (lane height cap vs. minimum, ratio ordering, severity ordering).
- Profile overlay validation and deterministic deep-merge helpers.

Functional requirements
- Validate config payloads and return structured errors (field path + message).
- Support built-in profile overlays: debug, fast, compact.

Non-functional requirements
- Keep rules deterministic and easy to audit.
"""

from __future__ import annotations

import copy
import math
import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Final, Literal, TypedDict

from swimlane_layout.constants import (
    BOUNDARY_TOLERANCE,
    CONFIG_SCHEMA_VERSION,
    CRITICAL_VIOLATION_PX,
    LANE_BUFFER,
    LANE_PADDING,
    LANE_START_X,
    MIN_LANE_HEIGHT,
    MIN_NODE_SPACING,
    MINOR_VIOLATION_PX,
    MODERATE_OVERCROWDING_RATIO,
    NODE_HEIGHT,
    NODE_WIDTH,
    PERFORMANCE_THRESHOLD_MS,
    SEVERE_OVERCROWDING_RATIO,
    TIER_ALIGNMENT_TOLERANCE,
    TIER_WIDTH,
)

ConfigSchemaVersion: Final[int] = CONFIG_SCHEMA_VERSION
BUILTIN_PROFILE_NAMES: Final[tuple[str, ...]] = ("debug", "fast", "compact")
DEBUG_LOG_LEVELS: Final[tuple[str, ...]] = ("minimal", "standard", "verbose", "debug")

_PROFILE_NAME_PATTERN = re.compile(r"^[a-z][a-z0-9_-]*$")


class MetaConfig(TypedDict):
    schema_version: int


class LayoutConfig(TypedDict):
    node_width: int
    node_height: int
    tier_width: int
    lane_start_x: int
    lane_padding: int
    lane_buffer: int
    min_lane_height: int
    min_node_spacing: int
    max_lane_height: int
    boundary_tolerance: float
    tier_alignment_tolerance: float


class RecoveryConfig(TypedDict):
    moderate_ratio: float
    severe_ratio: float
    allow_lane_expansion: bool


class ValidationConfig(TypedDict):
    comprehensive: bool
    detailed_logging: bool
    performance_threshold_ms: float
    minor_violation_px: float
    critical_violation_px: float


class DebugConfigSection(TypedDict):
    enable_console_logging: bool
    log_level: Literal["minimal", "standard", "verbose", "debug"]
    enable_assignment_stats: bool
    enable_position_monitoring: bool
    enable_visual_boundaries: bool


class ObservabilityConfig(TypedDict):
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"]
    log_format: Literal["json", "text"]
    log_path: str


class ProfileOverlay(TypedDict, total=False):
    layout: dict[str, object]
    recovery: dict[str, object]
    validation: dict[str, object]
    debug: dict[str, object]
    observability: dict[str, object]


class SwimlaneConfig(TypedDict):
    meta: MetaConfig
    layout: LayoutConfig
    recovery: RecoveryConfig
    validation: ValidationConfig
    debug: DebugConfigSection
    observability: ObservabilityConfig
    profiles: dict[str, ProfileOverlay]


DEFAULT_CONFIG: Final[SwimlaneConfig] = {
    "meta": {
        "schema_version": ConfigSchemaVersion,
    },
    "layout": {
        "node_width": NODE_WIDTH,
        "node_height": NODE_HEIGHT,
        "tier_width": TIER_WIDTH,
        "lane_start_x": LANE_START_X,
        "lane_padding": LANE_PADDING,
        "lane_buffer": LANE_BUFFER,
        "min_lane_height": MIN_LANE_HEIGHT,
        "min_node_spacing": MIN_NODE_SPACING,
        "max_lane_height": 0,
        "boundary_tolerance": BOUNDARY_TOLERANCE,
        "tier_alignment_tolerance": TIER_ALIGNMENT_TOLERANCE,
    },
    "recovery": {
        "moderate_ratio": MODERATE_OVERCROWDING_RATIO,
        "severe_ratio": SEVERE_OVERCROWDING_RATIO,
        "allow_lane_expansion": True,
    },
    "validation": {
        "comprehensive": True,
        "detailed_logging": False,
        "performance_threshold_ms": PERFORMANCE_THRESHOLD_MS,
        "minor_violation_px": MINOR_VIOLATION_PX,
        "critical_violation_px": CRITICAL_VIOLATION_PX,
    },
    "debug": {
        "enable_console_logging": True,
        "log_level": "standard",
        "enable_assignment_stats": True,
        "enable_position_monitoring": False,
        "enable_visual_boundaries": False,
    },
    "observability": {
        "log_level": "INFO",
        "log_format": "json",
        "log_path": "",
    },
    "profiles": {
        "debug": {
            "validation": {"detailed_logging": True},
            "debug": {
                "log_level": "debug",
                "enable_position_monitoring": True,
                "enable_visual_boundaries": True,
            },
            "observability": {"log_level": "DEBUG"},
        },
        "fast": {
            "validation": {"comprehensive": False, "detailed_logging": False},
            "debug": {"enable_console_logging": False, "enable_assignment_stats": False},
        },
        "compact": {
            "layout": {"lane_padding": 10, "lane_buffer": 10, "min_lane_height": 60},
        },
    },
}


@dataclass(frozen=True, slots=True)
class ConfigValidationIssue:
    """Single structured validation failure."""

    path: str
    message: str


@dataclass(frozen=True, slots=True)
class ConfigValidationResult:
    """Validation result with normalized config when no issues were found."""

    config: dict[str, Any] | None
    issues: tuple[ConfigValidationIssue, ...]

    @property
    def is_valid(self) -> bool:
        return self.config is not None and not self.issues


class ConfigValidationError(ValueError):
    """Raised when strict config validation fails."""

    def __init__(self, issues: Sequence[ConfigValidationIssue]) -> None:
        self.issues = tuple(issues)
        if not self.issues:
            rendered = "unknown validation failure"
        else:
            rendered = "\n".join(f"- {item.path}: {item.message}" for item in self.issues)
        super().__init__(f"invalid config:\n{rendered}")


class _IssueCollector:
    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: list[ConfigValidationIssue] = []

    def add(self, path: str, message: str) -> None:
        self._items.append(ConfigValidationIssue(path=path, message=message))

    def items(self) -> tuple[ConfigValidationIssue, ...]:
        return tuple(self._items)

    @property
    def has_issues(self) -> bool:
        return bool(self._items)


_SectionValidator = Callable[[Mapping[str, object], str, _IssueCollector, bool], dict[str, Any]]


def default_config() -> SwimlaneConfig:
    """Return a deep copy of deterministic built-in defaults."""

    return copy.deepcopy(DEFAULT_CONFIG)


def migration_guidance(found_version: int) -> str:
    """Return deterministic migration guidance for schema version mismatch."""

    if found_version < ConfigSchemaVersion:
        return (
            f"schema version {found_version} is older than supported {ConfigSchemaVersion}; "
            "upgrade swimlane.toml to the current schema"
        )
    if found_version > ConfigSchemaVersion:
        return (
            f"schema version {found_version} is newer than supported {ConfigSchemaVersion}; "
            "upgrade the swimlane-layout package"
        )
    return "schema version is current"


def merge_config(base: Mapping[str, object], overlay: Mapping[str, object]) -> dict[str, Any]:
    """Deterministically deep-merge ``overlay`` onto ``base``."""

    merged = _deep_copy_mapping(base)
    _merge_into(merged, overlay)
    return merged


def apply_profile_overlay(config: Mapping[str, object], profile: str | None) -> dict[str, Any]:
    """Apply a named profile overlay and re-validate the resulting config."""

    materialized = _deep_copy_mapping(config)
    if profile is None:
        return materialized

    selected = profile.strip()
    if not selected:
        return materialized

    profiles_raw = materialized.get("profiles")
    if not isinstance(profiles_raw, Mapping):
        raise ConfigValidationError(
            (ConfigValidationIssue("profiles", "profiles section is required"),)
        )

    overlay_raw = profiles_raw.get(selected)
    if overlay_raw is None:
        raise ConfigValidationError(
            (ConfigValidationIssue("profiles", f"profile {selected!r} is not defined"),)
        )
    if not isinstance(overlay_raw, Mapping):
        raise ConfigValidationError(
            (ConfigValidationIssue(f"profiles.{selected}", "profile overlay must be an object"),)
        )

    merged = merge_config(materialized, overlay_raw)
    return assert_valid_config(merged, active_profile=selected)


def validate_config(
    config: Mapping[str, object] | object,
    *,
    active_profile: str | None = None,
) -> ConfigValidationResult:
    """Validate config and return structured issues with deterministic paths."""

    issues = _IssueCollector()
    root = _as_object(config, "<root>", issues)
    if root is None:
        return ConfigValidationResult(config=None, issues=issues.items())

    normalized = _validate_root(root, "", issues, partial=False)

    selected_profile = active_profile.strip() if isinstance(active_profile, str) else None
    if selected_profile:
        profiles = normalized.get("profiles")
        if not isinstance(profiles, Mapping) or selected_profile not in profiles:
            issues.add("profiles", f"profile {selected_profile!r} is not defined")
        else:
            effective = merge_config(normalized, profiles[selected_profile])
            _validate_root(effective, "", issues, partial=False)

    if issues.has_issues:
        return ConfigValidationResult(config=None, issues=issues.items())
    return ConfigValidationResult(config=normalized, issues=())


def assert_valid_config(
    config: Mapping[str, object] | object,
    *,
    active_profile: str | None = None,
) -> dict[str, Any]:
    """Validate config and raise ``ConfigValidationError`` on failure."""

    result = validate_config(config, active_profile=active_profile)
    if result.config is None:
        raise ConfigValidationError(result.issues)
    return result.config


def _validate_root(
    payload: Mapping[str, object],
    path: str,
    issues: _IssueCollector,
    *,
    partial: bool,
) -> dict[str, Any]:
    allowed = {*_SECTION_VALIDATORS, "profiles"}
    _reject_unknown_keys(payload, allowed, path, issues)
    if not partial:
        _require_keys(payload, set(_SECTION_VALIDATORS), path, issues)

    out: dict[str, Any] = {}
    for key, validator in _SECTION_VALIDATORS.items():
        _section(
            payload,
            key=key,
            path=path,
            issues=issues,
            validator=validator,
            out=out,
            partial=partial,
        )

    profiles_raw = payload.get("profiles")
    if profiles_raw is not None:
        profiles_path = _join(path, "profiles")
        profiles_obj = _as_object(profiles_raw, profiles_path, issues)
        if profiles_obj is not None:
            out["profiles"] = _validate_profiles(profiles_obj, profiles_path, issues)

    if not partial:
        _validate_cross_fields(out, issues)
    return out


def _section(
    payload: Mapping[str, object],
    *,
    key: str,
    path: str,
    issues: _IssueCollector,
    validator: _SectionValidator,
    out: dict[str, Any],
    partial: bool,
) -> None:
    raw = payload.get(key)
    if raw is None:
        return
    section_path = _join(path, key)
    section_obj = _as_object(raw, section_path, issues)
    if section_obj is None:
        return
    out[key] = validator(section_obj, section_path, issues, partial)


def _validate_meta(
    payload: Mapping[str, object],
    path: str,
    issues: _IssueCollector,
    partial: bool,
) -> dict[str, Any]:
    allowed = {"schema_version"}
    _reject_unknown_keys(payload, allowed, path, issues)
    if not partial:
        _require_keys(payload, allowed, path, issues)

    out: dict[str, Any] = {}
    if "schema_version" in payload:
        parsed = _as_int(
            payload["schema_version"], _join(path, "schema_version"), issues, minimum=1
        )
        if parsed is not None:
            out["schema_version"] = parsed
            if parsed != ConfigSchemaVersion:
                issues.add(_join(path, "schema_version"), migration_guidance(parsed))
    return out


_LAYOUT_INT_MINIMUMS: Final[dict[str, int]] = {
    "node_width": 1,
    "node_height": 1,
    "tier_width": 1,
    "lane_start_x": 0,
    "lane_padding": 0,
    "lane_buffer": 0,
    "min_lane_height": 1,
    "min_node_spacing": 1,
    "max_lane_height": 0,
}
_LAYOUT_FLOAT_MINIMUMS: Final[dict[str, float]] = {
    "boundary_tolerance": 0.0,
    "tier_alignment_tolerance": 0.0,
}


def _validate_layout(
    payload: Mapping[str, object],
    path: str,
    issues: _IssueCollector,
    partial: bool,
) -> dict[str, Any]:
    allowed = {*_LAYOUT_INT_MINIMUMS, *_LAYOUT_FLOAT_MINIMUMS}
    _reject_unknown_keys(payload, allowed, path, issues)
    if not partial:
        _require_keys(payload, allowed, path, issues)

    out: dict[str, Any] = {}
    for key, minimum in _LAYOUT_INT_MINIMUMS.items():
        if key in payload:
            parsed_int = _as_int(payload[key], _join(path, key), issues, minimum=minimum)
            if parsed_int is not None:
                out[key] = parsed_int
    for key, float_minimum in _LAYOUT_FLOAT_MINIMUMS.items():
        if key in payload:
            parsed_float = _as_float(payload[key], _join(path, key), issues, minimum=float_minimum)
            if parsed_float is not None:
                out[key] = parsed_float
    return out


def _validate_recovery(
    payload: Mapping[str, object],
    path: str,
    issues: _IssueCollector,
    partial: bool,
) -> dict[str, Any]:
    allowed = {"moderate_ratio", "severe_ratio", "allow_lane_expansion"}
    _reject_unknown_keys(payload, allowed, path, issues)
    if not partial:
        _require_keys(payload, allowed, path, issues)

    out: dict[str, Any] = {}
    for key in ("moderate_ratio", "severe_ratio"):
        if key in payload:
            parsed = _as_float(payload[key], _join(path, key), issues, minimum=1.0)
            if parsed is not None:
                out[key] = parsed
    if "allow_lane_expansion" in payload:
        parsed_bool = _as_bool(
            payload["allow_lane_expansion"], _join(path, "allow_lane_expansion"), issues
        )
        if parsed_bool is not None:
            out["allow_lane_expansion"] = parsed_bool
    return out


def _validate_validation(
    payload: Mapping[str, object],
    path: str,
    issues: _IssueCollector,
    partial: bool,
) -> dict[str, Any]:
    bool_keys = ("comprehensive", "detailed_logging")
    float_keys = ("performance_threshold_ms", "minor_violation_px", "critical_violation_px")
    allowed = {*bool_keys, *float_keys}
    _reject_unknown_keys(payload, allowed, path, issues)
    if not partial:
        _require_keys(payload, allowed, path, issues)

    out: dict[str, Any] = {}
    for key in bool_keys:
        if key in payload:
            parsed_bool = _as_bool(payload[key], _join(path, key), issues)
            if parsed_bool is not None:
                out[key] = parsed_bool
    for key in float_keys:
        if key in payload:
            parsed = _as_float(payload[key], _join(path, key), issues, minimum=0.0)
            if parsed is not None:
                out[key] = parsed
    return out


def _validate_debug(
    payload: Mapping[str, object],
    path: str,
    issues: _IssueCollector,
    partial: bool,
) -> dict[str, Any]:
    bool_keys = (
        "enable_console_logging",
        "enable_assignment_stats",
        "enable_position_monitoring",
        "enable_visual_boundaries",
    )
    allowed = {*bool_keys, "log_level"}
    _reject_unknown_keys(payload, allowed, path, issues)
    if not partial:
        _require_keys(payload, allowed, path, issues)

    out: dict[str, Any] = {}
    if "log_level" in payload:
        parsed_level = _as_enum(
            payload["log_level"],
            _join(path, "log_level"),
            issues,
            allowed_values=DEBUG_LOG_LEVELS,
        )
        if parsed_level is not None:
            out["log_level"] = parsed_level
    for key in bool_keys:
        if key in payload:
            parsed_bool = _as_bool(payload[key], _join(path, key), issues)
            if parsed_bool is not None:
                out[key] = parsed_bool
    return out


def _validate_observability(
    payload: Mapping[str, object],
    path: str,
    issues: _IssueCollector,
    partial: bool,
) -> dict[str, Any]:
    allowed = {"log_level", "log_format", "log_path"}
    _reject_unknown_keys(payload, allowed, path, issues)
    if not partial:
        _require_keys(payload, allowed, path, issues)

    out: dict[str, Any] = {}

    if "log_level" in payload:
        parsed_log_level = _as_enum(
            payload["log_level"],
            _join(path, "log_level"),
            issues,
            allowed_values=("DEBUG", "INFO", "WARNING", "ERROR"),
        )
        if parsed_log_level is not None:
            out["log_level"] = parsed_log_level

    if "log_format" in payload:
        parsed_log_format = _as_enum(
            payload["log_format"],
            _join(path, "log_format"),
            issues,
            allowed_values=("json", "text"),
        )
        if parsed_log_format is not None:
            out["log_format"] = parsed_log_format

    if "log_path" in payload:
        parsed_log_path = _as_path_text(payload["log_path"], _join(path, "log_path"), issues)
        if parsed_log_path is not None:
            out["log_path"] = parsed_log_path

    return out


_SECTION_VALIDATORS: Final[dict[str, _SectionValidator]] = {
    "meta": _validate_meta,
    "layout": _validate_layout,
    "recovery": _validate_recovery,
    "validation": _validate_validation,
    "debug": _validate_debug,
    "observability": _validate_observability,
}
_OVERLAY_SECTIONS: Final[tuple[str, ...]] = (
    "debug",
    "layout",
    "observability",
    "recovery",
    "validation",
)


def _validate_profiles(
    payload: Mapping[str, object],
    path: str,
    issues: _IssueCollector,
) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for profile_name in sorted(payload):
        profile_path = _join(path, profile_name)
        raw = payload[profile_name]
        if not _PROFILE_NAME_PATTERN.fullmatch(profile_name):
            issues.add(profile_path, "profile name must match ^[a-z][a-z0-9_-]*$")
            continue
        profile_obj = _as_object(raw, profile_path, issues)
        if profile_obj is None:
            continue
        out[profile_name] = _validate_profile_overlay(profile_obj, profile_path, issues)
    return out


def _validate_profile_overlay(
    payload: Mapping[str, object],
    path: str,
    issues: _IssueCollector,
) -> dict[str, Any]:
    _reject_unknown_keys(payload, set(_OVERLAY_SECTIONS), path, issues)

    out: dict[str, Any] = {}
    for section in _OVERLAY_SECTIONS:
        _section(
            payload,
            key=section,
            path=path,
            issues=issues,
            validator=_SECTION_VALIDATORS[section],
            out=out,
            partial=True,
        )
    return out


def _validate_cross_fields(config: Mapping[str, Any], issues: _IssueCollector) -> None:
    layout = config.get("layout")
    if isinstance(layout, Mapping):
        cap = layout.get("max_lane_height")
        floor = layout.get("min_lane_height")
        if isinstance(cap, int) and isinstance(floor, int) and 0 < cap < floor:
            issues.add(
                "layout.max_lane_height",
                f"must be 0 (uncapped) or >= layout.min_lane_height ({floor})",
            )

    recovery = config.get("recovery")
    if isinstance(recovery, Mapping):
        moderate = recovery.get("moderate_ratio")
        severe = recovery.get("severe_ratio")
        if isinstance(moderate, float) and isinstance(severe, float) and severe < moderate:
            issues.add("recovery.severe_ratio", "must be >= recovery.moderate_ratio")

    validation = config.get("validation")
    if isinstance(validation, Mapping):
        minor = validation.get("minor_violation_px")
        critical = validation.get("critical_violation_px")
        if isinstance(minor, float) and isinstance(critical, float) and critical < minor:
            issues.add("validation.critical_violation_px", "must be >= validation.minor_violation_px")


def _as_object(value: object, path: str, issues: _IssueCollector) -> dict[str, object] | None:
    if not isinstance(value, Mapping):
        issues.add(path, f"expected object, got {type(value).__name__}")
        return None
    out: dict[str, object] = {}
    for key, item in value.items():
        if not isinstance(key, str):
            issues.add(path, f"object key must be string, got {type(key).__name__}")
            continue
        out[key] = item
    return out


def _as_str(value: object, path: str, issues: _IssueCollector) -> str | None:
    if not isinstance(value, str):
        issues.add(path, f"expected string, got {type(value).__name__}")
        return None
    parsed = value.strip()
    if not parsed:
        issues.add(path, "must not be empty")
        return None
    return parsed


def _as_path_text(value: object, path: str, issues: _IssueCollector) -> str | None:
    # Empty means "no file sink".
    if isinstance(value, str) and not value.strip():
        return ""
    parsed = _as_str(value, path, issues)
    if parsed is None:
        return None
    if "\x00" in parsed:
        issues.add(path, "must not contain NUL bytes")
        return None
    return parsed


def _as_bool(value: object, path: str, issues: _IssueCollector) -> bool | None:
    if isinstance(value, bool):
        return value
    issues.add(path, f"expected boolean, got {type(value).__name__}")
    return None


def _as_int(
    value: object,
    path: str,
    issues: _IssueCollector,
    *,
    minimum: int | None = None,
) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int):
        issues.add(path, f"expected integer, got {type(value).__name__}")
        return None
    if minimum is not None and value < minimum:
        issues.add(path, f"must be >= {minimum}")
        return None
    return value


def _as_float(
    value: object,
    path: str,
    issues: _IssueCollector,
    *,
    minimum: float | None = None,
) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        issues.add(path, f"expected number, got {type(value).__name__}")
        return None
    parsed = float(value)
    if not math.isfinite(parsed):
        issues.add(path, "must be finite")
        return None
    if minimum is not None and parsed < minimum:
        issues.add(path, f"must be >= {minimum}")
        return None
    return parsed


def _as_enum(
    value: object,
    path: str,
    issues: _IssueCollector,
    *,
    allowed_values: tuple[str, ...],
) -> str | None:
    parsed = _as_str(value, path, issues)
    if parsed is None:
        return None
    if parsed not in allowed_values:
        expected = ", ".join(sorted(allowed_values))
        issues.add(path, f"invalid value {parsed!r}; expected one of: {expected}")
        return None
    return parsed


def _reject_unknown_keys(
    payload: Mapping[str, object],
    allowed: set[str],
    path: str,
    issues: _IssueCollector,
) -> None:
    for key in sorted(payload):
        if key not in allowed:
            issues.add(_join(path, key), "unknown field")


def _require_keys(
    payload: Mapping[str, object],
    required: set[str],
    path: str,
    issues: _IssueCollector,
) -> None:
    for key in sorted(required):
        if key not in payload:
            issues.add(_join(path, key), "missing required field")


def _join(path: str, key: str) -> str:
    if not path:
        return key
    return f"{path}.{key}"


def _merge_into(target: dict[str, Any], overlay: Mapping[str, object]) -> None:
    for key in sorted(overlay):
        value = overlay[key]
        if isinstance(value, Mapping):
            existing = target.get(key)
            if isinstance(existing, dict):
                _merge_into(existing, value)
            elif isinstance(existing, Mapping):
                nested = _deep_copy_mapping(existing)
                _merge_into(nested, value)
                target[key] = nested
            else:
                nested_new: dict[str, Any] = {}
                _merge_into(nested_new, value)
                target[key] = nested_new
        else:
            target[key] = _deep_copy_value(value)


def _deep_copy_mapping(value: Mapping[str, object]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key in sorted(value):
        out[key] = _deep_copy_value(value[key])
    return out


def _deep_copy_value(value: object) -> Any:
    if isinstance(value, Mapping):
        out: dict[str, Any] = {}
        for key, item in value.items():
            if isinstance(key, str):
                out[key] = _deep_copy_value(item)
        return out
    if isinstance(value, list):
        return [_deep_copy_value(item) for item in value]
    return copy.deepcopy(value)


__all__ = [
    "BUILTIN_PROFILE_NAMES",
    "ConfigSchemaVersion",
    "ConfigValidationError",
    "ConfigValidationIssue",
    "ConfigValidationResult",
    "DEBUG_LOG_LEVELS",
    "DEFAULT_CONFIG",
    "ProfileOverlay",
    "SwimlaneConfig",
    "apply_profile_overlay",
    "assert_valid_config",
    "default_config",
    "merge_config",
    "migration_guidance",
    "validate_config",
]
