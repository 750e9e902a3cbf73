"""
swimlane-layout config package public API.

File: src/swimlane_layout/config/__init__.py
Last updated: 2026-10-19

Purpose
- Export config loading/validation entrypoints and public error types.

Functional requirements
- Support loading from ``swimlane.toml`` + ``SWIMLANE_`` env overrides.
- Fail fast with clear structured validation/load errors.
"""

from swimlane_layout.config.loader import (
    DEFAULT_CONFIG_FILE,
    ENV_PREFIX,
    OVERRIDABLE_SECTIONS,
    ConfigLoadError,
    env_variable,
    load_config,
)
from swimlane_layout.config.schema import (
    BUILTIN_PROFILE_NAMES,
    DEFAULT_CONFIG,
    ConfigSchemaVersion,
    ConfigValidationError,
    ConfigValidationIssue,
    ConfigValidationResult,
    ProfileOverlay,
    SwimlaneConfig,
    apply_profile_overlay,
    assert_valid_config,
    default_config,
    merge_config,
    migration_guidance,
    validate_config,
)

__all__ = [
    "BUILTIN_PROFILE_NAMES",
    "ConfigLoadError",
    "ConfigSchemaVersion",
    "ConfigValidationError",
    "ConfigValidationIssue",
    "ConfigValidationResult",
    "DEFAULT_CONFIG",
    "DEFAULT_CONFIG_FILE",
    "ENV_PREFIX",
    "OVERRIDABLE_SECTIONS",
    "ProfileOverlay",
    "SwimlaneConfig",
    "apply_profile_overlay",
    "assert_valid_config",
    "default_config",
    "env_variable",
    "load_config",
    "merge_config",
    "migration_guidance",
    "validate_config",
]
