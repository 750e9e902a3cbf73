"""
swimlane-layout — effective configuration for the CLI and ``LayoutSession``.

File: src/swimlane_layout/config/loader.py
Last updated: 2026-10-19

Purpose
- Resolve the config a build runs with. Layers, lowest first: built-in
  defaults, ``swimlane.toml``, the selected profile, ``SWIMLANE_*``
  variables, CLI overrides.

Functional requirements
- Only the keys declared in the ``layout``, ``recovery``, ``validation``,
  ``debug`` and ``observability`` sections can be set from the environment
  or the CLI. Each variable is ``SWIMLANE_<SECTION>_<KEY>`` and is coerced to
  the type of the key's default.
- The result always passes ``assert_valid_config``.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from swimlane_layout.config.schema import (
    apply_profile_overlay,
    assert_valid_config,
    default_config,
    merge_config,
)

DEFAULT_CONFIG_FILE: Final[str] = "swimlane.toml"
ENV_PREFIX: Final[str] = "SWIMLANE_"
OVERRIDABLE_SECTIONS: Final[tuple[str, ...]] = (
    "layout",
    "recovery",
    "validation",
    "debug",
    "observability",
)

_TRUE_WORDS: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})
_FALSE_WORDS: Final[frozenset[str]] = frozenset({"0", "false", "no", "off"})

Layer = dict[str, dict[str, object]]


class ConfigLoadError(ValueError):
    """A config file could not be read or an override has the wrong shape."""


def env_variable(section: str, key: str) -> str:
    """``("layout", "tier_width")`` -> ``SWIMLANE_LAYOUT_TIER_WIDTH``."""

    return f"{ENV_PREFIX}{section.upper()}_{key.upper()}"


def load_config(
    config_path: str | Path | None = None,
    *,
    profile: str | None = None,
    cli_overrides: Mapping[str, object] | None = None,
    environ: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Return the validated effective config.

    ``config_path`` must exist when given; otherwise ``./swimlane.toml`` is
    read if present. The profile is taken from ``profile``, else a
    ``"profile"`` entry in ``cli_overrides``, else ``SWIMLANE_PROFILE``.
    Other ``cli_overrides`` keys are dotted ``section.key`` paths.
    """

    env = os.environ if environ is None else environ
    overrides = dict(cli_overrides or {})
    selected = _pick_profile(
        profile, overrides.pop("profile", None), env.get(f"{ENV_PREFIX}PROFILE")
    )

    config = assert_valid_config(merge_config(default_config(), _read_config_file(config_path)))
    if selected is not None:
        config = apply_profile_overlay(config, selected)
    config = merge_config(config, _env_layer(env))
    config = merge_config(config, _cli_layer(overrides))
    return assert_valid_config(config, active_profile=selected)


def _pick_profile(*candidates: object) -> str | None:
    for candidate in candidates:
        if candidate is None:
            continue
        if not isinstance(candidate, str):
            raise ConfigLoadError(f"profile name must be a string, got {candidate!r}")
        return candidate.strip() or None
    return None


def _read_config_file(config_path: str | Path | None) -> dict[str, Any]:
    if config_path is None:
        path = Path.cwd() / DEFAULT_CONFIG_FILE
        if not path.is_file():
            return {}
    else:
        path = Path(config_path).expanduser()
        if not path.is_file():
            raise ConfigLoadError(f"config file not found: {path}")

    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigLoadError(f"invalid TOML in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigLoadError(f"cannot read config file {path}: {exc}") from exc


def _env_layer(environ: Mapping[str, str]) -> Layer:
    defaults: Mapping[str, object] = default_config()
    layer: Layer = {}
    for section in OVERRIDABLE_SECTIONS:
        keys = defaults[section]
        if not isinstance(keys, Mapping):
            continue
        for key, default in keys.items():
            name = env_variable(section, key)
            raw = environ.get(name)
            if raw is not None:
                layer.setdefault(section, {})[key] = _coerce(raw, default, name)
    return layer


def _coerce(raw: str, default: object, name: str) -> object:
    text = raw.strip()
    if isinstance(default, bool):
        word = text.lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
        raise ConfigLoadError(f"{name} must be true/false, yes/no, on/off or 1/0, got {raw!r}")
    if isinstance(default, int):
        try:
            return int(text)
        except ValueError as exc:
            raise ConfigLoadError(f"{name} must be an integer, got {raw!r}") from exc
    if isinstance(default, float):
        try:
            return float(text)
        except ValueError as exc:
            raise ConfigLoadError(f"{name} must be a number, got {raw!r}") from exc
    return text


def _cli_layer(overrides: Mapping[str, object]) -> Layer:
    layer: Layer = {}
    for dotted, value in sorted(overrides.items()):
        section, _, key = dotted.partition(".")
        if section not in OVERRIDABLE_SECTIONS or not key or "." in key:
            raise ConfigLoadError(
                f"override {dotted!r} must be <section>.<key> with section one of "
                f"{', '.join(OVERRIDABLE_SECTIONS)}"
            )
        layer.setdefault(section, {})[key] = value
    return layer


__all__ = [
    "ConfigLoadError",
    "DEFAULT_CONFIG_FILE",
    "ENV_PREFIX",
    "OVERRIDABLE_SECTIONS",
    "env_variable",
    "load_config",
]
