"""Item-file reader used by the CLI.

Accepts JSON or YAML documents holding either a list of item records or a
mapping with an ``items`` list. Records are converted with
``Item.from_mapping``, which tolerates missing or malformed fields; only
structural problems with the document itself raise ``ItemLoadError``.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Final

import yaml

from swimlane_layout.domain.models import Item

YAML_SUFFIXES: Final[frozenset[str]] = frozenset({".yaml", ".yml"})
JSON_SUFFIXES: Final[frozenset[str]] = frozenset({".json"})


class ItemLoadError(ValueError):
    """Raised when an item file cannot be read or has the wrong shape."""


def load_items(path: str | Path) -> tuple[Item, ...]:
    source = Path(path).expanduser()
    suffix = source.suffix.lower()
    if suffix not in YAML_SUFFIXES | JSON_SUFFIXES:
        raise ItemLoadError(f"unsupported item file type {suffix or '(none)'!r}: {source}")

    try:
        text = source.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ItemLoadError(f"item file not found: {source}") from exc
    except OSError as exc:
        raise ItemLoadError(f"unable to read item file {source}: {exc}") from exc

    return parse_items(text, fmt="yaml" if suffix in YAML_SUFFIXES else "json", origin=str(source))


def parse_items(text: str, *, fmt: str = "json", origin: str = "<string>") -> tuple[Item, ...]:
    try:
        payload = yaml.safe_load(text) if fmt == "yaml" else json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ItemLoadError(f"invalid {fmt.upper()} in {origin}: {exc}") from exc

    if payload is None:
        return ()
    if isinstance(payload, Mapping):
        payload = payload.get("items")
    if not isinstance(payload, list):
        raise ItemLoadError(f"{origin}: expected a list of items or a mapping with 'items'")

    items: list[Item] = []
    for index, record in enumerate(payload):
        if not isinstance(record, Mapping):
            raise ItemLoadError(f"{origin}: items[{index}] must be a mapping")
        items.append(Item.from_mapping(record))
    return tuple(items)


__all__ = ["ItemLoadError", "load_items", "parse_items"]
