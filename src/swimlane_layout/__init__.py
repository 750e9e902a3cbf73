"""
swimlane-layout: deterministic swimlane layout for game-item prerequisite trees.

Purpose
- Package root. Defines public package-level metadata and import boundaries.

Import boundary rules
- Nothing heavy is imported here; ``swimlane_layout.layout.builder`` pulls in
  the validation and observability planes, so callers import it explicitly.
- No side effects at import time (no config loading, no logging init).
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
