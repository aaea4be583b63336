"""Layout settings loaded from `bowtie.toml`."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

SETTINGS_FILENAME = "bowtie.toml"


@dataclass(frozen=True)
class LayoutSettings:
    """Geometry constants, in canvas units."""

    component_height: float = 50.0
    component_margin: float = 20.0  # vertical gap between node boxes
    component_padding: float = 10.0  # gap between canvas edge and node boxes
    barrier_width: float = 25.0
    barrier_gap: float = 10.0  # gap between consecutive barriers on an edge
    edge_padding: float = 150.0  # free run at each end of an edge
    char_width: float = 15.0
    canvas_margin: float = 75.0  # above and below the tallest column


def _coerce_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def settings_from_dict(data: dict[str, Any]) -> LayoutSettings:
    """Build settings from a parsed `[layout]` table."""
    known = {f.name for f in fields(LayoutSettings)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown layout setting(s): {', '.join(unknown)}")

    values: dict[str, float] = {}
    for key, raw in data.items():
        if isinstance(raw, bool) or not isinstance(raw, (int, float)):
            raise ValueError(f"{key} must be a number")
        if raw <= 0:
            raise ValueError(f"{key} must be positive")
        values[key] = float(raw)

    return replace(LayoutSettings(), **values)


def load_settings(path: Path) -> LayoutSettings:
    """
    Load layout settings from TOML.

    Only the `[layout]` table is read; missing keys keep their defaults.
    """
    import tomllib

    data = tomllib.loads(path.read_text(encoding="utf-8"))
    return settings_from_dict(_coerce_dict(data.get("layout")))


def find_settings(start: Path) -> Path | None:
    """Find a bowtie.toml by walking up from `start`."""
    cur = start.resolve()
    if cur.is_file():
        cur = cur.parent
    for p in (cur, *cur.parents):
        candidate = p / SETTINGS_FILENAME
        if candidate.is_file():
            return candidate
    return None
