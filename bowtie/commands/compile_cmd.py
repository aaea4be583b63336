"""Compile command - emit the laid-out model of a bowtie document."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table

from ..config import LayoutSettings, find_settings, load_settings
from ..export import geometry_to_dict, layout_to_dict
from ..geometry import compute_geometry
from ..layout import BowtieLayout, barrier_label
from ..pipeline import compile_bowtie
from .check_cmd import load_document, print_diagnostics


def resolve_settings(path: Path, config: Path | None) -> LayoutSettings:
    """Explicit --config wins, then the nearest bowtie.toml, then defaults."""
    settings_path = config or find_settings(path.parent)
    if settings_path is None:
        return LayoutSettings()
    return load_settings(settings_path)


def run_compile(
    path: Path,
    *,
    fmt: str = "md",
    geometry: bool = False,
    config: Path | None = None,
    out: Path | None = None,
) -> int:
    """Compile a document and write its layout as markdown, JSON or a rich table.

    Returns:
        Exit code (0 = compiled, 1 = compile errors or unreadable document, 2 = bad settings)
    """
    console = Console(stderr=True)
    console.print(f"Compiling {path}...", style="dim")

    source = load_document(console, path)
    if source is None:
        return 1
    result = compile_bowtie(source)
    if not result.ok or result.layout is None:
        print_diagnostics(console, result, path)
        return 1
    layout = result.layout

    try:
        settings = resolve_settings(path, config)
    except ValueError as exc:
        console.print(f"Invalid settings: {exc}", style="bold red")
        return 2

    payload: dict[str, Any] = layout_to_dict(layout)
    if geometry:
        payload["geometry"] = geometry_to_dict(compute_geometry(layout, settings))

    if fmt == "rich":
        if out:
            rich_console = Console(record=True)
            _print_rich(layout, console=rich_console)
            out.write_text(rich_console.export_text(), encoding="utf-8")
            console.print(f"Wrote layout to {out}", style="green")
        else:
            _print_rich(layout, console=Console())
        return 0

    if fmt == "json":
        text = json.dumps(payload, indent=2) + "\n"
    else:
        text = _to_markdown(payload)

    if out:
        out.write_text(text, encoding="utf-8")
        console.print(f"Wrote layout to {out}", style="green")
    else:
        print(text, end="" if text.endswith("\n") else "\n")

    return 0


def _to_markdown(payload: dict[str, Any]) -> str:
    lines = [f"# {payload['title'] or payload['event']}", "", f"Event: **{payload['event']}**", ""]
    numbers = {b["name"]: b["number"] for b in payload["barriers"]}

    for key, side, heading in (("causes", "cause", "Causes"), ("consequences", "consequence", "Consequences")):
        lines.append(f"## {heading}")
        lines.append("")
        if not payload[key]:
            lines.append("- (none)")
        for node in payload[key]:
            barriers = ", ".join(barrier_label(side, numbers[b["name"]], b["name"]) for b in node["barriers"])
            lines.append(f"- {node['name']}" + (f": {barriers}" if barriers else ""))
        lines.append("")

    lines.append("## Barriers")
    lines.append("")
    for barrier in payload["barriers"]:
        targets = ", ".join(t["name"] for t in barrier["targets"])
        lines.append(f"{barrier['number']}. {barrier['name']} ({targets})")

    if "geometry" in payload:
        geo = payload["geometry"]
        lines.append("")
        lines.append(f"Canvas: {geo['width']:g} x {geo['height']:g}")

    return "\n".join(lines) + "\n"


def _print_rich(layout: BowtieLayout, *, console: Console) -> None:
    console.print(layout.title or layout.event, style="bold")
    console.print(f"Event: {layout.event}", style="dim")

    for side, heading in (("cause", "Causes"), ("consequence", "Consequences")):
        table = Table(title=heading)
        table.add_column("#", justify="right", style="cyan")
        table.add_column("Node")
        table.add_column("Offset", justify="right")
        table.add_column("Barriers (node → event)")
        for placement, edge in zip(layout.nodes(side), layout.edges(side)):
            barriers = ", ".join(f"{b.name} @{b.fraction:.2f}" for b in edge.barriers)
            table.add_row(str(placement.index + 1), placement.name, f"{placement.offset:g}", barriers or "-")
        console.print(table)

    legend = Table(title="Barriers")
    legend.add_column("#", justify="right", style="cyan")
    legend.add_column("Barrier")
    legend.add_column("Targets")
    for entry in layout.legend:
        legend.add_row(str(entry.number), entry.name, ", ".join(f"{t.node} ({t.side})" for t in entry.targets))
    console.print(legend)
