"""JSON-safe views of the compiled model."""

from __future__ import annotations

from typing import Any

from .geometry import DiagramGeometry, Point, Rect
from .layout import BowtieLayout, EdgeLayout
from .results import Diagnostic


def diagnostic_to_dict(diagnostic: Diagnostic) -> dict[str, Any]:
    """Convert a Diagnostic to a JSON-serializable dict."""
    return {
        "kind": diagnostic.kind,
        "rule": diagnostic.rule,
        "message": diagnostic.message,
        "line": diagnostic.line,
        "subject": diagnostic.subject,
        "side": diagnostic.side,
    }


def _edge_to_dict(edge: EdgeLayout, offset: float) -> dict[str, Any]:
    return {
        "name": edge.node,
        "offset": offset,
        "barriers": [{"name": b.name, "index": b.index, "fraction": b.fraction} for b in edge.barriers],
    }


def layout_to_dict(layout: BowtieLayout) -> dict[str, Any]:
    """Title, event, both sides with their edge barriers, and the barrier legend."""
    sides = {}
    for side, key in (("cause", "causes"), ("consequence", "consequences")):
        offsets = {p.name: p.offset for p in layout.nodes(side)}
        sides[key] = [_edge_to_dict(edge, offsets[edge.node]) for edge in layout.edges(side)]

    return {
        "title": layout.title,
        "event": layout.event,
        **sides,
        "barriers": [
            {
                "number": entry.number,
                "name": entry.name,
                "targets": [{"side": t.side, "name": t.node} for t in entry.targets],
            }
            for entry in layout.legend
        ],
    }


def _point(p: Point) -> dict[str, float]:
    return {"x": p.x, "y": p.y}


def _rect(r: Rect) -> dict[str, Any]:
    return {"centre": _point(r.centre), "width": r.width, "height": r.height}


def geometry_to_dict(geometry: DiagramGeometry) -> dict[str, Any]:
    return {
        "width": geometry.width,
        "height": geometry.height,
        "event": {"centre": _point(geometry.event.centre), "radius": geometry.event.radius},
        "nodes": [{"side": n.side, "name": n.name, "box": _rect(n.box)} for n in geometry.nodes],
        "edges": [
            {
                "side": e.side,
                "node": e.node,
                "start": _point(e.start),
                "end": _point(e.end),
                "barriers": [{"name": b.name, "number": b.number, "box": _rect(b.box)} for b in e.barriers],
            }
            for e in geometry.edges
        ],
        "labels": [
            {
                "side": label.side,
                "number": label.number,
                "text": label.text,
                "alignment": label.alignment,
                "box": _rect(label.box),
            }
            for label in geometry.labels
        ],
    }
