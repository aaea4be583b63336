"""Canvas coordinates for a laid-out bowtie.

Turns the ordinal layout into points and boxes a drawing backend can use
directly. Nothing is drawn here.
"""

from __future__ import annotations

from dataclasses import dataclass

from .config import LayoutSettings
from .layout import BowtieLayout, EdgeLayout, LegendEntry, NodePlacement, barrier_label, slot_offset
from .models import SIDES, Side


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def towards(self, other: "Point", fraction: float) -> "Point":
        """Point `fraction` of the way from here to `other`."""
        return Point(
            self.x + (other.x - self.x) * fraction,
            self.y + (other.y - self.y) * fraction,
        )


@dataclass(frozen=True)
class Rect:
    centre: Point
    width: float
    height: float

    def with_padding(self, padding: float) -> "Rect":
        return Rect(self.centre, self.width + padding, self.height + padding)

    @property
    def left(self) -> float:
        return self.centre.x - self.width / 2

    @property
    def right(self) -> float:
        return self.centre.x + self.width / 2


@dataclass(frozen=True)
class Circle:
    centre: Point
    radius: float


@dataclass(frozen=True)
class NodeBox:
    side: Side
    name: str
    box: Rect


@dataclass(frozen=True)
class BarrierMark:
    name: str
    number: int  # legend number
    box: Rect


@dataclass(frozen=True)
class EdgeLine:
    side: Side
    node: str
    start: Point  # at the node box
    end: Point  # on the event circle
    barriers: tuple[BarrierMark, ...] = ()


@dataclass(frozen=True)
class LegendLabel:
    """One legend row printed under a node column."""

    side: Side
    number: int
    name: str
    text: str
    box: Rect
    alignment: str  # "left" under causes, "right" under consequences


@dataclass(frozen=True)
class DiagramGeometry:
    width: float
    height: float
    event: Circle
    nodes: tuple[NodeBox, ...] = ()
    edges: tuple[EdgeLine, ...] = ()
    labels: tuple[LegendLabel, ...] = ()


def text_width(text: str, settings: LayoutSettings) -> float:
    return len(text) * settings.char_width


def column_height(count: int, settings: LayoutSettings) -> float:
    if count <= 0:
        return 0.0
    return count * settings.component_height + (count - 1) * settings.component_margin


def edge_span(barrier_count: int, settings: LayoutSettings) -> float:
    """Horizontal room needed for the busiest edge, padding included."""
    run = barrier_count * settings.barrier_width + max(barrier_count - 1, 0) * settings.barrier_gap
    return run + 2 * settings.edge_padding


def legend_rows(layout: BowtieLayout, side: Side) -> tuple[LegendEntry, ...]:
    """Legend entries with at least one target on `side`, in legend order."""
    return tuple(entry for entry in layout.legend if any(t.side == side for t in entry.targets))


def compute_geometry(layout: BowtieLayout, settings: LayoutSettings | None = None) -> DiagramGeometry:
    """Compute canvas size and coordinates for every element of a layout.

    Legend rows continue each node column downwards, one slot per barrier
    that touches that side, so the canvas grows to fit them.
    """
    settings = settings or LayoutSettings()

    placements = (*layout.causes, *layout.consequences)
    box_width = max((text_width(p.name, settings) for p in placements), default=0.0)
    radius = text_width(layout.event, settings) / 2
    busiest = max(
        (len(e.barriers) for e in (*layout.cause_edges, *layout.consequence_edges)),
        default=0,
    )
    span = edge_span(busiest, settings)
    pitch = settings.component_height + settings.component_margin
    rows = {side: legend_rows(layout, side) for side in SIDES}

    def half_extent(side: Side) -> float:
        # Nodes sit centred on the axis; legend rows only extend downwards
        return column_height(len(layout.nodes(side)), settings) / 2 + len(rows[side]) * pitch

    width = 2 * (settings.component_padding + box_width + span + radius)
    height = 2 * max(half_extent("cause"), half_extent("consequence"), radius) + 2 * settings.canvas_margin
    centre = Point(width / 2, height / 2)

    def column_x(side: Side) -> float:
        if side == "cause":
            return settings.component_padding + box_width / 2
        return width - settings.component_padding - box_width / 2

    def node_box(placement: NodePlacement) -> Rect:
        y = centre.y + placement.offset * pitch
        return Rect(Point(column_x(placement.side), y), box_width, settings.component_height)

    boxes = {(p.side, p.name): node_box(p) for p in placements}
    left_point = Point(centre.x - radius, centre.y)
    right_point = Point(centre.x + radius, centre.y)

    def edge_line(edge: EdgeLayout) -> EdgeLine:
        box = boxes[(edge.side, edge.node)]
        if edge.side == "cause":
            start, end = Point(box.right, box.centre.y), left_point
        else:
            start, end = Point(box.left, box.centre.y), right_point

        marks = []
        for placement in edge.barriers:
            entry = layout.legend_entry(placement.name)
            marks.append(
                BarrierMark(
                    name=placement.name,
                    number=entry.number if entry else 0,
                    box=Rect(
                        start.towards(end, placement.fraction),
                        settings.barrier_width,
                        settings.component_height,
                    ),
                )
            )
        return EdgeLine(edge.side, edge.node, start, end, tuple(marks))

    def labels(side: Side) -> list[LegendLabel]:
        count = len(layout.nodes(side))
        return [
            LegendLabel(
                side=side,
                number=entry.number,
                name=entry.name,
                text=barrier_label(side, entry.number, entry.name),
                box=Rect(
                    Point(column_x(side), centre.y + slot_offset(count + i, count) * pitch),
                    box_width,
                    settings.component_height,
                ),
                alignment="left" if side == "cause" else "right",
            )
            for i, entry in enumerate(rows[side])
        ]

    return DiagramGeometry(
        width=width,
        height=height,
        event=Circle(centre, radius),
        nodes=tuple(NodeBox(p.side, p.name, boxes[(p.side, p.name)]) for p in placements),
        edges=tuple(edge_line(e) for e in (*layout.cause_edges, *layout.consequence_edges)),
        labels=(*labels("cause"), *labels("consequence")),
    )
