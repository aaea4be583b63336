"""Ordinal layout of a confirmed bowtie graph.

Positions here are renderer-agnostic:
- nodes get a perpendicular slot offset from the event axis
- barriers get a fraction of the way along their edge, from node to event
- every barrier identity gets a legend number shared by all its placements
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from .models import BarrierTarget, ConfirmedGraph, Edge, Side


@dataclass(frozen=True)
class NodePlacement:
    side: Side
    name: str
    index: int
    offset: float  # slots above (<0) or below (>0) the event axis


@dataclass(frozen=True)
class BarrierPlacement:
    name: str
    index: int
    fraction: float  # 0 = node, 1 = event; never either end


@dataclass(frozen=True)
class EdgeLayout:
    side: Side
    node: str
    barriers: tuple[BarrierPlacement, ...] = ()


@dataclass(frozen=True)
class LegendEntry:
    """A barrier identity with the label number a renderer prints beside it."""

    number: int
    name: str
    targets: tuple[BarrierTarget, ...]


@dataclass(frozen=True)
class BowtieLayout:
    """Position model handed to a renderer."""

    event: str
    title: str | None = None
    causes: tuple[NodePlacement, ...] = ()
    consequences: tuple[NodePlacement, ...] = ()
    cause_edges: tuple[EdgeLayout, ...] = ()
    consequence_edges: tuple[EdgeLayout, ...] = ()
    legend: tuple[LegendEntry, ...] = ()

    _edge_index: Mapping[tuple[Side, str], EdgeLayout] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        index = {(e.side, e.node): e for e in (*self.cause_edges, *self.consequence_edges)}
        object.__setattr__(self, "_edge_index", MappingProxyType(index))

    def nodes(self, side: Side) -> tuple[NodePlacement, ...]:
        return self.causes if side == "cause" else self.consequences

    def edges(self, side: Side) -> tuple[EdgeLayout, ...]:
        return self.cause_edges if side == "cause" else self.consequence_edges

    def edge(self, side: Side, node: str) -> EdgeLayout | None:
        return self._edge_index.get((side, node))

    def legend_entry(self, barrier: str) -> LegendEntry | None:
        for entry in self.legend:
            if entry.name == barrier:
                return entry
        return None

    def placements(self, barrier: str) -> list[tuple[EdgeLayout, BarrierPlacement]]:
        """All placements of one barrier identity, in edge order (causes first)."""
        found = []
        for edge in (*self.cause_edges, *self.consequence_edges):
            for placement in edge.barriers:
                if placement.name == barrier:
                    found.append((edge, placement))
        return found


def slot_offset(index: int, count: int) -> float:
    """Offset of slot `index` among `count` slots centred on zero."""
    return index - (count - 1) / 2


def barrier_fraction(index: int, count: int) -> float:
    """Even spacing along an edge that never touches either end."""
    return (index + 1) / (count + 1)


def barrier_label(side: Side, number: int, name: str) -> str:
    """Legend text: `[n] name` under causes, `name [n]` under consequences."""
    if side == "cause":
        return f"[{number}] {name}"
    return f"{name} [{number}]"


def _place_nodes(side: Side, edges: tuple[Edge, ...]) -> tuple[NodePlacement, ...]:
    count = len(edges)
    return tuple(
        NodePlacement(side, edge.node, i, slot_offset(i, count)) for i, edge in enumerate(edges)
    )


def _place_barriers(edge: Edge) -> EdgeLayout:
    count = len(edge.barriers)
    return EdgeLayout(
        edge.side,
        edge.node,
        tuple(
            BarrierPlacement(name, i, barrier_fraction(i, count)) for i, name in enumerate(edge.barriers)
        ),
    )


def compute_layout(graph: ConfirmedGraph) -> BowtieLayout:
    """Assign positions to every node and barrier of a confirmed graph."""
    legend = tuple(
        LegendEntry(number, name, targets)
        for number, (name, targets) in enumerate(graph.barriers, start=1)
    )

    return BowtieLayout(
        event=graph.event,
        title=graph.title,
        causes=_place_nodes("cause", graph.cause_edges),
        consequences=_place_nodes("consequence", graph.consequence_edges),
        cause_edges=tuple(_place_barriers(edge) for edge in graph.cause_edges),
        consequence_edges=tuple(_place_barriers(edge) for edge in graph.consequence_edges),
        legend=legend,
    )
