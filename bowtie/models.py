"""Data models for bowtie documents and graphs."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Literal, Mapping, Union

# Which side of the event a node sits on
Side = Literal["cause", "consequence"]

SIDES: tuple[Side, ...] = ("cause", "consequence")


@dataclass(frozen=True)
class Title:
    """A `title` line."""

    text: str
    line: int = 0


@dataclass(frozen=True)
class Cause:
    """A `cause` line."""

    name: str
    line: int = 0

    side: Side = field(default="cause", init=False)


@dataclass(frozen=True)
class Event:
    """An `event` line."""

    name: str
    line: int = 0


@dataclass(frozen=True)
class Consequence:
    """A `consequence` line."""

    name: str
    line: int = 0

    side: Side = field(default="consequence", init=False)


@dataclass(frozen=True)
class Barrier:
    """A `barrier name: target, target` line.

    Targets are kept exactly as written (trimmed); resolving them to a side
    happens against the built graph.
    """

    name: str
    targets: tuple[str, ...]
    line: int = 0


Record = Union[Title, Cause, Event, Consequence, Barrier]
Node = Union[Cause, Consequence]


@dataclass(frozen=True)
class Edge:
    """The line between one node and the event, with the barriers drawn on it."""

    side: Side
    node: str
    barriers: tuple[str, ...] = ()


@dataclass(frozen=True)
class BarrierTarget:
    """A resolved barrier target."""

    side: Side
    node: str


@dataclass(frozen=True)
class ConfirmedGraph:
    """A bowtie graph whose references all resolved.

    `barriers` pairs every barrier identity (name) with its full target list,
    in declaration order. Barrier names declared more than once with disjoint
    targets share one entry.
    """

    event: str
    title: str | None = None
    cause_edges: tuple[Edge, ...] = ()
    consequence_edges: tuple[Edge, ...] = ()
    barriers: tuple[tuple[str, tuple[BarrierTarget, ...]], ...] = ()

    @property
    def barrier_targets(self) -> Mapping[str, tuple[BarrierTarget, ...]]:
        """Read-only view: barrier name -> targets."""
        return MappingProxyType(dict(self.barriers))

    @property
    def causes(self) -> tuple[str, ...]:
        return tuple(edge.node for edge in self.cause_edges)

    @property
    def consequences(self) -> tuple[str, ...]:
        return tuple(edge.node for edge in self.consequence_edges)

    def edges(self, side: Side) -> tuple[Edge, ...]:
        return self.cause_edges if side == "cause" else self.consequence_edges

    def edge(self, side: Side, node: str) -> Edge | None:
        for candidate in self.edges(side):
            if candidate.node == node:
                return candidate
        return None
