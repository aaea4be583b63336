"""Bowtie graph construction and target resolution."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping

from .models import (
    SIDES,
    Barrier,
    BarrierTarget,
    Cause,
    ConfirmedGraph,
    Consequence,
    Edge,
    Event,
    Node,
    Record,
    Side,
    Title,
)
from .results import Fatal, Ok, StructuralError


@dataclass(frozen=True)
class Resolution:
    """Where a barrier target name exists."""

    target: str
    sides: tuple[Side, ...] = ()

    @property
    def is_resolved(self) -> bool:
        return len(self.sides) == 1

    @property
    def is_ambiguous(self) -> bool:
        return len(self.sides) > 1

    @property
    def side(self) -> Side | None:
        return self.sides[0] if self.is_resolved else None


@dataclass(frozen=True)
class BowtieGraph:
    """Causes and consequences around one event, with barriers still unresolved."""

    title: str | None = None
    events: tuple[Event, ...] = ()
    cause_declarations: tuple[Cause, ...] = ()
    consequence_declarations: tuple[Consequence, ...] = ()
    barriers: tuple[Barrier, ...] = ()

    causes: Mapping[str, Cause] = field(init=False, repr=False, compare=False)  # name -> first declaration
    consequences: Mapping[str, Consequence] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        causes: dict[str, Cause] = {}
        for cause in self.cause_declarations:
            causes.setdefault(cause.name, cause)
        consequences: dict[str, Consequence] = {}
        for consequence in self.consequence_declarations:
            consequences.setdefault(consequence.name, consequence)
        object.__setattr__(self, "causes", MappingProxyType(causes))
        object.__setattr__(self, "consequences", MappingProxyType(consequences))

    @property
    def event(self) -> Event | None:
        return self.events[0] if len(self.events) == 1 else None

    def nodes(self, side: Side) -> Mapping[str, Node]:
        return self.causes if side == "cause" else self.consequences  # type: ignore[return-value]

    def resolve(self, target: str) -> Resolution:
        """Find which side(s) a barrier target names."""
        return Resolution(target, tuple(side for side in SIDES if target in self.nodes(side)))

    def attach_barriers(self) -> ConfirmedGraph:
        """Place every barrier on the edges it targets.

        Edges receive barrier names in document order of the barrier
        declarations. Targets that do not resolve to exactly one side are
        skipped, so call this only on a graph that passed validation.
        """
        on_edge: dict[tuple[Side, str], list[str]] = {
            (side, name): [] for side in SIDES for name in self.nodes(side)
        }
        barrier_targets: dict[str, list[BarrierTarget]] = {}

        for barrier in self.barriers:
            targets = barrier_targets.setdefault(barrier.name, [])
            for target in barrier.targets:
                resolution = self.resolve(target)
                if not resolution.is_resolved:
                    continue
                key = (resolution.side, target)
                if barrier.name not in on_edge[key]:
                    on_edge[key].append(barrier.name)
                    targets.append(BarrierTarget(resolution.side, target))

        def edges(side: Side) -> tuple[Edge, ...]:
            return tuple(Edge(side, name, tuple(on_edge[(side, name)])) for name in self.nodes(side))

        event = self.event
        return ConfirmedGraph(
            event=event.name if event else "",
            title=self.title,
            cause_edges=edges("cause"),
            consequence_edges=edges("consequence"),
            barriers=tuple((name, tuple(targets)) for name, targets in barrier_targets.items()),
        )


def build_graph(records: Iterable[Record]) -> BowtieGraph:
    """Assemble records into a bowtie graph.

    Raises:
        StructuralError: on a second event record, or when no event exists
    """
    title: str | None = None
    event: Event | None = None
    causes: list[Cause] = []
    consequences: list[Consequence] = []
    barriers: list[Barrier] = []

    for record in records:
        if isinstance(record, Title):
            title = record.text
        elif isinstance(record, Event):
            if event is not None:
                raise StructuralError(
                    "multiple-events",
                    f"Second event '{record.name}' (event '{event.name}' declared on line {event.line})",
                    line=record.line,
                    subject=record.name,
                )
            event = record
        elif isinstance(record, Cause):
            causes.append(record)
        elif isinstance(record, Consequence):
            consequences.append(record)
        elif isinstance(record, Barrier):
            barriers.append(record)

    if event is None:
        raise StructuralError("missing-event", "Document declares no event")

    return BowtieGraph(
        title=title,
        events=(event,),
        cause_declarations=tuple(causes),
        consequence_declarations=tuple(consequences),
        barriers=tuple(barriers),
    )


def build_graph_result(records: Iterable[Record]) -> Ok[BowtieGraph] | Fatal:
    """Build the graph, or the structural failure that prevented it."""
    try:
        return Ok(build_graph(records))
    except StructuralError as exc:
        return Fatal(exc.diagnostic)
