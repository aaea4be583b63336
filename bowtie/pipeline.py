"""
Compile pipeline: Parsed -> Built -> Validated -> Laid-out.

Each stage consumes the complete output of the one before it. A failing
stage halts the pipeline; its diagnostics are the result's diagnostics.
Parsing and building stop at their first defect, validation reports all.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from .graph import BowtieGraph, build_graph_result
from .layout import BowtieLayout, compute_layout
from .models import ConfirmedGraph, Record
from .parser import parse_document
from .results import CompileError, Diagnostic, Ok
from .rules import validate_graph


class Stage(Enum):
    PARSED = "parsed"
    BUILT = "built"
    VALIDATED = "validated"
    LAID_OUT = "laid-out"


@dataclass(frozen=True)
class CompileResult:
    """Outcome of one compile.

    `stage` is the last stage that completed (None when parsing failed);
    `stages` lists all of them, so a successful compile reports VALIDATED
    on its way to LAID_OUT.
    """

    stage: Stage | None
    diagnostics: tuple[Diagnostic, ...] = ()
    records: tuple[Record, ...] = ()
    graph: BowtieGraph | None = None
    confirmed: ConfirmedGraph | None = None
    layout: BowtieLayout | None = None

    @property
    def ok(self) -> bool:
        return self.stage is Stage.LAID_OUT

    @property
    def stages(self) -> tuple[Stage, ...]:
        """Every stage that completed, in pipeline order."""
        if self.stage is None:
            return ()
        order = list(Stage)
        return tuple(order[: order.index(self.stage) + 1])

    @property
    def failure_kind(self) -> str | None:
        """Kind of the diagnostics that halted the pipeline (parse, structural, validation)."""
        if self.ok:
            return None
        return self.diagnostics[0].kind if self.diagnostics else None

    def raise_for_errors(self) -> BowtieLayout:
        if not self.ok or self.layout is None:
            raise CompileError(self.diagnostics)
        return self.layout


def compile_bowtie(text: str | Iterable[str]) -> CompileResult:
    """Compile a bowtie document into a laid-out model."""
    parsed = parse_document(text)
    if not isinstance(parsed, Ok):
        return CompileResult(stage=None, diagnostics=parsed.diagnostics)
    records = parsed.value

    built = build_graph_result(records)
    if not isinstance(built, Ok):
        return CompileResult(stage=Stage.PARSED, diagnostics=built.diagnostics, records=records)
    graph = built.value

    validated = validate_graph(graph)
    if not isinstance(validated, Ok):
        return CompileResult(
            stage=Stage.BUILT,
            diagnostics=validated.diagnostics,
            records=records,
            graph=graph,
        )
    confirmed = validated.value

    return CompileResult(
        stage=Stage.LAID_OUT,
        records=records,
        graph=graph,
        confirmed=confirmed,
        layout=compute_layout(confirmed),
    )
