"""
Diagnostics and stage results for the compile pipeline.

Stages hand their output forward as explicit result values:
- Ok: the stage succeeded and carries its output
- Fatal: parsing or building stopped at its first defect
- Invalid: validation finished and found one or more defects

The exceptions below are raised inside a single stage only and are turned
into a Fatal result at that stage's boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Literal, TypeVar

from .models import Side

T = TypeVar("T")

DiagnosticKind = Literal["parse", "structural", "validation"]


@dataclass(frozen=True)
class Diagnostic:
    """A single compile finding."""

    kind: DiagnosticKind
    rule: str
    message: str
    line: int | None = None
    subject: str | None = None  # offending name, target or token
    side: Side | None = None

    def __str__(self) -> str:
        loc = f"line {self.line}" if self.line else "document"
        return f"{self.kind.upper()}: [{self.rule}] {loc} - {self.message}"


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Fatal:
    diagnostic: Diagnostic

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        return (self.diagnostic,)


@dataclass(frozen=True)
class Invalid:
    diagnostics: tuple[Diagnostic, ...]


class StageError(Exception):
    """Base for errors that halt a stage at its first defect."""

    kind: DiagnosticKind = "parse"

    def __init__(
        self,
        rule: str,
        message: str,
        *,
        line: int | None = None,
        subject: str | None = None,
    ) -> None:
        super().__init__(message)
        self.diagnostic = Diagnostic(
            kind=self.kind,
            rule=rule,
            message=message,
            line=line,
            subject=subject,
        )


class ParseError(StageError):
    """Malformed line, unknown keyword, bad barrier target list, duplicate title."""

    kind: DiagnosticKind = "parse"


class StructuralError(StageError):
    """Zero or multiple event records."""

    kind: DiagnosticKind = "structural"


class CompileError(Exception):
    """Raised by CompileResult.raise_for_errors()."""

    def __init__(self, diagnostics: tuple[Diagnostic, ...]) -> None:
        self.diagnostics = diagnostics
        lines = "\n".join(str(d) for d in diagnostics)
        super().__init__(f"{len(diagnostics)} compile error(s)\n{lines}")
