"""Validation rules for built bowtie graphs."""

from __future__ import annotations

from collections import defaultdict

from .graph import BowtieGraph
from .models import SIDES, ConfirmedGraph
from .results import Diagnostic, Invalid, Ok

# Characters the notation uses as separators; names containing them cannot be
# targeted unambiguously
RESERVED_CHARACTERS = (",", ":")

RULE_EXPLANATIONS: dict[str, str] = {
    # parse
    "unknown-keyword": "Every line must start with title, cause, event, consequence or barrier.",
    "missing-value": "A keyword must be followed by a name (or, for title, some text).",
    "duplicate-title": "A document may declare at most one title.",
    "malformed-barrier": "Barrier lines read `barrier <name>: <target>[, <target>]*`.",
    "empty-target": "A barrier needs at least one target and no empty entries between commas.",
    # structural
    "missing-event": "A document must declare exactly one event; none was found.",
    "multiple-events": "A document must declare exactly one event; a second was found.",
    # validation
    "event-count": "The graph must hold exactly one event.",
    "duplicate-node": "Cause names are unique among causes, consequence names among consequences.",
    "duplicate-barrier": "A barrier name may be reused only with a disjoint set of targets.",
    "duplicate-target": "A barrier lists the same target more than once.",
    "unresolved-target": "A barrier target must name a declared cause or consequence.",
    "ambiguous-target": (
        "The target names both a cause and a consequence. The notation has no side "
        "qualifier, so rename one of them."
    ),
    "reserved-character": "Names of causes, consequences and barriers may not contain ',' or ':'.",
}


def get_rule_ids() -> list[str]:
    return list(RULE_EXPLANATIONS)


class ValidationRules:
    """Collection of checks over a built graph. Every check runs; findings accumulate."""

    def __init__(self, graph: BowtieGraph):
        self.graph = graph

    def run_all(self) -> list[Diagnostic]:
        """Run all checks and return findings."""
        results = []
        results.extend(self.check_event_count())
        results.extend(self.check_duplicate_nodes())
        results.extend(self.check_duplicate_barriers())
        results.extend(self.check_barrier_targets())
        results.extend(self.check_reserved_characters())
        return results

    def check_event_count(self) -> list[Diagnostic]:
        """Check that exactly one event exists."""
        count = len(self.graph.events)
        if count == 1:
            return []

        line = self.graph.events[1].line if count > 1 else None
        return [
            Diagnostic(
                kind="validation",
                rule="event-count",
                message=f"Expected exactly one event, found {count}",
                line=line,
            )
        ]

    def check_duplicate_nodes(self) -> list[Diagnostic]:
        """Check for repeated cause names and repeated consequence names."""
        results = []

        for side, declarations in (
            ("cause", self.graph.cause_declarations),
            ("consequence", self.graph.consequence_declarations),
        ):
            first_seen: dict[str, int] = {}
            for node in declarations:
                if node.name not in first_seen:
                    first_seen[node.name] = node.line
                    continue
                results.append(
                    Diagnostic(
                        kind="validation",
                        rule="duplicate-node",
                        message=f"Duplicate {side} '{node.name}' (first declared on line {first_seen[node.name]})",
                        line=node.line,
                        subject=node.name,
                        side=side,
                    )
                )

        return results

    def check_duplicate_barriers(self) -> list[Diagnostic]:
        """Check barrier redeclarations and repeated targets.

        Rules:
        - a barrier may list a target only once
        - a barrier name may be declared again only with disjoint targets
        """
        results = []
        claimed: dict[str, dict[str, int]] = defaultdict(dict)  # barrier -> target -> line

        for barrier in self.graph.barriers:
            seen_here: set[str] = set()
            for target in barrier.targets:
                if target in seen_here:
                    results.append(
                        Diagnostic(
                            kind="validation",
                            rule="duplicate-target",
                            message=f"Barrier '{barrier.name}' lists target '{target}' more than once",
                            line=barrier.line,
                            subject=target,
                        )
                    )
                    continue
                seen_here.add(target)

                previous = claimed[barrier.name].get(target)
                if previous is not None:
                    results.append(
                        Diagnostic(
                            kind="validation",
                            rule="duplicate-barrier",
                            message=(
                                f"Barrier '{barrier.name}' already targets '{target}' "
                                f"(declared on line {previous})"
                            ),
                            line=barrier.line,
                            subject=barrier.name,
                        )
                    )

            for target in seen_here:
                claimed[barrier.name].setdefault(target, barrier.line)

        return results

    def check_barrier_targets(self) -> list[Diagnostic]:
        """Check that every barrier target names exactly one existing node."""
        results = []

        for barrier in self.graph.barriers:
            for target in dict.fromkeys(barrier.targets):
                resolution = self.graph.resolve(target)
                if resolution.is_resolved:
                    continue
                if resolution.is_ambiguous:
                    results.append(
                        Diagnostic(
                            kind="validation",
                            rule="ambiguous-target",
                            message=(
                                f"Barrier '{barrier.name}' targets '{target}', which is both "
                                "a cause and a consequence"
                            ),
                            line=barrier.line,
                            subject=target,
                        )
                    )
                else:
                    results.append(
                        Diagnostic(
                            kind="validation",
                            rule="unresolved-target",
                            message=f"Barrier '{barrier.name}' targets unknown node '{target}'",
                            line=barrier.line,
                            subject=target,
                        )
                    )

        return results

    def check_reserved_characters(self) -> list[Diagnostic]:
        """Check that addressable names avoid the notation's separators."""
        results = []

        named = [
            *((side, node) for side in SIDES for node in self._declarations(side)),
            *((None, barrier) for barrier in self.graph.barriers),
        ]
        reported: set[tuple[str | None, str]] = set()
        for side, item in named:
            if (side, item.name) in reported:
                continue
            found = [c for c in RESERVED_CHARACTERS if c in item.name]
            if not found:
                continue
            reported.add((side, item.name))
            label = side or "barrier"
            results.append(
                Diagnostic(
                    kind="validation",
                    rule="reserved-character",
                    message=f"{label.capitalize()} name '{item.name}' contains {' and '.join(repr(c) for c in found)}",
                    line=item.line,
                    subject=item.name,
                    side=side,
                )
            )

        return results

    def _declarations(self, side):
        if side == "cause":
            return self.graph.cause_declarations
        return self.graph.consequence_declarations


def validate_graph(graph: BowtieGraph) -> Ok[ConfirmedGraph] | Invalid:
    """Validate a built graph and, when clean, attach barriers to its edges."""
    findings = ValidationRules(graph).run_all()
    if findings:
        return Invalid(tuple(findings))
    return Ok(graph.attach_barriers())
