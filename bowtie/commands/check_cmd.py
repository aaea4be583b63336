"""Check command - report every defect in a bowtie document."""

from __future__ import annotations

import json
from collections import defaultdict
from pathlib import Path

from rich.console import Console

from ..export import diagnostic_to_dict
from ..pipeline import CompileResult, compile_bowtie
from ..results import Diagnostic
from ..rules import RULE_EXPLANATIONS


def read_document(path: Path) -> str:
    return path.read_text(encoding="utf-8-sig")


def load_document(console: Console, path: Path) -> str | None:
    """Read a document, printing the failure instead of raising."""
    try:
        return read_document(path)
    except (OSError, UnicodeDecodeError) as exc:
        console.print(f"ERROR: cannot read {path}: {exc}", style="bold red", markup=False)
        return None



def run_check(path: Path, output_json: bool = False) -> int:
    """Compile a document and report its diagnostics.

    Args:
        path: Bowtie document to check
        output_json: Output results as JSON instead of human-readable

    Returns:
        Exit code (0 = clean, 1 = defects found or unreadable document)
    """
    console = Console(stderr=True)
    console.print(f"Checking {path}...", style="dim")

    source = load_document(console, path)
    if source is None:
        return 1
    result = compile_bowtie(source)

    if output_json:
        _output_json(result)
    else:
        print_diagnostics(console, result, path)

    return 0 if result.ok else 1


def _output_json(result: CompileResult) -> None:
    output = {
        "ok": result.ok,
        "stage": result.stage.value if result.stage else None,
        "stages": [stage.value for stage in result.stages],
        "errors": [diagnostic_to_dict(d) for d in result.diagnostics],
    }
    print(json.dumps(output, indent=2))


def print_diagnostics(console: Console, result: CompileResult, path: Path) -> None:
    """Print diagnostics grouped by rule, then a one-line verdict."""
    if result.ok:
        console.print(f"✅ {path.name}: no errors", style="bold green")
        return

    by_rule: dict[str, list[Diagnostic]] = defaultdict(list)
    for d in result.diagnostics:
        by_rule[d.rule].append(d)

    for rule_id, findings in sorted(by_rule.items()):
        console.print(f"\n  Rule: {rule_id}", style="bold")
        for d in sorted(findings, key=lambda x: x.line or 0):
            file_ref = path.name
            if d.line:
                file_ref += f":{d.line}"
            console.print(f"    ERROR: {file_ref} - {d.message}", style="bold red")

    console.print()
    kind = result.failure_kind or "compile"
    console.print(f"❌ {len(result.diagnostics)} {kind} error(s)", style="bold red")


def run_explain(rule_id: str) -> int:
    """Print the documentation for a rule."""
    console = Console()
    explanation = RULE_EXPLANATIONS.get(rule_id)
    if explanation is None:
        console.print(f"Unknown rule: {rule_id}", style="bold red")
        console.print(f"Available: {', '.join(RULE_EXPLANATIONS)}", style="dim")
        return 1

    console.print(f"{rule_id}", style="bold")
    console.print(f"  {explanation}")
    return 0
