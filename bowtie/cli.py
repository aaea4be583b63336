"""CLI entrypoint for bowtie."""

import sys
from pathlib import Path

import click

from . import __version__


@click.group()
@click.version_option(__version__, prog_name="bowtie")
def cli() -> None:
    """bowtie - Compiler for bowtie risk-diagram documents.

    Check documents for defects and emit their laid-out diagram model.
    """


@cli.command("compile")
@click.argument("document", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["md", "json", "rich"]),
    default="md",
    show_default=True,
    help="Output format",
)
@click.option(
    "--geometry/--no-geometry",
    default=False,
    show_default=True,
    help="Include canvas coordinates in the output",
)
@click.option(
    "--config",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Layout settings file (defaults to the nearest bowtie.toml)",
)
@click.option("--out", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Write output to a file")
def compile_document(document: Path, fmt: str, geometry: bool, config: Path | None, out: Path | None) -> None:
    """Compile DOCUMENT into its laid-out diagram model."""
    from .commands.compile_cmd import run_compile

    sys.exit(run_compile(document, fmt=fmt, geometry=geometry, config=config, out=out))


@cli.command()
@click.argument("document", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--json",
    "output_json",
    is_flag=True,
    help="Output results as JSON",
)
def check(document: Path, output_json: bool) -> None:
    """Report every defect in DOCUMENT.

    Parse and structural errors stop at the first defect; validation errors
    are all reported in one pass.
    """
    from .commands.check_cmd import run_check

    sys.exit(run_check(document, output_json=output_json))


@cli.command()
@click.argument("rule_id")
def explain(rule_id: str) -> None:
    """Explain a diagnostic rule (e.g. bowtie explain ambiguous-target)."""
    from .commands.check_cmd import run_explain

    sys.exit(run_explain(rule_id))


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
