"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from bowtie.graph import BowtieGraph, build_graph
from bowtie.parser import iter_records
from bowtie.pipeline import CompileResult, compile_bowtie


@pytest.fixture
def fixtures_path() -> Path:
    """Directory holding the sample documents."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def chemical_spillage_path(fixtures_path: Path) -> Path:
    return fixtures_path / "chemical_spillage.bowtie"


@pytest.fixture
def chemical_spillage_text(chemical_spillage_path: Path) -> str:
    return chemical_spillage_path.read_text(encoding="utf-8")


@pytest.fixture
def chemical_spillage_graph(chemical_spillage_text: str) -> BowtieGraph:
    """Built (not yet validated) graph of the chemical spillage sample."""
    return build_graph(iter_records(chemical_spillage_text))


@pytest.fixture
def chemical_spillage_result(chemical_spillage_text: str) -> CompileResult:
    return compile_bowtie(chemical_spillage_text)


@pytest.fixture
def cyber_attacks_text(fixtures_path: Path) -> str:
    return (fixtures_path / "cyber_attacks.bowtie").read_text(encoding="utf-8")
