"""bowtie - compile bowtie risk-diagram notation into a validated, laid-out model."""

from .layout import BowtieLayout, compute_layout
from .pipeline import CompileResult, Stage, compile_bowtie
from .results import CompileError, Diagnostic

__version__ = "0.1.0"

__all__ = [
    "BowtieLayout",
    "CompileError",
    "CompileResult",
    "Diagnostic",
    "Stage",
    "compile_bowtie",
    "compute_layout",
]
