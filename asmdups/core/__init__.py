"""Parsing, windowing and loading of disassembled functions."""

from .errors import (
    ComparisonError,
    ConfigError,
    DupsError,
    InputReadError,
    ReportWriteError,
    TraversalError,
)
from .parser import is_null_stub, parse_file, parse_instructions
from .signature import signature, signature_key
from .types import DupsFile, Function, Instruction
from .windows import apply_sliding_window

__all__ = [
    # Types
    "DupsFile",
    "Function",
    "Instruction",
    # Parsing
    "parse_instructions",
    "parse_file",
    "is_null_stub",
    "signature",
    "signature_key",
    "apply_sliding_window",
    # Errors
    "DupsError",
    "TraversalError",
    "InputReadError",
    "ComparisonError",
    "ReportWriteError",
    "ConfigError",
]
