"""
Shared fixtures and helpers for the asmdups tests.

Listings are written in the disassembler's own format, with the instruction
word stored byte-swapped, so the parser sees exactly what it would see on a
real corpus.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

import pytest

from asmdups.core.parser import swap_bytes
from asmdups.core.signature import signature_key
from asmdups.core.types import Function, Instruction

# A varied opcode sequence: addiu, sw, lw, special, beq, lui, ori, j
BASE_CLASSES = [9, 43, 35, 0, 4, 15, 13, 2]

JR_RA = 0x03E00008
NOP = 0x00000000


def ops_from_classes(classes: Iterable[int], low: int = 0) -> List[int]:
    """Instruction words with the given primary opcodes and low bits."""
    return [(c << 26) | (low & 0x03FFFFFF) for c in classes]


def listing_text(name: Optional[str], ops: Sequence[int], vram: int = 0x80010000, offset: int = 0x1000) -> str:
    """Render a function listing the way splat emits it."""
    lines = [".include \"macro.inc\"", "", ".section .text, \"ax\"", ""]
    if name is not None:
        lines.append(f"glabel {name}")
    for i, op in enumerate(ops):
        lines.append(
            f"/* {offset + 4 * i:X} {vram + 4 * i:08X} {swap_bytes(op):08X} */  insn"
        )
    return "\n".join(lines) + "\n"


def write_listing(path: Path, name: Optional[str], ops: Sequence[int], vram: int = 0x80010000) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(listing_text(name, ops, vram=vram))
    return path


def make_function(name: str, key: Sequence[int], file: str = "asm/test.s", vram: int = 0x80000000) -> Function:
    """Build a Function directly from a signature sequence."""
    ops = [Instruction(file_addr=4 * i, vram_addr=vram + 4 * i, op=c << 26) for i, c in enumerate(key)]
    return Function(name=name, ops=ops, key=signature_key(ops), dir="asm", file=file)


@pytest.fixture(autouse=True)
def reset_package_logger(monkeypatch):
    """Undo logging set up by CLI runs and clear config overrides."""
    for var in ("ASMDUPS_CONFIG", "ASMDUPS_WINDOW_STRIDE", "ASMDUPS_WINDOW_SIZE",
                "ASMDUPS_BASE_DIR", "ASMDUPS_LENGTH_PREFILTER"):
        monkeypatch.delenv(var, raising=False)
    yield
    logger = logging.getLogger("asmdups")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def two_dirs(tmp_path):
    """Two directories holding the same function, one with different low bits."""
    dir_a = tmp_path / "nz0"
    dir_b = tmp_path / "np3"
    write_listing(dir_a / "func_a.s", "func_a", ops_from_classes(BASE_CLASSES, low=0x1234))
    write_listing(dir_b / "func_b.s", "func_b", ops_from_classes(BASE_CLASSES, low=0x0042))
    return dir_a, dir_b
