"""Parsing of disassembled ``.s`` listings into ``Function`` values.

Each instruction line in the listing looks like::

    /* 1234 80012340 2400BD27 */  addiu  $sp, $sp, -0x40

Once split on whitespace the second, third and fourth tokens are the file
offset, the virtual address and the instruction word. The disassembler emits
the word in the opposite byte order, so it is swapped on read. Anything that
does not fit that shape is skipped.
"""

import re
from pathlib import Path
from typing import List, Optional, Union

from .errors import InputReadError
from .signature import signature_key
from .types import Function, Instruction

LABEL_DIRECTIVE = "glabel"

# Bare digits; int(x, 16) on its own also takes prefixes and separators
HEX_TOKEN = re.compile(r"[0-9A-Fa-f]+")

# jr $ra / nop
RETURN_OP = 0x03E00008
NOP_OP = 0x00000000

U32_MAX = 0xFFFFFFFF
U64_MAX = 0xFFFFFFFFFFFFFFFF


def _parse_hex(token: str, limit: int) -> Optional[int]:
    if not HEX_TOKEN.fullmatch(token):
        return None
    value = int(token, 16)
    if value > limit:
        return None
    return value


def swap_bytes(op: int) -> int:
    """Reverse the four bytes of a 32-bit word."""
    return (
        ((op & 0xFF) << 24)
        | (((op >> 8) & 0xFF) << 16)
        | (((op >> 16) & 0xFF) << 8)
        | ((op >> 24) & 0xFF)
    )


def parse_line(line: str) -> Optional[Instruction]:
    """Parse one listing line, returning None for non-instruction lines."""
    parts = line.split()
    if len(parts) < 4:
        return None

    file_addr = _parse_hex(parts[1], U64_MAX)
    if file_addr is None:
        return None
    vram_addr = _parse_hex(parts[2], U64_MAX)
    if vram_addr is None:
        return None
    op = _parse_hex(parts[3], U32_MAX)
    if op is None:
        return None

    return Instruction(file_addr=file_addr, vram_addr=vram_addr, op=swap_bytes(op))


def parse_instructions(text: str, dir: str, file: str) -> Function:
    """Parse the text of one listing into a Function.

    Args:
        text: Full listing text
        dir: Directory the listing was found under
        file: Path of the listing

    Returns:
        The parsed function. Its name is empty when the listing has no label.
    """
    instructions: List[Instruction] = []
    name: Optional[str] = None

    for line in text.splitlines():
        parts = line.split()
        if name is None and len(parts) == 2 and parts[0] == LABEL_DIRECTIVE:
            name = parts[1]
            continue

        instruction = parse_line(line)
        if instruction is not None:
            instructions.append(instruction)

    return Function(
        name=name or "",
        ops=instructions,
        key=signature_key(instructions),
        dir=dir,
        file=file,
    )


def parse_file(path: Union[str, Path], dir: str) -> Function:
    """Read and parse a single listing file.

    Raises:
        InputReadError: The file could not be read or is not text
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise InputReadError(f"Unable to read {path}: {e}", path=str(path)) from e

    return parse_instructions(text, dir, str(path))


def is_null_stub(function: Function) -> bool:
    """True for a function whose whole body is ``jr $ra; nop``."""
    return (
        len(function.ops) == 2
        and function.ops[0].op == RETURN_OP
        and function.ops[1].op == NOP_OP
    )


def is_indexable(function: Function) -> bool:
    """Whether a parsed function should be windowed and compared."""
    return bool(function.ops) and not is_null_stub(function)
