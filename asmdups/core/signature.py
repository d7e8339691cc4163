"""Coarse per-instruction signatures used as the comparison alphabet."""

from typing import Iterable

from .types import Instruction, Key

# Primary opcode field: the top six bits of the word
OPCODE_SHIFT = 26
OPCODE_MASK = 0x3F


def signature(op: int) -> int:
    """Reduce an instruction word to its primary opcode class (0-63).

    Register and immediate operands live in the low 26 bits, so instructions
    that only differ there share a signature.
    """
    return (op >> OPCODE_SHIFT) & OPCODE_MASK


def signature_key(ops: Iterable[Instruction]) -> Key:
    """Signature of every instruction, in order."""
    return tuple(signature(ins.op) for ins in ops)
