"""Core data structures for parsed assembly functions.

An ``Instruction`` is one decoded word from a disassembly listing and a
``Function`` is an ordered run of them, either a whole labelled function or a
window fragment cut out of one. ``DupsFile`` is the parsed content of a single
input directory.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

# Signature bytes, one per instruction
Key = Tuple[int, ...]


@dataclass(frozen=True)
class Instruction:
    """A single decoded instruction word.

    Attributes:
        file_addr: Offset of the word in the original binary
        vram_addr: Virtual address the word is loaded at
        op: The 32-bit instruction word, byte order already corrected
    """
    file_addr: int
    vram_addr: int
    op: int


@dataclass
class Function:
    """A parsed function or a window fragment of one.

    ``dir`` and ``file`` record where the function came from; they are used
    for reporting and marker cross-referencing only, never for comparison.
    ``similarity`` is stamped when the function joins an existing cluster and
    ``decompiled`` is filled in from the ``INCLUDE_ASM`` markers.
    """
    name: str
    ops: List[Instruction]
    key: Key
    dir: str
    file: str
    similarity: float = 0.0
    decompiled: bool = False
    parent: Optional[str] = None  # declared name of the function a window was cut from

    @property
    def label(self) -> str:
        """Declared name of the whole function this entry belongs to."""
        return self.parent if self.parent is not None else self.name

    @property
    def first_vram(self) -> Optional[int]:
        return self.ops[0].vram_addr if self.ops else None


def vram_sort_key(function: Function) -> float:
    """Sort key placing functions by first virtual address, empty ones last."""
    first = function.first_vram
    return float("inf") if first is None else first


@dataclass
class DupsFile:
    """Parsed functions of one input directory, ordered by virtual address."""
    name: str
    funcs: List[Function] = field(default_factory=list)

    def __iter__(self) -> Iterator[Function]:
        return iter(self.funcs)

    def __len__(self) -> int:
        return len(self.funcs)
