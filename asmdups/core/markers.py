"""Cross-referencing of ``INCLUDE_ASM`` markers in the C sources.

A function whose assembly is still pulled in with ``INCLUDE_ASM`` has not
been decompiled yet. Anything the markers do not mention is treated as
already ported.
"""

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from .errors import InputReadError
from .loader import collect_files
from .types import Function

logger = logging.getLogger(__name__)

# INCLUDE_ASM("dir", name) and INCLUDE_ASM(type, "dir", name)
INCLUDE_ASM_RE = re.compile(r'INCLUDE_ASM\((?:[^,"()]*,\s*)?"([^"]*)",\s*([^)]*)\)')
INCLUDE_ASM_TOKEN = "INCLUDE_ASM"


@dataclass(frozen=True)
class IncludeAsmEntry:
    """One ``INCLUDE_ASM`` line and the listing it refers to."""
    line: str
    path: str
    asm_path: str


def _normalize(path: Union[str, Path]) -> str:
    return os.path.normcase(os.path.abspath(str(path)))


def parse_include_asm(line: str, path: str, include_root: Union[str, Path]) -> Optional[IncludeAsmEntry]:
    """Build an entry from a marker line, or None if the line does not match."""
    match = INCLUDE_ASM_RE.search(line)
    if match is None:
        return None
    asm_dir = match.group(1).replace("\\", "/")
    asm_name = match.group(2).strip()
    asm_path = Path(include_root) / asm_dir / f"{asm_name}.s"
    return IncludeAsmEntry(line=line, path=path, asm_path=str(asm_path))


def scan_include_asm(
    src_dir: Union[str, Path],
    include_root: Union[str, Path],
    extension: str = ".c",
) -> List[IncludeAsmEntry]:
    """Collect every ``INCLUDE_ASM`` marker in the sources under src_dir.

    Raises:
        TraversalError: If a source directory cannot be listed
        InputReadError: If a source file cannot be read
    """
    entries: List[IncludeAsmEntry] = []

    for source in collect_files(src_dir, extension):
        logger.debug(f"checking {source}")
        try:
            with open(source, "r", encoding="utf-8", errors="replace") as f:
                lines = f.read().splitlines()
        except OSError as e:
            raise InputReadError(f"Unable to read {source}: {e}", path=str(source)) from e

        for line in lines:
            if INCLUDE_ASM_TOKEN not in line:
                continue
            entry = parse_include_asm(line, str(source), include_root)
            if entry is None:
                logger.warning(f"Unrecognized INCLUDE_ASM line in {source}: {line.strip()}")
                continue
            entries.append(entry)

    return entries


class DecompiledIndex:
    """Answers whether a listing's function has already been decompiled."""

    def __init__(self, entries: Iterable[IncludeAsmEntry] = ()):
        self._by_path: Dict[str, List[IncludeAsmEntry]] = {}
        for entry in entries:
            self._by_path.setdefault(_normalize(entry.asm_path), []).append(entry)

    def __len__(self) -> int:
        return sum(len(entries) for entries in self._by_path.values())

    def is_decompiled(self, asm_path: Union[str, Path], name: str) -> bool:
        """False while a marker for this listing still names the function."""
        for entry in self._by_path.get(_normalize(asm_path), []):
            if name in entry.line:
                return False
        return True

    def mark(self, functions: Iterable[Function]) -> None:
        """Stamp ``decompiled`` on each function, fragments by their parent's name."""
        for function in functions:
            function.decompiled = self.is_decompiled(function.file, function.label)
