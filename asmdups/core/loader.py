"""Directory traversal and corpus loading."""

import logging
import os
from pathlib import Path
from typing import Iterable, List, Union

from .errors import TraversalError
from .parser import is_indexable, parse_file
from .types import DupsFile, Function, vram_sort_key
from .windows import DEFAULT_STRIDE, DEFAULT_WINDOW_SIZE, apply_sliding_window

logger = logging.getLogger(__name__)


def collect_files(root: Union[str, Path], extension: str) -> List[Path]:
    """Collect files ending in ``extension`` under root, recursively.

    Entries are visited in name order so that runs are reproducible.

    Raises:
        TraversalError: If root or any directory below it cannot be listed
    """
    root = Path(root)
    try:
        with os.scandir(root) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as e:
        logger.error(f"Unable to read directory {root}: {e}")
        raise TraversalError(f"Unable to read directory {root}: {e}", path=str(root)) from e

    files: List[Path] = []
    for entry in entries:
        path = Path(entry.path)
        if entry.is_dir():
            files.extend(collect_files(path, extension))
        elif entry.is_file() and entry.name.endswith(extension):
            files.append(path)
    return files


def load_directory(
    root: Union[str, Path],
    extension: str = ".s",
    stride: int = DEFAULT_STRIDE,
    size: int = DEFAULT_WINDOW_SIZE,
) -> List[Function]:
    """Parse every listing under root into functions plus window fragments.

    Empty listings and ``jr $ra; nop`` stubs are dropped. Each kept function
    is followed by its fragments.
    """
    root_name = str(root)
    functions: List[Function] = []
    skipped = 0

    for path in collect_files(root, extension):
        logger.debug(f"checking {path}")
        function = parse_file(path, root_name)
        if not is_indexable(function):
            skipped += 1
            continue
        functions.append(function)
        functions.extend(apply_sliding_window(function, stride, size))

    if skipped:
        logger.debug(f"Skipped {skipped} empty or stub listings under {root_name}")
    return functions


def load_snapshot(
    root: Union[str, Path],
    extension: str = ".s",
    stride: int = DEFAULT_STRIDE,
    size: int = DEFAULT_WINDOW_SIZE,
) -> DupsFile:
    """Load a directory and order its functions by first virtual address."""
    functions = load_directory(root, extension, stride, size)
    functions.sort(key=vram_sort_key)
    return DupsFile(name=str(root), funcs=functions)


def log_snapshot_listing(snapshots: Iterable[DupsFile]) -> None:
    """Log every function of every snapshot with its instruction count."""
    for snapshot in snapshots:
        logger.info(f"file {snapshot.name}")
        for function in snapshot.funcs:
            logger.info(f"\t{function.name} {len(function.ops)}")
