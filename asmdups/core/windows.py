"""Sliding-window fragmentation of parsed functions.

Fragments let two otherwise different functions match on a shared inlined
routine.
"""

from typing import List

from .signature import signature_key
from .types import Function

DEFAULT_STRIDE = 4
DEFAULT_WINDOW_SIZE = 32


def apply_sliding_window(
    function: Function,
    stride: int = DEFAULT_STRIDE,
    size: int = DEFAULT_WINDOW_SIZE,
) -> List[Function]:
    """Cut fixed-size fragments out of a function.

    Windows start at 0, stride, 2*stride, ... and stop once a full window no
    longer fits; there is no short trailing window.

    Args:
        function: Parsed function to fragment
        stride: Distance between window starts
        size: Number of instructions per window

    Returns:
        Fragments named ``<name>:<first>:<last>``
    """
    if stride < 1:
        raise ValueError(f"stride must be positive, got {stride}")
    if size < 1:
        raise ValueError(f"window size must be positive, got {size}")

    ops = function.ops
    fragments: List[Function] = []

    for start in range(0, len(ops), stride):
        end = start + size
        if end > len(ops):
            break

        window_ops = ops[start:end]
        fragments.append(
            Function(
                name=f"{function.name}:{start}:{end - 1}",
                ops=window_ops,
                key=signature_key(window_ops),
                dir=function.dir,
                file=function.file,
                parent=function.label,
            )
        )

    return fragments
