"""
Normalized edit-distance similarity between signature sequences.

This is the hot loop of the whole tool: clustering a corpus calls it once per
(candidate, representative) pair. The dynamic-programming table is evaluated
one row at a time with numpy. Within a row, substitution and deletion only
depend on the previous row and are computed in one vectorized step; the
insertion chain ``row[j] = min(row[j], row[j - 1] + 1)`` is resolved with a
running minimum over ``row - j``.
"""

from typing import Sequence, Union

import numpy as np

Signature = Union[Sequence[int], bytes, str]


def _as_array(seq: Signature) -> np.ndarray:
    if isinstance(seq, str):
        # One element per character, not per encoded byte
        return np.fromiter(map(ord, seq), dtype=np.int64, count=len(seq))
    return np.fromiter(seq, dtype=np.int64, count=len(seq))


def _distance(arr_a: np.ndarray, arr_b: np.ndarray) -> int:
    len_a, len_b = len(arr_a), len(arr_b)
    if len_a == 0:
        return len_b
    if len_b == 0:
        return len_a

    offsets = np.arange(len_b + 1, dtype=np.int64)
    prev = offsets.copy()
    row = np.empty(len_b + 1, dtype=np.int64)
    for i in range(len_a):
        row[0] = i + 1
        changed = np.minimum(prev[:-1], prev[1:]) + 1
        row[1:] = np.where(arr_b == arr_a[i], prev[:-1], changed)
        prev = np.minimum.accumulate(row - offsets) + offsets

    return int(prev[-1])


def edit_distance(a: Signature, b: Signature) -> int:
    """Unit-cost Levenshtein distance between two sequences."""
    return _distance(_as_array(a), _as_array(b))


def similarity(a: Signature, b: Signature) -> float:
    """Similarity in [0, 1]: ``(max_len - distance) / max_len``.

    Two empty sequences are identical and score 1.0.
    """
    arr_a, arr_b = _as_array(a), _as_array(b)
    max_len = max(len(arr_a), len(arr_b))
    if max_len == 0:
        return 1.0
    return (max_len - _distance(arr_a, arr_b)) / max_len


def similarity_upper_bound(len_a: int, len_b: int) -> float:
    """Best similarity two sequences of these lengths could reach.

    The distance is at least the length difference, so the score can never
    exceed this value.
    """
    max_len = max(len_a, len_b)
    if max_len == 0:
        return 1.0
    return (max_len - abs(len_a - len_b)) / max_len
