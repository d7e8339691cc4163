"""
Approximate bucket map: clusters functions by signature similarity.

A normal dict cannot be used because membership is decided by a similarity
threshold rather than exact key equality, and similarity is not transitive.
Entries are kept as an ordered list of (representative key, cluster) pairs and
every insert scans them in creation order; the first representative that is
similar enough claims the new function.
"""

from __future__ import annotations

import logging
from typing import Iterator, List, Tuple

from ..core.types import Function, Key
from .similarity import similarity, similarity_upper_bound

logger = logging.getLogger(__name__)

Cluster = List[Function]
Entry = Tuple[Key, Cluster]


class LevenshteinBucketMap:
    """Map from a representative signature to the functions similar to it.

    Args:
        threshold: Minimum similarity (0-1) to join an existing cluster.
            1.0 only groups identical signatures.
        length_prefilter: Skip representatives whose length alone rules out
            reaching the threshold. Never changes the resulting clusters.
    """

    def __init__(self, threshold: float, length_prefilter: bool = True) -> None:
        if not 0.0 <= threshold <= 1.0:
            raise ValueError(f"threshold must be between 0 and 1, got {threshold}")
        self.threshold = threshold
        self.length_prefilter = length_prefilter
        self._entries: List[Entry] = []
        self.comparisons = 0  # scorer calls made while routing inserts

    def insert(self, key: Key, value: Function) -> None:
        """Add a function to the first cluster whose representative matches."""
        if not value.ops:
            raise ValueError(f"cannot index function {value.name!r} with no instructions")

        key = tuple(key)
        for representative, cluster in self._entries:
            if (
                self.length_prefilter
                and similarity_upper_bound(len(key), len(representative)) < self.threshold
            ):
                continue

            self.comparisons += 1
            if similarity(key, representative) >= self.threshold:
                value.similarity = similarity(value.key, cluster[0].key)
                cluster.append(value)
                return

        self._entries.append((key, [value]))

    def insert_all(self, functions: List[Function]) -> None:
        for function in functions:
            self.insert(function.key, function)
        logger.debug(
            f"Indexed {len(functions)} functions into {len(self._entries)} clusters "
            f"({self.comparisons} comparisons)"
        )

    def entries(self) -> List[Entry]:
        """All (representative key, cluster) pairs in creation order."""
        return list(self._entries)

    def clusters(self) -> List[Cluster]:
        return [cluster for _, cluster in self._entries]

    def duplicate_clusters(self) -> List[Cluster]:
        """Clusters with more than one member, i.e. actual findings."""
        return [cluster for _, cluster in self._entries if len(cluster) > 1]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self._entries)
