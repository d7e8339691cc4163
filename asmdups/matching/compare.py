"""Ordered two-directory comparison.

Unlike the clustering report this scores every cross pair and keeps the
first directory's order, which makes it easy to line up two overlays side by
side and spot where they share code.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from ..core.errors import ComparisonError
from ..core.types import DupsFile, Function
from .similarity import similarity

logger = logging.getLogger(__name__)


@dataclass
class PairMatch:
    """A function of the first directory matched with one of the second."""
    left: Function
    right: Function
    similarity: float


@dataclass
class PairComparison:
    """Result of comparing two directory snapshots."""
    left: DupsFile
    right: DupsFile
    threshold: float
    matches: List[PairMatch] = field(default_factory=list)

    def first_match(self, function: Function) -> Optional[PairMatch]:
        """First recorded match whose left side has this function's name."""
        for match in self.matches:
            if match.left.name == function.name:
                return match
        return None

    def ordered_view(self) -> List[Tuple[Function, Optional[PairMatch]]]:
        """Every function of the first directory in order, with its duplicate if any."""
        return [(function, self.first_match(function)) for function in self.left.funcs]


def compare_ordered(snapshots: Sequence[DupsFile], threshold: float) -> PairComparison:
    """Score every function of the first snapshot against every one of the second.

    Args:
        snapshots: Exactly two parsed directories
        threshold: Minimum similarity for a pair to be kept

    Raises:
        ComparisonError: If not given exactly two snapshots
    """
    if len(snapshots) != 2:
        raise ComparisonError(
            f"exactly two directories required for an ordered compare, got {len(snapshots)}",
            details={'directories': [s.name for s in snapshots]},
        )

    left, right = snapshots
    result = PairComparison(left=left, right=right, threshold=threshold)

    for f0 in left.funcs:
        for f1 in right.funcs:
            score = similarity(f0.key, f1.key)
            if score >= threshold:
                result.matches.append(PairMatch(left=f0, right=f1, similarity=score))

    logger.info(
        f"Compared {len(left)} x {len(right)} functions, {len(result.matches)} pairs "
        f"at or above {threshold}"
    )
    return result
