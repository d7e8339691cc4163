"""Similarity scoring, fuzzy clustering and ordered comparison."""

from .bucket_map import LevenshteinBucketMap
from .compare import PairComparison, PairMatch, compare_ordered
from .similarity import edit_distance, similarity

__all__ = [
    "LevenshteinBucketMap",
    "PairComparison",
    "PairMatch",
    "compare_ordered",
    "edit_distance",
    "similarity",
]
