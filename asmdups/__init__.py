"""asmdups - find duplicated functions across disassembled listings."""

__version__ = "0.1.0"

from .core.types import DupsFile, Function, Instruction
from .matching.bucket_map import LevenshteinBucketMap
from .matching.similarity import similarity

__all__ = ["DupsFile", "Function", "Instruction", "LevenshteinBucketMap", "similarity", "__version__"]
