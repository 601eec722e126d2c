"""dirparity — structural diff of two directory trees.

Lists the files that exist under one root but not the other. Contents are
never compared; a path present on both sides counts as equal.

Public API:
- compare
- CompareConfig
- ComparisonReport
"""

from .comparison import compare
from .config import CompareConfig, load_config
from .errors import CompareError, PathNormalizationError, RootNotFoundError
from .models import ComparisonReport, Difference, FileSet

__all__ = [
    "compare",
    "CompareConfig",
    "load_config",
    "ComparisonReport",
    "Difference",
    "FileSet",
    "CompareError",
    "PathNormalizationError",
    "RootNotFoundError",
]
