from __future__ import annotations

from fnmatch import fnmatchcase
from typing import Sequence


def _normalize(value: str) -> str:
    return value.replace("\\", "/").strip("/")


def matches_ignore_pattern(rel_path: str, patterns: Sequence[str]) -> bool:
    """Check if a root-relative path matches any of the ignore patterns.

    Supports glob patterns like:
    - "**/.DS_Store" - match .DS_Store in any directory
    - ".git/**" - match everything under .git
    - "*.tmp" - match .tmp files (``*`` also crosses "/")
    - "cache/**/*.bin" - ``**`` in the middle spans any number of directories

    Args:
        rel_path: Path relative to the scanned root (forward slashes)
        patterns: Glob patterns to match against

    Returns:
        True if the path matches any pattern and should be left out
    """
    rel_path = _normalize(rel_path)
    parts = rel_path.split("/")

    for pattern in patterns:
        pattern = _normalize(pattern)
        if not pattern:
            continue

        if pattern.startswith("**/"):
            suffix = pattern[3:]
            # Any trailing run of components may match the suffix
            for i in range(len(parts)):
                if fnmatchcase("/".join(parts[i:]), suffix):
                    return True

        elif pattern.endswith("/**"):
            prefix = pattern[:-3]
            # The prefix is a glob too: try each leading run of components
            for i in range(1, len(parts) + 1):
                if fnmatchcase("/".join(parts[:i]), prefix):
                    return True

        elif fnmatchcase(rel_path, pattern):
            return True

    return False


def prunes_directory(rel_dir: str, patterns: Sequence[str]) -> bool:
    """True if every file under ``rel_dir`` would be ignored.

    Only ``dir/**`` and ``**/dir/**`` style patterns prune a whole subtree;
    anything else is decided per file.
    """
    for pattern in patterns:
        pattern = _normalize(pattern)
        if pattern.endswith("/**") and matches_ignore_pattern(rel_dir, [pattern[:-3]]):
            return True
    return False
