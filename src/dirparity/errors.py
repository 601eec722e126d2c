"""Failures raised by ``compare``.

Unreadable entries met during a walk are not errors: the enumerator skips
them and keeps going. Only the conditions below abort a comparison.
"""
from __future__ import annotations

from pathlib import Path


class CompareError(Exception):
    """Base class for fatal comparison failures."""


class RootNotFoundError(CompareError):
    """A root is missing, is not a directory, or cannot be listed."""

    def __init__(self, root: str | Path, reason: str = "Directory not found") -> None:
        self.root = Path(root)
        self.reason = reason
        super().__init__(f"{reason}: {root}")


class PathNormalizationError(CompareError):
    """A walked path could not be expressed relative to its root."""

    def __init__(self, root: str | Path, path: str | Path) -> None:
        self.root = Path(root)
        self.path = Path(path)
        super().__init__(f"Path {path} is not under root {root}")
