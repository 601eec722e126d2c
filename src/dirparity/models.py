from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator, Literal

Side = Literal["a_only", "b_only"]

@dataclass(frozen=True)
class FileSet:
    """Root-relative paths of every regular file found under ``root``.

    ``skipped`` counts entries that could not be read during the walk.
    Those files are simply absent from ``paths``.
    """
    root: Path
    paths: frozenset[str] = field(default_factory=frozenset)
    skipped: int = 0

    def __contains__(self, rel_path: object) -> bool:
        return rel_path in self.paths

    def __iter__(self) -> Iterator[str]:
        return iter(self.paths)

    def __len__(self) -> int:
        return len(self.paths)

@dataclass(frozen=True)
class Difference:
    side: Side
    path: str

@dataclass(frozen=True)
class ComparisonReport:
    """Outcome of comparing two trees.

    ``a_only`` and ``b_only`` are sorted so that repeated runs over
    unchanged trees render identically.
    """
    root_a: Path
    root_b: Path
    a_only: tuple[str, ...] = ()
    b_only: tuple[str, ...] = ()
    files_a: int = 0
    files_b: int = 0
    skipped_a: int = 0
    skipped_b: int = 0

    @property
    def identical(self) -> bool:
        return not self.a_only and not self.b_only

    @property
    def differences(self) -> list[Difference]:
        diffs = [Difference(side="a_only", path=p) for p in self.a_only]
        diffs.extend(Difference(side="b_only", path=p) for p in self.b_only)
        return diffs

    def swapped(self) -> "ComparisonReport":
        return ComparisonReport(
            root_a=self.root_b,
            root_b=self.root_a,
            a_only=self.b_only,
            b_only=self.a_only,
            files_a=self.files_b,
            files_b=self.files_a,
            skipped_a=self.skipped_b,
            skipped_b=self.skipped_a,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "root_a": str(self.root_a),
            "root_b": str(self.root_b),
            "identical": self.identical,
            "a_only": list(self.a_only),
            "b_only": list(self.b_only),
            "files_a": self.files_a,
            "files_b": self.files_b,
            "skipped_a": self.skipped_a,
            "skipped_b": self.skipped_b,
        }
