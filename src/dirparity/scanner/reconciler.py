from __future__ import annotations

import logging

from ..models import ComparisonReport, FileSet

logger = logging.getLogger(__name__)


def one_sided(probe: FileSet, lookup: FileSet) -> tuple[str, ...]:
    """Paths of ``probe`` that are missing from ``lookup``, sorted."""
    # ``in lookup`` is a frozenset hash probe
    return tuple(sorted(p for p in probe if p not in lookup))


def reconcile(files_a: FileSet, files_b: FileSet) -> ComparisonReport:
    """Compare two enumerations by presence only.

    Two passes: A probed against B, then B probed against A. Files present
    on both sides count as equal whatever their contents.
    """
    a_only = one_sided(files_a, files_b)
    b_only = one_sided(files_b, files_a)
    logger.info(
        f"Reconciled {len(files_a)} vs {len(files_b)} files: "
        f"{len(a_only)} only in {files_a.root}, {len(b_only)} only in {files_b.root}"
    )
    return ComparisonReport(
        root_a=files_a.root,
        root_b=files_b.root,
        a_only=a_only,
        b_only=b_only,
        files_a=len(files_a),
        files_b=len(files_b),
        skipped_a=files_a.skipped,
        skipped_b=files_b.skipped,
    )
