from __future__ import annotations

import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Callable, Literal

from .config import CompareConfig
from .models import ComparisonReport, FileSet
from .scanner.enumerator import check_root, enumerate_files
from .scanner.reconciler import reconcile

logger = logging.getLogger(__name__)

Root = str | os.PathLike[str]
EntryCallback = Callable[[Literal["a", "b"], str], None]


def compare(
    root_a: Root,
    root_b: Root,
    *,
    config: CompareConfig | None = None,
    parallel: bool | None = None,
    on_entry: EntryCallback | None = None,
) -> ComparisonReport:
    """Report which files exist under one root but not the other.

    Both roots are checked before either is walked, so a missing root fails
    fast instead of producing a one-sided report. ``parallel`` overrides
    ``config.parallel``. ``on_entry`` is called with ``"a"`` or ``"b"`` and
    the relative path of every file found (from a worker thread when
    running in parallel).

    Raises:
        RootNotFoundError: either root is missing or not a directory.
        PathNormalizationError: a walked path escaped its root.
    """
    cfg = config or CompareConfig()
    use_parallel = cfg.parallel if parallel is None else parallel
    start = time.time()

    check_root(root_a)
    check_root(root_b)

    def scan(root: Root, side: Literal["a", "b"]) -> FileSet:
        hook = partial(on_entry, side) if on_entry is not None else None
        return enumerate_files(
            root,
            ignore=cfg.ignore,
            follow_symlinks=cfg.follow_symlinks,
            on_entry=hook,
        )

    if use_parallel:
        with ThreadPoolExecutor(max_workers=2) as executor:
            future_a = executor.submit(scan, root_a, "a")
            future_b = executor.submit(scan, root_b, "b")
            # result() re-raises a worker's exception; no report is built then
            files_a = future_a.result()
            files_b = future_b.result()
    else:
        files_a = scan(root_a, "a")
        files_b = scan(root_b, "b")

    report = reconcile(files_a, files_b)
    logger.info(
        f"Compared {root_a} and {root_b} in {time.time() - start:.2f}s: "
        f"{'identical' if report.identical else f'{len(report.differences)} differences'}"
    )
    return report
