from __future__ import annotations

import logging
from pathlib import Path

import pytest


@pytest.fixture
def make_tree(tmp_path: Path):
    """Build a directory under tmp_path holding the given relative files."""

    def _make(name: str, files: list[str] | tuple[str, ...] = (), dirs: tuple[str, ...] = ()) -> Path:
        root = tmp_path / name
        root.mkdir()
        for rel in files:
            p = root / rel
            p.parent.mkdir(parents=True, exist_ok=True)
            p.write_text(f"content of {rel}")
        for d in dirs:
            (root / d).mkdir(parents=True, exist_ok=True)
        return root

    return _make


@pytest.fixture(autouse=True)
def _reset_dirparity_logger():
    yield
    logger = logging.getLogger("dirparity")
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
    logger.setLevel(logging.NOTSET)
