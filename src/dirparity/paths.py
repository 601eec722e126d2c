from __future__ import annotations

from pathlib import PurePath

from .errors import PathNormalizationError

def relpath(root: str | PurePath, path: str | PurePath) -> str:
    """Return ``path`` relative to ``root`` in forward-slash form.

    Raises PathNormalizationError if ``path`` does not live under ``root``
    or is the root itself.
    """
    try:
        rel = PurePath(path).relative_to(PurePath(root))
    except ValueError as e:
        raise PathNormalizationError(root, path) from e
    if not rel.parts:
        raise PathNormalizationError(root, path)
    return rel.as_posix()
