# addonhub/core/paths.py
import os
from pathlib import Path


def is_safe_path(candidate: str | os.PathLike, root: str | os.PathLike) -> bool:
    """
    Return True when ``candidate`` exists, is already canonical (resolving
    symlinks, ``.`` and ``..`` segments or doubled separators does not change
    it) and lives under ``root``.

    Used to stop screenshot paths declared by a package from escaping the
    downloaded artifact directory.
    """
    raw = os.fspath(candidate)
    if not os.path.isabs(raw):
        raw = os.path.join(os.getcwd(), raw)
    try:
        resolved = Path(raw).resolve(strict=True)
    except (OSError, RuntimeError, ValueError):
        # missing file, symlink loop or embedded NUL
        return False

    if str(resolved) != raw:
        return False

    root_resolved = Path(root).resolve()
    return resolved == root_resolved or root_resolved in resolved.parents
