# tarball_service/util/fs.py
from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import Union

PathLike = Union[str, Path]


def ensure_under_root(root: PathLike, target: PathLike) -> Path:
    """
    Resolve `target` so it is guaranteed to be inside `root`.

    - If `target` is relative, interpret it under `root`.
    - If `target` is absolute, it must still live inside `root`.
    - Allows exact match with `root` or any descendant.
    """
    root_p = Path(root).resolve()
    tgt_p = Path(target)

    if not tgt_p.is_absolute():
        tgt_p = root_p / tgt_p

    # Resolve symlinks/.. and normalise
    tgt_p = tgt_p.resolve()

    # Reject escapes (use relative_to to avoid simple prefix checks)
    try:
        tgt_p.relative_to(root_p)
    except ValueError:
        raise ValueError(f"path escapes root: {target}")

    return tgt_p


def safe_member_path(name: str) -> Path:
    """
    Normalise an archive member name into a relative path.

    `.` and empty segments are dropped (`./a//b` -> `a/b`). Raises ValueError for
    absolute names, any `..` part, and names with nothing left after normalising.
    Backslashes count as separators so Windows-built archives get the same check.
    """
    normalized = name.replace("\\", "/")
    if PurePosixPath(normalized).is_absolute():
        raise ValueError(f"absolute path in archive: {name}")
    parts = [part for part in normalized.split("/") if part not in ("", ".")]
    if ".." in parts:
        raise ValueError(f"unsafe path in archive: {name}")
    if not parts:
        raise ValueError(f"empty path in archive: {name}")
    return Path(*parts)
