"""Path utilities: canonical cache keys and directory prefix helpers.

Rules shared by every store:
- A cache key never starts or ends with '/'; the root is the empty string and is never stored;
- A descendant of directory ``d`` is any key starting with ``d + '/'``.
"""

from __future__ import annotations

SEPARATOR = "/"


def trim_path(p: str | None) -> str:
    return (p or "").strip(SEPARATOR)


def descendant_prefix(dir_key: str) -> str:
    return dir_key + SEPARATOR


def is_descendant(path: str, dir_key: str) -> bool:
    """True when ``path`` lies strictly below ``dir_key`` (``a/bc`` is not below ``a/b``)."""
    if not dir_key:
        return bool(path)
    return path.startswith(descendant_prefix(dir_key))
