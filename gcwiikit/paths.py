"""Path formatting helpers."""

from __future__ import annotations

import os
from pathlib import PurePath


def path_display(path: str | os.PathLike) -> str:
    """Render a path without root and current-directory components."""
    return os.sep.join(
        part for part in PurePath(path).parts if part not in ("/", ".")
    )


def _ascii_lower(text: str) -> str:
    return "".join(c.lower() if c.isascii() else c for c in text)


def _extension(filename: str | os.PathLike) -> str | None:
    name = PurePath(filename).name
    if not name or name == "..":
        return None
    before, sep, after = name.rpartition(".")
    if not sep or not before:
        return None
    return after


def has_extension(filename: str | os.PathLike, extension: str) -> bool:
    """Whether the file's extension equals ``extension``, ignoring ASCII case."""
    ext = _extension(filename)
    return ext is not None and _ascii_lower(ext) == _ascii_lower(extension)