# Path canonicalization used before a walk starts.

from __future__ import annotations

import os
from typing import Union

SEPARATOR = "/"


class PathError(ValueError):
    """Raised when a path cannot be canonicalized."""


def clean(path: Union[str, os.PathLike]) -> str:
    """
    Return the canonical form of path.

    Repeated separators collapse to one, "." segments and trailing
    separators are removed, and a leading "/" is kept. ".." segments are
    left alone; resolving them would need the filesystem.

    Examples:
        >>> clean("/usr//local/./lib/")
        '/usr/local/lib'
        >>> clean("./a/b")
        'a/b'
        >>> clean("/")
        '/'

    Raises:
        PathError: If path is empty or contains a NUL byte.
    """
    raw = os.fspath(path)
    if isinstance(raw, bytes):
        raw = os.fsdecode(raw)

    if raw == "":
        raise PathError("Cannot clean an empty path")
    if "\0" in raw:
        raise PathError(f"Path contains a NUL byte: {raw!r}")

    absolute = raw.startswith(SEPARATOR)
    parts = [p for p in raw.split(SEPARATOR) if p not in ("", ".")]
    joined = SEPARATOR.join(parts)

    if absolute:
        return SEPARATOR + joined
    return joined or "."
