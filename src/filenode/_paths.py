"""Location helpers: scheme checks, directory-path marking, joining.

A location is a ``str`` or ``os.PathLike``.  Whether a location names a
directory is a property of its spelling: a trailing separator marks it.
"""

from __future__ import annotations

import os
import re
from urllib.parse import unquote, urlparse

from .exceptions import UnsupportedLocation

_SCHEME_RE = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]*)://")


def _separators() -> tuple[str, ...]:
    if os.sep == "/":
        return ("/",)
    return ("/", os.sep)


def local_path(location: str | os.PathLike[str]) -> str:
    """Return *location* as a local path string.

    ``file://`` URLs are converted.  Any other URL scheme raises
    :class:`UnsupportedLocation`.
    """
    path = os.fspath(location)
    if not isinstance(path, str):
        raise UnsupportedLocation(f"Unsupported location: {path!r}")
    m = _SCHEME_RE.match(path)
    if m is None:
        return path
    if m.group(1).lower() != "file":
        raise UnsupportedLocation(
            f"Location is not directly accessible: {path}", path=path,
        )
    parsed = urlparse(path)
    if parsed.netloc not in ("", "localhost"):
        raise UnsupportedLocation(f"Remote file URL: {path}", path=path)
    return unquote(parsed.path)


def is_directory_path(path: str) -> bool:
    """Return True if *path* is spelled as a directory (trailing separator)."""
    return path.endswith(_separators())


def base_name(path: str) -> str:
    """Return the final component of *path*, ignoring a trailing separator."""
    stripped = path.rstrip("".join(_separators()))
    if not stripped:
        return ""
    return os.path.basename(stripped)


def _check_name(name: str) -> str:
    """Validate a single path segment used as an on-disk name."""
    if not name:
        raise ValueError("Name must not be empty")
    if name in (".", ".."):
        raise ValueError(f"Invalid name: {name!r}")
    if "\0" in name or any(sep in name for sep in _separators()):
        raise ValueError(f"Name must be a single path segment: {name!r}")
    return name


def join(path: str, name: str, *, directory: bool) -> str:
    """Append *name* to *path*, marking the result as a directory if asked."""
    _check_name(name)
    if path and not is_directory_path(path):
        path += "/"
    child = path + name
    return child + "/" if directory else child
