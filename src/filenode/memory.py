"""In-memory :class:`~filenode.access.FileAccess` backend.

Keeps a flat map of normalized paths to file bytes (``None`` for
directories) and records every mutating call in :attr:`calls`, in order.
Failures can be injected per operation and path with :meth:`fail`.
"""

from __future__ import annotations

import posixpath

from . import _paths
from ._types import ReadingOptions
from .access import FileAccess
from .exceptions import (
    CreateFailure,
    FileNodeError,
    ListFailure,
    ReadFailure,
    RemovalFailure,
    WriteFailure,
)

_FAILURES: dict[str, type[FileNodeError]] = {
    "list": ListFailure,
    "read": ReadFailure,
    "write": WriteFailure,
    "mkdir": CreateFailure,
    "remove": RemovalFailure,
}


def _key(path: str) -> str:
    stripped = path.rstrip("/")
    if not stripped:
        return "/"
    return posixpath.normpath(stripped)


class MemoryFileAccess(FileAccess):
    """A :class:`FileAccess` that never touches the host filesystem.

    Attributes:
        calls: ``(operation, path)`` tuples for each ``write``, ``mkdir``
            and ``remove``, paths normalized without a trailing ``/``.
    """

    def __init__(self):
        self._entries: dict[str, bytes | None] = {"/": None}
        self._failures: set[tuple[str, str]] = set()
        self.calls: list[tuple[str, str]] = []

    def fail(self, operation: str, path: str) -> None:
        """Make the next and all later *operation* calls on *path* fail.

        *operation* is one of ``list``, ``read``, ``write``, ``mkdir``,
        ``remove``.
        """
        if operation not in _FAILURES:
            raise ValueError(f"Unknown operation: {operation!r}")
        self._failures.add((operation, _key(path)))

    def _check(self, operation: str, key: str, path: str) -> None:
        if (operation, key) in self._failures:
            raise _FAILURES[operation](f"Injected {operation} failure: {path}", path=path)

    def _parent_is_directory(self, key: str) -> bool:
        parent = posixpath.dirname(key)
        if parent in ("", "/"):
            return True
        return parent in self._entries and self._entries[parent] is None

    # -- queries -------------------------------------------------------------

    def exists(self, path: str) -> bool:
        return _key(path) in self._entries

    def is_directory(self, path: str) -> bool:
        key = _key(path)
        return key in self._entries and self._entries[key] is None

    def list_children(self, path: str) -> list[str]:
        key = _key(path)
        self._check("list", key, path)
        if not self.is_directory(key):
            raise ListFailure(f"Not a directory: {path}", path=path)
        result = []
        for entry, data in self._entries.items():
            if entry != key and posixpath.dirname(entry) == key:
                name = posixpath.basename(entry)
                result.append(_paths.join(path, name, directory=data is None))
        return result

    def read_all(self, path: str, options: ReadingOptions = ReadingOptions(0)) -> bytes:
        key = _key(path)
        self._check("read", key, path)
        data = self._entries.get(key)
        if data is None:
            reason = "Is a directory" if key in self._entries else "No such file"
            raise ReadFailure(f"Cannot read {path}: {reason}", path=path)
        return data

    # -- mutations -----------------------------------------------------------

    def write_all(self, path: str, data: bytes, *, atomic: bool = False) -> None:
        key = _key(path)
        self.calls.append(("write", key))
        self._check("write", key, path)
        if not self._parent_is_directory(key):
            raise WriteFailure(f"Cannot write {path}: No such directory", path=path)
        if self.is_directory(key):
            raise WriteFailure(f"Cannot write {path}: Is a directory", path=path)
        self._entries[key] = bytes(data)

    def create_directory(self, path: str, *, recursive: bool = False) -> None:
        key = _key(path)
        self.calls.append(("mkdir", key))
        self._check("mkdir", key, path)
        if key in self._entries:
            raise CreateFailure(f"Cannot create directory {path}: File exists", path=path)
        if not self._parent_is_directory(key):
            if not recursive:
                raise CreateFailure(
                    f"Cannot create directory {path}: No such directory", path=path,
                )
            parent = posixpath.dirname(key)
            if self.exists(parent):
                raise CreateFailure(
                    f"Cannot create directory {path}: Not a directory", path=path,
                )
            self.create_directory(parent, recursive=True)
        self._entries[key] = None

    def remove_recursive(self, path: str) -> None:
        key = _key(path)
        self.calls.append(("remove", key))
        self._check("remove", key, path)
        if key not in self._entries:
            raise RemovalFailure(f"Cannot remove {path}: No such file", path=path)
        prefix = key.rstrip("/") + "/"
        for entry in [e for e in self._entries if e == key or e.startswith(prefix)]:
            del self._entries[entry]
        self._entries.setdefault("/", None)
