"""Filesystem access used by node trees.

:class:`FileAccess` is the small set of filesystem operations a node tree
needs to read itself from, and write itself to, a location.
:class:`LocalFileAccess` implements it on the host filesystem.  Every
backend reports failures with the :mod:`filenode.exceptions` taxonomy,
chaining the native error.
"""

from __future__ import annotations

import logging
import mmap
import os
import shutil
import stat
import tempfile
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Hashable, Iterator

from . import _paths
from ._types import ReadingOptions
from .exceptions import (
    CreateFailure,
    FileNodeError,
    ListFailure,
    ReadFailure,
    RemovalFailure,
    WriteFailure,
)

logger = logging.getLogger(__name__)


class FileAccess(ABC):
    """Filesystem operations consumed by :class:`~filenode.FileNode`.

    Paths are local path strings.  A trailing ``/`` marks a directory path.
    """

    def is_directory_path(self, path: str) -> bool:
        """Return True if *path* is spelled as a directory path."""
        return _paths.is_directory_path(path)

    def identity(self, path: str) -> Hashable | None:
        """Return a key naming the directory at *path* itself, or None.

        Two paths reaching the same directory (through symlinks) share a
        key.  Backends without links return None.
        """
        return None

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Return True if any entity exists at *path*."""

    @abstractmethod
    def is_directory(self, path: str) -> bool:
        """Return True if a directory exists at *path*."""

    @abstractmethod
    def list_children(self, path: str) -> list[str]:
        """Return the paths of the immediate entries of directory *path*.

        Directory entries are returned with a trailing ``/``.
        Raises :class:`ListFailure`.
        """

    @abstractmethod
    def read_all(self, path: str, options: ReadingOptions = ReadingOptions(0)) -> bytes:
        """Return the full contents of file *path*. Raises :class:`ReadFailure`."""

    @abstractmethod
    def write_all(self, path: str, data: bytes, *, atomic: bool = False) -> None:
        """Write *data* to *path*. Raises :class:`WriteFailure`."""

    @abstractmethod
    def create_directory(self, path: str, *, recursive: bool = False) -> None:
        """Create directory *path*. Raises :class:`CreateFailure`."""

    @abstractmethod
    def remove_recursive(self, path: str) -> None:
        """Remove the entity at *path*, recursively. Raises :class:`RemovalFailure`."""


@contextmanager
def _reraise(error_cls: type[FileNodeError], action: str, path: str) -> Iterator[None]:
    """Translate :class:`OSError` raised in the block into *error_cls*."""
    try:
        yield
    except OSError as exc:
        reason = exc.strerror or str(exc)
        raise error_cls(f"Cannot {action} {path}: {reason}", path=path) from exc


def _umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


def _native(path: str) -> str:
    """Strip a trailing directory marker so stat-style calls see the entry itself."""
    stripped = path.rstrip("/" + os.sep)
    return stripped or path


class LocalFileAccess(FileAccess):
    """:class:`FileAccess` over the host filesystem."""

    def exists(self, path: str) -> bool:
        return os.path.lexists(_native(path))

    def is_directory(self, path: str) -> bool:
        return os.path.isdir(_native(path))

    def identity(self, path: str) -> tuple[int, int]:
        with _reraise(ReadFailure, "stat", path):
            st = os.stat(_native(path))
        return (st.st_dev, st.st_ino)

    def list_children(self, path: str) -> list[str]:
        result = []
        with _reraise(ListFailure, "list", path):
            with os.scandir(_native(path)) as it:
                for entry in it:
                    is_dir = entry.is_dir(follow_symlinks=True)
                    result.append(_paths.join(path, entry.name, directory=is_dir))
        return result

    def read_all(self, path: str, options: ReadingOptions = ReadingOptions(0)) -> bytes:
        logger.debug("read %s", path)
        with _reraise(ReadFailure, "read", path):
            with open(_native(path), "rb") as f:
                st = os.fstat(f.fileno())
                if (ReadingOptions.WITHOUT_MAPPING in options
                        or not stat.S_ISREG(st.st_mode) or st.st_size == 0):
                    return f.read()
                with mmap.mmap(f.fileno(), 0, access=mmap.ACCESS_READ) as m:
                    return m[:]

    def write_all(self, path: str, data: bytes, *, atomic: bool = False) -> None:
        logger.debug("write %s (%d bytes, atomic=%s)", path, len(data), atomic)
        target = _native(path)
        with _reraise(WriteFailure, "write", path):
            if not atomic:
                with open(target, "wb") as f:
                    f.write(data)
                return
            parent = os.path.dirname(target) or "."
            fd, tmp = tempfile.mkstemp(
                dir=parent, prefix=f".{os.path.basename(target)}.", suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(data)
                os.chmod(tmp, 0o666 & ~_umask())
                os.replace(tmp, target)
            except BaseException:
                if os.path.lexists(tmp):
                    os.unlink(tmp)
                raise

    def create_directory(self, path: str, *, recursive: bool = False) -> None:
        logger.debug("mkdir %s", path)
        with _reraise(CreateFailure, "create directory", path):
            if recursive:
                os.makedirs(_native(path))
            else:
                os.mkdir(_native(path))

    def remove_recursive(self, path: str) -> None:
        logger.debug("remove %s", path)
        target = _native(path)
        with _reraise(RemovalFailure, "remove", path):
            if os.path.isdir(target) and not os.path.islink(target):
                shutil.rmtree(target)
            else:
                os.unlink(target)


LOCAL = LocalFileAccess()
"""Shared host-filesystem backend used when no ``access`` is given."""
