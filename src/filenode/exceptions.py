"""Exceptions for filenode.

Every error raised by the library derives from :class:`FileNodeError`.
Failures reported by a :class:`~filenode.access.FileAccess` backend are
chained, so the native :class:`OSError` is available as ``__cause__``.
"""

from __future__ import annotations


class FileNodeError(Exception):
    """Base class for all filenode errors.

    Attributes:
        path: The location involved in the failure, when there is one.
    """

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class UnsupportedLocation(FileNodeError):
    """The location cannot be reached through direct filesystem access."""


class ReadFailure(FileNodeError):
    """Reading the bytes of a file failed."""


class WriteFailure(FileNodeError):
    """Writing the bytes of a file failed."""


class ListFailure(ReadFailure):
    """Listing the entries of a directory failed.

    A :class:`ReadFailure`, so snapshot callers can catch one class.
    """


class CreateFailure(FileNodeError):
    """Creating a directory failed."""


class RemovalFailure(FileNodeError):
    """Removing an existing entity failed."""


class DestinationExists(FileNodeError):
    """A directory was written over an existing entity.

    The existing entity is removed before this is raised.  If that removal
    failed too, its error is kept in :attr:`cleanup_error` (and chained as
    ``__cause__``).
    """

    def __init__(self, message: str, path: str | None = None,
                 cleanup_error: FileNodeError | None = None):
        super().__init__(message, path)
        self.cleanup_error = cleanup_error


class DestinationNotDirectoryPath(FileNodeError):
    """A directory was written to a location not marked as a directory path."""


class InconsistentChild(FileNodeError):
    """A child read from disk came back without a usable name."""


class NotADirectory(FileNodeError):
    """A child operation was attempted on a regular-file node."""


class DuplicateResolvedName(FileNodeError):
    """Two siblings resolve to the same on-disk name.

    Attributes:
        name: The colliding name.
    """

    def __init__(self, name: str, path: str | None = None):
        super().__init__(f"Two children resolve to the same name: {name!r}", path)
        self.name = name


class AlreadyAttached(FileNodeError):
    """The node already belongs to a directory; detach it first."""


class CyclicInsertion(FileNodeError):
    """A directory was inserted into its own subtree."""
