from .node import FileNode, RegularFile, Directory
from ._types import ReadingOptions, WritingOptions
from .access import FileAccess, LocalFileAccess
from .memory import MemoryFileAccess
from .exceptions import (
    FileNodeError,
    UnsupportedLocation,
    ReadFailure,
    WriteFailure,
    ListFailure,
    CreateFailure,
    RemovalFailure,
    DestinationExists,
    DestinationNotDirectoryPath,
    InconsistentChild,
    NotADirectory,
    DuplicateResolvedName,
    AlreadyAttached,
    CyclicInsertion,
)

__all__ = [
    "FileNode", "RegularFile", "Directory",
    "ReadingOptions", "WritingOptions",
    "FileAccess", "LocalFileAccess", "MemoryFileAccess",
    "FileNodeError", "UnsupportedLocation",
    "ReadFailure", "WriteFailure", "ListFailure", "CreateFailure", "RemovalFailure",
    "DestinationExists", "DestinationNotDirectoryPath", "InconsistentChild",
    "NotADirectory", "DuplicateResolvedName", "AlreadyAttached", "CyclicInsertion",
]
