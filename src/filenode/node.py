"""In-memory file trees.

A :class:`FileNode` is either a :class:`RegularFile` holding bytes or a
:class:`Directory` holding named children.  Trees can be snapshotted from a
location with :meth:`FileNode.from_filesystem`, edited in memory, and
written back out with :meth:`FileNode.write`.

Names
-----
Each node carries two optional names:

- ``stored_name``: the name the node was read from or committed under.
- ``preferred_name``: the name the node asks to be filed under.

:meth:`FileNode.resolved_name` picks the on-disk name: stored name, else
preferred name, else a freshly generated token.  It never mutates the
node; :meth:`FileNode.commit_name` records the result.
"""

from __future__ import annotations

import logging
import os
import uuid
from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import Iterator, Mapping

from dulwich.objects import Blob, Tree

from . import _paths
from ._types import ReadingOptions, WritingOptions
from .access import LOCAL, FileAccess
from .exceptions import (
    AlreadyAttached,
    CyclicInsertion,
    DestinationExists,
    DestinationNotDirectoryPath,
    DuplicateResolvedName,
    InconsistentChild,
    NotADirectory,
    ReadFailure,
    RemovalFailure,
)

logger = logging.getLogger(__name__)

GIT_FILEMODE_TREE = 0o040000
GIT_FILEMODE_BLOB = 0o100644


def _new_name() -> str:
    return uuid.uuid4().hex


class FileNode(ABC):
    """Base class for regular-file and directory nodes.

    Use :meth:`leaf`, :meth:`directory` or :meth:`from_filesystem` to
    create nodes.
    """

    def __init__(self):
        self.stored_name: str | None = None
        self.preferred_name: str | None = None
        self._attached = False

    # -- construction --------------------------------------------------------

    @staticmethod
    def leaf(payload: bytes) -> RegularFile:
        """Return a regular-file node holding *payload*."""
        return RegularFile(payload)

    @staticmethod
    def directory(children: Mapping[str, FileNode] | None = None) -> Directory:
        """Return a directory node whose children are exactly *children*."""
        return Directory(children)

    @staticmethod
    def from_filesystem(
        location: str | os.PathLike[str],
        options: ReadingOptions = ReadingOptions(0),
        *,
        access: FileAccess | None = None,
    ) -> FileNode:
        """Snapshot the file or directory tree at *location*.

        Both names of every node read are set to its final path component.

        Raises:
            UnsupportedLocation: *location* is not a local path.
            ReadFailure: a file could not be read, a directory could not
                be listed (:class:`ListFailure`), or a symlink loops back
                to an ancestor directory.
            InconsistentChild: an entry came back without a name.
        """
        access = access or LOCAL
        return _read_node(_paths.local_path(location), options, access)

    # -- classification ------------------------------------------------------

    @property
    def is_leaf(self) -> bool:
        """True for regular-file nodes."""
        return False

    @property
    def is_directory(self) -> bool:
        """True for directory nodes."""
        return not self.is_leaf

    # -- names ---------------------------------------------------------------

    def resolved_name(self) -> str:
        """Return the name this node would be written under.

        Stored name, else preferred name, else a new unique token.  Does
        not modify the node; two calls on an unnamed node differ.
        """
        if self.stored_name is not None:
            return self.stored_name
        if self.preferred_name is not None:
            return self.preferred_name
        return _new_name()

    def commit_name(self, name: str | None = None) -> str:
        """Record *name* (or the resolved name) as the stored name.

        A stored name, once set, is kept; the existing value is returned.
        """
        if self.stored_name is None:
            self.stored_name = self.resolved_name() if name is None else name
        return self.stored_name

    def _label(self) -> str | None:
        return self.stored_name if self.stored_name is not None else self.preferred_name

    # -- mutation ------------------------------------------------------------

    def add_child(self, child: FileNode) -> str:
        """Insert *child*; only directories have children."""
        raise NotADirectory(
            f"Cannot add a child to a regular file ({self._label()!r})",
        )

    # -- content -------------------------------------------------------------

    @property
    @abstractmethod
    def oid(self) -> str:
        """Git object id (hex) of this node's content."""

    # -- writing -------------------------------------------------------------

    def write(
        self,
        location: str | os.PathLike[str],
        options: WritingOptions = WritingOptions(0),
        original_contents_path: str | os.PathLike[str] | None = None,
        *,
        access: FileAccess | None = None,
    ) -> None:
        """Recursively write this node to *location*.

        A regular file replaces whatever exists at *location*.  A directory
        needs a directory path (trailing ``/``) that does not exist yet;
        its parent must exist.  Children are written in sorted key order,
        each under its :meth:`resolved_name`.  The first failure aborts the
        whole write; entries already written stay on disk.

        Every sibling name is resolved and checked before anything is
        written, so :class:`DuplicateResolvedName` leaves the disk
        untouched.

        *original_contents_path* names an earlier revision of the tree.  It
        is carried down to every child but files are always rewritten.

        Raises:
            UnsupportedLocation: *location* is not a local path.
            DestinationNotDirectoryPath: a directory was written to a path
                without a trailing ``/``.
            DestinationExists: a directory was written over an existing
                entity, which has been removed.
            DuplicateResolvedName: two siblings share a resolved name.
            RemovalFailure, WriteFailure, CreateFailure: backend failures.
        """
        access = access or LOCAL
        path = _paths.local_path(location)
        original = None
        if original_contents_path is not None:
            original = _paths.local_path(original_contents_path)

        steps = list(self._plan(path, original, None))
        logger.debug("write %r to %s (%d entries)", self, path, len(steps))
        update_names = WritingOptions.WITH_NAME_UPDATING in options
        for node, node_path, node_original, name in steps:
            node._write_one(node_path, options, node_original, access)
            if update_names and name is not None:
                node.commit_name(name)

    def _plan(self, path: str, original: str | None, name: str | None):
        """Yield ``(node, path, original, name)`` in write order (pre-order)."""
        yield (self, path, original, name)

    @abstractmethod
    def _write_one(self, path: str, options: WritingOptions,
                   original: str | None, access: FileAccess) -> None:
        """Write this node alone (no children) to *path*."""


class RegularFile(FileNode):
    """A regular-file node.

    Attributes:
        payload: The file's bytes.
    """

    def __init__(self, payload: bytes):
        super().__init__()
        self.payload = bytes(payload)

    def __repr__(self) -> str:
        return f"RegularFile({self._label()!r}, {len(self.payload)} bytes)"

    @property
    def is_leaf(self) -> bool:
        return True

    @property
    def oid(self) -> str:
        return Blob.from_string(self.payload).id.decode("ascii")

    def _write_one(self, path, options, original, access):
        if access.exists(path):
            logger.debug("Replacing existing entity at %s", path)
            access.remove_recursive(path)
        access.write_all(path, self.payload, atomic=WritingOptions.ATOMIC in options)


class Directory(FileNode):
    """A directory node.

    Each child without a preferred name takes its key in *children* as
    preferred name.  Children belong to one directory at a time; use
    :meth:`remove_child` before inserting a node elsewhere.
    """

    def __init__(self, children: Mapping[str, FileNode] | None = None):
        super().__init__()
        self._children: dict[str, FileNode] = {}
        children = dict(children or {})
        seen: set[int] = set()
        for key, child in children.items():
            _paths._check_name(key)
            self._check_attach(child)
            if id(child) in seen:
                raise AlreadyAttached(f"Node appears twice (again under {key!r})")
            seen.add(id(child))
        for key, child in children.items():
            child._attached = True
            if child.preferred_name is None:
                child.preferred_name = key
            self._children[key] = child

    def __repr__(self) -> str:
        return f"Directory({self._label()!r}, {len(self._children)} children)"

    @property
    def children(self) -> Mapping[str, FileNode]:
        """Read-only view of the children, by key."""
        return MappingProxyType(self._children)

    @property
    def oid(self) -> str:
        tree = Tree()
        for key in sorted(self._children):
            child = self._children[key]
            mode = GIT_FILEMODE_TREE if child.is_directory else GIT_FILEMODE_BLOB
            tree.add(key.encode(), mode, child.oid.encode("ascii"))
        return tree.id.decode("ascii")

    def _contains(self, node: FileNode) -> bool:
        for child in self._children.values():
            if child is node:
                return True
            if isinstance(child, Directory) and child._contains(node):
                return True
        return False

    def _check_attach(self, child: FileNode) -> None:
        if child._attached:
            raise AlreadyAttached("Node already belongs to a directory")
        if child is self or (isinstance(child, Directory) and child._contains(self)):
            raise CyclicInsertion("Cannot insert a directory into its own subtree")

    def add_child(self, child: FileNode) -> str:
        """Insert *child* and return the key it was stored under.

        The key is the child's preferred name when it has one that is not
        taken.  Otherwise a fresh unique name is generated and also becomes
        the child's preferred name.

        Raises:
            AlreadyAttached: *child* belongs to another directory.
            CyclicInsertion: *child* is this directory or an ancestor.
            ValueError: the preferred name is not a single path segment.
        """
        name = child.preferred_name
        if name is not None:
            _paths._check_name(name)
        self._check_attach(child)
        child._attached = True
        if name is not None and name not in self._children:
            self._children[name] = child
            return name
        name = _new_name()
        while name in self._children:
            name = _new_name()
        self._children[name] = child
        child.preferred_name = name
        return name

    def remove_child(self, key: str) -> FileNode:
        """Detach and return the child stored under *key*.

        Raises :class:`KeyError` if there is no such child.
        """
        child = self._children.pop(key)
        child._attached = False
        return child

    def walk(self, prefix: str = "") -> Iterator[tuple[str, list[str], list[tuple[str, RegularFile]]]]:
        """Walk the tree top-down, yielding ``(dirpath, dirnames, files)``.

        *files* holds ``(key, node)`` pairs.  Entries are sorted by key.
        """
        dirs: list[str] = []
        files: list[tuple[str, RegularFile]] = []
        for key in sorted(self._children):
            child = self._children[key]
            if isinstance(child, Directory):
                dirs.append(key)
            else:
                files.append((key, child))

        yield (prefix, dirs, files)

        for key in dirs:
            child_prefix = f"{prefix}/{key}" if prefix else key
            yield from self._children[key].walk(child_prefix)

    def _plan(self, path, original, name):
        yield (self, path, original, name)
        seen: set[str] = set()
        entries = []
        for key in sorted(self._children):
            child = self._children[key]
            child_name = child.resolved_name()
            if child_name in seen:
                raise DuplicateResolvedName(child_name, path)
            seen.add(child_name)
            entries.append((child, child_name))
        for child, child_name in entries:
            child_path = _paths.join(path, child_name, directory=child.is_directory)
            child_original = None
            if original is not None:
                child_original = _paths.join(
                    original, child_name, directory=child.is_directory,
                )
            yield from child._plan(child_path, child_original, child_name)

    def _write_one(self, path, options, original, access):
        if not access.is_directory_path(path):
            raise DestinationNotDirectoryPath(
                f"Directory destination must end with '/': {path}", path=path,
            )
        if access.exists(path):
            cleanup_error = None
            try:
                access.remove_recursive(path)
            except RemovalFailure as exc:
                cleanup_error = exc
            raise DestinationExists(
                f"Destination already exists: {path}",
                path=path, cleanup_error=cleanup_error,
            ) from cleanup_error
        access.create_directory(path, recursive=False)


def _read_node(path: str, options: ReadingOptions, access: FileAccess,
               ancestors: frozenset = frozenset()) -> FileNode:
    """Build a node for *path*, recursing into directories.

    *ancestors* holds the identities of the directories above *path*.
    """
    node: FileNode
    if access.is_directory_path(path) or access.is_directory(path):
        logger.debug("snapshot directory %s", path)
        identity = access.identity(path)
        if identity is not None:
            if identity in ancestors:
                raise ReadFailure(f"Directory loop at {path}", path=path)
            ancestors = ancestors | {identity}
        children: dict[str, FileNode] = {}
        for child_path in access.list_children(path):
            child = _read_node(child_path, options, access, ancestors)
            if not child.preferred_name:
                raise InconsistentChild(f"Entry has no name: {child_path}", path=child_path)
            children[child.preferred_name] = child
        node = Directory(children)
    else:
        node = RegularFile(access.read_all(path, options))
    name = _paths.base_name(path) or None
    node.stored_name = name
    node.preferred_name = name
    return node
