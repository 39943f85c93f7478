"""Option flags for reading and writing node trees."""

from __future__ import annotations

from enum import Flag


class ReadingOptions(Flag):
    """Flags accepted by :meth:`FileNode.from_filesystem`.

    Members: ``IMMEDIATE``, ``WITHOUT_MAPPING``.  File contents are always
    read eagerly, so ``IMMEDIATE`` only documents intent.  Without
    ``WITHOUT_MAPPING`` a local backend may memory-map regular files while
    copying them out.  Neither flag changes the shape of the tree read.
    """
    IMMEDIATE = 1
    WITHOUT_MAPPING = 2


class WritingOptions(Flag):
    """Flags accepted by :meth:`FileNode.write`.

    Members:
        ATOMIC: write each file to a temporary sibling, then rename it
            into place.
        WITH_NAME_UPDATING: after each descendant is written, record the
            name it was written under as its ``stored_name``.
    """
    ATOMIC = 1
    WITH_NAME_UPDATING = 2
