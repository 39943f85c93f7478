"""Shared fixtures for filenode tests."""

import pytest
from click.testing import CliRunner

from filenode import MemoryFileAccess


@pytest.fixture
def mem():
    """An empty in-memory filesystem."""
    return MemoryFileAccess()


@pytest.fixture
def build(tmp_path):
    """An existing, empty scratch directory on disk."""
    p = tmp_path / "build"
    p.mkdir()
    return p


@pytest.fixture
def sample_tree(tmp_path):
    """A small tree on disk.

    Tree:
        readme.txt, data/blob.bin, data/sub/deep.txt, empty/
    """
    root = tmp_path / "sample"
    root.mkdir()
    (root / "readme.txt").write_text("readme")
    data = root / "data"
    data.mkdir()
    (data / "blob.bin").write_bytes(b"\x00\x01\x02")
    sub = data / "sub"
    sub.mkdir()
    (sub / "deep.txt").write_text("deep")
    (root / "empty").mkdir()
    return root


# ---------------------------------------------------------------------------
# CLI fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def runner():
    return CliRunner()
