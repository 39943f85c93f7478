"""Tests for in-memory FileNode behaviour: classification, names, children."""

import pytest

from filenode import (
    AlreadyAttached,
    CyclicInsertion,
    Directory,
    FileNode,
    NotADirectory,
    RegularFile,
)

EMPTY_BLOB = "e69de29bb2d1d6434b8b29ae775ad8c2e48c5391"
EMPTY_TREE = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"


class TestConstruction:
    def test_leaf(self):
        node = FileNode.leaf(b"Hello World!")
        assert isinstance(node, RegularFile)
        assert node.is_leaf
        assert not node.is_directory
        assert node.payload == b"Hello World!"
        assert node.stored_name is None
        assert node.preferred_name is None

    def test_leaf_copies_bytearray(self):
        buf = bytearray(b"abc")
        node = FileNode.leaf(buf)
        buf[0] = ord("z")
        assert node.payload == b"abc"

    def test_empty_directory(self):
        node = FileNode.directory({})
        assert isinstance(node, Directory)
        assert node.is_directory
        assert not node.is_leaf
        assert len(node.children) == 0

    def test_base_class_is_abstract(self):
        with pytest.raises(TypeError):
            FileNode()

    def test_directory_default_children(self):
        assert len(Directory().children) == 0

    def test_directory_keys_kept(self):
        a = FileNode.leaf(b"a")
        node = FileNode.directory({"x.txt": a})
        assert node.children["x.txt"] is a

    def test_directory_sets_missing_preferred_name(self):
        a = FileNode.leaf(b"a")
        FileNode.directory({"x.txt": a})
        assert a.preferred_name == "x.txt"

    def test_directory_keeps_existing_preferred_name(self):
        a = FileNode.leaf(b"a")
        a.preferred_name = "other.txt"
        node = FileNode.directory({"x.txt": a})
        assert a.preferred_name == "other.txt"
        assert "x.txt" in node.children

    def test_directory_rejects_bad_key(self):
        with pytest.raises(ValueError):
            FileNode.directory({"a/b": FileNode.leaf(b"")})

    def test_children_view_is_read_only(self):
        node = FileNode.directory({})
        with pytest.raises(TypeError):
            node.children["x"] = FileNode.leaf(b"")

    def test_repr(self):
        leaf = FileNode.leaf(b"abc")
        leaf.preferred_name = "a.txt"
        assert repr(leaf) == "RegularFile('a.txt', 3 bytes)"
        assert repr(FileNode.directory({"a.txt": leaf})) == "Directory(None, 1 children)"


class TestNames:
    def test_filename_setter_independent(self):
        node = FileNode.leaf(b"Test")
        node.preferred_name = "File1"
        assert node.stored_name is None
        node.stored_name = "New File"
        assert node.preferred_name == "File1"
        assert node.stored_name == "New File"

    def test_resolved_prefers_stored(self):
        node = FileNode.leaf(b"")
        node.preferred_name = "p"
        node.stored_name = "s"
        assert node.resolved_name() == "s"

    def test_resolved_falls_back_to_preferred(self):
        node = FileNode.leaf(b"")
        node.preferred_name = "p"
        assert node.resolved_name() == "p"

    def test_resolved_generates_without_mutating(self):
        node = FileNode.leaf(b"")
        first = node.resolved_name()
        assert first
        assert node.stored_name is None
        assert node.preferred_name is None
        assert node.resolved_name() != first

    def test_commit_name_generated(self):
        node = FileNode.leaf(b"")
        name = node.commit_name()
        assert node.stored_name == name
        assert node.resolved_name() == name

    def test_commit_name_explicit(self):
        node = FileNode.leaf(b"")
        assert node.commit_name("x") == "x"
        assert node.stored_name == "x"

    def test_commit_name_keeps_stored(self):
        node = FileNode.leaf(b"")
        node.stored_name = "first"
        assert node.commit_name("second") == "first"
        assert node.stored_name == "first"


class TestAddChild:
    def test_preferred_name_used(self):
        parent = FileNode.directory({})
        child = FileNode.leaf(b"data")
        child.preferred_name = "data.txt"
        assert parent.add_child(child) == "data.txt"
        assert parent.children["data.txt"] is child
        assert len(parent.children) == 1
        assert child.preferred_name == "data.txt"

    def test_count_increases_by_one(self):
        parent = FileNode.directory({"a": FileNode.leaf(b"a")})
        child = FileNode.leaf(b"b")
        child.preferred_name = "b"
        parent.add_child(child)
        assert len(parent.children) == 2

    def test_preferred_name_taken(self):
        first = FileNode.leaf(b"Test")
        first.preferred_name = "data.txt"
        parent = FileNode.directory({"data.txt": first})
        second = FileNode.leaf(b"Duplicate")
        second.preferred_name = "data.txt"
        key = parent.add_child(second)
        assert key != "data.txt"
        assert parent.children[key] is second
        assert parent.children["data.txt"] is first
        assert second.preferred_name == key
        assert second.stored_name is None

    def test_no_preferred_name(self):
        parent = FileNode.directory({})
        child = FileNode.leaf(b"x")
        key = parent.add_child(child)
        assert key
        assert child.preferred_name == key
        assert parent.children[key] is child

    def test_unnamed_children_get_distinct_keys(self):
        parent = FileNode.directory({})
        keys = {parent.add_child(FileNode.leaf(b"")) for _ in range(20)}
        assert len(keys) == 20
        assert set(parent.children) == keys

    @pytest.mark.parametrize("name", ["a/b", ".", ".."])
    def test_bad_preferred_name_rejected(self, name):
        parent = FileNode.directory({})
        child = FileNode.leaf(b"x")
        child.preferred_name = name
        with pytest.raises(ValueError):
            parent.add_child(child)
        assert len(parent.children) == 0
        child.preferred_name = "ok"
        assert FileNode.directory({}).add_child(child) == "ok"

    def test_add_to_leaf_raises(self):
        leaf = FileNode.leaf(b"Test")
        with pytest.raises(NotADirectory):
            leaf.add_child(FileNode.directory({}))

    def test_child_is_shared_not_copied(self):
        parent = FileNode.directory({})
        child = FileNode.leaf(b"old")
        key = parent.add_child(child)
        child.payload = b"new"
        assert parent.children[key].payload == b"new"


class TestOwnership:
    def test_child_in_two_parents_rejected(self):
        child = FileNode.leaf(b"")
        FileNode.directory({"a": child})
        with pytest.raises(AlreadyAttached):
            FileNode.directory({}).add_child(child)

    def test_failed_insert_leaves_parent_unchanged(self):
        child = FileNode.leaf(b"")
        FileNode.directory({"a": child})
        other = FileNode.directory({})
        with pytest.raises(AlreadyAttached):
            other.add_child(child)
        assert len(other.children) == 0

    def test_same_node_twice_in_constructor(self):
        x = FileNode.leaf(b"x")
        with pytest.raises(AlreadyAttached):
            FileNode.directory({"a": x, "b": x})
        assert x.preferred_name is None
        key = FileNode.directory({}).add_child(x)
        assert x.preferred_name == key

    def test_failed_constructor_leaves_earlier_children_free(self):
        free = FileNode.leaf(b"free")
        owned = FileNode.leaf(b"owned")
        FileNode.directory({"owned": owned})
        with pytest.raises(AlreadyAttached):
            FileNode.directory({"a": free, "b": owned})
        assert free.preferred_name is None
        free.preferred_name = "free.txt"
        assert FileNode.directory({}).add_child(free) == "free.txt"

    def test_remove_child_allows_reinsert(self):
        child = FileNode.leaf(b"")
        first = FileNode.directory({"a": child})
        assert first.remove_child("a") is child
        assert "a" not in first.children
        second = FileNode.directory({})
        assert second.add_child(child) == "a"

    def test_remove_missing_child(self):
        with pytest.raises(KeyError):
            FileNode.directory({}).remove_child("nope")

    def test_insert_into_self(self):
        d = FileNode.directory({})
        with pytest.raises(CyclicInsertion):
            d.add_child(d)

    def test_insert_ancestor(self):
        inner = FileNode.directory({})
        outer = FileNode.directory({"inner": inner})
        with pytest.raises(CyclicInsertion):
            inner.add_child(outer)


class TestOid:
    def test_empty_blob(self):
        assert FileNode.leaf(b"").oid == EMPTY_BLOB

    def test_blob(self):
        assert FileNode.leaf(b"hello world\n").oid == "3b18e512dba79e4c8300dd08aeb37f8e728b8dad"

    def test_empty_tree(self):
        assert FileNode.directory({}).oid == EMPTY_TREE

    def test_tree_depends_on_names(self):
        a = FileNode.directory({"a.txt": FileNode.leaf(b"x")})
        b = FileNode.directory({"b.txt": FileNode.leaf(b"x")})
        assert a.oid != b.oid

    def test_tree_ignores_insertion_order(self):
        a = FileNode.directory({"a": FileNode.leaf(b"1"), "b": FileNode.leaf(b"2")})
        b = FileNode.directory({"b": FileNode.leaf(b"2"), "a": FileNode.leaf(b"1")})
        assert a.oid == b.oid

    def test_tree_depends_on_content(self):
        a = FileNode.directory({"a": FileNode.leaf(b"1")})
        b = FileNode.directory({"a": FileNode.leaf(b"2")})
        assert a.oid != b.oid


class TestWalk:
    def test_walk(self):
        deep = FileNode.leaf(b"deep")
        root = FileNode.directory({
            "z.txt": FileNode.leaf(b"z"),
            "src": FileNode.directory({
                "sub": FileNode.directory({"deep.txt": deep}),
                "main.py": FileNode.leaf(b"main"),
            }),
            "a.txt": FileNode.leaf(b"a"),
        })
        walked = [(d, dirs, [n for n, _ in files]) for d, dirs, files in root.walk()]
        assert walked == [
            ("", ["src"], ["a.txt", "z.txt"]),
            ("src", ["sub"], ["main.py"]),
            ("src/sub", [], ["deep.txt"]),
        ]

    def test_walk_yields_nodes(self):
        leaf = FileNode.leaf(b"x")
        root = FileNode.directory({"x": leaf})
        [(_, _, files)] = list(root.walk())
        assert files == [("x", leaf)]
