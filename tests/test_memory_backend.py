# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.06.15
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# tests/test_memory_backend.py

"""Tests for the in-process memory backend."""

import gc
from datetime import datetime, UTC

import pytest

from polyfs.core.kinds import EntryKind
from polyfs.storage.memory import (
    MEMORY_ROOT,
    MemoryRootNode,
    create_memory_file,
    memory_file,
    memory_root,
)
from polyfs.system.exceptions import AlreadyExists, NotExists, NotSupported


OLD_TIME = datetime(2020, 1, 2, 3, 4, 5, tzinfo=UTC)


class TestMemoryRoot:
    def test_single_root(self):
        assert MemoryRootNode() is MEMORY_ROOT
        assert memory_root().node is MEMORY_ROOT
        assert memory_root().kind is EntryKind.MEMORY_DIRECTORY

    def test_root_has_no_parent(self):
        assert memory_root().parent is None

    def test_enumeration_not_supported(self):
        with pytest.raises(NotSupported) as exc_info:
            list(memory_root())
        assert "MemoryDirectory" in str(exc_info.value)

    def test_root_can_not_be_deleted(self):
        root = memory_root()
        with pytest.raises(NotSupported):
            root.delete()
        assert not root.deleted

    def test_root_has_no_modification_time(self):
        with pytest.raises(NotSupported):
            memory_root().modification_time

    def test_lookup_by_name(self):
        entry = create_memory_file("a.txt", b"hello")
        assert (memory_root() / "a.txt").node is entry.node
        assert memory_file("a.txt").read_bytes() == b"hello"
        assert "a.txt" in memory_root()

    def test_missing_name(self):
        with pytest.raises(NotExists) as exc_info:
            memory_file("nope")
        assert str(exc_info.value).startswith('"nope" (memory)')

    def test_unreferenced_file_is_released(self):
        """A buffer no handle refers to disappears from the root."""
        create_memory_file("gone.txt", b"x")
        gc.collect()
        assert not memory_root().has("gone.txt")


class TestMemoryFile:
    def test_create_with_text(self):
        entry = create_memory_file("a.txt", "héllo")
        assert entry.kind is EntryKind.MEMORY_FILE
        assert entry.read_bytes() == "héllo".encode("utf-8")
        assert entry.size == 6

    def test_str(self):
        assert str(create_memory_file("a.txt")) == '"a.txt" (memory)'

    def test_create_over_existing(self):
        first = create_memory_file("a.txt", b"1")
        with pytest.raises(AlreadyExists):
            create_memory_file("a.txt", b"2")
        assert memory_file("a.txt").node is first.node

    def test_write_updates_modification_time(self):
        entry = create_memory_file("a.txt", b"1").set_modification_time(OLD_TIME)
        assert entry.modification_time == OLD_TIME
        entry.write_bytes(b"2")
        assert entry.modification_time > OLD_TIME

    def test_naive_modification_time_is_local(self):
        naive = datetime(2020, 1, 2, 3, 4, 5)
        entry = create_memory_file("a.txt", b"1").set_modification_time(naive)
        assert entry.modification_time.tzinfo is not None
        assert entry.modification_time == naive.astimezone()
        assert entry.if_modified_since(OLD_TIME.replace(year=2019)) is entry

    def test_append(self):
        entry = create_memory_file("a.txt", b"ab").append(b"cd")
        assert entry.read_bytes() == b"abcd"

    def test_open_write_stores_on_close(self):
        entry = create_memory_file("a.txt", b"old")
        with entry.open("w") as stream:
            stream.write(b"new")
        assert entry.read_bytes() == b"new"

    def test_open_append(self):
        entry = create_memory_file("a.txt", b"old")
        with entry.open("a") as stream:
            stream.write(b"+")
        assert entry.read_bytes() == b"old+"

    def test_open_read_is_snapshot(self):
        entry = create_memory_file("a.txt", b"old")
        with entry.open() as stream:
            entry.write_bytes(b"new")
            assert stream.read() == b"old"

    def test_open_rejects_unknown_mode(self):
        with pytest.raises(ValueError):
            create_memory_file("a.txt").open("x")

    def test_delete_frees_name(self):
        entry = create_memory_file("a.txt", b"1")
        entry.delete()
        assert not memory_root().has("a.txt")
        create_memory_file("a.txt", b"2")

    def test_parent_is_root(self):
        assert create_memory_file("a.txt").parent.node is MEMORY_ROOT


class TestMemoryTransfers:
    def test_copy_within_memory(self):
        entry = create_memory_file("a.txt", b"data")
        copy = entry.copy_as("b.txt")
        copy.write_bytes(b"changed")
        assert entry.read_bytes() == b"data"
        assert memory_file("b.txt").read_bytes() == b"changed"

    def test_copy_onto_itself(self):
        entry = create_memory_file("a.txt", b"data")
        with pytest.raises(AlreadyExists):
            entry.overwrite_next().copy_to(memory_root())
        assert entry.read_bytes() == b"data"

    def test_rename(self):
        entry = create_memory_file("a.txt", b"data")
        node = entry.node
        entry.rename("b.txt")
        assert entry.node is node
        assert memory_file("b.txt").read_bytes() == b"data"
        assert not memory_root().has("a.txt")

    def test_rename_onto_occupied(self):
        entry = create_memory_file("a.txt", b"a")
        other = create_memory_file("b.txt", b"b")
        with pytest.raises(AlreadyExists):
            entry.rename("b.txt")
        entry.overwrite_next().rename("b.txt")
        assert memory_file("b.txt").read_bytes() == b"a"
        assert other.read_bytes() == b"b"

    def test_local_to_memory_and_back(self, hello_file, other_dir):
        in_memory = hello_file.copy_to(memory_root())
        assert in_memory.kind is EntryKind.MEMORY_FILE
        assert in_memory.read_bytes() == b"hello"

        back = in_memory.copy_to(other_dir, "back.txt")
        assert back.kind is EntryKind.LOCAL_FILE
        assert back.read_bytes() == b"hello"

    def test_move_local_to_memory(self, hello_file):
        """The handle changes variant and the local file is gone."""
        path = hello_file.node.path
        hello_file.set_modification_time(OLD_TIME)
        hello_file.move_to(memory_root())

        assert not path.exists()
        assert hello_file.kind is EntryKind.MEMORY_FILE
        assert hello_file.modification_time == OLD_TIME
        assert memory_file("a.txt").read_bytes() == b"hello"

    def test_move_memory_to_local(self, work_dir):
        entry = create_memory_file("m.txt", b"mem").set_modification_time(OLD_TIME)
        entry.move_to(work_dir)
        assert entry.kind is EntryKind.LOCAL_FILE
        assert entry.modification_time == OLD_TIME
        assert not memory_root().has("m.txt")
        assert (work_dir / "m.txt").read_bytes() == b"mem"
