# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.06.10
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/polyfs/storage/memory.py

"""
In-process memory backend.

There is one memory root. It holds named byte buffers and nothing else:
no subdirectories, no enumeration. The root keeps only weak references to
its files, so a buffer nobody holds a handle to is gone, as it would be for
any other garbage-collected object. The registry exists to answer "is this
name occupied" for the overwrite policy and to look files up by name while
they are alive.
"""

import io
import weakref
from datetime import datetime, UTC
from typing import BinaryIO, Optional

from loguru import logger

from polyfs.core.entry import Entry
from polyfs.core.kinds import EntryKind
from polyfs.core.policy import OverwritePolicy, default_policy
from polyfs.core.protocols import Node
from polyfs.system.exceptions import AlreadyExists, NotExists


def _describe(name: str) -> str:
    return f'"{name}" (memory)'


class _WriteBackStream(io.BytesIO):
    """BytesIO that stores its whole buffer into a memory file on close."""

    def __init__(self, node: "MemoryFileNode", initial: bytes = b""):
        super().__init__(initial)
        self.seek(0, io.SEEK_END)
        self._node = node

    def close(self) -> None:
        if not self.closed:
            self._node.write_bytes(self.getvalue())
        super().close()


class MemoryFileNode(Node):
    """A named byte buffer living in the memory root."""
    kind = EntryKind.MEMORY_FILE

    def __init__(self, name: str, content: bytes = b""):
        self._name = name
        self.content = bytearray(content)
        self._modification_time = datetime.now(UTC)

    @property
    def name(self) -> str:
        return self._name

    def __str__(self) -> str:
        return _describe(self._name)

    def parent(self) -> "MemoryRootNode":
        return MEMORY_ROOT

    def modification_time(self) -> datetime:
        return self._modification_time

    def set_modification_time(self, time: datetime) -> None:
        # Naive times are local times
        self._modification_time = time if time.tzinfo is not None else time.astimezone()

    def size(self) -> int:
        return len(self.content)

    def delete(self) -> None:
        MEMORY_ROOT.release(self)

    def read_bytes(self) -> bytes:
        return bytes(self.content)

    def write_bytes(self, data: bytes) -> None:
        self.content = bytearray(data)
        self._modification_time = datetime.now(UTC)

    def append_bytes(self, data: bytes) -> None:
        self.content.extend(data)
        self._modification_time = datetime.now(UTC)

    def open(self, mode: str) -> BinaryIO:
        if mode == "r":
            return io.BytesIO(bytes(self.content))
        if mode == "w":
            return _WriteBackStream(self)
        if mode == "a":
            return _WriteBackStream(self, bytes(self.content))
        raise ValueError(f"Invalid mode {mode!r}: expected one of r, w, a")


class MemoryRootNode(Node):
    """The single directory-like node of the memory backend."""
    kind = EntryKind.MEMORY_DIRECTORY

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._files = weakref.WeakValueDictionary()
        return cls._instance

    @property
    def name(self) -> str:
        return "memory"

    def __str__(self) -> str:
        return "memory"

    def __len__(self) -> int:
        return len(self._files)

    def child(self, name: str) -> MemoryFileNode:
        node = self._files.get(name)
        if node is None:
            raise NotExists(_describe(name))
        return node

    def has(self, name: str) -> bool:
        return name in self._files

    def occupant(self, name: str) -> Optional[MemoryFileNode]:
        return self._files.get(name)

    def prepare_destination(self, name: str, overwrite: bool) -> None:
        """Free name for a new file, detaching the current occupant if overwriting."""
        occupant = self._files.get(name)
        if occupant is None:
            return
        if not overwrite:
            raise AlreadyExists(_describe(name))
        logger.debug(f"Overwriting {occupant}")
        del self._files[name]

    def register(self, node: MemoryFileNode) -> MemoryFileNode:
        self._files[node.name] = node
        return node

    def release(self, node: MemoryFileNode) -> None:
        if self._files.get(node.name) is node:
            del self._files[node.name]

    def rename(self, node: MemoryFileNode, new_name: str) -> MemoryFileNode:
        self.release(node)
        node._name = new_name
        return self.register(node)

    def clear(self) -> None:
        self._files.clear()


MEMORY_ROOT = MemoryRootNode()


def memory_root(policy: Optional[OverwritePolicy] = None) -> Entry:
    return Entry(MEMORY_ROOT, policy)


def memory_file(name: str, policy: Optional[OverwritePolicy] = None) -> Entry:
    """Live memory file called name."""
    return Entry(MEMORY_ROOT.child(name), policy)


def create_memory_file(name: str, content: bytes | str = b"",
                       policy: Optional[OverwritePolicy] = None) -> Entry:
    """Create a memory file; an occupied name is replaced only if the policy allows it."""
    policy = policy if policy is not None else default_policy()
    if isinstance(content, str):
        content = content.encode("utf-8")
    MEMORY_ROOT.prepare_destination(name, policy.permits())
    node = MEMORY_ROOT.register(MemoryFileNode(name, content))
    logger.debug(f"Created {node}")
    return Entry(node, policy)
