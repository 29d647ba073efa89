# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.06.07
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/polyfs/core/entry.py

"""
Entry handles.

An Entry is what callers hold. It points at a Node through an indirection
that the transfer engine may rebind: after a move the same handle represents
the object at its new location, even when the move crossed backends and the
new location has a different variant. After delete() the handle is a
tombstone and every further operation raises UsedAfterDelete.
"""

from datetime import datetime, UTC
from pathlib import PurePosixPath
from typing import BinaryIO, Callable, Iterator, Optional, Union

from loguru import logger

from polyfs.core import transfer
from polyfs.core.encoding import Transcoder, transcoder_for
from polyfs.core.kinds import EntryKind
from polyfs.core.policy import OverwritePolicy, default_policy
from polyfs.core.protocols import Node
from polyfs.system.exceptions import NotSupported, UsedAfterDelete


class NoMatch:
    """Result of a conditional lookup that matched nothing.

    Falsy, and deliberately without entry operations: callers test for it
    (`if result is NO_MATCH`) instead of calling through it.
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NO_MATCH"


NO_MATCH = NoMatch()


class Entry:
    """Handle to one located object in a storage backend."""

    def __init__(self, node: Node, policy: Optional[OverwritePolicy] = None):
        self._node: Optional[Node] = node
        self._policy = policy if policy is not None else default_policy()
        self._overwrite_once = False
        self._tombstone: Optional[str] = None

    # ---- handle plumbing ----

    def __str__(self) -> str:
        if self._tombstone is not None:
            return self._tombstone
        return str(self._node)

    def __repr__(self) -> str:
        if self._tombstone is not None:
            return f"<{type(self).__name__} {self._tombstone} (deleted)>"
        return f"<{type(self).__name__} {self._node.kind.value} {self._node}>"

    def _check_live(self) -> None:
        if self._tombstone is not None:
            raise UsedAfterDelete(self._tombstone)

    @property
    def node(self) -> Node:
        """Current backing node. Raises UsedAfterDelete on a tombstoned handle."""
        self._check_live()
        return self._node

    @property
    def deleted(self) -> bool:
        return self._tombstone is not None

    @property
    def policy(self) -> OverwritePolicy:
        return self._policy

    def _wrap(self, node: Node) -> "Entry":
        return Entry(node, self._policy)

    def overwrite_next(self) -> "Entry":
        """Allow the next operation on this entry to overwrite its destination."""
        self._check_live()
        self._overwrite_once = True
        return self

    def consume_overwrite(self) -> bool:
        """Evaluate the policy for one operation and clear the one-shot override."""
        one_shot = self._overwrite_once
        self._overwrite_once = False
        return self._policy.permits(one_shot)

    # ---- naming ----

    @property
    def kind(self) -> EntryKind:
        return self.node.kind

    @property
    def name(self) -> str:
        return self.node.name

    @property
    def parent(self) -> Optional["Entry"]:
        parent = self.node.parent()
        return self._wrap(parent) if parent is not None else None

    @property
    def is_directory(self) -> bool:
        return self.node.kind.is_directory

    @property
    def extension(self) -> str:
        return PurePosixPath(self.name).suffix

    def change_extension(self, new_extension: str) -> "Entry":
        """Rename this entry so its name ends with new_extension ("txt" or ".txt")."""
        if new_extension and not new_extension.startswith("."):
            new_extension = "." + new_extension
        return self.rename(str(PurePosixPath(self.name).with_suffix(new_extension)))

    # ---- transfer ----

    def move_to(self, destination: "Entry", new_name: Optional[str] = None) -> "Entry":
        """Move into destination (as new_name) and rebind this handle there.

        Returns this entry.
        """
        node = self.node
        destination_node = destination.node
        overwrite = self.consume_overwrite()
        self._node = transfer.move(node, destination_node, new_name or node.name, overwrite)
        return self

    def rename(self, new_name: Union[str, Callable[[str], str]]) -> "Entry":
        """Change the name within the same parent.

        new_name may be a callable receiving the current name.
        """
        node = self.node
        if callable(new_name):
            new_name = new_name(node.name)
        parent = node.parent()
        if parent is None:
            self.consume_overwrite()
            raise NotSupported.for_kind("rename", node.kind.value, str(node))
        overwrite = self.consume_overwrite()
        self._node = transfer.move(node, parent, new_name, overwrite)
        return self

    def copy_to(self, destination: "Entry", new_name: Optional[str] = None) -> "Entry":
        """Copy into destination (as new_name) and return the copy."""
        node = self.node
        destination_node = destination.node
        overwrite = self.consume_overwrite()
        return self._wrap(transfer.copy(node, destination_node, new_name or node.name, overwrite))

    def copy_as(self, new_name: str) -> "Entry":
        """Copy within the same parent under new_name."""
        node = self.node
        parent = node.parent()
        if parent is None:
            self.consume_overwrite()
            raise NotSupported.for_kind("copy", node.kind.value, str(node))
        overwrite = self.consume_overwrite()
        return self._wrap(transfer.copy(node, parent, new_name, overwrite))

    def copy_as_ebcdic_to(self, destination: "Entry", new_name: Optional[str] = None) -> "Entry":
        """Copy into destination using EBCDIC-mode transfer where a mainframe is involved."""
        node = self.node
        destination_node = destination.node
        overwrite = self.consume_overwrite()
        return self._wrap(
            transfer.copy_as_ebcdic(node, destination_node, new_name or node.name, overwrite))

    def delete(self) -> "Entry":
        """Delete the backing object and tombstone this handle."""
        node = self.node
        node.delete()
        logger.debug(f"Deleted {node}")
        self._tombstone = str(node)
        self._node = None
        return self

    # ---- time ----

    @property
    def modification_time(self) -> datetime:
        return self.node.modification_time()

    @modification_time.setter
    def modification_time(self, time: datetime) -> None:
        self.node.set_modification_time(time)

    def set_modification_time(self, time: datetime) -> "Entry":
        self.node.set_modification_time(time)
        return self

    def touch(self) -> "Entry":
        return self.set_modification_time(datetime.now(UTC))

    def if_modified_since(self, since: Union[datetime, "Entry"]) -> Union["Entry", NoMatch]:
        """Return this entry if it changed after since (a time or another entry), else NO_MATCH."""
        if isinstance(since, Entry):
            since = since.modification_time
        elif not isinstance(since, datetime):
            raise TypeError(f"wrong argument ({since!r} for datetime or Entry)")
        elif since.tzinfo is None:
            # Naive times are local times
            since = since.astimezone()
        return self if self.modification_time > since else NO_MATCH

    # ---- file content ----

    @property
    def size(self) -> int:
        return self.node.size()

    def read_bytes(self) -> bytes:
        return self.node.read_bytes()

    def write_bytes(self, data: bytes) -> "Entry":
        self.node.write_bytes(bytes(data))
        return self

    def append(self, data: bytes) -> "Entry":
        self.node.append_bytes(bytes(data))
        return self

    def rewrite(self, func: Callable[[bytes], bytes]) -> "Entry":
        """Replace the content with func(old content)."""
        node = self.node
        node.write_bytes(func(node.read_bytes()))
        return self

    def write_if_different(self, data: bytes) -> "Entry":
        node = self.node
        if node.read_bytes() != data:
            node.write_bytes(bytes(data))
        return self

    def open(self, mode: str = "r") -> BinaryIO:
        """Open a binary stream on the content ("r", "w" or "a")."""
        return self.node.open(mode)

    def apply(self, transcoder: Transcoder) -> "Entry":
        """Rewrite the content through transcoder."""
        return self.rewrite(transcoder.encode)

    def transcode(self, source_encoding: str, target_encoding: str) -> "Entry":
        """Rewrite the content from one code page to another."""
        with transcoder_for(source_encoding, target_encoding) as transcoder:
            return self.apply(transcoder)

    # ---- directory content ----

    def __iter__(self) -> Iterator["Entry"]:
        return self.entries()

    def entries(self, include_hidden: bool = False) -> Iterator["Entry"]:
        nodes = self.node.iterate(include_hidden)
        return (self._wrap(node) for node in nodes)

    def files(self, *patterns: str) -> list["Entry"]:
        """File-like entries of this directory, or of the glob matches if patterns are given."""
        if patterns:
            return [entry for entry in self.glob(*patterns) if not entry.is_directory]
        return [entry for entry in self.entries() if not entry.is_directory]

    def by_name(self, name: str) -> "Entry":
        return self._wrap(self.node.child(name))

    def __truediv__(self, name: str) -> "Entry":
        return self.by_name(name)

    def glob(self, *patterns: str) -> list["Entry"]:
        return [self._wrap(node) for node in self.node.glob(*patterns)]

    def has(self, name: str) -> bool:
        return self.node.has(name)

    def __contains__(self, name: str) -> bool:
        return self.has(name)
