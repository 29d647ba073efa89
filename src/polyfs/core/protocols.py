# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.06.07
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/polyfs/core/protocols.py

"""
Backing-record protocol for entries.

A Node is the backend-specific record an Entry handle points at: a local
path, an in-memory buffer, or a dataset/member name on a remote system. Nodes
implement the primitives; Entry adds the overwrite policy, tombstoning and
dispatch to the transfer engine on top of them.

Every optional primitive defaults to raising NotSupported naming the variant,
so a backend only overrides what it can actually do.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import BinaryIO, Iterator, Optional

from polyfs.core.kinds import EntryKind
from polyfs.system.exceptions import NotExists, NotSupported


class Node(ABC):
    """Base class for all backing records."""

    kind: EntryKind

    @property
    @abstractmethod
    def name(self) -> str:
        """Last path segment, or dataset/member identifier."""
        raise NotImplementedError("name not implemented")

    @abstractmethod
    def __str__(self) -> str:
        """Identity used in diagnostics."""
        raise NotImplementedError("__str__() not implemented")

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self}>"

    def _not_supported(self, operation: str) -> NotSupported:
        return NotSupported.for_kind(operation, self.kind.value, str(self))

    # ---- common ----

    def parent(self) -> Optional["Node"]:
        """Directory-like node containing this one; None for root-like nodes."""
        return None

    def modification_time(self) -> datetime:
        raise self._not_supported("modification_time")

    def set_modification_time(self, time: datetime) -> None:
        raise self._not_supported("set_modification_time")

    def size(self) -> int:
        raise self._not_supported("size")

    def delete(self) -> None:
        """Remove the backing object. Called once per handle by Entry.delete()."""
        raise self._not_supported("delete")

    # ---- file-like ----

    def read_bytes(self) -> bytes:
        raise self._not_supported("read")

    def write_bytes(self, data: bytes) -> None:
        raise self._not_supported("write")

    def append_bytes(self, data: bytes) -> None:
        self.write_bytes(self.read_bytes() + data)

    def open(self, mode: str) -> BinaryIO:
        raise self._not_supported("open")

    # ---- directory-like ----

    def iterate(self, include_hidden: bool = False) -> Iterator["Node"]:
        raise self._not_supported("enumeration")

    def child(self, name: str) -> "Node":
        """Look up a contained node by name.

        This implementation scans iterate(); backends override it with a
        direct lookup.
        """
        for node in self.iterate(include_hidden=True):
            if node.name == name:
                return node
        raise NotExists(name)

    def has(self, name: str) -> bool:
        try:
            self.child(name)
            return True
        except NotExists:
            return False

    def glob(self, *patterns: str) -> list["Node"]:
        raise self._not_supported("glob")
