# Author: PB & Claude
# Maintainer: PB
# Original date: 2025-06-13
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/polyfs/storage/mvs.py

"""
Mainframe (MVS) backend.

    MainframeSystemNode        directory-like, holds datasets, parent None
      PartitionedDatasetNode   directory-like, holds members
        MemberNode             file-like
      SequentialDatasetNode    file-like

Identity is the quoted MVS path: 'DATASET' or 'DATASET(MEMBER)'. Lookups are
optimistic: a handle is returned without asking the server, and a missing
dataset or member shows up as a remote error on first real use.

No mainframe node has a modification time, so moves out of the mainframe
have no generic fallback.
"""

import ftplib
import io
import re
from typing import Iterator, Optional

from polyfs.config.credentials import Credentials
from polyfs.config.manager import DEFAULT_CHUNK_SIZE, DEFAULT_SITE_COMMAND
from polyfs.core.entry import Entry
from polyfs.core.kinds import EntryKind
from polyfs.core.policy import OverwritePolicy
from polyfs.core.protocols import Node
from polyfs.storage.ftp import MVSConnection, get_connection
from polyfs.system.exceptions import NotSupported


_MEMBER_NAME = re.compile(r"\((.*?)\)")


def mvs_path(dataset_name: str, member_name: Optional[str] = None) -> str:
    if member_name is None:
        return f"'{dataset_name}'"
    return f"'{dataset_name}({member_name})'"


def _require_overwrite(directory: Node, name: str, overwrite: bool) -> None:
    # The server can not cheaply tell whether the target exists
    if not overwrite:
        raise NotSupported(
            f"Can not perform copying to {directory}: copying to {directory.kind.value} "
            f"with no overwriting is not implemented",
            operation="copy",
            kinds=(directory.kind.value,),
        )


class MainframeSystemNode(Node):
    """Root of one remote MVS system."""
    kind = EntryKind.MAINFRAME_SYSTEM

    def __init__(self, connection: MVSConnection):
        self.connection = connection

    @property
    def name(self) -> str:
        return self.connection.address

    def __str__(self) -> str:
        return self.name

    def __eq__(self, other) -> bool:
        return isinstance(other, MainframeSystemNode) and self.connection is other.connection

    def __hash__(self) -> int:
        return hash(id(self.connection))

    def child(self, name: str) -> "PartitionedDatasetNode":
        return PartitionedDatasetNode(self, name)

    def has(self, name: str) -> bool:
        # child() never asks the server, so it can not answer this
        raise self._not_supported("has")

    def dataset(self, name: str, sequential: bool = False) -> "MVSNode":
        if sequential:
            return SequentialDatasetNode(self, name)
        return PartitionedDatasetNode(self, name)

    def destination(self, dataset_name: str, overwrite: bool) -> str:
        """MVS path for a new sequential dataset."""
        _require_overwrite(self, dataset_name, overwrite)
        return mvs_path(dataset_name)


class MVSNode(Node):
    """Dataset or member on a mainframe system."""

    def __init__(self, system: MainframeSystemNode, name: str):
        self.system = system
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    @property
    def connection(self) -> MVSConnection:
        return self.system.connection

    @property
    def path(self) -> str:
        raise NotImplementedError("path not implemented")

    def __str__(self) -> str:
        return self.path

    def __eq__(self, other) -> bool:
        return type(other) is type(self) and self.system == other.system and self.path == other.path

    def __hash__(self) -> int:
        return hash((type(self), self.system, self.path))


class PartitionedDatasetNode(MVSNode):
    kind = EntryKind.PARTITIONED_DATASET

    @property
    def path(self) -> str:
        return mvs_path(self.name)

    def parent(self) -> MainframeSystemNode:
        return self.system

    def member_names(self) -> list[str]:
        names = []
        for listed in self.connection.list_names(f"'{self.name}(*)'"):
            match = _MEMBER_NAME.search(listed)
            names.append(match.group(1) if match else listed)
        return names

    def iterate(self, include_hidden: bool = False) -> Iterator["MemberNode"]:
        for name in self.member_names():
            yield MemberNode(self, name)

    def child(self, name: str) -> "MemberNode":
        return MemberNode(self, name)

    def has(self, name: str) -> bool:
        try:
            return name in self.member_names()
        except ftplib.error_perm:
            # An empty or absent dataset lists nothing
            return False

    def destination(self, member_name: str, overwrite: bool) -> str:
        """MVS path for a new member."""
        _require_overwrite(self, member_name, overwrite)
        return mvs_path(self.name, member_name)


class SequentialNode(MVSNode):
    """File-like mainframe node. Content moves as whole transfers only."""

    def read_bytes(self) -> bytes:
        buffer = io.BytesIO()
        self.connection.retrieve_binary(self.path, buffer)
        return buffer.getvalue()

    def write_bytes(self, data: bytes) -> None:
        self.connection.store_binary(self.path, io.BytesIO(data))

    def delete(self) -> None:
        self.connection.delete(self.path)


class MemberNode(SequentialNode):
    kind = EntryKind.MEMBER

    def __init__(self, dataset: PartitionedDatasetNode, name: str):
        super().__init__(dataset.system, name)
        self.dataset = dataset

    @property
    def path(self) -> str:
        return mvs_path(self.dataset.name, self.name)

    def parent(self) -> PartitionedDatasetNode:
        return self.dataset


class SequentialDatasetNode(SequentialNode):
    kind = EntryKind.SEQUENTIAL_DATASET

    @property
    def path(self) -> str:
        return mvs_path(self.name)

    def parent(self) -> MainframeSystemNode:
        return self.system


def mainframe(credentials: Credentials, policy: Optional[OverwritePolicy] = None,
              site_command: Optional[str] = DEFAULT_SITE_COMMAND,
              chunk_size: int = DEFAULT_CHUNK_SIZE, **connection_options) -> Entry:
    """Entry for the root of the MVS system reachable with credentials."""
    connection = get_connection(credentials, site_command, chunk_size, **connection_options)
    return Entry(MainframeSystemNode(connection), policy)


def dataset(system: Entry, name: str, sequential: bool = False) -> Entry:
    """Dataset called name on the system entry; partitioned unless sequential."""
    node = system.node
    if not isinstance(node, MainframeSystemNode):
        raise TypeError(f"{system} is not a mainframe system")
    return Entry(node.dataset(name, sequential), system.policy)
