# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.06.07
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/polyfs/core/kinds.py

"""Variant tags for entries. The transfer engine dispatches on pairs of these."""

from enum import Enum


class EntryKind(str, Enum):
    LOCAL_FILE = "LocalFile"
    LOCAL_DIRECTORY = "LocalDirectory"
    MEMORY_FILE = "MemoryFile"
    MEMORY_DIRECTORY = "MemoryDirectory"
    MAINFRAME_SYSTEM = "MainframeSystem"
    PARTITIONED_DATASET = "PartitionedDataset"
    SEQUENTIAL_DATASET = "SequentialDataset"
    MEMBER = "Member"

    def __str__(self) -> str:
        return self.value

    @property
    def is_directory(self) -> bool:
        return self in _DIRECTORY_KINDS

    @property
    def is_file(self) -> bool:
        return not self.is_directory

    @property
    def is_mainframe(self) -> bool:
        return self in _MAINFRAME_KINDS


_DIRECTORY_KINDS = frozenset({
    EntryKind.LOCAL_DIRECTORY,
    EntryKind.MEMORY_DIRECTORY,
    EntryKind.MAINFRAME_SYSTEM,
    EntryKind.PARTITIONED_DATASET,
})

_MAINFRAME_KINDS = frozenset({
    EntryKind.MAINFRAME_SYSTEM,
    EntryKind.PARTITIONED_DATASET,
    EntryKind.SEQUENTIAL_DATASET,
    EntryKind.MEMBER,
})
