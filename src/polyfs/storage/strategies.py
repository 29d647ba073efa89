# Author: PB & Claude
# Maintainer: PB
# Original date: 2025-06-13
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/polyfs/storage/strategies.py

"""
Concrete transfer strategies, registered into the engine's tables on import.

    source -> destination           copy                 move
    local -> local directory        shutil copy          os.rename (EXDEV: fallback)
    local file -> memory            read into buffer     fallback
    local file -> mainframe         binary STOR          fallback
    memory -> local directory       write buffer         fallback
    memory -> memory                duplicate buffer     rename in place
    memory -> mainframe             binary STOR          fallback
    mainframe -> local directory    binary RETR          none (no modification time)
    mainframe -> memory             binary RETR          none (no modification time)

EBCDIC copies exist for local/memory files into the mainframe and for
mainframe files out of it. Every strategy receives nodes and returns the node
at the new location.
"""

import errno
import io
import os
import shutil
from pathlib import Path

from loguru import logger

from polyfs.core.kinds import EntryKind
from polyfs.core.transfer import COPY, EBCDIC_COPY, MOVE, move_by_copy
from polyfs.storage.local import (
    LocalDirectoryNode, LocalFileNode, LocalNode, node_for, prepare_destination
)
from polyfs.storage.memory import MEMORY_ROOT, MemoryFileNode, MemoryRootNode
from polyfs.storage.mvs import PartitionedDatasetNode, SequentialNode
from polyfs.system.exceptions import AlreadyExists


LOCAL_FILE = EntryKind.LOCAL_FILE
LOCAL_DIRECTORY = EntryKind.LOCAL_DIRECTORY
MEMORY_FILE = EntryKind.MEMORY_FILE
MEMORY_DIRECTORY = EntryKind.MEMORY_DIRECTORY
MAINFRAME_DIRECTORIES = (EntryKind.PARTITIONED_DATASET, EntryKind.MAINFRAME_SYSTEM)
MAINFRAME_FILES = (EntryKind.MEMBER, EntryKind.SEQUENTIAL_DATASET)


def _mainframe_target(directory, name: str, overwrite: bool) -> tuple[str, SequentialNode]:
    """MVS path and node for a new file-like entry in a partitioned dataset or system root."""
    path = directory.destination(name, overwrite)
    if isinstance(directory, PartitionedDatasetNode):
        return path, directory.child(name)
    return path, directory.dataset(name, sequential=True)


def _memory_target(source, name: str, overwrite: bool) -> None:
    if MEMORY_ROOT.occupant(name) is source:
        raise AlreadyExists(str(source))
    MEMORY_ROOT.prepare_destination(name, overwrite)


# ---- copy ----

@COPY.register((LOCAL_FILE, LOCAL_DIRECTORY), LOCAL_DIRECTORY)
def copy_local_to_local(source: LocalNode, directory: LocalDirectoryNode, name: str,
                        overwrite: bool) -> LocalNode:
    target = directory.path / name
    if target == source.path:
        raise AlreadyExists(str(source))
    prepare_destination(target, overwrite)
    if isinstance(source, LocalDirectoryNode):
        shutil.copytree(source.path, target, copy_function=shutil.copy, symlinks=True)
    else:
        shutil.copy(source.path, target)
    return node_for(target)


@COPY.register((LOCAL_FILE, MEMORY_FILE), MEMORY_DIRECTORY)
def copy_file_to_memory(source, root: MemoryRootNode, name: str, overwrite: bool) -> MemoryFileNode:
    _memory_target(source, name, overwrite)
    return MEMORY_ROOT.register(MemoryFileNode(name, source.read_bytes()))


@COPY.register(MEMORY_FILE, LOCAL_DIRECTORY)
def copy_memory_to_local(source: MemoryFileNode, directory: LocalDirectoryNode, name: str,
                         overwrite: bool) -> LocalFileNode:
    target = prepare_destination(directory.path / name, overwrite)
    target.write_bytes(source.read_bytes())
    return LocalFileNode(target)


@COPY.register((LOCAL_FILE, MEMORY_FILE), MAINFRAME_DIRECTORIES)
def upload_binary(source, directory, name: str, overwrite: bool) -> SequentialNode:
    path, node = _mainframe_target(directory, name, overwrite)
    with source.open("r") as stream:
        node.connection.store_binary(path, stream)
    return node


@COPY.register(MAINFRAME_FILES, LOCAL_DIRECTORY)
def download_binary_to_local(source: SequentialNode, directory: LocalDirectoryNode, name: str,
                             overwrite: bool) -> LocalFileNode:
    target = prepare_destination(directory.path / name, overwrite)
    _download(source, target, ebcdic=False)
    return LocalFileNode(target)


@COPY.register(MAINFRAME_FILES, MEMORY_DIRECTORY)
def download_binary_to_memory(source: SequentialNode, root: MemoryRootNode, name: str,
                              overwrite: bool) -> MemoryFileNode:
    MEMORY_ROOT.prepare_destination(name, overwrite)
    return MEMORY_ROOT.register(MemoryFileNode(name, source.read_bytes()))


def _download(source: SequentialNode, target: Path, ebcdic: bool) -> None:
    retrieve = source.connection.retrieve_ebcdic if ebcdic else source.connection.retrieve_binary
    try:
        with target.open("wb") as stream:
            retrieve(source.path, stream)
    except Exception:
        # No partial download left behind
        target.unlink(missing_ok=True)
        raise


# ---- move ----

@MOVE.register((LOCAL_FILE, LOCAL_DIRECTORY), LOCAL_DIRECTORY)
def move_local_to_local(source: LocalNode, directory: LocalDirectoryNode, name: str,
                        overwrite: bool) -> LocalNode:
    target = directory.path / name
    if target == source.path:
        return source
    prepare_destination(target, overwrite)
    try:
        os.rename(source.path, target)
    except OSError as e:
        if e.errno != errno.EXDEV:
            raise
        logger.debug(f"{source} and {directory} are on different devices, moving by copying")
        return move_by_copy(source, directory, name, overwrite)
    return node_for(target)


@MOVE.register(MEMORY_FILE, MEMORY_DIRECTORY)
def rename_in_memory(source: MemoryFileNode, root: MemoryRootNode, name: str,
                     overwrite: bool) -> MemoryFileNode:
    if name == source.name:
        return source
    MEMORY_ROOT.prepare_destination(name, overwrite)
    return MEMORY_ROOT.rename(source, name)


# ---- EBCDIC copy ----

@EBCDIC_COPY.register((LOCAL_FILE, MEMORY_FILE), MAINFRAME_DIRECTORIES)
def upload_ebcdic(source, directory, name: str, overwrite: bool) -> SequentialNode:
    path, node = _mainframe_target(directory, name, overwrite)
    with source.open("r") as stream:
        node.connection.store_ebcdic(path, stream)
    return node


@EBCDIC_COPY.register(MAINFRAME_FILES, LOCAL_DIRECTORY)
def download_ebcdic_to_local(source: SequentialNode, directory: LocalDirectoryNode, name: str,
                             overwrite: bool) -> LocalFileNode:
    target = prepare_destination(directory.path / name, overwrite)
    _download(source, target, ebcdic=True)
    return LocalFileNode(target)


@EBCDIC_COPY.register(MAINFRAME_FILES, MEMORY_DIRECTORY)
def download_ebcdic_to_memory(source: SequentialNode, root: MemoryRootNode, name: str,
                              overwrite: bool) -> MemoryFileNode:
    MEMORY_ROOT.prepare_destination(name, overwrite)
    buffer = io.BytesIO()
    source.connection.retrieve_ebcdic(source.path, buffer)
    return MEMORY_ROOT.register(MemoryFileNode(name, buffer.getvalue()))
