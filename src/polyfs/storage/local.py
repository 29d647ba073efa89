# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.06.10
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/polyfs/storage/local.py

"""
Local filesystem backend.

Nodes wrap absolute paths. Identity in diagnostics is the path in double
quotes. Names starting with "." are hidden and skipped by enumeration and
glob unless asked for.
"""

import os
import shutil
import tempfile
from datetime import datetime, timedelta, UTC
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Union

from loguru import logger

from polyfs.core.entry import Entry
from polyfs.core.kinds import EntryKind
from polyfs.core.policy import OverwritePolicy, default_policy
from polyfs.core.protocols import Node
from polyfs.system.exceptions import AlreadyExists, NotExists


PathLike = Union[str, Path]

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

_OPEN_MODES = {"r": "rb", "w": "wb", "a": "ab"}


def quoted(path: PathLike) -> str:
    return f'"{path}"'


def is_hidden(name: str) -> bool:
    return name.startswith(".")


def to_datetime(mtime_ns: int) -> datetime:
    """Filesystem timestamp to an aware UTC datetime (microsecond precision)."""
    return _EPOCH + timedelta(microseconds=mtime_ns // 1000)


def to_timestamp_ns(time: datetime) -> int:
    """Aware or naive (local) datetime to nanoseconds since the epoch."""
    return ((time.astimezone(UTC) - _EPOCH) // timedelta(microseconds=1)) * 1000


class LocalNode(Node):
    """A path on the local filesystem."""

    def __init__(self, path: PathLike):
        self.path = Path(path)

    @property
    def name(self) -> str:
        return self.path.name

    def __str__(self) -> str:
        return quoted(self.path)

    def __eq__(self, other) -> bool:
        return isinstance(other, LocalNode) and self.kind == other.kind and self.path == other.path

    def __hash__(self) -> int:
        return hash((self.kind, self.path))

    def _stat(self) -> os.stat_result:
        try:
            return self.path.stat()
        except FileNotFoundError as e:
            raise NotExists(str(self)) from e

    def parent(self) -> Optional["LocalDirectoryNode"]:
        if self.path.parent == self.path:
            return None
        return LocalDirectoryNode(self.path.parent)

    def modification_time(self) -> datetime:
        return to_datetime(self._stat().st_mtime_ns)

    def set_modification_time(self, time: datetime) -> None:
        stat = self._stat()
        os.utime(self.path, ns=(stat.st_atime_ns, to_timestamp_ns(time)))


class LocalFileNode(LocalNode):
    kind = EntryKind.LOCAL_FILE

    def size(self) -> int:
        return self._stat().st_size

    def delete(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError as e:
            raise NotExists(str(self)) from e

    def read_bytes(self) -> bytes:
        try:
            return self.path.read_bytes()
        except FileNotFoundError as e:
            raise NotExists(str(self)) from e

    def write_bytes(self, data: bytes) -> None:
        self.path.write_bytes(data)

    def append_bytes(self, data: bytes) -> None:
        with self.path.open("ab") as f:
            f.write(data)

    def open(self, mode: str) -> BinaryIO:
        if mode not in _OPEN_MODES:
            raise ValueError(f"Invalid mode {mode!r}: expected one of {', '.join(_OPEN_MODES)}")
        try:
            return self.path.open(_OPEN_MODES[mode])
        except FileNotFoundError as e:
            raise NotExists(str(self)) from e


class LocalDirectoryNode(LocalNode):
    kind = EntryKind.LOCAL_DIRECTORY

    def delete(self) -> None:
        try:
            shutil.rmtree(self.path)
        except FileNotFoundError as e:
            raise NotExists(str(self)) from e

    def iterate(self, include_hidden: bool = False) -> Iterator[LocalNode]:
        try:
            names = sorted(os.listdir(self.path))
        except FileNotFoundError as e:
            raise NotExists(str(self)) from e
        for name in names:
            if is_hidden(name) and not include_hidden:
                continue
            yield node_for(self.path / name)

    def child(self, name: str) -> LocalNode:
        path = self.path / name
        if not (path.exists() or path.is_symlink()):
            raise NotExists(quoted(path))
        return node_for(path)

    def glob(self, *patterns: str) -> list[LocalNode]:
        """Nodes below this directory matching any of patterns, without hidden ones."""
        found: dict[Path, None] = {}
        for pattern in patterns:
            for path in self.path.glob(pattern):
                relative = path.relative_to(self.path)
                if any(is_hidden(part) for part in relative.parts):
                    continue
                found.setdefault(path)
        return [node_for(path) for path in sorted(found)]

    def destination(self, name: str, overwrite: bool) -> Path:
        return prepare_destination(self.path / name, overwrite)


def node_for(path: PathLike) -> LocalNode:
    path = Path(path)
    if path.is_dir():
        return LocalDirectoryNode(path)
    return LocalFileNode(path)


def prepare_destination(path: Path, overwrite: bool) -> Path:
    """Make path free for a new entry.

    Raises:
        AlreadyExists: If something is at path and overwrite is False
    """
    if path.exists() or path.is_symlink():
        if not overwrite:
            raise AlreadyExists(quoted(path))
        logger.debug(f"Overwriting {quoted(path)}")
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
    return path


def _absolute(path: PathLike) -> Path:
    return Path(os.path.abspath(os.path.expanduser(str(path))))


def _target_path(location: Union[Entry, PathLike], name: Optional[str]) -> Path:
    if isinstance(location, Entry):
        if location.kind is not EntryKind.LOCAL_DIRECTORY:
            raise TypeError(f"{location} is not a local directory")
        if name is None:
            raise TypeError("name is required when a directory is given")
        return location.node.path / name
    path = _absolute(location)
    return path / name if name is not None else path


# ---- lookup ----

def local_entry(path: PathLike, policy: Optional[OverwritePolicy] = None) -> Entry:
    """Existing local file or directory at path."""
    path = _absolute(path)
    if not (path.exists() or path.is_symlink()):
        raise NotExists(quoted(path))
    return Entry(node_for(path), policy)


def local_file(path: PathLike, policy: Optional[OverwritePolicy] = None) -> Entry:
    path = _absolute(path)
    if not path.is_file():
        raise NotExists(quoted(path))
    return Entry(LocalFileNode(path), policy)


def local_directory(path: PathLike, policy: Optional[OverwritePolicy] = None) -> Entry:
    path = _absolute(path)
    if not path.is_dir():
        raise NotExists(quoted(path))
    return Entry(LocalDirectoryNode(path), policy)


# ---- creation ----

def create_local_file(location: Union[Entry, PathLike], name: Optional[str] = None,
                      content: Union[bytes, str] = b"",
                      policy: Optional[OverwritePolicy] = None) -> Entry:
    """Create a local file at location (a path, or a directory entry plus name).

    An occupied location is replaced only if the policy allows overwriting.
    """
    policy = policy if policy is not None else default_policy()
    path = prepare_destination(_target_path(location, name), policy.permits())
    if isinstance(content, str):
        content = content.encode("utf-8")
    path.write_bytes(content)
    logger.debug(f"Created local file {quoted(path)}")
    return Entry(LocalFileNode(path), policy)


def create_local_directory(location: Union[Entry, PathLike], name: Optional[str] = None,
                           policy: Optional[OverwritePolicy] = None) -> Entry:
    policy = policy if policy is not None else default_policy()
    path = prepare_destination(_target_path(location, name), policy.permits())
    path.mkdir(parents=True)
    logger.debug(f"Created local directory {quoted(path)}")
    return Entry(LocalDirectoryNode(path), policy)


def new_or_existing_local_file(location: Union[Entry, PathLike], name: Optional[str] = None,
                               content: Union[bytes, str] = b"",
                               policy: Optional[OverwritePolicy] = None) -> Entry:
    """The existing file at location, or a new one with content."""
    try:
        return local_file(_target_path(location, name), policy)
    except NotExists:
        return create_local_file(location, name, content, policy)


def new_or_existing_local_directory(location: Union[Entry, PathLike], name: Optional[str] = None,
                                    policy: Optional[OverwritePolicy] = None) -> Entry:
    try:
        return local_directory(_target_path(location, name), policy)
    except NotExists:
        return create_local_directory(location, name, policy)


def temporary_directory(policy: Optional[OverwritePolicy] = None) -> Entry:
    """The system temporary directory."""
    return Entry(LocalDirectoryNode(_absolute(tempfile.gettempdir())), policy)


def current_directory(policy: Optional[OverwritePolicy] = None) -> Entry:
    return Entry(LocalDirectoryNode(_absolute(os.getcwd())), policy)
