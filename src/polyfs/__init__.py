# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.06.14
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/polyfs/__init__.py

"""
polyfs - uniform entry operations over local disk, in-memory buffers and
MVS datasets reachable over FTP.

    from polyfs import create_local_file, memory_root

    entry = create_local_file("/tmp/a.txt", content=b"hello")
    entry.move_to(memory_root())    # the handle now refers to the memory file
"""

from polyfs.core.entry import Entry, NO_MATCH, NoMatch
from polyfs.core.kinds import EntryKind
from polyfs.core.policy import (
    OverwritePolicy, default_policy, allow_overwrite, disallow_overwrite,
    overwrite_allowed, allowing_overwrite,
)
from polyfs.core.encoding import Transcoder, compose, transcoder_for, transcode
from polyfs.config.credentials import Credentials
from polyfs.storage import (
    local_entry, local_file, local_directory,
    create_local_file, create_local_directory,
    new_or_existing_local_file, new_or_existing_local_directory,
    temporary_directory, current_directory,
    memory_root, memory_file, create_memory_file,
    mainframe, dataset, close_all_connections,
)
from polyfs.core.temporary import (
    TemporaryEntry, create_temporary_file, copy_to_temporary, move_to_temporary,
)
from polyfs.core.last_build import LastBuild
from polyfs.system.exceptions import (
    PolyFSError, NotExists, AlreadyExists, UsedAfterDelete, NotSupported,
)

__all__ = [
    'Entry', 'NO_MATCH', 'NoMatch', 'EntryKind',
    'OverwritePolicy', 'default_policy', 'allow_overwrite', 'disallow_overwrite',
    'overwrite_allowed', 'allowing_overwrite',
    'Transcoder', 'compose', 'transcoder_for', 'transcode',
    'Credentials',
    'local_entry', 'local_file', 'local_directory',
    'create_local_file', 'create_local_directory',
    'new_or_existing_local_file', 'new_or_existing_local_directory',
    'temporary_directory', 'current_directory',
    'memory_root', 'memory_file', 'create_memory_file',
    'mainframe', 'dataset', 'close_all_connections',
    'TemporaryEntry', 'create_temporary_file', 'copy_to_temporary', 'move_to_temporary',
    'LastBuild',
    'PolyFSError', 'NotExists', 'AlreadyExists', 'UsedAfterDelete', 'NotSupported',
]
