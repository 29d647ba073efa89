# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.06.14
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/polyfs/storage/__init__.py

"""
Storage backends for polyfs.

Importing this package registers every backend's copy, move and EBCDIC
strategies with the transfer engine.
"""

from . import strategies  # noqa: F401  (registers strategies)
from .local import (
    local_entry, local_file, local_directory,
    create_local_file, create_local_directory,
    new_or_existing_local_file, new_or_existing_local_directory,
    temporary_directory, current_directory,
)
from .memory import MEMORY_ROOT, memory_root, memory_file, create_memory_file
from .mvs import mainframe, dataset
from .ftp import MVSConnection, get_connection, close_all_connections
from .factory import parse_location, resolve_location

__all__ = [
    'local_entry',
    'local_file',
    'local_directory',
    'create_local_file',
    'create_local_directory',
    'new_or_existing_local_file',
    'new_or_existing_local_directory',
    'temporary_directory',
    'current_directory',
    'MEMORY_ROOT',
    'memory_root',
    'memory_file',
    'create_memory_file',
    'mainframe',
    'dataset',
    'MVSConnection',
    'get_connection',
    'close_all_connections',
    'parse_location',
    'resolve_location',
]
