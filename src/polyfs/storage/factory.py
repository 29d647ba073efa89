# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.06.14
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/polyfs/storage/factory.py

"""
Resolution of location strings to entries.

    mem:                 the memory root
    mem:NAME             memory file NAME
    mvs:                 root of the mainframe system named by the credentials file
    mvs:DATASET          partitioned dataset
    mvs:DATASET(MEMBER)  member of a partitioned dataset
    mvs-seq:DATASET      sequential dataset
    anything else        local file or directory path
"""

import re
from pathlib import Path
from typing import NamedTuple, Optional

from loguru import logger

from polyfs.config.credentials import PasswordFunc, load_credentials
from polyfs.config.manager import PolyFSConfig
from polyfs.core.entry import Entry
from polyfs.core.policy import OverwritePolicy
from polyfs.storage.local import local_entry
from polyfs.storage.memory import memory_file, memory_root
from polyfs.storage.mvs import dataset, mainframe
from polyfs.system.exceptions import ConfigError


MEMORY_SCHEME = "mem"
MVS_SCHEME = "mvs"
MVS_SEQUENTIAL_SCHEME = "mvs-seq"

_SCHEMED = re.compile(r"^(mem|mvs|mvs-seq):(.*)$")
_DATASET = re.compile(r"^([^()\s]+)(?:\(([^()\s]+)\))?$")


class Location(NamedTuple):
    scheme: Optional[str]  # None for local paths
    dataset: Optional[str] = None
    member: Optional[str] = None
    name: Optional[str] = None
    path: Optional[Path] = None


def parse_location(text: str) -> Location:
    """Split a location string into its parts without touching any backend."""
    match = _SCHEMED.match(text)
    if match is None:
        return Location(None, path=Path(text))

    scheme, rest = match.groups()
    if scheme == MEMORY_SCHEME:
        return Location(scheme, name=rest or None)
    if not rest:
        if scheme == MVS_SEQUENTIAL_SCHEME:
            raise ValueError(f"Dataset name missing in {text!r}")
        return Location(scheme)

    dataset_match = _DATASET.match(rest)
    if dataset_match is None:
        raise ValueError(f"Invalid dataset in {text!r}: expected DATASET or DATASET(MEMBER)")
    dataset_name, member_name = dataset_match.groups()
    if scheme == MVS_SEQUENTIAL_SCHEME and member_name is not None:
        raise ValueError(f"A sequential dataset has no members: {text!r}")
    return Location(scheme, dataset=dataset_name.upper(),
                    member=member_name.upper() if member_name else None)


def resolve_location(text: str, config: PolyFSConfig, password_func: Optional[PasswordFunc] = None,
                     policy: Optional[OverwritePolicy] = None) -> Entry:
    """Entry for a location string."""
    location = parse_location(text)
    logger.debug(f"Resolving {text!r} as {location}")

    if location.scheme is None:
        return local_entry(location.path, policy)
    if location.scheme == MEMORY_SCHEME:
        return memory_file(location.name, policy) if location.name else memory_root(policy)

    if config.credentials_file is None:
        raise ConfigError(f"credentials_file must be configured to use {location.scheme}: locations")
    credentials = load_credentials(config.credentials_file, password_func)
    system = mainframe(credentials, policy, config.site_command, config.chunk_size)
    if location.dataset is None:
        return system
    if location.scheme == MVS_SEQUENTIAL_SCHEME:
        return dataset(system, location.dataset, sequential=True)
    partitioned = dataset(system, location.dataset)
    return partitioned / location.member if location.member else partitioned
