# Author: PB & Claude
# Maintainer: PB
# Original date: 2025-06-14
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/polyfs/core/last_build.py

"""
Time of the last build of a project.

The time is kept as the modification time of a sentinel file in the system
temporary directory. The sentinel is named from a digest of the project name
so every process finds the same file. A project never built before reports
1980-01-01, older than any real source.
"""

import hashlib
from datetime import datetime, UTC
from typing import Optional

from loguru import logger

from polyfs.core.entry import Entry
from polyfs.core.policy import OverwritePolicy
from polyfs.storage.local import create_local_file, temporary_directory


NEVER_BUILT = datetime(1980, 1, 1, tzinfo=UTC)


def sentinel_name(project: str) -> str:
    digest = hashlib.sha1(project.encode("utf-8")).hexdigest()[:16]
    return f"last_build_of_prj_{digest}.tmp"


class LastBuild:
    """Build timestamp of one project."""

    def __init__(self, project: str, sentinel: Entry):
        self.project = project
        self._sentinel = sentinel
        self._time: Optional[datetime] = None

    @classmethod
    def of(cls, project: str) -> "LastBuild":
        policy = OverwritePolicy()
        directory = temporary_directory(policy)
        name = sentinel_name(project)
        if directory.has(name):
            sentinel = directory / name
        else:
            with policy.allowing():
                sentinel = create_local_file(directory, name, policy=policy)
            sentinel.set_modification_time(NEVER_BUILT)
            logger.debug(f"Created build sentinel {sentinel} for {project!r}")
        return cls(project, sentinel)

    def __repr__(self) -> str:
        return f"LastBuild({self.project!r})"

    @property
    def time(self) -> datetime:
        """When the project was last built; NEVER_BUILT if it never was."""
        if self._time is None:
            self._time = self._sentinel.modification_time
        return self._time

    def mark_built_now(self) -> datetime:
        self._time = datetime.now(UTC)
        self._sentinel.set_modification_time(self._time)
        return self._time

    def forget(self) -> None:
        """Drop the recorded time; the next LastBuild.of() starts over."""
        self._sentinel.delete()
        self._time = None

    def is_outdated_by(self, entry: Entry) -> bool:
        """True if entry changed after the last build."""
        return bool(entry.if_modified_since(self.time))
