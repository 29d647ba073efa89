# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.06.07
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/polyfs/core/policy.py

"""
Overwrite policy.

An OverwritePolicy says whether an operation may replace an existing entry at
its destination. Every Entry handle refers to one policy (the process default
unless another is given) and combines it with its own one-shot override.

Usage as a scoped acquisition:
    with policy.allowing():
        entry.copy_to(directory)    # may overwrite
    # previous value restored here, also when the block raised
"""

from contextlib import contextmanager
from typing import Iterator

from loguru import logger


class OverwritePolicy:
    """Mutable "overwrite allowed" flag with save/force/restore scoping."""

    def __init__(self, allowed: bool = False):
        self.allowed = allowed

    def __repr__(self) -> str:
        return f"OverwritePolicy(allowed={self.allowed})"

    def allow(self) -> None:
        self.allowed = True

    def disallow(self) -> None:
        self.allowed = False

    def permits(self, one_shot: bool = False) -> bool:
        """Evaluate the policy for one operation with the entry's one-shot override."""
        return self.allowed or one_shot

    @contextmanager
    def allowing(self) -> Iterator["OverwritePolicy"]:
        """Force allowed=True inside the block, restoring the saved value on every exit path."""
        saved = self.allowed
        self.allowed = True
        logger.debug("Overwrite allowed for scoped block")
        try:
            yield self
        finally:
            self.allowed = saved


_default_policy = OverwritePolicy()


def default_policy() -> OverwritePolicy:
    """The process-wide policy used by entries created without an explicit one."""
    return _default_policy


def allow_overwrite() -> None:
    _default_policy.allow()


def disallow_overwrite() -> None:
    _default_policy.disallow()


def overwrite_allowed() -> bool:
    return _default_policy.allowed


def allowing_overwrite():
    """Scoped acquisition on the process-wide policy."""
    return _default_policy.allowing()
