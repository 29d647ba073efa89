# Author: PB & Claude
# Maintainer: PB
# Original date: 2025-06-13
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/polyfs/core/temporary.py

"""
Temporary entries.

A TemporaryEntry is a regular entry that owns its deletion: dispose() (or
leaving a `with` block) deletes it. Temporary files live in the system
temporary directory under names `prefix + base36(counter) + suffix`; the
process-wide counter advances past names that are already taken.
"""

import itertools
from typing import Callable, Optional, Union

from loguru import logger

from polyfs.core import transfer
from polyfs.core.entry import Entry
from polyfs.core.policy import OverwritePolicy
from polyfs.storage.local import create_local_file, temporary_directory


DEFAULT_PREFIX = "tmp"

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"

_next_index = 0


class TemporaryEntry(Entry):
    """Entry deleted by dispose() or on leaving a `with` block."""

    def dispose(self) -> None:
        if self.deleted:
            return
        self.delete()

    def __enter__(self) -> "TemporaryEntry":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.dispose()


def base36(number: int) -> str:
    if number < 0:
        raise ValueError(f"negative number: {number}")
    digits = []
    while True:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36_DIGITS[remainder])
        if number == 0:
            return "".join(reversed(digits))


def new_location(suffix: str = "", prefix: str = DEFAULT_PREFIX) -> tuple[Entry, str]:
    """Temporary directory and a name not taken in it."""
    global _next_index
    directory = temporary_directory()
    for index in itertools.count(_next_index):
        name = f"{prefix}{base36(index)}{suffix}"
        if not directory.has(name):
            _next_index = index
            logger.debug(f"Allocated temporary name {name}")
            return directory, name


def create_temporary_file(suffix: str = "", prefix: str = DEFAULT_PREFIX,
                          content: Union[bytes, str, Callable[[], Union[bytes, str]], None] = None,
                          policy: Optional[OverwritePolicy] = None) -> TemporaryEntry:
    """New temporary local file, with content (or the result of calling content)."""
    directory, name = new_location(suffix, prefix)
    if callable(content):
        content = content()
    entry = create_local_file(directory, name, content or b"", policy)
    return TemporaryEntry(entry.node, entry.policy)


def copy_to_temporary(entry: Entry, suffix: str = "", prefix: str = DEFAULT_PREFIX) -> TemporaryEntry:
    """Copy entry into a new temporary local file."""
    node = entry.node
    directory, name = new_location(suffix, prefix)
    copied = transfer.copy(node, directory.node, name, entry.consume_overwrite())
    return TemporaryEntry(copied, entry.policy)


def move_to_temporary(entry: Entry, suffix: str = "", prefix: str = DEFAULT_PREFIX) -> Entry:
    """Move entry to a new temporary location; the handle follows it."""
    directory, name = new_location(suffix, prefix)
    return entry.move_to(directory, name)
