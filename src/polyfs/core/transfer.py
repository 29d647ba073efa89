# Author: PB & Claude
# Maintainer: PB
# Original date: 2025-06-13
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/polyfs/core/transfer.py

"""
Cross-backend transfer engine.

Copy, move and EBCDIC copy are resolved through tables keyed on the
(source kind, destination kind) pair. Backends register their strategies
into these tables (see polyfs.storage.strategies); a pair with no entry
fails with NotSupported naming both variants.

A move with no native strategy falls back to move_by_copy(): capture the
source modification time, copy, stamp the copy with that time, delete the
source. The caller's Entry handle is then rebound to the returned node.
"""

from typing import Callable, Optional

from loguru import logger

from polyfs.core.kinds import EntryKind
from polyfs.core.protocols import Node
from polyfs.system.exceptions import NotSupported


# strategy(source, destination, new_name, overwrite) -> node at the new location
Strategy = Callable[[Node, Node, str, bool], Node]


class StrategyTable:
    """Map from (source kind, destination kind) to a transfer strategy."""

    def __init__(self, operation: str):
        self.operation = operation
        self._strategies: dict[tuple[EntryKind, EntryKind], Strategy] = {}

    def __contains__(self, pair: tuple[EntryKind, EntryKind]) -> bool:
        return pair in self._strategies

    def __len__(self) -> int:
        return len(self._strategies)

    def pairs(self) -> list[tuple[EntryKind, EntryKind]]:
        return sorted(self._strategies, key=lambda pair: (pair[0].value, pair[1].value))

    def register(self, sources: EntryKind | tuple[EntryKind, ...],
                 destinations: EntryKind | tuple[EntryKind, ...]) -> Callable[[Strategy], Strategy]:
        """Decorator registering a strategy for every (source, destination) combination."""
        if isinstance(sources, EntryKind):
            sources = (sources,)
        if isinstance(destinations, EntryKind):
            destinations = (destinations,)

        def decorator(strategy: Strategy) -> Strategy:
            for source_kind in sources:
                for destination_kind in destinations:
                    self._strategies[(source_kind, destination_kind)] = strategy
            return strategy

        return decorator

    def lookup(self, source_kind: EntryKind, destination_kind: EntryKind) -> Optional[Strategy]:
        return self._strategies.get((source_kind, destination_kind))


COPY = StrategyTable("copy")
MOVE = StrategyTable("move")
EBCDIC_COPY = StrategyTable("copy as EBCDIC")


def _not_supported(operation: str, source: Node, destination: Node) -> NotSupported:
    return NotSupported.for_pair(
        operation, source.kind.value, destination.kind.value, str(source), str(destination)
    )


def copy(source: Node, destination: Node, new_name: str, overwrite: bool) -> Node:
    """Copy source into destination as new_name and return the new node."""
    strategy = COPY.lookup(source.kind, destination.kind)
    if strategy is None:
        raise _not_supported("copy", source, destination)
    logger.debug(f"copy {source} -> {destination} as {new_name!r} via {strategy.__name__}")
    return strategy(source, destination, new_name, overwrite)


def move(source: Node, destination: Node, new_name: str, overwrite: bool) -> Node:
    """Move source into destination as new_name and return the node to rebind to."""
    strategy = MOVE.lookup(source.kind, destination.kind)
    if strategy is None:
        return move_by_copy(source, destination, new_name, overwrite)
    logger.debug(f"move {source} -> {destination} as {new_name!r} via {strategy.__name__}")
    return strategy(source, destination, new_name, overwrite)


def move_by_copy(source: Node, destination: Node, new_name: str, overwrite: bool) -> Node:
    """Generic move: copy preserving the modification time, then delete the source."""
    try:
        modification_time = source.modification_time()
    except NotSupported as e:
        raise NotSupported(
            f"can not move {source} to {destination}: "
            f"{source.kind.value} does not expose a modification time",
            operation="move",
            kinds=(source.kind.value, destination.kind.value),
        ) from e

    if COPY.lookup(source.kind, destination.kind) is None:
        raise _not_supported("move", source, destination)

    logger.debug(f"move {source} -> {destination} as {new_name!r} by copying")
    copied = copy(source, destination, new_name, overwrite)
    try:
        copied.set_modification_time(modification_time)
    except NotSupported as e:
        # Leave no half-moved copy behind
        try:
            copied.delete()
        except Exception as cleanup_error:
            logger.error(f"Failed to remove {copied} after an incomplete move: {cleanup_error}")
        raise NotSupported(
            f"can not complete moving of {source} to {destination}: "
            f"{copied.kind.value} does not accept a modification time",
            operation="move",
            kinds=(source.kind.value, destination.kind.value),
        ) from e

    source.delete()
    return copied


def copy_as_ebcdic(source: Node, destination: Node, new_name: str, overwrite: bool) -> Node:
    """Copy with EBCDIC-mode transfer; degrades to a plain copy for pairs without one."""
    strategy = EBCDIC_COPY.lookup(source.kind, destination.kind)
    if strategy is None:
        logger.warning(
            f"{source} -> {destination}: no EBCDIC transfer between {source.kind.value} and "
            f"{destination.kind.value}, performing a plain copy"
        )
        return copy(source, destination, new_name, overwrite)
    logger.debug(f"EBCDIC copy {source} -> {destination} as {new_name!r} via {strategy.__name__}")
    return strategy(source, destination, new_name, overwrite)
