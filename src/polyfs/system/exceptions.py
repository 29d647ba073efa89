# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.06.08
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/polyfs/system/exceptions.py

"""
polyfs-specific exception classes.

Every failure surfaced by an entry operation is one of these types, so that
calling code can branch on the kind of failure instead of parsing messages.
"""

from typing import Iterable, Optional


class PolyFSError(Exception):
    """Base exception for all polyfs errors."""
    pass


# === ENTRY ERRORS ===

class EntryError(PolyFSError):
    """Base class for errors about one specific entry."""

    def __init__(self, message: str, entry: Optional[str] = None):
        self.entry = entry
        super().__init__(message)


class NotExists(EntryError):
    """Raised when looking up an entry that is not there."""

    def __init__(self, entry: str):
        super().__init__(f"{entry} does not exist", entry=entry)


class AlreadyExists(EntryError):
    """Raised when a destination is occupied and overwriting is not allowed."""

    def __init__(self, entry: str):
        super().__init__(f"{entry} already exists", entry=entry)


class UsedAfterDelete(EntryError):
    """Raised on any operation on an entry handle after it has been deleted."""

    def __init__(self, entry: str):
        super().__init__(f"{entry} is deleted", entry=entry)


class NotSupported(PolyFSError):
    """Raised when an operation has no implementation for a variant or variant pair."""

    def __init__(self, message: str, operation: str = None, kinds: Iterable[str] = ()):
        self.operation = operation
        self.kinds = tuple(kinds)
        super().__init__(message)

    @classmethod
    def for_kind(cls, operation: str, kind: str, entry: Optional[str] = None) -> "NotSupported":
        """Build the error for an operation a single variant does not implement."""
        subject = f"{entry}: " if entry else ""
        return cls(
            f"{subject}{operation} is not supported for {kind}",
            operation=operation,
            kinds=(kind,),
        )

    @classmethod
    def for_pair(cls, operation: str, source_kind: str, destination_kind: str,
                 source: Optional[str] = None, destination: Optional[str] = None) -> "NotSupported":
        """Build the error for a (source, destination) pair with no strategy."""
        if source and destination:
            prefix = f"can not {operation} {source} to {destination}: "
        else:
            prefix = ""
        return cls(
            f"{prefix}{operation} of {source_kind} to {destination_kind} is not supported",
            operation=operation,
            kinds=(source_kind, destination_kind),
        )


# === CONFIGURATION AND CREDENTIALS ERRORS ===

class ConfigError(PolyFSError):
    """Raised when there are configuration validation or loading errors."""
    pass


class CredentialsError(ConfigError):
    """Base class for credentials loading errors."""
    pass


class PasswordNotSpecified(CredentialsError):
    """Raised when a credentials line has no password and nothing can supply one."""

    def __init__(self, address: str = None, login: str = None):
        self.address = address
        self.login = login
        target = f" for {login}@{address}" if address and login else ""
        super().__init__(f"Password is not specified{target}")


class InvalidCredentialsFormat(CredentialsError):
    """Raised when a credentials line is not of the form 'address, login[, password]'."""

    def __init__(self, line: str):
        self.line = line
        super().__init__(
            f'Invalid credentials file format: line "{line}" must be of the form '
            f'"address, login[, password]"'
        )


class CredentialsNotFound(CredentialsError):
    """Raised when a credentials file holds no usable line."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f'Credentials are not found in "{path}"')


# === TRANSPORT ERRORS ===

class TransportError(PolyFSError):
    """Raised when the FTP session to a remote system can not be established."""

    def __init__(self, message: str, address: str = None, retry_possible: bool = False):
        self.address = address
        self.retry_possible = retry_possible
        super().__init__(message)


# === ENCODING ERRORS ===

class EncodingError(PolyFSError):
    """Base class for transcoding errors."""
    pass


class EncodingNotSupported(EncodingError, NotSupported):
    """Raised when no transcoder can be built for a pair of code pages."""

    def __init__(self, source: str, target: str):
        NotSupported.__init__(
            self,
            f"can not transcode from {source} to {target}: unknown code page",
            operation="transcode",
            kinds=(source, target),
        )


class TranscoderReleaseError(EncodingError):
    """Raised after releasing every stage of a pipeline when some of them failed."""

    def __init__(self, errors: list[Exception]):
        self.errors = list(errors)
        details = "; ".join(f"{type(e).__name__}: {e}" for e in self.errors)
        super().__init__(f"{len(self.errors)} transcoder stage(s) failed to release: {details}")
