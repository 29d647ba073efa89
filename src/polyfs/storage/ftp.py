# Author: PB & Claude
# Maintainer: PB
# Original date: 2025-06-13
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/polyfs/storage/ftp.py

"""
FTP control channel to a remote MVS system.

One MVSConnection exists per Credentials (see get_connection()). The
ftplib session is opened on first use, reused afterwards and reopened when
it is observed closed; the site initialization command is issued once per
(re)connect. Ordinary transfers run in binary mode. EBCDIC transfers switch
the session to TYPE E for exactly one transfer and switch it back.
"""

import ftplib
import re
from typing import BinaryIO, Callable, Optional

from loguru import logger

from polyfs.config.credentials import Credentials
from polyfs.config.manager import DEFAULT_CHUNK_SIZE, DEFAULT_SITE_COMMAND
from polyfs.system.exceptions import TransportError


# Server reply for deleting a dataset or member that is not there
ABSENT_ON_DELETE = re.compile(r"550 DELE fails: .*? does not exist")

FTPFactory = Callable[[], ftplib.FTP]


class MVSConnection:
    """Lazily opened, reused and auto-reopened FTP session to one MVS system."""

    def __init__(self, credentials: Credentials, site_command: Optional[str] = DEFAULT_SITE_COMMAND,
                 chunk_size: int = DEFAULT_CHUNK_SIZE, ftp_factory: FTPFactory = ftplib.FTP):
        self.credentials = credentials
        self.site_command = site_command
        self.chunk_size = chunk_size
        self.ftp_factory = ftp_factory
        self._ftp: Optional[ftplib.FTP] = None

    def __repr__(self) -> str:
        state = "open" if self.is_open else "closed"
        return f"<MVSConnection {self.credentials} ({state})>"

    @property
    def address(self) -> str:
        return self.credentials.address

    @property
    def is_open(self) -> bool:
        return self._ftp is not None and self._ftp.sock is not None

    @property
    def ftp(self) -> ftplib.FTP:
        """The live session, opened or reopened as needed."""
        if not self.is_open:
            if self._ftp is not None:
                logger.debug(f"FTP session to {self.address} is closed, reopening")
            self._ftp = self._open()
        return self._ftp

    def _open(self) -> ftplib.FTP:
        ftp = self.ftp_factory()
        try:
            ftp.connect(self.address)
            ftp.login(self.credentials.login, self.credentials.password)
            if self.site_command:
                ftp.sendcmd(f"SITE {self.site_command}")
        except (OSError, EOFError, ftplib.Error) as e:
            ftp.close()
            raise TransportError(
                f"Failed to open FTP session to {self.credentials}: {e}", address=self.address
            ) from e
        logger.debug(f"Opened FTP session to {self.credentials}")
        return ftp

    def close(self) -> None:
        """Close the session if open. A later operation opens a new one."""
        if self._ftp is None:
            return
        ftp, self._ftp = self._ftp, None
        try:
            ftp.quit()
        except (OSError, EOFError, ftplib.Error) as e:
            logger.warning(f"Closing FTP session to {self.address} failed: {e}")
            ftp.close()
        else:
            logger.debug(f"Closed FTP session to {self.address}")

    def __enter__(self) -> "MVSConnection":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # ---- binary transfers ----

    def store_binary(self, path: str, source: BinaryIO) -> None:
        logger.debug(f"STOR {path} (binary)")
        self.ftp.storbinary(f"STOR {path}", source, self.chunk_size)

    def retrieve_binary(self, path: str, target: BinaryIO) -> None:
        logger.debug(f"RETR {path} (binary)")
        self.ftp.retrbinary(f"RETR {path}", target.write, self.chunk_size)

    # ---- EBCDIC transfers ----

    def store_ebcdic(self, path: str, source: BinaryIO) -> None:
        """Upload letting the server convert the bytes into its EBCDIC code page."""
        logger.debug(f"STOR {path} (EBCDIC)")
        ftp = self.ftp
        ftp.voidcmd("TYPE E")
        try:
            with ftp.transfercmd(f"STOR {path}") as conn:
                while chunk := source.read(self.chunk_size):
                    conn.sendall(chunk)
            ftp.voidresp()
        except Exception:
            self._restore_binary_after_failure(ftp)
            raise
        ftp.voidcmd("TYPE I")

    def retrieve_ebcdic(self, path: str, target: BinaryIO) -> None:
        """Download letting the server convert the bytes out of its EBCDIC code page."""
        logger.debug(f"RETR {path} (EBCDIC)")
        ftp = self.ftp
        ftp.voidcmd("TYPE E")
        try:
            with ftp.transfercmd(f"RETR {path}") as conn:
                while chunk := conn.recv(self.chunk_size):
                    target.write(chunk)
            ftp.voidresp()
        except Exception:
            self._restore_binary_after_failure(ftp)
            raise
        ftp.voidcmd("TYPE I")

    def _restore_binary_after_failure(self, ftp: ftplib.FTP) -> None:
        """Switch back to binary mode after a failed transfer, keeping the transfer error.

        If the server does not answer TYPE I cleanly the reply stream can no
        longer be trusted, so the session is dropped and the next operation
        opens a new one.
        """
        try:
            ftp.voidcmd("TYPE I")
        except (OSError, EOFError, ftplib.Error) as e:
            logger.warning(f"Could not restore binary mode on {self.address}, dropping session: {e}")
            if self._ftp is ftp:
                self._ftp = None
            ftp.close()

    # ---- other commands ----

    def delete(self, path: str) -> None:
        """Delete path; a target the server reports as absent counts as deleted."""
        try:
            self.ftp.delete(path)
        except ftplib.error_perm as e:
            if ABSENT_ON_DELETE.search(str(e)):
                logger.debug(f"{path} is already absent on {self.address}")
                return
            raise

    def list_names(self, pattern: str) -> list[str]:
        return self.ftp.nlst(pattern)


_connections: dict[Credentials, MVSConnection] = {}


def get_connection(credentials: Credentials, site_command: Optional[str] = DEFAULT_SITE_COMMAND,
                   chunk_size: int = DEFAULT_CHUNK_SIZE,
                   ftp_factory: FTPFactory = ftplib.FTP) -> MVSConnection:
    """The one connection for credentials, created on first request.

    A later request with other settings updates the shared connection: the
    chunk size applies to the next transfer, the site command and FTP factory
    to the next (re)connect.
    """
    connection = _connections.get(credentials)
    if connection is None:
        connection = MVSConnection(credentials, site_command, chunk_size, ftp_factory)
        _connections[credentials] = connection
        logger.debug(f"Registered connection for {credentials}")
        return connection

    if (connection.site_command, connection.chunk_size) != (site_command, chunk_size):
        logger.debug(f"Updating settings of {connection}: site command {site_command!r}, "
                     f"chunk size {chunk_size}")
    connection.site_command = site_command
    connection.chunk_size = chunk_size
    connection.ftp_factory = ftp_factory
    return connection


def close_all_connections() -> None:
    """Close every registered connection and forget them."""
    for connection in list(_connections.values()):
        connection.close()
    _connections.clear()
