# Author: PB & Claude
# Maintainer: PB
# Original date: 2025-06-17
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/polyfs/config/credentials.py

"""
Credentials for a remote MVS system.

A credentials file is line oriented:

    # Lines starting with "#" are ignored.
    ; Lines starting with ";" are ignored as well.

    # address, login, password
    mainframe.example.com, msdude, 99012x95

    # or, prompting for the password:
    mainframe.example.com, msdude

The first data line wins.
"""

from pathlib import Path
from typing import Callable, Optional

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from polyfs.system.exceptions import (
    CredentialsNotFound, InvalidCredentialsFormat, PasswordNotSpecified
)


PasswordFunc = Callable[[str, str], str]

COMMENT_PREFIXES = ("#", ";")


class Credentials(BaseModel):
    """Address, login and password of a remote system. Immutable and hashable."""
    model_config = ConfigDict(frozen=True)

    address: str = Field(..., min_length=1)
    login: str = Field(..., min_length=1)
    password: str = Field(..., repr=False)

    def __str__(self) -> str:
        return f"{self.login}@{self.address}"

    @classmethod
    def load_from_file(cls, path: Path, password_func: Optional[PasswordFunc] = None) -> "Credentials":
        return load_credentials(path, password_func)


def _no_password(address: str, login: str) -> str:
    raise PasswordNotSpecified(address, login)


def parse_credentials_line(line: str, password_func: Optional[PasswordFunc] = None) -> Optional[Credentials]:
    """Parse one line of a credentials file.

    Returns:
        Credentials, or None for blank and comment lines

    Raises:
        InvalidCredentialsFormat: If the line lacks an address or a login
        PasswordNotSpecified: If there is no password and no password_func
    """
    line = line.strip()
    if not line or line.startswith(COMMENT_PREFIXES):
        return None

    fields = [field.strip() for field in line.split(",", 2)]
    if len(fields) < 2 or not fields[0] or not fields[1]:
        raise InvalidCredentialsFormat(line)

    address, login = fields[0], fields[1]
    password = fields[2] if len(fields) == 3 and fields[2] else None
    if password is None:
        password = (password_func or _no_password)(address, login)

    return Credentials(address=address, login=login, password=password)


def load_credentials(path: Path, password_func: Optional[PasswordFunc] = None) -> Credentials:
    """Load Credentials from the first data line of a credentials file.

    Args:
        path: Credentials file
        password_func: Called with (address, login) when the line has no password

    Raises:
        CredentialsNotFound: If the file has no data line
    """
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        for line in f:
            credentials = parse_credentials_line(line, password_func)
            if credentials is not None:
                logger.debug(f"Loaded credentials for {credentials} from {path}")
                return credentials
    raise CredentialsNotFound(str(path))
