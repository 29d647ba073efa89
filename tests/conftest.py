# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.06.15
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# tests/conftest.py

"""
Shared test fixtures for the polyfs test suite.

Every test gets an empty memory root, a default overwrite policy that
disallows overwriting, a private system temporary directory and no
registered FTP connections. Mainframe tests talk to a MagicMock standing in
for ftplib.FTP; nothing touches the network.
"""

import ftplib
import tempfile
from unittest.mock import MagicMock

import pytest
from loguru import logger

from polyfs.config.credentials import Credentials
from polyfs.core import temporary
from polyfs.core.policy import default_policy
from polyfs.storage.ftp import close_all_connections
from polyfs.storage.local import create_local_directory, create_local_file, local_directory
from polyfs.storage.memory import MEMORY_ROOT
from polyfs.storage.mvs import dataset, mainframe


@pytest.fixture(autouse=True)
def isolated_state(tmp_path, monkeypatch):
    """Reset process-wide state around every test."""
    temp_dir = tmp_path / "system-tmp"
    temp_dir.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(temp_dir))
    monkeypatch.setattr(temporary, "_next_index", 0)
    MEMORY_ROOT.clear()
    default_policy().allowed = False
    yield
    MEMORY_ROOT.clear()
    default_policy().allowed = False
    close_all_connections()


@pytest.fixture
def system_temp_dir(tmp_path):
    return tmp_path / "system-tmp"


@pytest.fixture
def log_messages():
    """Messages logged at WARNING or above while the test runs."""
    messages = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]),
                            level="WARNING")
    yield messages
    logger.remove(handler_id)


# ---- local ----

@pytest.fixture
def work_dir(tmp_path):
    """Local directory entry for the test's scratch area."""
    path = tmp_path / "work"
    path.mkdir()
    return local_directory(path)


@pytest.fixture
def hello_file(work_dir):
    """Local file a.txt containing b"hello"."""
    return create_local_file(work_dir, "a.txt", b"hello")


@pytest.fixture
def other_dir(work_dir):
    return create_local_directory(work_dir, "other")


# ---- mainframe ----

@pytest.fixture
def credentials():
    return Credentials(address="mvs.example", login="user", password="secret")


@pytest.fixture
def mock_ftp():
    """MagicMock standing in for a connected ftplib.FTP session."""
    ftp = MagicMock(spec=ftplib.FTP)
    ftp.nlst.return_value = []
    return ftp


@pytest.fixture
def ftp_factory(mock_ftp):
    return MagicMock(return_value=mock_ftp)


@pytest.fixture
def system(credentials, ftp_factory):
    """Mainframe system root entry backed by mock_ftp."""
    return mainframe(credentials, ftp_factory=ftp_factory)


@pytest.fixture
def pds(system):
    """Partitioned dataset PROJ.SRC."""
    return dataset(system, "PROJ.SRC")


@pytest.fixture
def member(pds):
    """Member PROJ.SRC(ALPHA), looked up optimistically."""
    return pds / "ALPHA"


@pytest.fixture
def ebcdic_connection(mock_ftp):
    """The data connection mock_ftp hands out for transfercmd()."""
    return mock_ftp.transfercmd.return_value.__enter__.return_value


@pytest.fixture
def serve_binary(mock_ftp):
    """Function making mock_ftp.retrbinary deliver some content in one block."""
    def serve(content: bytes) -> None:
        def retrbinary(command, callback, blocksize=8192, rest=None):
            callback(content)
            return "226 Transfer complete"
        mock_ftp.retrbinary.side_effect = retrbinary
    return serve
