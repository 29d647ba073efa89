# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.06.15
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# tests/test_cli.py

"""Test suite for the polyfs command line."""

from unittest.mock import patch

import orjson
import pytest
from typer.testing import CliRunner

from polyfs.cli.main import app
from polyfs.config.manager import PolyFSConfig
from polyfs.core.policy import default_policy
from polyfs.system.exceptions import ConfigError

runner = CliRunner()


@pytest.fixture
def cli_config():
    """Configuration handed to every command instead of the user's polyfs.yml."""
    config = PolyFSConfig()
    with patch("polyfs.cli.utils.load_merged_config", return_value=config), \
            patch("polyfs.cli.main.setup_logging"):
        yield config


def invoke(*args):
    return runner.invoke(app, list(args))


def text(result) -> str:
    """Command output with rich line wrapping undone."""
    return " ".join(result.stdout.split())


class TestGlobalOptions:
    def test_version(self):
        with patch("polyfs.cli.main.version", return_value="1.2.3"):
            result = invoke("--version")
        assert result.exit_code == 0
        assert "polyfs version 1.2.3" in result.stdout

    def test_config_error(self):
        with patch("polyfs.cli.utils.load_merged_config",
                   side_effect=ConfigError("bad chunk_size")):
            result = invoke("ls", ".")
        assert result.exit_code == 1
        assert "Configuration error: bad chunk_size" in text(result)

    def test_config_sets_default_policy(self, cli_config, work_dir):
        cli_config.overwrite_allowed = True
        result = invoke("ls", str(work_dir.node.path))
        assert result.exit_code == 0
        assert default_policy().allowed is True


class TestLs:
    def test_table(self, cli_config, hello_file, work_dir):
        result = invoke("ls", str(work_dir.node.path))
        assert result.exit_code == 0, result.stdout
        assert "a.txt" in result.stdout

    def test_json(self, cli_config, hello_file, work_dir):
        (work_dir.node.path / ".hidden").write_bytes(b"")
        result = invoke("ls", "--json", str(work_dir.node.path))
        assert result.exit_code == 0, result.stdout
        listed = orjson.loads(result.stdout)
        assert [item["name"] for item in listed] == ["a.txt"]
        assert listed[0]["size"] == 5

    def test_all_includes_hidden(self, cli_config, hello_file, work_dir):
        (work_dir.node.path / ".hidden").write_bytes(b"")
        result = invoke("ls", "-a", "--json", str(work_dir.node.path))
        assert [item["name"] for item in orjson.loads(result.stdout)] == [".hidden", "a.txt"]

    def test_missing_location(self, cli_config, tmp_path):
        result = invoke("ls", str(tmp_path / "absent"))
        assert result.exit_code == 1
        assert "✗" in result.stdout
        assert "does not exist" in text(result)


class TestCat:
    def test_prints_content(self, cli_config, hello_file):
        result = invoke("cat", str(hello_file.node.path))
        assert result.exit_code == 0
        assert result.stdout == "hello"


class TestCp:
    def test_copy(self, cli_config, hello_file, other_dir):
        result = invoke("cp", str(hello_file.node.path), str(other_dir.node.path))
        assert result.exit_code == 0, result.stdout
        assert "Copied" in result.stdout
        assert (other_dir.node.path / "a.txt").read_bytes() == b"hello"

    def test_copy_with_name(self, cli_config, hello_file, other_dir):
        result = invoke("cp", "-n", "b.txt", str(hello_file.node.path), str(other_dir.node.path))
        assert result.exit_code == 0, result.stdout
        assert (other_dir.node.path / "b.txt").read_bytes() == b"hello"

    def test_occupied_needs_force(self, cli_config, hello_file, other_dir):
        (other_dir.node.path / "a.txt").write_bytes(b"old")
        result = invoke("cp", str(hello_file.node.path), str(other_dir.node.path))
        assert result.exit_code == 1
        assert "already exists" in text(result)

        result = invoke("cp", "--force", str(hello_file.node.path), str(other_dir.node.path))
        assert result.exit_code == 0, result.stdout
        assert (other_dir.node.path / "a.txt").read_bytes() == b"hello"

    def test_ebcdic_between_local_directories(self, cli_config, hello_file, other_dir):
        result = invoke("cp", "--ebcdic", str(hello_file.node.path), str(other_dir.node.path))
        assert result.exit_code == 0, result.stdout
        assert (other_dir.node.path / "a.txt").read_bytes() == b"hello"

    def test_mvs_without_credentials(self, cli_config, hello_file):
        result = invoke("cp", str(hello_file.node.path), "mvs:PROJ.SRC")
        assert result.exit_code == 1
        assert "credentials_file" in result.stdout


class TestMvRm:
    def test_move(self, cli_config, hello_file, other_dir):
        source = hello_file.node.path
        result = invoke("mv", str(source), str(other_dir.node.path))
        assert result.exit_code == 0, result.stdout
        assert not source.exists()
        assert (other_dir.node.path / "a.txt").exists()

    def test_remove(self, cli_config, hello_file):
        path = hello_file.node.path
        result = invoke("rm", str(path))
        assert result.exit_code == 0, result.stdout
        assert "Deleted" in result.stdout
        assert not path.exists()


class TestTranscode:
    def test_rewrites_file(self, cli_config, hello_file):
        hello_file.write_bytes(bytes.fromhex("c885939396"))
        result = invoke("transcode", str(hello_file.node.path), "--from", "IBM-1047", "--to", "UTF-8")
        assert result.exit_code == 0, result.stdout
        assert hello_file.read_bytes() == b"Hello"

    def test_unknown_encoding(self, cli_config, hello_file):
        result = invoke("transcode", str(hello_file.node.path), "--from", "nope", "--to", "UTF-8")
        assert result.exit_code == 1
        assert "nope" in result.stdout
        assert hello_file.read_bytes() == b"hello"
