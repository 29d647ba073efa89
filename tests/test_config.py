# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.05.10
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# tests/test_config.py

from pathlib import Path

import pytest
import yaml

from polyfs.config import manager
from polyfs.config.manager import (
    CONFIG_FILE,
    DEFAULT_CHUNK_SIZE,
    PolyFSConfig,
    load_merged_config,
    validate_config,
)
from polyfs.system.exceptions import ConfigError


@pytest.fixture
def config_dirs(tmp_path, monkeypatch):
    """Two config directories searched low to high, nothing else."""
    low = tmp_path / "etc"
    high = tmp_path / "user"
    low.mkdir()
    high.mkdir()
    monkeypatch.setattr(manager, "_get_config_search_paths",
                        lambda: (low / CONFIG_FILE, high / CONFIG_FILE))
    return low, high


def write_config(directory: Path, data) -> Path:
    path = directory / CONFIG_FILE
    path.write_text(yaml.safe_dump(data) if not isinstance(data, str) else data)
    return path


class TestDefaults:
    def test_no_config_files(self, config_dirs):
        config = load_merged_config()
        assert config.overwrite_allowed is False
        assert config.chunk_size == DEFAULT_CHUNK_SIZE == 8192
        assert config.site_command == "ISPFSTATS"
        assert config.credentials_file is None
        assert config.include_hidden is False
        assert config.temporary_prefix == "tmp"
        assert config.local_log is None


class TestMerge:
    def test_later_file_overrides(self, config_dirs):
        low, high = config_dirs
        write_config(low, {"chunk_size": 1024, "site_command": "FILETYPE=SEQ"})
        write_config(high, {"chunk_size": 4096})

        config = load_merged_config()
        assert config.chunk_size == 4096
        assert config.site_command == "FILETYPE=SEQ"

    def test_paths_are_parsed(self, config_dirs, tmp_path):
        low, _ = config_dirs
        write_config(low, {"credentials_file": str(tmp_path / "creds.txt")})
        assert load_merged_config().credentials_file == tmp_path / "creds.txt"

    def test_empty_file(self, config_dirs):
        low, _ = config_dirs
        write_config(low, "")
        assert load_merged_config() == PolyFSConfig()

    def test_env_override_location(self, tmp_path, monkeypatch):
        """POLYFS_CONFIG_HOME is searched last and wins."""
        monkeypatch.setenv("HOME", str(tmp_path / "home"))
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        override = tmp_path / "override"
        override.mkdir()
        write_config(override, {"overwrite_allowed": True})
        monkeypatch.setenv("POLYFS_CONFIG_HOME", str(override))

        assert override / CONFIG_FILE in manager._get_config_search_paths()
        assert load_merged_config().overwrite_allowed is True


class TestInvalidConfig:
    def test_invalid_yaml(self, config_dirs):
        low, _ = config_dirs
        write_config(low, "chunk_size: [unclosed\n")
        with pytest.raises(ConfigError, match="Failed to load config"):
            load_merged_config()

    def test_not_a_mapping(self, config_dirs):
        low, _ = config_dirs
        write_config(low, "- a\n- b\n")
        with pytest.raises(ConfigError, match="must contain a mapping"):
            load_merged_config()

    def test_invalid_value(self, config_dirs):
        low, _ = config_dirs
        write_config(low, {"chunk_size": 0})
        with pytest.raises(ConfigError):
            load_merged_config()

    def test_load_single_file(self, tmp_path):
        path = write_config(tmp_path, {"include_hidden": True})
        assert PolyFSConfig.load(path).include_hidden is True
        with pytest.raises(ConfigError):
            PolyFSConfig.load(tmp_path / "absent.yml")


class TestValidateConfig:
    def test_valid(self, config_dirs):
        assert validate_config() == []

    def test_missing_credentials_file(self, config_dirs, tmp_path):
        low, _ = config_dirs
        write_config(low, {"credentials_file": str(tmp_path / "absent.txt")})
        errors = validate_config()
        assert len(errors) == 1
        assert "credentials_file does not exist" in errors[0]

    def test_relative_log_dir(self, config_dirs):
        low, _ = config_dirs
        write_config(low, {"local_log": "logs"})
        assert validate_config() == ["local_log path must be absolute: logs"]

    def test_load_error_reported(self, config_dirs):
        low, _ = config_dirs
        write_config(low, "- not a mapping\n")
        errors = validate_config()
        assert errors[0].startswith("Error in config:")
