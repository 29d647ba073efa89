# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.05.13
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/polyfs/config/manager.py

from __future__ import annotations

import os
from pathlib import Path
from typing import Final, Optional

import yaml
from loguru import logger
from pydantic import BaseModel, Field, ValidationError

from polyfs.system.exceptions import ConfigError


# ---- Constants ----

CONFIG_FILE: Final = "polyfs.yml"

# ftplib.FTP's own default blocksize
DEFAULT_CHUNK_SIZE: Final = 8192

DEFAULT_SITE_COMMAND: Final = "ISPFSTATS"


def _get_config_search_paths() -> tuple[Path, ...]:
    """Get config file search paths (ordered by priority: lowest to highest).

    Evaluated on every call so environment overrides set by tests are seen.
    """
    return (
        Path("/etc/polyfs") / CONFIG_FILE,
        Path.home() / ".config" / "polyfs" / CONFIG_FILE,
        Path(os.getenv("XDG_CONFIG_HOME", "")) / "polyfs" / CONFIG_FILE,
        Path(os.getenv("POLYFS_CONFIG_HOME", "")) / CONFIG_FILE,
    )


def _load_merged_config_data(candidates: tuple[Path, ...]) -> dict:
    """Load and merge config data from candidate paths.

    Args:
        candidates: Paths to check for config files

    Returns:
        Merged configuration data, empty if no file was found

    Raises:
        ConfigError: If a config file exists but is not valid YAML mapping
    """
    merged_data = {}
    found_configs = []

    for candidate in candidates:
        # Unset env vars collapse to a relative path; skip those
        if not candidate.is_absolute() or not candidate.exists():
            continue
        try:
            with candidate.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to load config from {candidate}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config file {candidate} must contain a mapping")

        merged_data.update(data)  # Later configs override earlier ones
        found_configs.append(str(candidate))
        logger.debug(f"Loaded config from {candidate}")

    if found_configs:
        logger.debug(f"Merged config from: {', '.join(found_configs)}")
    else:
        logger.debug(f"No {CONFIG_FILE} found, using defaults")
    return merged_data


class PolyFSConfig(BaseModel):
    """Settings shared by the backends, the transfer engine and the CLI."""

    overwrite_allowed: bool = Field(
        default=False, description="Initial value of the process-wide overwrite policy")
    chunk_size: int = Field(
        default=DEFAULT_CHUNK_SIZE, gt=0, description="Block size for streamed FTP transfers")
    site_command: str = Field(
        default=DEFAULT_SITE_COMMAND, description="SITE command issued once per FTP (re)connect")
    credentials_file: Optional[Path] = None
    include_hidden: bool = False
    temporary_prefix: str = "tmp"
    local_log: Optional[Path] = None

    @classmethod
    def load(cls, config_path: Path) -> "PolyFSConfig":
        """Load config from a single file."""
        try:
            with config_path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            return cls.model_validate(data)
        except (OSError, yaml.YAMLError, ValidationError) as e:
            raise ConfigError(str(e)) from e


def load_merged_config() -> PolyFSConfig:
    """Load and merge config from all locations (system defaults + user overrides)."""
    merged_data = _load_merged_config_data(_get_config_search_paths())
    try:
        return PolyFSConfig.model_validate(merged_data)
    except ValidationError as e:
        raise ConfigError(str(e)) from e


def validate_config() -> list[str]:
    """Return a list of validation errors. Empty list means config is valid."""
    errors = []
    try:
        config = load_merged_config()
    except ConfigError as e:
        errors.append(f"Error in config: {e}")
        return errors

    if config.credentials_file is not None and not config.credentials_file.is_file():
        errors.append(f"credentials_file does not exist: {config.credentials_file}")

    if config.local_log is not None and not config.local_log.is_absolute():
        errors.append(f"local_log path must be absolute: {config.local_log}")

    return errors


# done.
