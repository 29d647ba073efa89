# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.06.14
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/polyfs/cli/utils.py

"""
CLI utility functions shared by the polyfs commands.

All functions handle console output and typer exits consistently: failures
print a red ✗ line and exit with status 1.
"""

import ftplib
from typing import NoReturn

import typer
from rich.console import Console

from polyfs.config.manager import PolyFSConfig, load_merged_config
from polyfs.system.exceptions import ConfigError, PolyFSError


# Errors a command reports instead of a traceback
OPERATION_ERRORS = (PolyFSError, OSError, ftplib.Error, ValueError)


def load_config_with_console(console: Console) -> PolyFSConfig:
    """
    Load polyfs configuration with proper error handling and console output.

    Args:
        console: Rich console for output

    Returns:
        Loaded configuration object

    Raises:
        typer.Exit: If configuration loading fails
    """
    try:
        return load_merged_config()
    except ConfigError as e:
        handle_config_error(console, str(e))


def prompt_password(address: str, login: str) -> str:
    """Ask for the password of a credentials line that has none."""
    return typer.prompt(f"Password for {login}@{address}", hide_input=True)


def handle_config_error(console: Console, error_message: str) -> NoReturn:
    """Handle configuration errors with consistent formatting."""
    console.print(f"[red]✗[/red] Configuration error: {error_message}")
    raise typer.Exit(1)


def handle_operation_error(console: Console, operation: str, error: Exception) -> NoReturn:
    """Handle operation errors with consistent formatting."""
    console.print(f"[red]✗[/red] Error {operation}: {error}")
    raise typer.Exit(1)
