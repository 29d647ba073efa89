# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.06.14
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/polyfs/cli/main.py

"""
polyfs command line.

Every LOCATION argument is a location string (see polyfs.storage.factory):
`mem:`, `mem:NAME`, `mvs:`, `mvs:DATASET`, `mvs:DATASET(MEMBER)`,
`mvs-seq:DATASET` or a local path. Mainframe locations need
`credentials_file` in polyfs.yml.
"""

# Standard library imports
from importlib.metadata import version
from typing import Optional

# Third-party imports
import orjson
import typer
from rich.console import Console

# Local polyfs imports
from polyfs.cli.utils import (
    OPERATION_ERRORS,
    handle_operation_error,
    load_config_with_console,
    prompt_password,
)
from polyfs.config.manager import PolyFSConfig
from polyfs.core.entry import Entry
from polyfs.core.policy import default_policy
from polyfs.storage.factory import resolve_location
from polyfs.storage.ftp import close_all_connections
from polyfs.system.display import entries_to_table, entry_to_dict
from polyfs.system.logging_setup import setup_logging

# Initialize Typer app
app = typer.Typer(
    help="""polyfs - One set of file operations for local disk, memory and MVS datasets

[bold green]Inspect:[/bold green] ls, cat
[bold magenta]Transfer:[/bold magenta] cp, mv, rm
[bold blue]Content:[/bold blue] transcode
""",
    rich_markup_mode="rich"
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        try:
            pkg_version = version("polyfs")
        except Exception as e:
            handle_operation_error(console, "retrieving version", e)
        console.print(f"polyfs version {pkg_version}")
        raise typer.Exit()


def _config(ctx: typer.Context) -> PolyFSConfig:
    return ctx.obj["config"]


def _resolve(ctx: typer.Context, location: str) -> Entry:
    return resolve_location(location, _config(ctx), password_func=prompt_password)


@app.callback()
def main(
    ctx: typer.Context,
    version: Optional[bool] = typer.Option(
        None, "--version", callback=version_callback, is_eager=True,
        help="Show version and exit"
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    """polyfs - Uniform entry operations across storage backends."""
    config = load_config_with_console(console)
    setup_logging(config, debug=debug)
    default_policy().allowed = config.overwrite_allowed
    ctx.obj = {"config": config}
    ctx.call_on_close(close_all_connections)


@app.command()
def ls(
    ctx: typer.Context,
    location: str = typer.Argument(..., help="Directory or file to list"),
    include_hidden: bool = typer.Option(False, "--all", "-a", help="Include hidden entries"),
    to_json: bool = typer.Option(False, "--json", help="Output results as JSON"),
) -> None:
    """[bold green]Inspect[/bold green]: List a directory-like location."""
    try:
        entry = _resolve(ctx, location)
        if entry.is_directory:
            entries = list(entry.entries(include_hidden or _config(ctx).include_hidden))
        else:
            entries = [entry]

        if to_json:
            typer.echo(orjson.dumps(
                [entry_to_dict(e) for e in entries], option=orjson.OPT_INDENT_2).decode())
        else:
            console.print(entries_to_table(entries, title=str(entry)))
    except OPERATION_ERRORS as e:
        handle_operation_error(console, f"listing {location}", e)


@app.command()
def cat(
    ctx: typer.Context,
    location: str = typer.Argument(..., help="File to print"),
) -> None:
    """[bold green]Inspect[/bold green]: Write the content of a file to stdout."""
    try:
        content = _resolve(ctx, location).read_bytes()
    except OPERATION_ERRORS as e:
        handle_operation_error(console, f"reading {location}", e)
    typer.echo(content, nl=False)


@app.command()
def cp(
    ctx: typer.Context,
    source: str = typer.Argument(..., help="Entry to copy"),
    destination: str = typer.Argument(..., help="Directory to copy into"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Name of the copy"),
    ebcdic: bool = typer.Option(False, "--ebcdic", help="Transfer in EBCDIC mode"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing destination"),
) -> None:
    """[bold magenta]Transfer[/bold magenta]: Copy an entry into a directory."""
    try:
        entry = _resolve(ctx, source)
        directory = _resolve(ctx, destination)
        if force:
            entry.overwrite_next()
        if ebcdic:
            copied = entry.copy_as_ebcdic_to(directory, name)
        else:
            copied = entry.copy_to(directory, name)
    except OPERATION_ERRORS as e:
        handle_operation_error(console, f"copying {source}", e)
    console.print(f"[green]✓[/green] Copied {source} to {copied}")


@app.command()
def mv(
    ctx: typer.Context,
    source: str = typer.Argument(..., help="Entry to move"),
    destination: str = typer.Argument(..., help="Directory to move into"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="New name"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing destination"),
) -> None:
    """[bold magenta]Transfer[/bold magenta]: Move an entry into a directory."""
    try:
        entry = _resolve(ctx, source)
        directory = _resolve(ctx, destination)
        if force:
            entry.overwrite_next()
        entry.move_to(directory, name)
    except OPERATION_ERRORS as e:
        handle_operation_error(console, f"moving {source}", e)
    console.print(f"[green]✓[/green] Moved {source} to {entry}")


@app.command()
def rm(
    ctx: typer.Context,
    location: str = typer.Argument(..., help="Entry to delete"),
) -> None:
    """[bold magenta]Transfer[/bold magenta]: Delete an entry."""
    try:
        entry = _resolve(ctx, location)
        entry.delete()
    except OPERATION_ERRORS as e:
        handle_operation_error(console, f"deleting {location}", e)
    console.print(f"[green]✓[/green] Deleted {entry}")


@app.command()
def transcode(
    ctx: typer.Context,
    location: str = typer.Argument(..., help="File to rewrite"),
    source_encoding: str = typer.Option(..., "--from", help="Current encoding, e.g. IBM-1047"),
    target_encoding: str = typer.Option(..., "--to", help="New encoding, e.g. UTF-8"),
) -> None:
    """[bold blue]Content[/bold blue]: Rewrite a file from one encoding to another."""
    try:
        entry = _resolve(ctx, location)
        entry.transcode(source_encoding, target_encoding)
    except OPERATION_ERRORS as e:
        handle_operation_error(console, f"transcoding {location}", e)
    console.print(f"[green]✓[/green] Transcoded {entry} from {source_encoding} to {target_encoding}")


if __name__ == "__main__":
    app()
