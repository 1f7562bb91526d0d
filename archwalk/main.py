from __future__ import annotations

"""
Typer CLI entry point: list what an archive built from a path would hold.

The `list` command:
- Walks a file or directory with the archive builder
- Optionally stores it under another name (--as)
- Prints the members, any recorded errors and a summary with Rich

Exit code is 0 when the walk completed and 1 when it was aborted.
"""

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from archwalk.builder import Builder
from archwalk.config import WalkConfig
from archwalk.reporting.console import print_members

logger = logging.getLogger(__name__)

app = typer.Typer(help="archwalk - walk a tree the way an archive builder sees it.")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.callback()
def main_callback() -> None:
    """Walk filesystem trees and report them as archive members."""


@app.command("list")
def list_members(
    target: Path = typer.Argument(
        ...,
        exists=True,
        help="File or directory to walk.",
    ),
    member_name: Optional[str] = typer.Option(
        None,
        "--as",
        "-a",
        help="Name to store TARGET under (defaults to TARGET itself).",
    ),
    follow_symlinks: bool = typer.Option(
        False,
        "--follow-symlinks",
        "-L",
        help="Archive what symlinks point to instead of the links.",
    ),
    exclude: Optional[List[str]] = typer.Option(
        None,
        "--exclude",
        "-x",
        help="Glob pattern of members to leave out (repeatable).",
    ),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Abort on entries that cannot be archived instead of skipping them.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show disk paths and progress."),
) -> None:
    """
    List the members an archive of TARGET would contain.
    """
    _configure_logging(verbose)

    config = WalkConfig(
        follow_symlinks=follow_symlinks,
        exclude=tuple(exclude or ()),
        strict=strict,
    )
    builder = Builder(config)

    res = builder.add_path(str(target), member_name)

    errors = builder.error.records if builder.error is not None else []
    print_members(builder.members, errors, verbose=verbose)

    if res != 0:
        typer.echo(f"Walk of {target} aborted.", err=True)
        raise typer.Exit(code=1)


def main() -> None:
    """Entry point for `python -m archwalk.main`."""
    app()


if __name__ == "__main__":
    main()
