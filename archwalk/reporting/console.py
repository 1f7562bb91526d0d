# Rich console output: show collected archive members and recorded errors.

from __future__ import annotations

from typing import Sequence

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from archwalk.errors.models import ErrorRecord, Severity
from archwalk.members import Member, MemberKind

# Member kind → Rich style
KIND_STYLE = {
    MemberKind.DIRECTORY: "bold blue",
    MemberKind.SYMLINK: "cyan",
    MemberKind.FIFO: "yellow",
    MemberKind.CHARDEV: "bold yellow",
    MemberKind.BLOCKDEV: "bold yellow",
}

DEFAULT_KIND_STYLE = "white"

# Severity → Rich style
SEVERITY_STYLE = {
    Severity.FATAL: "bold red",
    Severity.WARN: "bold yellow",
    Severity.OK: "bold green",
}


def _format_size(size: int) -> str:
    """Return a short human-readable size (e.g. 4.0K, 12M)."""
    value = float(size)
    for unit in ("", "K", "M", "G", "T"):
        if value < 1024 or unit == "T":
            return f"{int(value)}" if unit == "" else f"{value:.1f}{unit}"
        value /= 1024
    return str(size)


def _member_label(member: Member) -> Text:
    label = Text(member.name, style=KIND_STYLE.get(member.kind, DEFAULT_KIND_STYLE))
    if member.link_target is not None:
        label.append(f" -> {member.link_target}", style="dim")
    return label


def print_members(
    members: Sequence[Member],
    errors: Sequence[ErrorRecord] = (),
    verbose: bool = False,
    console: Console | None = None,
) -> None:
    """
    Print archive members as a table, followed by any recorded errors and
    a summary. If verbose, the on-disk path of each member is shown too.
    """
    if console is None:
        console = Console()

    if not members and not errors:
        console.print(
            Panel(
                "[yellow]Nothing to archive.[/yellow]",
                title="archwalk",
                border_style="yellow",
                box=box.ROUNDED,
            )
        )
        return

    if members:
        table = Table(
            show_header=True,
            header_style="bold magenta",
            box=box.SIMPLE,
            padding=(0, 1),
            expand=False,
        )
        table.add_column("Mode", style="dim", width=10)
        table.add_column("Size", justify="right", width=8)
        table.add_column("Member")
        if verbose:
            table.add_column("Path", style="dim")

        for m in members:
            row = [m.filemode, _format_size(m.size), _member_label(m)]
            if verbose:
                row.append(Text(m.disk_path))
            table.add_row(*row)

        console.print(table)

    if errors:
        _print_errors_table(errors, console)

    _print_summary(members, errors, console)


def _print_errors_table(errors: Sequence[ErrorRecord], console: Console) -> None:
    """Print every recorded error with its severity and OS reason."""
    table = Table(
        title="Errors",
        show_header=True,
        header_style="bold cyan",
        box=box.ROUNDED,
        padding=(0, 1),
    )
    table.add_column("Severity", width=8)
    table.add_column("Path", style="white")
    table.add_column("Message")

    for e in errors:
        message = e.message
        if e.errno:
            message = f"{message}: {e.strerror}"
        table.add_row(
            Text(e.severity.value.upper(), style=SEVERITY_STYLE[e.severity]),
            Text(e.path),
            Text(message),
        )

    console.print()
    console.print(table)


def _print_summary(
    members: Sequence[Member],
    errors: Sequence[ErrorRecord],
    console: Console,
) -> None:
    """Print a compact summary of members by kind and error count."""
    by_kind: dict[MemberKind, int] = {}
    for m in members:
        by_kind[m.kind] = by_kind.get(m.kind, 0) + 1

    total = len(members)
    summary_parts = [f"[bold]{total} member{'s' if total != 1 else ''}[/bold]"]
    for kind in MemberKind:
        if kind in by_kind:
            summary_parts.append(f"{by_kind[kind]} {kind.value}")
    if errors:
        summary_parts.append(f"[bold yellow]{len(errors)} error{'s' if len(errors) != 1 else ''}[/]")

    console.print()
    console.print(
        Panel(
            " | ".join(summary_parts),
            title="Summary",
            border_style="yellow" if errors else "green",
            box=box.ROUNDED,
        )
    )
