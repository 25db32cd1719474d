"""Console output for toru via Rich.

``console`` carries a command's own output (task views, tables, confirmations).
Diagnostics go to stderr so that output piped from ``toru list`` or
``toru view`` stays clean.
"""

from __future__ import annotations

from rich.console import Console

console = Console(highlight=False)
_diagnostics = Console(highlight=False, stderr=True)

_verbose = False


def set_verbose(enabled: bool) -> None:
    global _verbose
    _verbose = enabled


def success(msg: str) -> None:
    console.print(f"[green]ok:[/green] {msg}")


def info(msg: str) -> None:
    _diagnostics.print(f"[cyan]toru:[/cyan] {msg}")


def warn(msg: str) -> None:
    _diagnostics.print(f"[yellow]warning:[/yellow] {msg}")


def error(msg: str) -> None:
    _diagnostics.print(f"[bold red]error:[/bold red] {msg}")


def debug(msg: str) -> None:
    if _verbose:
        _diagnostics.print(f"[dim]debug: {msg}[/dim]")
