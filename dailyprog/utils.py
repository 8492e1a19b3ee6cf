"""Shared utility functions for dailyprog.

Provides synchronous command execution for post-create steps, file-system
helpers, and Rich-based console reporting.  All user-facing output of the
package goes through the module-level ``console`` so tests can capture it in
one place.
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

console = Console()
err_console = Console(stderr=True)

# ---------------------------------------------------------------------------
# Command execution
# ---------------------------------------------------------------------------


def run_command(argv: Sequence[str], cwd: str | Path | None = None) -> int:
    """Run a command to completion and return its exit status.

    Standard output is discarded, standard error is inherited from the
    parent so the user sees diagnostics.  There is no timeout: a hung child
    blocks the caller.

    Args:
        argv: Executable followed by its arguments.
        cwd: Working directory for the child process.

    Returns:
        The process return code.

    Raises:
        OSError: If the executable could not be launched.
    """
    completed = subprocess.run(
        list(argv),
        cwd=str(cwd) if cwd else None,
        stdout=subprocess.DEVNULL,
        stderr=None,
        check=False,
    )
    return completed.returncode


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


def ensure_dir(path: str | Path) -> Path:
    """Create a directory (and parents) if it does not exist.

    Args:
        path: Directory path.

    Returns:
        The ``Path`` object.
    """
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path


def write_text(path: Path, content: str, mode: int = 0o644) -> Path:
    """Create parent dirs, write *content* and apply *mode*.

    Existing files are overwritten.
    """
    ensure_dir(path.parent)
    path.write_text(content, encoding="utf-8")
    path.chmod(mode)
    return path


def expand_home(path: str) -> Path:
    """Expand a leading ``~`` and return a ``Path``."""
    return Path(path).expanduser()


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message to stderr."""
    err_console.print(f"[bold red]Error:[/bold red] {escape(message)}")


def print_warning(message: str) -> None:
    """Print a yellow warning message to stderr."""
    err_console.print(f"[bold yellow]Warning:[/bold yellow] {escape(message)}")


def print_verbose(message: str, verbose: bool) -> None:
    """Print a dimmed progress line when *verbose* is set."""
    if verbose:
        console.print(f"[dim]{escape(message)}[/dim]", highlight=False)


def print_table(
    rows: Sequence[Sequence[str]],
    columns: Sequence[str],
    title: str | None = None,
) -> None:
    """Print a simple multi-column table.

    Args:
        rows: Row values, one sequence per row, in the order of *columns*.
        columns: Column headers.
        title: Optional table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    for i, column in enumerate(columns):
        table.add_column(column, style="dim" if i == 0 else None, no_wrap=i == 0)

    for row in rows:
        table.add_row(*(escape(str(value)) for value in row))

    console.print(table)
