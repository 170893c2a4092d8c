"""Shared utility functions for create-project.

Provides async command execution and Rich-based console helpers.  Consoles
are always bound to an explicit stream so the CLI front-end can be driven
with in-memory streams from tests.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TextIO

from rich.console import Console
from rich.markup import escape

console = Console(soft_wrap=True, highlight=False, emoji=False)
err_console = Console(stderr=True, soft_wrap=True, highlight=False, emoji=False)

# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(
    cmd: list[str],
    cwd: str | Path | None = None,
) -> tuple[int, str, str]:
    """Run a command asynchronously and capture its output.

    Args:
        cmd: Program and arguments.
        cwd: Working directory for the child process.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple.

    Raises:
        OSError: If the program does not exist or *cwd* is not a usable
            directory.
    """
    process = await asyncio.create_subprocess_exec(
        *cmd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        cwd=str(cwd) if cwd else None,
    )

    stdout_bytes, stderr_bytes = await process.communicate()
    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="replace").strip()
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    return (process.returncode or 0, stdout_str, stderr_str)


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def make_console(stream: TextIO | None, *, stderr: bool = False) -> Console:
    """Return a console writing to *stream*, or the process default when ``None``."""
    if stream is None:
        return err_console if stderr else console
    return Console(file=stream, soft_wrap=True, highlight=False, emoji=False)


def print_info(message: str, target: Console | None = None) -> None:
    """Print a plain progress message."""
    (target or console).print(escape(message))


def print_success(message: str, target: Console | None = None) -> None:
    """Print a green success message."""
    (target or console).print(f"[bold green]{escape(message)}[/bold green]")


def print_error(message: str, target: Console | None = None) -> None:
    """Print a red error message."""
    (target or err_console).print(f"[bold red]{escape(message)}[/bold red]")


def print_warning(message: str, target: Console | None = None) -> None:
    """Print a yellow warning message."""
    (target or err_console).print(f"[bold yellow]{escape(message)}[/bold yellow]")


def print_raw(text: str, target: Console | None = None) -> None:
    """Print *text* verbatim: no markup, no highlighting."""
    (target or err_console).print(text, markup=False, highlight=False)
