"""Shared utility functions for create-rsk-dapp.

Provides async command execution, JSON I/O, and Rich-based console output
(success/warning/error lines, the banner, and per-step phase reporting).
"""

from __future__ import annotations

import asyncio
import json
import os
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from .errors import OptionalStepFailed, SubprocessFailure

console = Console()

# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(
    cmd: str | list[str],
    cwd: str | Path | None = None,
    timeout: int | None = None,
    env: dict[str, str] | None = None,
) -> tuple[int, str, str]:
    """Run a command asynchronously and capture its output.

    Args:
        cmd: Shell command string or list of arguments.
        cwd: Working directory for the child process.
        timeout: Maximum wall-clock seconds before the process is killed;
            ``None`` waits for the command however long it takes.
        env: Optional extra environment variables merged on top of ``os.environ``.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple.  A timed-out command
        returns ``-1``; a missing executable returns ``127`` and one that
        cannot be started for any other reason returns ``126``.
    """
    merged_env: dict[str, str] | None = None
    if env:
        merged_env = {**os.environ, **env}

    try:
        if isinstance(cmd, list):
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=str(cwd) if cwd else None,
                env=merged_env,
            )
        else:
            process = await asyncio.create_subprocess_shell(
                cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=str(cwd) if cwd else None,
                env=merged_env,
            )
    except FileNotFoundError as exc:
        return (127, "", str(exc))
    except OSError as exc:
        return (126, "", str(exc))

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return (
            -1,
            "",
            f"Command timed out after {timeout}s: {format_command(cmd)}",
        )

    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="replace").strip()
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    return (process.returncode or 0, stdout_str, stderr_str)


async def run_checked(
    cmd: str | list[str],
    cwd: str | Path | None = None,
    timeout: int | None = None,
    env: dict[str, str] | None = None,
) -> str:
    """Run a command and return its combined output.

    Raises:
        SubprocessFailure: If the command exits non-zero, times out, or
            cannot be started.
    """
    returncode, stdout, stderr = await run_command(cmd, cwd=cwd, timeout=timeout, env=env)
    cmd_str = format_command(cmd)
    if returncode != 0:
        raise SubprocessFailure(
            f"Command failed (exit {returncode}): {cmd_str}\n{stderr or stdout}".rstrip(),
            command=cmd_str,
            returncode=returncode,
            stdout=stdout,
            stderr=stderr,
        )
    return "\n".join(part for part in (stdout, stderr) if part)


def format_command(cmd: str | list[str]) -> str:
    return cmd if isinstance(cmd, str) else " ".join(cmd)


# ---------------------------------------------------------------------------
# JSON I/O
# ---------------------------------------------------------------------------


def load_json(path: str | Path) -> dict[str, Any]:
    """Load and parse a JSON object file.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
        ValueError: If the top-level value is not an object.
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path} does not contain a JSON object")
    return data


async def save_json(data: dict[str, Any] | list[Any], path: str | Path) -> None:
    """Save data as two-space indented JSON with a trailing newline.

    Key order is preserved.  Parent directories are created automatically.
    """
    file_path = Path(path)
    content = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    await asyncio.to_thread(write_text, file_path, content)


def write_text(path: Path, content: str) -> None:
    """Create parent dirs and write *content* as UTF-8."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_banner(version: str) -> None:
    """Print the tool banner."""
    console.print(
        Panel(
            f"[bold bright_cyan]Rootstock dApp Creator v{version}[/bold bright_cyan]\n"
            "Build full-stack dApps on RSK",
            border_style="cyan",
            expand=False,
        )
    )


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")


class PhaseReporter:
    """Reports discrete labelled steps: running, then succeeded/warned/failed.

    Purely observational -- it never changes control flow.  A spinner is
    shown while a step runs when the console is interactive.
    """

    def __init__(self, out: Console | None = None) -> None:
        self.console = out or console

    @contextmanager
    def phase(
        self, running: str, done: str, warning: str | None = None
    ) -> Iterator[None]:
        """Show *running* while the body executes; print *done* on success.

        On an exception the step is marked failed and the exception is
        re-raised unchanged.  An ``OptionalStepFailed`` is shown as a warning
        instead (using *warning* when given), together with the command output.
        """
        try:
            with self.console.status(running, spinner="dots"):
                yield
        except OptionalStepFailed as exc:
            self.warn(warning or str(exc))
            detail = exc.cause.output or str(exc.cause)
            if detail:
                self.console.print(f"  [dim]{escape(detail)}[/dim]", highlight=False)
            raise
        except Exception:
            self.fail(running.rstrip(". "))
            raise
        self.succeed(done)

    def succeed(self, message: str) -> None:
        self.console.print(f"[green]✔[/green] {message}")

    def warn(self, message: str) -> None:
        self.console.print(f"[yellow]⚠[/yellow] {message}")

    def fail(self, message: str) -> None:
        self.console.print(f"[red]✖[/red] {message}")
