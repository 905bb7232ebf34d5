"""External command execution.

This is the only module that talks to subprocess directly. Release steps
run git, tar, cp, docker and the release scripts through run_silent() and get
a ProcessError value back on failure.

Command output is streamed to the terminal, never captured, so a failing
tool's own diagnostics reach the user unmodified. Environment overlays are
merged over a copy of os.environ for a single command; the parent process
environment is never modified.
"""

from __future__ import annotations

import os
import subprocess
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from lpkg.core.result import Err, Ok, Result

__all__ = ["ProcessError", "overlay_env", "run_silent"]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """Failed command.

    Attributes:
        command: Command and arguments as executed.
        returncode: Exit status, or -1 when the command could not be started
            or timed out.
        detail: Why the command could not run (empty for a plain non-zero exit).
    """

    command: tuple[str, ...]
    returncode: int
    detail: str = ""

    def __str__(self) -> str:
        shown = " ".join(self.command[:3])
        if len(self.command) > 3:
            shown += " ..."
        return f"{shown} failed (exit {self.returncode})"


def overlay_env(overlay: Mapping[str, str] | None) -> dict[str, str] | None:
    """os.environ updated with overlay, or None (inherit) when there is nothing to add."""
    if not overlay:
        return None
    env = os.environ.copy()
    env.update(overlay)
    return env


def run_silent(
    cmd: list[str],
    cwd: Path,
    env: Mapping[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[None, ProcessError]:
    """Run cmd in cwd with output going straight to the terminal.

    Args:
        cmd: Command and arguments.
        cwd: Working directory.
        env: Variables overlaid on the current environment for this command.
        timeout: Maximum seconds to wait (None for no limit).

    Returns:
        Ok(None) on exit status 0, Err(ProcessError) otherwise.
    """
    command = tuple(cmd)
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=overlay_env(env),
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired:
        return Err(ProcessError(command, -1, f"timed out after {timeout}s"))
    except OSError as e:
        return Err(ProcessError(command, -1, str(e)))

    if proc.returncode != 0:
        return Err(ProcessError(command, proc.returncode))
    return Ok(None)
