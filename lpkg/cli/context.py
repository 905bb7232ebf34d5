from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import typer

from lpkg.core.config import ReleaseConfig, load_release_config
from lpkg.core.result import Err
from lpkg.output.console import ConsoleProtocol, RichConsole
from lpkg.output.errors import packaging_error_exit_code, print_packaging_error
from lpkg.release.version import ResolvedVersion, resolve_version


@dataclass(frozen=True, slots=True)
class CLIContext:
    config: ReleaseConfig
    console: ConsoleProtocol


def build_context(project_root: Path | None = None) -> CLIContext:
    """Load the release configuration once for this invocation."""
    console = RichConsole()
    root = project_root or Path.cwd()
    result = load_release_config(root, os.environ)
    if isinstance(result, Err):
        print_packaging_error(result.error, console)
        raise typer.Exit(code=packaging_error_exit_code(result.error))
    return CLIContext(config=result.value, console=console)


def resolve_release_version(ctx: CLIContext) -> ResolvedVersion:
    result = resolve_version(ctx.config.version, release_time=ctx.config.release_time)
    if isinstance(result, Err):
        print_packaging_error(result.error, ctx.console)
        raise typer.Exit(code=packaging_error_exit_code(result.error))
    return result.value
