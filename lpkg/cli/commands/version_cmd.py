from __future__ import annotations

import typer

from lpkg.cli.commands._helpers import exit_on_error
from lpkg.cli.context import build_context, resolve_release_version
from lpkg.release.version import resolve_native_version


def version(
    ctx: typer.Context,
    native: bool = typer.Option(False, "--native", help="Also print the native version."),
) -> None:
    """Print the resolved release version."""
    cli = build_context(ctx.obj)
    resolved = resolve_release_version(cli)
    typer.echo(resolved.version)
    if native:
        native_version = resolved.native_version
        if native_version is None:
            # VERSION given without VERSION_NATIVE: only --native needs the descriptor
            native_version = exit_on_error(resolve_native_version(cli.config.version), cli)
        typer.echo(native_version)
