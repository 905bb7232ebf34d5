from __future__ import annotations

from pathlib import Path

import typer

from lpkg.cli.commands._helpers import exit_on_error
from lpkg.cli.context import build_context, resolve_release_version
from lpkg.release.archive import ArchiveArtifact, prepare_archives


def archive(
    ctx: typer.Context,
    out: Path = typer.Option(Path("."), "--out", help="Output directory"),
) -> None:
    """Build the source archive (and deb/rpm aliases) if missing."""
    cli = build_context(ctx.obj)
    resolved = resolve_release_version(cli)
    artifact = ArchiveArtifact(package=cli.config.package, version=resolved.version)
    exit_on_error(
        prepare_archives(
            artifact,
            out.expanduser().absolute(),
            source_root=cli.config.project_root,
            console=cli.console,
        ),
        cli,
    )
