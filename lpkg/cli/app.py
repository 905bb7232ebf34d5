from __future__ import annotations

from pathlib import Path

import typer

from lpkg import __version__
from lpkg.cli.commands.archive_cmd import archive
from lpkg.cli.commands.packages import apt_app, yum_app
from lpkg.cli.commands.version_cmd import version
from lpkg.core.errors import ErrorCode


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# Commands
app.command()(version)
app.command()(archive)

# Sub-apps
app.add_typer(apt_app, name="apt")
app.add_typer(yum_app, name="yum")


def _show_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    ctx: typer.Context,
    show_version: bool = typer.Option(
        False,
        "--version",
        callback=_show_version,
        is_eager=True,
        help="Show lpkg version and exit.",
    ),
    project: Path = typer.Option(
        Path("."),
        "--project",
        help="Source tree holding the version metadata (default: current directory)",
    ),
) -> None:
    try:
        root = project.expanduser().resolve()
    except OSError as e:
        typer.echo(f"error: invalid --project: {e}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    if not root.is_dir():
        typer.echo(f"error: --project '{root}' is not a directory", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    ctx.obj = root


def main() -> None:
    app()
