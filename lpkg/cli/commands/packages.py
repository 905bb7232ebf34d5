"""`lpkg apt ...` / `lpkg yum ...` commands.

One sub-app per TargetNamespace, generated from the same command set.
"""

from __future__ import annotations

import typer

from lpkg.cli.commands._helpers import exit_on_error
from lpkg.cli.context import CLIContext, build_context, resolve_release_version
from lpkg.output.console import Style
from lpkg.release.dispatcher import TargetDispatcher
from lpkg.release.http import RealHttpClient
from lpkg.release.images import build_image
from lpkg.release.targets import PackagingTarget, TargetNamespace, targets_for

# Replaced in tests.
http_client_factory = RealHttpClient


def make_dispatcher(cli: CLIContext) -> TargetDispatcher:
    version = resolve_release_version(cli)
    return TargetDispatcher(cli.config, version, http=http_client_factory(), console=cli.console)


def show_targets(cli: CLIContext, namespace: TargetNamespace) -> None:
    for target in targets_for(cli.config, namespace):
        cli.console.print(f"{target.name}  ({target.family})")


def download(cli: CLIContext, namespace: TargetNamespace) -> None:
    exit_on_error(make_dispatcher(cli).download_packages(namespace), cli)


def upload_rc(cli: CLIContext, namespace: TargetNamespace) -> None:
    exit_on_error(make_dispatcher(cli).upload_rc(namespace), cli)
    cli.console.success(f"{namespace}: RC uploaded")


def rc(cli: CLIContext, namespace: TargetNamespace) -> None:
    exit_on_error(make_dispatcher(cli).rc(namespace), cli)
    cli.console.success(f"{namespace}: RC uploaded")


def release(cli: CLIContext, namespace: TargetNamespace) -> None:
    exit_on_error(make_dispatcher(cli).release(namespace), cli)
    cli.console.success(f"{namespace}: released")


def image(cli: CLIContext, namespace: TargetNamespace, target_name: str, *, dry_run: bool) -> None:
    known = {t.name for t in targets_for(cli.config, namespace)}
    if target_name not in known:
        cli.console.warning(f"{target_name} is not a configured {namespace} target")
        cli.console.print(f"configured: {', '.join(sorted(known)) or '-'}", Style.DIM)
    target = PackagingTarget(namespace, target_name)
    exit_on_error(build_image(cli.config, target, cli.console, dry_run=dry_run), cli)


def namespace_app(namespace: TargetNamespace) -> typer.Typer:
    ns_app = typer.Typer(
        add_completion=False,
        no_args_is_help=True,
        help=f"{namespace.value.upper()} packages",
    )

    @ns_app.command("targets")
    def targets_cmd(ctx: typer.Context) -> None:  # pyright: ignore[reportUnusedFunction]
        """List configured targets."""
        show_targets(build_context(ctx.obj), namespace)

    @ns_app.command("download")
    def download_cmd(ctx: typer.Context) -> None:  # pyright: ignore[reportUnusedFunction]
        """Download and extract pre-built packages of every target."""
        download(build_context(ctx.obj), namespace)

    @ns_app.command("upload-rc")
    def upload_rc_cmd(ctx: typer.Context) -> None:  # pyright: ignore[reportUnusedFunction]
        """Upload already downloaded packages as a release candidate."""
        upload_rc(build_context(ctx.obj), namespace)

    @ns_app.command("rc")
    def rc_cmd(ctx: typer.Context) -> None:  # pyright: ignore[reportUnusedFunction]
        """Download packages and upload them as a release candidate."""
        rc(build_context(ctx.obj), namespace)

    @ns_app.command("release")
    def release_cmd(ctx: typer.Context) -> None:  # pyright: ignore[reportUnusedFunction]
        """Release the RC packages."""
        release(build_context(ctx.obj), namespace)

    @ns_app.command("image")
    def image_cmd(  # pyright: ignore[reportUnusedFunction]
        ctx: typer.Context,
        target: str = typer.Argument(..., help="Target, e.g. debian-bookworm-arm64"),
        dry_run: bool = typer.Option(False, "--dry-run", help="Print the docker command only"),
    ) -> None:
        """Build the docker build environment of a target."""
        image(build_context(ctx.obj), namespace, target, dry_run=dry_run)

    return ns_app


apt_app = namespace_app(TargetNamespace.APT)
yum_app = namespace_app(TargetNamespace.YUM)
