"""Docker build environments for packaging targets.

Each target has a Dockerfile directory under the packaging dir
(``packaging/<namespace>/<target>/Dockerfile``). Images are published as
``ghcr.io/<repository>/package-<package>-<os>[-<arch>]`` and built with the
Go toolchain version pinned in the project's ``.env`` file.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from lpkg.core.config import ReleaseConfig
from lpkg.core.result import Err, Ok, Result
from lpkg.output.console import ConsoleProtocol
from lpkg.platform.process import run_silent
from lpkg.release.errors import ExternalCommandError, NotFoundError, PackagingError
from lpkg.release.targets import PackagingTarget

__all__ = [
    "ImagePlan",
    "build_image",
    "docker_build_options",
    "docker_image",
    "plan_image",
    "read_toolchain_version",
]


@dataclass(frozen=True, slots=True)
class ImagePlan:
    image: str
    context_dir: Path
    build_options: tuple[str, ...]

    def command(self) -> list[str]:
        return ["docker", "build", "--tag", self.image, *self.build_options, str(self.context_dir)]


def read_toolchain_version(path: Path, key: str = "GO") -> Result[str, NotFoundError]:
    """Value of the first ``KEY=value`` line in path (unquoted)."""
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except OSError as e:
        return Err(NotFoundError(path=path, message=f"cannot read {path.name}: {e}"))

    prefix = f"{key}="
    for line in lines:
        if line.startswith(prefix):
            return Ok(line.split("=", 1)[1])
    return Err(NotFoundError(path=path, message=f"{key} not found in {path.name}"))


def docker_image(config: ReleaseConfig, target: PackagingTarget) -> str:
    image = f"{config.package}-{target.os}"
    if target.architecture:
        image += f"-{target.architecture}"
    return f"ghcr.io/{config.github_repository}/package-{image}"


def docker_build_options(config: ReleaseConfig) -> Result[tuple[str, ...], NotFoundError]:
    go = read_toolchain_version(config.toolchain_path)
    if isinstance(go, Err):
        return go
    return Ok(("--build-arg", f"GO_VERSION={go.value}"))


def plan_image(config: ReleaseConfig, target: PackagingTarget) -> Result[ImagePlan, NotFoundError]:
    context_dir = config.packaging_path / target.namespace.value / target.name
    dockerfile = context_dir / "Dockerfile"
    if not dockerfile.is_file():
        return Err(NotFoundError(path=dockerfile, message=f"no Dockerfile for {target}"))

    options = docker_build_options(config)
    if isinstance(options, Err):
        return options

    return Ok(
        ImagePlan(
            image=docker_image(config, target),
            context_dir=context_dir,
            build_options=options.value,
        )
    )


def build_image(
    config: ReleaseConfig,
    target: PackagingTarget,
    console: ConsoleProtocol,
    *,
    dry_run: bool = False,
) -> Result[ImagePlan, PackagingError]:
    plan = plan_image(config, target)
    if isinstance(plan, Err):
        return plan

    cmd = plan.value.command()
    console.info(" ".join(cmd))
    if dry_run:
        return plan

    result = run_silent(cmd, cwd=config.project_root)
    if isinstance(result, Err):
        return Err(ExternalCommandError.from_process(result.error))
    console.success(plan.value.image)
    return plan
