"""Source archive builder.

``git archive`` keeps symlinks as symlinks, but downstream packaging tools
(debuild, rpmbuild) expect regular files. The archive is therefore built in
two passes: export, extract, copy with ``cp -R -L`` to materialize links,
and re-tar over the first archive.

Scratch directories are scoped: a stale directory of the same name is
removed on entry and the directory is removed on exit, also on failure.
"""

from __future__ import annotations

import shutil
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from lpkg.core.result import Err, Ok, Result
from lpkg.output.console import ConsoleProtocol
from lpkg.platform.process import run_silent
from lpkg.release.errors import ExternalCommandError, PackagingError

__all__ = [
    "ArchiveArtifact",
    "ArchiveStep",
    "archive_steps",
    "build_archive",
    "prepare_archives",
    "scratch_dir",
]


@dataclass(frozen=True, slots=True)
class ArchiveArtifact:
    """Source tarball naming for one package version.

    Debian replaces ``-`` with ``~`` in upstream versions so that
    pre-releases sort before the release; RPM versions cannot contain ``-``
    at all and keep only the part before it.
    """

    package: str
    version: str

    @property
    def base_name(self) -> str:
        return f"{self.package}-{self.version}"

    @property
    def name(self) -> str:
        return f"{self.base_name}.tar.gz"

    @property
    def deb_upstream_version(self) -> str:
        return self.version.replace("-", "~")

    @property
    def deb_name(self) -> str:
        return f"{self.package}-{self.deb_upstream_version}.tar.gz"

    @property
    def rpm_version(self) -> str:
        return self.version.split("-", 1)[0]

    @property
    def rpm_name(self) -> str:
        return f"{self.package}-{self.rpm_version}.tar.gz"

    def aliases(self) -> tuple[str, ...]:
        """Alias names that differ from the canonical archive name."""
        return tuple(n for n in dict.fromkeys((self.deb_name, self.rpm_name)) if n != self.name)


@dataclass(frozen=True, slots=True)
class ArchiveStep:
    name: str
    action: Callable[[], Result[None, PackagingError]]


def _remove(path: Path) -> None:
    if path.is_symlink() or path.is_file():
        path.unlink()
    elif path.exists():
        shutil.rmtree(path)


@contextmanager
def scratch_dir(path: Path) -> Iterator[Path]:
    """Own path for the duration of the block, removing it before and after."""
    _remove(path)
    try:
        yield path
    finally:
        _remove(path)


def _sh(cmd: list[str], cwd: Path) -> Result[None, PackagingError]:
    result = run_silent(cmd, cwd=cwd)
    if isinstance(result, Err):
        return Err(ExternalCommandError.from_process(result.error))
    return Ok(None)


def _dereference(extracted: Path, staging: Path) -> Result[None, PackagingError]:
    with scratch_dir(staging):
        try:
            extracted.rename(staging)
        except OSError as e:
            return Err(
                ExternalCommandError(
                    command=("mv", str(extracted), str(staging)), returncode=-1, detail=str(e)
                )
            )
        return _sh(["cp", "-R", "-L", staging.name, extracted.name], extracted.parent)


def archive_steps(
    *, source_root: Path, output_path: Path, prefix: str, work_dir: Path
) -> tuple[ArchiveStep, ...]:
    """The ordered archive pipeline. Every step is required for a reproducible result."""
    extracted = work_dir / prefix
    staging = work_dir / f"{prefix}.tmp"
    return (
        ArchiveStep(
            "export",
            lambda: _sh(
                [
                    "git",
                    "archive",
                    "HEAD",
                    "--output",
                    str(output_path),
                    "--prefix",
                    f"{prefix}/",
                ],
                source_root,
            ),
        ),
        ArchiveStep("extract", lambda: _sh(["tar", "xf", str(output_path)], work_dir)),
        ArchiveStep("dereference", lambda: _dereference(extracted, staging)),
        ArchiveStep("repack", lambda: _sh(["tar", "czf", str(output_path), prefix], work_dir)),
    )


def build_archive(
    output_path: Path,
    prefix: str,
    *,
    source_root: Path,
    console: ConsoleProtocol,
    work_dir: Path | None = None,
) -> Result[Path, PackagingError]:
    """Build a symlink-free ``.tar.gz`` of HEAD with every entry under prefix/.

    Args:
        output_path: Archive to write (overwritten).
        prefix: Top-level directory name inside the archive.
        source_root: Git checkout to export.
        console: Progress output.
        work_dir: Where the extracted tree lives while it is rewritten.
            Defaults to the output directory.

    Returns:
        Ok(output_path), or the error of the first failing step.
    """
    output_path = output_path.absolute()
    work_dir = (work_dir or output_path.parent).absolute()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    work_dir.mkdir(parents=True, exist_ok=True)

    with scratch_dir(work_dir / prefix):
        steps = archive_steps(
            source_root=source_root, output_path=output_path, prefix=prefix, work_dir=work_dir
        )
        for step in steps:
            console.info(f"{step.name}: {prefix}")
            result = step.action()
            if isinstance(result, Err):
                return result

    return Ok(output_path)


def prepare_archives(
    artifact: ArchiveArtifact,
    out_dir: Path,
    *,
    source_root: Path,
    console: ConsoleProtocol,
) -> Result[list[Path], PackagingError]:
    """Make sure the archive and its deb/rpm aliases exist in out_dir.

    Existing files are kept as they are; only missing ones are produced.
    """
    archive = out_dir / artifact.name
    if archive.exists():
        console.info(f"up to date: {archive.name}")
    else:
        built = build_archive(
            archive, artifact.base_name, source_root=source_root, console=console
        )
        if isinstance(built, Err):
            return built
        console.success(str(archive))

    created = [archive]
    for alias in artifact.aliases():
        alias_path = out_dir / alias
        if not alias_path.exists():
            try:
                shutil.copyfile(archive, alias_path)
            except OSError as e:
                return Err(
                    ExternalCommandError(
                        command=("cp", str(archive), str(alias_path)), returncode=-1, detail=str(e)
                    )
                )
            console.success(str(alias_path))
        created.append(alias_path)
    return Ok(created)
