"""Per-namespace download, RC upload and release of pre-built packages.

Packages are built by CI and attached to the GitHub release of the version.
From there they are downloaded into ``<ARROW_SOURCE>/packages/<package>-<version>``
and handed to the Apache Arrow release scripts, which read which
distributions to handle from ``UPLOAD_<FAMILY>`` / ``DEPLOY_<FAMILY>``
environment flags.

Every step is fail-fast: the first failing download or command aborts the
operation and no partial progress is recorded.
"""

from __future__ import annotations

from pathlib import Path
from urllib.parse import urlparse

from lpkg.core.config import ReleaseConfig
from lpkg.core.result import Err, Ok, Result
from lpkg.output.console import ConsoleProtocol
from lpkg.platform.process import run_silent
from lpkg.release.errors import ExternalCommandError, PackagingError
from lpkg.release.http import HttpClient
from lpkg.release.targets import (
    PackagingTarget,
    TargetNamespace,
    built_package_url,
    distinct_families,
    targets_for,
)
from lpkg.release.version import ResolvedVersion

__all__ = ["TargetDispatcher"]


class TargetDispatcher:
    """Runs packaging operations for the configured targets of a release.

    The resolved version is injected once and used for every URL, directory
    and script argument.
    """

    def __init__(
        self,
        config: ReleaseConfig,
        version: ResolvedVersion,
        *,
        http: HttpClient,
        console: ConsoleProtocol,
    ) -> None:
        self._config = config
        self._version = version
        self._http = http
        self._console = console

    @property
    def version(self) -> str:
        return self._version.version

    @property
    def package_dir_name(self) -> str:
        return f"{self._config.package}-{self.version}"

    @property
    def download_dir(self) -> Path:
        return self._config.packages_dir / self.package_dir_name

    def targets(self, namespace: TargetNamespace) -> tuple[PackagingTarget, ...]:
        return targets_for(self._config, namespace)

    def built_package_url(self, target: PackagingTarget) -> str:
        return built_package_url(self._config.github_repository, self.version, target)

    def download_packages(self, namespace: TargetNamespace) -> Result[list[Path], PackagingError]:
        """Download and extract the pre-built packages of every target.

        Targets are processed in declaration order; the first failure stops
        the run.
        """
        download_dir = self.download_dir
        download_dir.mkdir(parents=True, exist_ok=True)

        archives: list[Path] = []
        for target in self.targets(namespace):
            url = self.built_package_url(target)
            dest = download_dir / Path(urlparse(url).path).name
            self._console.info(f"download {url}")
            downloaded = self._http.download(url, dest)
            if isinstance(downloaded, Err):
                return downloaded

            extracted = self._sh(["tar", "xf", downloaded.value.name], cwd=download_dir)
            if isinstance(extracted, Err):
                return extracted
            archives.append(downloaded.value)

        self._console.success(f"{namespace}: {len(archives)} target(s) in {download_dir}")
        return Ok(archives)

    def upload_env(self, namespace: TargetNamespace) -> dict[str, str]:
        """Environment overlay for the RC upload script."""
        env = {
            "CROSSBOW_JOB_ID": self.package_dir_name,
            "DEB_PACKAGE_NAME": self._config.package,
            "STAGING": self._config.staging,
            "UPLOAD_DEFAULT": "0",
        }
        for family in distinct_families(self.targets(namespace)):
            env[f"UPLOAD_{family}"] = "1"
        return env

    def release_env(self, namespace: TargetNamespace) -> dict[str, str]:
        """Environment overlay for the release script."""
        env = {
            "STAGING": self._config.staging,
            "DEPLOY_DEFAULT": "0",
        }
        for family in distinct_families(self.targets(namespace)):
            env[f"DEPLOY_{family}"] = "1"
        return env

    def upload_rc(self, namespace: TargetNamespace) -> Result[None, PackagingError]:
        """Upload the downloaded packages as a release candidate."""
        return self._run_script(self._config.scripts.upload, self.upload_env(namespace))

    def release(self, namespace: TargetNamespace) -> Result[None, PackagingError]:
        """Promote the release candidate packages to the release repositories."""
        return self._run_script(self._config.scripts.release, self.release_env(namespace))

    def rc(self, namespace: TargetNamespace) -> Result[None, PackagingError]:
        """Download then upload as release candidate."""
        downloaded = self.download_packages(namespace)
        if isinstance(downloaded, Err):
            return downloaded
        return self.upload_rc(namespace)

    def _run_script(self, script: str, env: dict[str, str]) -> Result[None, PackagingError]:
        flags = " ".join(f"{k}={v}" for k, v in sorted(env.items()))
        self._console.info(f"{script} {self.version} ({flags})")
        return self._sh([script, self.version, "0"], cwd=self._config.tooling_root, env=env)

    def _sh(
        self, cmd: list[str], *, cwd: Path, env: dict[str, str] | None = None
    ) -> Result[None, PackagingError]:
        result = run_silent(cmd, cwd=cwd, env=env)
        if isinstance(result, Err):
            return Err(ExternalCommandError.from_process(result.error))
        return Ok(None)
