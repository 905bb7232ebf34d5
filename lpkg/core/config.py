"""Release configuration resolved once at startup.

Settings come from three layers, later layers winning:

1. Built-in defaults (the layout of an ADBC-style source tree)
2. An optional ``lpkg.toml`` at the project root
3. Environment variables (``ARROW_SOURCE``, ``VERSION``, ``APT_TARGETS``...)

The resulting ReleaseConfig is immutable and is passed explicitly to the
version resolver, archive builder and target dispatcher. Nothing downstream
reads the process environment.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str, get_str_list, get_table

__all__ = [
    "CONFIG_FILE_NAME",
    "DEFAULT_APT_TARGETS",
    "DEFAULT_YUM_TARGETS",
    "ConfigurationError",
    "ReleaseConfig",
    "ScriptSettings",
    "VersionSettings",
    "load_release_config",
    "parse_release_time",
]

CONFIG_FILE_NAME = "lpkg.toml"

DEFAULT_PACKAGE = "apache-arrow-adbc"
DEFAULT_GITHUB_REPOSITORY = "apache/arrow-adbc"

DEFAULT_APT_TARGETS: tuple[str, ...] = (
    "debian-bookworm",
    "debian-bookworm-arm64",
    "ubuntu-jammy",
    "ubuntu-noble",
)

DEFAULT_YUM_TARGETS: tuple[str, ...] = (
    "almalinux-8",
    "almalinux-9",
)

# Target names are used verbatim in URLs, image tags and directory names.
_TARGET_RE = re.compile(r"^\S+$")


@dataclass(frozen=True, slots=True)
class ConfigurationError:
    """Missing or invalid configuration (environment or lpkg.toml)."""

    message: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class VersionSettings:
    """Where versions come from.

    File paths are relative to project_root. Overrides, when set, are used
    verbatim and skip the corresponding file entirely.
    """

    project_root: Path
    metadata_file: str = "dev/release/versions.env"
    metadata_key: str = "RELEASE"
    native_file: str = "c/cmake_modules/AdbcVersion.cmake"
    native_key: str = "ADBC_VERSION"
    snapshot_marker: str = "-SNAPSHOT"
    version_override: str | None = None
    native_override: str | None = None

    @property
    def metadata_path(self) -> Path:
        return self.project_root / self.metadata_file

    @property
    def native_path(self) -> Path:
        return self.project_root / self.native_file


@dataclass(frozen=True, slots=True)
class ScriptSettings:
    """Release scripts, relative to the tooling checkout (ARROW_SOURCE)."""

    upload: str = "dev/release/05-binary-upload.sh"
    release: str = "dev/release/post-02-binary.sh"


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Everything a release run needs, resolved once."""

    project_root: Path
    tooling_root: Path
    release_time: datetime
    version: VersionSettings
    package: str = DEFAULT_PACKAGE
    github_repository: str = DEFAULT_GITHUB_REPOSITORY
    staging: str = "no"
    apt_targets: tuple[str, ...] = DEFAULT_APT_TARGETS
    yum_targets: tuple[str, ...] = DEFAULT_YUM_TARGETS
    scripts: ScriptSettings = field(default_factory=ScriptSettings)
    toolchain_file: str = ".env"
    packaging_dir: str = "packaging"

    @property
    def toolchain_path(self) -> Path:
        return self.project_root / self.toolchain_file

    @property
    def packaging_path(self) -> Path:
        return self.project_root / self.packaging_dir

    @property
    def packages_dir(self) -> Path:
        """Root of the per-version download directories."""
        return self.tooling_root / "packages"


def parse_release_time(value: str) -> Result[datetime, ConfigurationError]:
    """Parse an ISO-8601 timestamp and normalize it to UTC.

    Naive timestamps are taken as UTC.
    """
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return Err(
            ConfigurationError(
                f"invalid RELEASE_TIME: {value!r}",
                hint="Use ISO-8601, e.g. 2024-05-01T12:00:00Z",
            )
        )
    if parsed.tzinfo is None:
        return Ok(parsed.replace(tzinfo=UTC))
    return Ok(parsed.astimezone(UTC))


def _env(environ: Mapping[str, str], key: str) -> str | None:
    value = environ.get(key)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _parse_targets(raw: str) -> tuple[str, ...]:
    return tuple(t.strip() for t in raw.split(",") if t.strip())


def _validate_targets(
    targets: tuple[str, ...], *, source: str
) -> Result[tuple[str, ...], ConfigurationError]:
    for target in targets:
        if _TARGET_RE.match(target) is None:
            return Err(
                ConfigurationError(
                    f"invalid packaging target in {source}: {target!r}",
                    hint="Target names cannot contain whitespace",
                )
            )
    return Ok(targets)


def _read_config_file(path: Path) -> Result[StrDict, ConfigurationError]:
    """Parse lpkg.toml. A missing file yields an empty table."""
    import tomllib

    if not path.exists():
        return Ok({})
    try:
        data_obj: object = tomllib.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        return Err(ConfigurationError(f"cannot read {path}: {e}"))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigurationError(f"invalid TOML in {path}: {e}"))
    except UnicodeDecodeError as e:
        return Err(ConfigurationError(f"cannot decode {path}: {e}"))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigurationError(f"{path.name} root must be a TOML table"))
    return Ok(data)


def load_release_config(
    project_root: Path,
    environ: Mapping[str, str],
    *,
    now: Callable[[], datetime] | None = None,
) -> Result[ReleaseConfig, ConfigurationError]:
    """Build the release configuration for project_root.

    Args:
        project_root: Source tree holding the version metadata files.
        environ: Environment to read overrides from (usually os.environ).
        now: Clock used when RELEASE_TIME is not set.

    Returns:
        Ok(ReleaseConfig), or Err(ConfigurationError) if ARROW_SOURCE is
        unset, RELEASE_TIME is malformed, lpkg.toml is invalid or a target
        name is malformed.
    """
    tooling = _env(environ, "ARROW_SOURCE")
    if tooling is None:
        return Err(
            ConfigurationError(
                "You must set ARROW_SOURCE environment variable",
                hint="Point it at an Apache Arrow checkout providing dev/release scripts",
            )
        )

    file_result = _read_config_file(project_root / CONFIG_FILE_NAME)
    if isinstance(file_result, Err):
        return file_result
    data = file_result.value
    version_table: StrDict = get_table(data, "version") or {}
    targets_table: StrDict = get_table(data, "targets") or {}
    scripts_table: StrDict = get_table(data, "scripts") or {}

    release_time_raw = _env(environ, "RELEASE_TIME")
    if release_time_raw is not None:
        time_result = parse_release_time(release_time_raw)
        if isinstance(time_result, Err):
            return time_result
        release_time = time_result.value
    else:
        release_time = (now or (lambda: datetime.now(UTC)))().astimezone(UTC)

    apt_raw = _env(environ, "APT_TARGETS")
    if apt_raw is not None:
        apt = _validate_targets(_parse_targets(apt_raw), source="APT_TARGETS")
    else:
        apt_file = get_str_list(targets_table, "apt")
        apt = _validate_targets(
            DEFAULT_APT_TARGETS if apt_file is None else tuple(apt_file),
            source=CONFIG_FILE_NAME,
        )
    if isinstance(apt, Err):
        return apt

    yum_raw = _env(environ, "YUM_TARGETS")
    if yum_raw is not None:
        yum = _validate_targets(_parse_targets(yum_raw), source="YUM_TARGETS")
    else:
        yum_file = get_str_list(targets_table, "yum")
        yum = _validate_targets(
            DEFAULT_YUM_TARGETS if yum_file is None else tuple(yum_file),
            source=CONFIG_FILE_NAME,
        )
    if isinstance(yum, Err):
        return yum

    defaults = VersionSettings(project_root=project_root)
    version = VersionSettings(
        project_root=project_root,
        metadata_file=get_str(version_table, "file") or defaults.metadata_file,
        metadata_key=get_str(version_table, "key") or defaults.metadata_key,
        native_file=get_str(version_table, "native_file") or defaults.native_file,
        native_key=get_str(version_table, "native_key") or defaults.native_key,
        snapshot_marker=get_str(version_table, "snapshot_marker") or defaults.snapshot_marker,
        version_override=_env(environ, "VERSION"),
        native_override=_env(environ, "VERSION_NATIVE"),
    )

    script_defaults = ScriptSettings()
    return Ok(
        ReleaseConfig(
            project_root=project_root,
            tooling_root=Path(tooling).expanduser().absolute(),
            release_time=release_time,
            version=version,
            package=get_str(data, "package") or DEFAULT_PACKAGE,
            github_repository=(
                _env(environ, "GITHUB_REPOSITORY")
                or get_str(data, "github_repository")
                or DEFAULT_GITHUB_REPOSITORY
            ),
            staging=_env(environ, "STAGING") or "no",
            apt_targets=apt.value,
            yum_targets=yum.value,
            scripts=ScriptSettings(
                upload=get_str(scripts_table, "upload") or script_defaults.upload,
                release=get_str(scripts_table, "release") or script_defaults.release,
            ),
            toolchain_file=get_str(data, "toolchain_file") or ".env",
            packaging_dir=get_str(data, "packaging_dir") or "packaging",
        )
    )
