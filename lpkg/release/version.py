"""Product and native version resolution.

The product version comes from the release metadata file
(``RELEASE="1.2.0"``), the native version from the native build's version
descriptor (``set(ADBC_VERSION "1.2.0-SNAPSHOT")``). When the native version
is a snapshot, the product version gets a ``-devYYYYMMDD`` suffix built from
the release time, so nightly packages sort after the previous release.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from lpkg.core.config import VersionSettings
from lpkg.core.result import Err, Ok, Result
from lpkg.release.errors import NotFoundError

__all__ = [
    "ResolvedVersion",
    "dev_suffix",
    "read_quoted_value",
    "resolve_native_version",
    "resolve_version",
]


@dataclass(frozen=True, slots=True)
class ResolvedVersion:
    """Versions for one release run; computed once, reused for all naming.

    native_version is None when the product version is overridden without a
    native override: the native descriptor is not read in that case.
    """

    version: str
    native_version: str | None


def read_quoted_value(path: Path, key: str) -> Result[str, NotFoundError]:
    """Return the first quoted value assigned to key in path.

    Matches both ``KEY="value"`` and ``KEY "value"``.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        return Err(NotFoundError(path=path, message=f"cannot read {path.name}: {e}"))

    m = re.search(rf'\b{re.escape(key)}\s*=?\s*"(.+?)"', text)
    if m is None:
        return Err(NotFoundError(path=path, message=f"{key} not found in {path.name}"))
    return Ok(m.group(1))


def dev_suffix(release_time: datetime) -> str:
    return f"-dev{release_time.astimezone(UTC).strftime('%Y%m%d')}"


def resolve_native_version(settings: VersionSettings) -> Result[str, NotFoundError]:
    if settings.native_override is not None:
        return Ok(settings.native_override)
    return read_quoted_value(settings.native_path, settings.native_key)


def resolve_version(
    settings: VersionSettings, *, release_time: datetime
) -> Result[ResolvedVersion, NotFoundError]:
    """Resolve the product and native versions.

    An explicit product version override is used verbatim, without the
    snapshot suffix, and neither metadata file is read. Otherwise the
    release version is read from the metadata file and suffixed with ``-devYYYYMMDD`` (UTC) when the native
    version ends with the snapshot marker.

    Args:
        settings: File locations, keys and overrides.
        release_time: Timestamp used for the snapshot suffix.

    Returns:
        Ok(ResolvedVersion), or Err(NotFoundError) when a file is missing
        or does not contain the expected key.
    """
    if settings.version_override is not None:
        return Ok(ResolvedVersion(settings.version_override, settings.native_override))

    native = resolve_native_version(settings)
    if isinstance(native, Err):
        return native

    release = read_quoted_value(settings.metadata_path, settings.metadata_key)
    if isinstance(release, Err):
        return release

    version = release.value
    if native.value.endswith(settings.snapshot_marker):
        version += dev_suffix(release_time)
    return Ok(ResolvedVersion(version, native.value))
