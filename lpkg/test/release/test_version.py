"""Tests for lpkg.release.version."""

from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime, timedelta, timezone
from pathlib import Path

import pytest

from lpkg.core.config import VersionSettings
from lpkg.core.result import Err, Ok
from lpkg.release.errors import NotFoundError
from lpkg.release.version import (
    ResolvedVersion,
    dev_suffix,
    read_quoted_value,
    resolve_version,
)

RELEASE_TIME = datetime(2024, 3, 7, 12, 0, tzinfo=UTC)


def _write_tree(root: Path, *, release: str = "1.2.0", native: str = "1.2.0") -> VersionSettings:
    versions_env = root / "dev" / "release" / "versions.env"
    versions_env.parent.mkdir(parents=True)
    versions_env.write_text(
        f'# The release version\nRELEASE="{release}"\nVERSION_CPP="{native}"\n',
        encoding="utf-8",
    )
    cmake = root / "c" / "cmake_modules" / "AdbcVersion.cmake"
    cmake.parent.mkdir(parents=True)
    cmake.write_text(
        f'set(ADBC_VERSION "{native}")\nstring(REGEX MATCH "^[0-9]+" ADBC_VERSION_MAJOR)\n',
        encoding="utf-8",
    )
    return VersionSettings(project_root=root)


class TestResolveVersion:
    def test_release_version_when_not_snapshot(self, tmp_path: Path) -> None:
        settings = _write_tree(tmp_path, release="1.2.0", native="1.2.0")

        result = resolve_version(settings, release_time=RELEASE_TIME)

        assert result == Ok(ResolvedVersion("1.2.0", "1.2.0"))

    def test_snapshot_gets_dev_suffix(self, tmp_path: Path) -> None:
        settings = _write_tree(tmp_path, release="1.3.0", native="1.3.0-SNAPSHOT")

        result = resolve_version(settings, release_time=RELEASE_TIME)

        assert result == Ok(ResolvedVersion("1.3.0-dev20240307", "1.3.0-SNAPSHOT"))

    def test_dev_suffix_uses_utc_date(self, tmp_path: Path) -> None:
        settings = _write_tree(tmp_path, release="1.3.0", native="1.3.0-SNAPSHOT")
        # 2024-01-01 01:00 in UTC+09:00 is still 2023-12-31 in UTC
        tokyo = datetime(2024, 1, 1, 1, 0, tzinfo=timezone(timedelta(hours=9)))

        result = resolve_version(settings, release_time=tokyo)

        assert isinstance(result, Ok)
        assert result.value.version == "1.3.0-dev20231231"

    def test_version_override_is_verbatim(self, tmp_path: Path) -> None:
        settings = _write_tree(tmp_path, release="1.3.0", native="1.3.0-SNAPSHOT")

        result = resolve_version(
            replace(settings, version_override="1.3.0-rc1"), release_time=RELEASE_TIME
        )

        assert result == Ok(ResolvedVersion("1.3.0-rc1", None))

    def test_native_override_controls_suffix(self, tmp_path: Path) -> None:
        settings = _write_tree(tmp_path, release="1.3.0", native="1.3.0")

        snapshot = resolve_version(
            replace(settings, native_override="9.9.9-SNAPSHOT"), release_time=RELEASE_TIME
        )
        release = resolve_version(
            replace(settings, native_override="9.9.9"), release_time=RELEASE_TIME
        )

        assert snapshot == Ok(ResolvedVersion("1.3.0-dev20240307", "9.9.9-SNAPSHOT"))
        assert release == Ok(ResolvedVersion("1.3.0", "9.9.9"))

    def test_both_overrides_skip_files(self, tmp_path: Path) -> None:
        settings = VersionSettings(
            project_root=tmp_path, version_override="2.0.0", native_override="2.0.0-SNAPSHOT"
        )

        result = resolve_version(settings, release_time=RELEASE_TIME)

        assert result == Ok(ResolvedVersion("2.0.0", "2.0.0-SNAPSHOT"))

    def test_version_override_needs_no_files(self, tmp_path: Path) -> None:
        settings = VersionSettings(project_root=tmp_path, version_override="1.4.0")
        assert not settings.native_path.exists()
        assert not settings.metadata_path.exists()

        result = resolve_version(settings, release_time=RELEASE_TIME)

        assert result == Ok(ResolvedVersion("1.4.0", None))

    def test_missing_metadata_file(self, tmp_path: Path) -> None:
        settings = VersionSettings(project_root=tmp_path, native_override="1.0.0")

        result = resolve_version(settings, release_time=RELEASE_TIME)

        assert isinstance(result, Err)
        assert isinstance(result.error, NotFoundError)
        assert result.error.path == settings.metadata_path

    def test_missing_native_file(self, tmp_path: Path) -> None:
        settings = _write_tree(tmp_path)
        settings.native_path.unlink()

        result = resolve_version(settings, release_time=RELEASE_TIME)

        assert isinstance(result, Err)
        assert result.error.path == settings.native_path


class TestReadQuotedValue:
    def test_key_equals_value(self, tmp_path: Path) -> None:
        path = tmp_path / "versions.env"
        path.write_text('PREVIOUS_RELEASE="0.9.0"\nRELEASE="1.0.0"\n', encoding="utf-8")

        assert read_quoted_value(path, "RELEASE") == Ok("1.0.0")

    def test_key_space_value(self, tmp_path: Path) -> None:
        path = tmp_path / "Version.cmake"
        path.write_text('set(ADBC_VERSION "1.0.0-SNAPSHOT")\n', encoding="utf-8")

        assert read_quoted_value(path, "ADBC_VERSION") == Ok("1.0.0-SNAPSHOT")

    def test_pattern_mismatch(self, tmp_path: Path) -> None:
        path = tmp_path / "versions.env"
        path.write_text("RELEASE=1.0.0\n", encoding="utf-8")

        result = read_quoted_value(path, "RELEASE")

        assert isinstance(result, Err)
        assert "RELEASE not found" in result.error.message


@pytest.mark.parametrize(
    ("when", "expected"),
    [
        (datetime(2024, 1, 5, tzinfo=UTC), "-dev20240105"),
        (datetime(2024, 12, 31, 23, 59, tzinfo=UTC), "-dev20241231"),
    ],
)
def test_dev_suffix_zero_padded(when: datetime, expected: str) -> None:
    assert dev_suffix(when) == expected
