"""Tests for lpkg.release.targets."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

import pytest

from lpkg.core.config import ReleaseConfig, VersionSettings
from lpkg.release.targets import (
    PackagingTarget,
    TargetNamespace,
    built_package_url,
    distinct_families,
    rules_for,
    targets_for,
)

APT = TargetNamespace.APT
YUM = TargetNamespace.YUM
BASE = "https://github.com/apache/arrow-adbc/releases/download/1.2.0/"


@pytest.mark.parametrize(
    ("namespace", "name", "expected"),
    [
        (APT, "debian-bookworm-arm64", "debian-bookworm-arm64.tar.gz"),
        (APT, "debian-bookworm", "debian-bookworm-amd64.tar.gz"),
        (YUM, "almalinux-9", "almalinux-9-x86_64.tar.gz"),
        (YUM, "almalinux-9-aarch64", "almalinux-9-aarch64.tar.gz"),
    ],
)
def test_built_package_url(namespace: TargetNamespace, name: str, expected: str) -> None:
    url = built_package_url("apache/arrow-adbc", "1.2.0", PackagingTarget(namespace, name))

    assert url == BASE + expected


def test_arch_suffix_is_namespace_specific() -> None:
    # An apt-style suffix means nothing to yum and vice versa.
    assert PackagingTarget(YUM, "almalinux-9-arm64").asset_name == "almalinux-9-arm64-x86_64.tar.gz"
    assert PackagingTarget(APT, "ubuntu-noble-aarch64").asset_name == (
        "ubuntu-noble-aarch64-amd64.tar.gz"
    )


class TestPackagingTarget:
    def test_family(self) -> None:
        assert PackagingTarget(APT, "debian-bookworm-arm64").family == "DEBIAN"
        assert PackagingTarget(YUM, "almalinux-9").family == "ALMALINUX"

    def test_os_and_architecture(self) -> None:
        target = PackagingTarget(APT, "debian-bookworm-arm64")
        assert target.os == "debian-bookworm"
        assert target.architecture == "arm64"

        plain = PackagingTarget(YUM, "almalinux-9")
        assert plain.os == "almalinux-9"
        assert plain.architecture is None

    def test_four_part_name(self) -> None:
        target = PackagingTarget(YUM, "amazon-linux-2023-aarch64")

        assert target.family == "AMAZON"
        assert target.os == "amazon-linux-2023"
        assert target.architecture == "aarch64"
        assert target.asset_name == "amazon-linux-2023-aarch64.tar.gz"

        default_arch = PackagingTarget(YUM, "amazon-linux-2023")
        assert default_arch.os == "amazon-linux-2023"
        assert default_arch.architecture is None
        assert default_arch.asset_name == "amazon-linux-2023-x86_64.tar.gz"

    def test_foreign_arch_suffix_is_part_of_the_os(self) -> None:
        target = PackagingTarget(APT, "ubuntu-noble-aarch64")

        assert target.os == "ubuntu-noble-aarch64"
        assert target.architecture is None


def test_distinct_families_dedupes_in_order() -> None:
    targets = tuple(
        PackagingTarget(APT, n) for n in ("debian-bookworm", "debian-bookworm-arm64", "ubuntu-jammy")
    )

    assert distinct_families(targets) == ("DEBIAN", "UBUNTU")


def test_rules_table_covers_every_namespace() -> None:
    for namespace in TargetNamespace:
        rules = rules_for(namespace)
        assert rules.arch_suffix.startswith("-")
        assert rules.default_arch != rules.arch_suffix.removeprefix("-")


def test_targets_for_keeps_declaration_order(tmp_path: Path) -> None:
    config = ReleaseConfig(
        project_root=tmp_path,
        tooling_root=tmp_path,
        release_time=datetime(2024, 1, 1, tzinfo=UTC),
        version=VersionSettings(project_root=tmp_path),
        apt_targets=("ubuntu-noble", "debian-bookworm"),
        yum_targets=("almalinux-8",),
    )

    assert [t.name for t in targets_for(config, APT)] == ["ubuntu-noble", "debian-bookworm"]
    assert [t.namespace for t in targets_for(config, YUM)] == [YUM]
