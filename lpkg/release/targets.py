"""Packaging targets and per-namespace rules.

A target names a distribution release and, optionally, a non-default
architecture: ``debian-bookworm``, ``debian-bookworm-arm64``,
``almalinux-9-aarch64``. Targets are grouped by packaging namespace (APT or
YUM); each namespace has a fixed rules table instead of string-keyed method
lookup.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from lpkg.core.config import ReleaseConfig

__all__ = [
    "NamespaceRules",
    "PackagingTarget",
    "TargetNamespace",
    "built_package_url",
    "distinct_families",
    "rules_for",
    "targets_for",
]


class TargetNamespace(Enum):
    APT = "apt"
    YUM = "yum"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class NamespaceRules:
    """Naming rules of a packaging namespace.

    Attributes:
        arch_suffix: Target suffix marking a non-default architecture build.
            Such targets are published under their own name.
        default_arch: Architecture appended to the asset name of every other
            target.
    """

    arch_suffix: str
    default_arch: str


_RULES: dict[TargetNamespace, NamespaceRules] = {
    TargetNamespace.APT: NamespaceRules(
        arch_suffix="-arm64",
        default_arch="amd64",
    ),
    TargetNamespace.YUM: NamespaceRules(
        arch_suffix="-aarch64",
        default_arch="x86_64",
    ),
}


def rules_for(namespace: TargetNamespace) -> NamespaceRules:
    return _RULES[namespace]


@dataclass(frozen=True, slots=True)
class PackagingTarget:
    namespace: TargetNamespace
    name: str

    @property
    def family(self) -> str:
        """Distribution family tag: the part before the first hyphen, upper-cased."""
        return self.name.split("-", 1)[0].upper()

    @property
    def is_arch_build(self) -> bool:
        return self.name.endswith(rules_for(self.namespace).arch_suffix)

    @property
    def os(self) -> str:
        """Target name without the architecture suffix, e.g. ``amazon-linux-2023``."""
        if self.is_arch_build:
            return self.name.removesuffix(rules_for(self.namespace).arch_suffix)
        return self.name

    @property
    def architecture(self) -> str | None:
        """Non-default architecture of the build, None for the namespace default."""
        if self.is_arch_build:
            return rules_for(self.namespace).arch_suffix.removeprefix("-")
        return None

    @property
    def asset_name(self) -> str:
        """Release asset name of the pre-built packages for this target."""
        rules = rules_for(self.namespace)
        if self.is_arch_build:
            return f"{self.name}.tar.gz"
        return f"{self.name}-{rules.default_arch}.tar.gz"

    def __str__(self) -> str:
        return self.name


def targets_for(config: ReleaseConfig, namespace: TargetNamespace) -> tuple[PackagingTarget, ...]:
    """Configured targets of a namespace, in declaration order."""
    match namespace:
        case TargetNamespace.APT:
            names = config.apt_targets
        case TargetNamespace.YUM:
            names = config.yum_targets
    return tuple(PackagingTarget(namespace, name) for name in names)


def built_package_url(repository: str, version: str, target: PackagingTarget) -> str:
    """URL of the pre-built package archive attached to the GitHub release."""
    return f"https://github.com/{repository}/releases/download/{version}/{target.asset_name}"


def distinct_families(targets: tuple[PackagingTarget, ...]) -> tuple[str, ...]:
    """Families of targets without duplicates, first occurrence order."""
    return tuple(dict.fromkeys(t.family for t in targets))
