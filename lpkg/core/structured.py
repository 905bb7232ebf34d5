"""Typed access to parsed lpkg.toml tables."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TypeGuard

StrDict = dict[str, object]


def is_str_dict(obj: object) -> TypeGuard[StrDict]:
    return isinstance(obj, dict) and all(isinstance(k, str) for k in obj)


def as_str_dict(obj: object) -> StrDict | None:
    return obj if is_str_dict(obj) else None


def get_str(table: Mapping[str, object], key: str) -> str | None:
    """Stripped string at key; None when absent, blank or not a string."""
    value = table.get(key)
    if isinstance(value, str):
        return value.strip() or None
    return None


def get_table(table: Mapping[str, object], key: str) -> StrDict | None:
    return as_str_dict(table.get(key))


def get_str_list(table: Mapping[str, object], key: str) -> list[str] | None:
    """Non-blank strings of the array at key.

    None when the key is absent, not an array, or holds a non-string item
    (a target list like ``apt = ["debian-bookworm", 12]`` is rejected whole).
    """
    value = table.get(key)
    if not isinstance(value, list):
        return None
    names: list[str] = []
    for item in value:
        if not isinstance(item, str):
            return None
        if item.strip():
            names.append(item.strip())
    return names
