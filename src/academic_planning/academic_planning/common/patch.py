from __future__ import annotations

from dataclasses import fields
from typing import Any, Dict


class _Unset:
    """Marker for a field that was absent from an update payload."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


def is_set(value: Any) -> bool:
    return value is not UNSET


def patch_changes(patch: Any) -> Dict[str, Any]:
    """Column -> value for every field of a patch dataclass that was supplied."""
    return {f.name: getattr(patch, f.name) for f in fields(patch) if is_set(getattr(patch, f.name))}
