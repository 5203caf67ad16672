"""Readers turning a JSON body into typed values.

Every ``patch_*`` reader returns ``UNSET`` when the key is absent so that update
payloads can tell "not sent" apart from "sent empty".
"""
from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date
from .patch import UNSET


def _blank(value: Any) -> bool:
    return value is None or value is False or (isinstance(value, str) and not value.strip())


def to_date(value: Any, field_name: str) -> Optional[date]:
    if _blank(value):
        return None
    if isinstance(value, date):
        return value
    try:
        return parse_iso_date(str(value))
    except ValueError:
        raise ValidationError(f"{field_name}: date invalide (AAAA-MM-JJ)")


def to_float(value: Any, field_name: str) -> Optional[float]:
    if _blank(value):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name}: nombre invalide")


def to_int(value: Any, field_name: str, *, default: Optional[int] = None) -> Optional[int]:
    if _blank(value):
        return default
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValidationError(f"{field_name}: entier invalide")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name}: entier invalide")


def to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "on", "yes"}
    return bool(value)


def to_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


# -------- update readers --------
def patch_text(payload: Mapping[str, Any], key: str) -> Any:
    """Non-nullable text: an empty value leaves the stored one untouched."""
    value = payload.get(key)
    if _blank(value):
        return UNSET
    return str(value).strip()


def patch_optional_text(payload: Mapping[str, Any], key: str) -> Any:
    if key not in payload:
        return UNSET
    return to_text(payload[key])


def patch_date(payload: Mapping[str, Any], key: str) -> Any:
    """Nullable date: present-but-empty clears it."""
    if key not in payload:
        return UNSET
    return to_date(payload[key], key)


def patch_required_date(payload: Mapping[str, Any], key: str) -> Any:
    """Non-nullable date: an empty value leaves the stored one untouched."""
    if _blank(payload.get(key)):
        return UNSET
    return to_date(payload[key], key)


def patch_float(payload: Mapping[str, Any], key: str) -> Any:
    if key not in payload:
        return UNSET
    return to_float(payload[key], key)


def patch_int(payload: Mapping[str, Any], key: str) -> Any:
    if key not in payload:
        return UNSET
    return to_int(payload[key], key)


def patch_count(payload: Mapping[str, Any], key: str) -> Any:
    """Non-negative counter; null or empty counts as zero."""
    if key not in payload:
        return UNSET
    value = to_int(payload[key], key, default=0)
    if value < 0:
        raise ValidationError(f"{key}: valeur négative")
    return value


def patch_bool(payload: Mapping[str, Any], key: str) -> Any:
    if key not in payload:
        return UNSET
    return to_bool(payload[key])
