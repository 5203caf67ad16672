from __future__ import annotations

from typing import Any, Mapping, Sequence

from ..core.exceptions import ValidationError


def require_fields(payload: Mapping[str, Any], required: Sequence[str]) -> None:
    """Reject a create payload when any mandatory key is missing or empty.

    The message always lists every required field, not only the missing ones.
    """
    for name in required:
        value = payload.get(name)
        if value is None or value is False or (isinstance(value, str) and not value.strip()):
            raise ValidationError("Champs requis: " + ", ".join(required))
