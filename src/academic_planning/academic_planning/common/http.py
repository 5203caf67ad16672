from __future__ import annotations

from typing import Any, Dict

from flask import request


def json_body() -> Dict[str, Any]:
    """Request JSON as a dict; anything else is treated as an empty payload."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}
