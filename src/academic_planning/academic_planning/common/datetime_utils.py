from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date.

    Full ISO timestamps ("2024-10-01T00:00:00.000Z") are accepted too; only the
    calendar day is kept.
    """
    return datetime.strptime(value.strip()[:10], "%Y-%m-%d").date()


def iso_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
