from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import Activity, NewActivity


class ActivityRepository(Protocol):
    def list_rows(
        self,
        *,
        program_id: Optional[int] = None,
        period_id: Optional[int] = None,
    ) -> Sequence[dict]:
        """Activities by planned date (undated last), joined with
        ``programme {name, code}`` and ``periode {nom, annee}``."""

        raise NotImplementedError

    def get_by_id(self, activity_id: int) -> Optional[Activity]:
        raise NotImplementedError

    def create(self, draft: NewActivity) -> int:
        raise NotImplementedError

    def update(self, activity_id: int, changes: Mapping[str, Any]) -> bool:
        """Apply ``changes``; False when the activity does not exist."""

        raise NotImplementedError

    def delete(self, activity_id: int) -> bool:
        raise NotImplementedError
