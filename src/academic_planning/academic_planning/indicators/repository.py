from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import Indicator, NewIndicator


class IndicatorRepository(Protocol):
    def list_rows(
        self,
        *,
        program_id: Optional[int] = None,
        period_id: Optional[int] = None,
        type: Optional[str] = None,
    ) -> Sequence[dict]:
        """Newest first, joined with ``programme``, ``periode`` and ``responsable``."""

        raise NotImplementedError

    def get_by_id(self, indicator_id: int) -> Optional[Indicator]:
        raise NotImplementedError

    def create(self, draft: NewIndicator) -> int:
        raise NotImplementedError

    def update(self, indicator_id: int, changes: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def delete(self, indicator_id: int) -> bool:
        raise NotImplementedError
