from __future__ import annotations

from typing import AbstractSet, Any, ContextManager, Mapping, Optional, Protocol, Sequence

from .model import NewPeriod, Period


class PeriodWriter(Protocol):
    """Write operations bound to one open transaction."""

    def lock(self, period_id: int) -> bool:
        """Lock the row for update; False when it does not exist."""

        raise NotImplementedError

    def lock_all(self) -> AbstractSet[int]:
        """Lock every period row in primary-key order; returns their ids.

        Activations take this lock before any other, so they all queue in the
        same order.
        """

        raise NotImplementedError

    def deactivate_others(self, *, keep_id: Optional[int] = None) -> int:
        """Set active=false on every active period except ``keep_id``.

        Callers hold ``lock_all`` first.

        Returns the number of periods switched off.
        """

        raise NotImplementedError

    def insert(self, draft: NewPeriod) -> int:
        raise NotImplementedError

    def update(self, period_id: int, changes: Mapping[str, Any]) -> None:
        raise NotImplementedError


class PeriodRepository(Protocol):
    def list_all(self) -> Sequence[Period]:
        """All periods, most recent academic year first."""

        raise NotImplementedError

    def get_by_id(self, period_id: int) -> Optional[Period]:
        raise NotImplementedError

    def get_active(self) -> Optional[Period]:
        raise NotImplementedError

    def transaction(self) -> ContextManager[PeriodWriter]:
        """Open a transaction; committed on normal exit, rolled back on error."""

        raise NotImplementedError

    def delete(self, period_id: int) -> bool:
        raise NotImplementedError
