from __future__ import annotations

from typing import Any, ContextManager, Mapping, Optional, Protocol, Sequence

from .model import NewStudentResult, StudentResult


class ResultWriter(Protocol):
    """Write side of one result transaction."""

    def lock(self, result_id: int) -> Optional[StudentResult]:
        """Row-lock and return the stored result, or None when it does not exist."""

        raise NotImplementedError

    def update(self, result_id: int, changes: Mapping[str, Any]) -> None:
        raise NotImplementedError


class ResultRepository(Protocol):
    def list_rows(
        self,
        *,
        module_id: Optional[int] = None,
        student_number: Optional[str] = None,
        status: Optional[str] = None,
    ) -> Sequence[dict]:
        """Ordered by module name then student last name, joined with
        ``module {name, code, programme {name, code}}``."""

        raise NotImplementedError

    def get_by_id(self, result_id: int) -> Optional[StudentResult]:
        raise NotImplementedError

    def create(self, draft: NewStudentResult) -> int:
        raise NotImplementedError

    def transaction(self) -> ContextManager[ResultWriter]:
        raise NotImplementedError

    def delete(self, result_id: int) -> bool:
        raise NotImplementedError
