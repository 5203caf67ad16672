from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import ClassSession, Instructor, Module, NewModule, NewProgram, Program


class ProgramRepository(Protocol):
    def list_for_user(
        self,
        *,
        user_id: int,
        search: Optional[str] = None,
        status: Optional[str] = None,
    ) -> Sequence[Program]:
        """Programs owned by ``user_id``, newest first."""

        raise NotImplementedError

    def get_by_id(self, program_id: int) -> Optional[Program]:
        raise NotImplementedError

    def list_modules(self, *, program_id: int) -> Sequence[Module]:
        raise NotImplementedError

    def get_module(self, module_id: int) -> Optional[Module]:
        raise NotImplementedError

    def get_instructor(self, instructor_id: int) -> Optional[Instructor]:
        raise NotImplementedError

    def list_sessions(self, *, module_id: int) -> Sequence[ClassSession]:
        """Sessions of a module by date and start time."""

        raise NotImplementedError

    def create(self, draft: NewProgram) -> int:
        raise NotImplementedError

    def code_exists(self, code: str) -> bool:
        raise NotImplementedError

    def create_with_modules(self, draft: NewProgram, modules: Sequence[NewModule]) -> int:
        """Insert the program and all its modules in one transaction."""

        raise NotImplementedError

    def delete(self, program_id: int) -> bool:
        raise NotImplementedError
