from __future__ import annotations

from typing import Any, Callable, Dict, List

from ..common.datetime_utils import iso_or_none, now_local
from ..core.constants import EXPORT_VERSION
from ..core.exceptions import NotFoundError
from ..programs.model import Program
from ..programs.repository import ProgramRepository
from ..users.repository import UserRepository


class DataExportService:
    """Everything a user owns, as one JSON document.

    Programs carry their modules; each module carries its sessions and the
    contact details of its instructor. The password hash is never exported.
    """

    def __init__(
        self,
        users: UserRepository,
        programs: ProgramRepository,
        *,
        version: str = EXPORT_VERSION,
        clock: Callable = now_local,
    ):
        self._users = users
        self._programs = programs
        self._version = version
        self._clock = clock

    def export_user_data(self, *, user_id: int) -> Dict[str, Any]:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("Utilisateur non trouvé")

        programs = self._programs.list_for_user(user_id=user.user_id)
        return {
            "user": {
                "name": user.name,
                "email": user.email,
                "role": user.role.value,
                "createdAt": iso_or_none(user.created_at),
            },
            "programmes": [self._program_tree(p) for p in programs],
            "exportDate": self._clock().isoformat(),
            "version": self._version,
        }

    def _program_tree(self, program: Program) -> Dict[str, Any]:
        out = program.to_dict()
        modules: List[Dict[str, Any]] = []
        for module in self._programs.list_modules(program_id=program.program_id):
            item = module.to_dict()
            item["seances"] = [s.to_dict() for s in self._programs.list_sessions(module_id=module.module_id)]
            instructor = self._programs.get_instructor(module.instructor_id) if module.instructor_id else None
            item["intervenant"] = instructor.contact_dict() if instructor else None
            modules.append(item)
        out["modules"] = modules
        return out
