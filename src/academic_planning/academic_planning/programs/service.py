from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from ..common.payload import to_date, to_text
from ..common.validators import require_fields
from ..core.enums import ProgramStatus
from ..core.exceptions import NotFoundError, ValidationError
from .model import NewProgram
from .repository import ProgramRepository

PROGRAM_REQUIRED_FIELDS = ("code", "name", "dateDebut", "dateFin")


class ProgramService:
    def __init__(self, programs: ProgramRepository):
        self._programs = programs

    def list_programs(
        self,
        *,
        user_id: int,
        search: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        programs = self._programs.list_for_user(user_id=int(user_id), search=search or None, status=status or None)
        return [p.to_dict() for p in programs]

    def get_program(self, program_id: int) -> Dict[str, Any]:
        program = self._programs.get_by_id(int(program_id))
        if not program:
            raise NotFoundError("Programme non trouvé")
        out = program.to_dict()
        out["modules"] = [m.to_dict() for m in self._programs.list_modules(program_id=program.program_id)]
        return out

    def create_program(self, *, user_id: int, payload: Mapping[str, Any]) -> Dict[str, Any]:
        require_fields(payload, PROGRAM_REQUIRED_FIELDS)

        start_date = to_date(payload["dateDebut"], "dateDebut")
        end_date = to_date(payload["dateFin"], "dateFin")
        if end_date < start_date:
            raise ValidationError("dateFin ne peut pas précéder dateDebut")

        try:
            status = ProgramStatus(payload.get("status") or ProgramStatus.PLANIFIE.value)
        except ValueError:
            raise ValidationError("Statut de programme invalide")

        program_id = self._programs.create(
            NewProgram(
                code=str(payload["code"]).strip(),
                name=str(payload["name"]).strip(),
                description=to_text(payload.get("description")),
                semester=to_text(payload.get("semestre")),
                level=to_text(payload.get("niveau")),
                start_date=start_date,
                end_date=end_date,
                status=status,
                user_id=int(user_id),
            )
        )
        return self.get_program(program_id)

    def delete_program(self, program_id: int) -> None:
        if not self._programs.delete(int(program_id)):
            raise NotFoundError("Programme non trouvé")
