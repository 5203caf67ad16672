from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from ..common.patch import is_set, patch_changes
from ..common.payload import patch_count, patch_float, patch_optional_text, patch_text, to_float, to_int, to_text
from ..common.validators import require_fields
from ..core.exceptions import NotFoundError, ValidationError
from ..programs.repository import ProgramRepository
from .attendance import attendance_percentage
from .model import NewStudentResult, StudentResultPatch
from .repository import ResultRepository

RESULT_REQUIRED_FIELDS = ("numeroEtudiant", "nomEtudiant", "prenomEtudiant", "moduleId", "statut")


def _count(payload: Mapping[str, Any], key: str) -> int:
    value = to_int(payload.get(key), key, default=0)
    if value < 0:
        raise ValidationError(f"{key}: valeur négative")
    return value


def result_patch_from_payload(payload: Mapping[str, Any]) -> StudentResultPatch:
    progress = patch_float(payload, "progressionPct")
    return StudentResultPatch(
        cc_score=patch_float(payload, "noteCC"),
        exam_score=patch_float(payload, "noteExamen"),
        final_score=patch_float(payload, "noteFinale"),
        status=patch_text(payload, "statut"),
        mention=patch_optional_text(payload, "mention"),
        hours_done=patch_count(payload, "vhDeroule"),
        progress_pct=0.0 if progress is None else progress,
        presences=patch_count(payload, "presences"),
        absences=patch_count(payload, "absences"),
    )


class ResultService:
    def __init__(self, results: ResultRepository, programs: ProgramRepository):
        self._results = results
        self._programs = programs

    def list_results(
        self,
        *,
        module_id: Optional[int] = None,
        student_number: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        return list(
            self._results.list_rows(
                module_id=module_id,
                student_number=student_number or None,
                status=status or None,
            )
        )

    def get_result(self, result_id: int) -> Dict[str, Any]:
        result = self._results.get_by_id(int(result_id))
        if not result:
            raise NotFoundError("Résultat non trouvé")

        out = result.to_dict()
        module = self._programs.get_module(result.module_id)
        if module is None:
            out["module"] = None
            return out

        module_out = module.to_dict()
        program = self._programs.get_by_id(module.program_id)
        instructor = self._programs.get_instructor(module.instructor_id) if module.instructor_id else None
        module_out["programme"] = program.to_dict() if program else None
        module_out["intervenant"] = instructor.to_dict() if instructor else None
        out["module"] = module_out
        return out

    def create_result(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        require_fields(payload, RESULT_REQUIRED_FIELDS)

        presences = _count(payload, "presences")
        absences = _count(payload, "absences")
        if payload.get("presences") is not None and payload.get("absences") is not None:
            rate = attendance_percentage(presences, absences)
        else:
            rate = to_float(payload.get("tauxPresence"), "tauxPresence") or 0.0

        result_id = self._results.create(
            NewStudentResult(
                student_number=str(payload["numeroEtudiant"]).strip(),
                last_name=str(payload["nomEtudiant"]).strip(),
                first_name=str(payload["prenomEtudiant"]).strip(),
                email=to_text(payload.get("emailEtudiant")),
                module_id=to_int(payload["moduleId"], "moduleId"),
                cc_score=to_float(payload.get("noteCC"), "noteCC"),
                exam_score=to_float(payload.get("noteExamen"), "noteExamen"),
                final_score=to_float(payload.get("noteFinale"), "noteFinale"),
                status=str(payload["statut"]).strip(),
                mention=to_text(payload.get("mention")),
                hours_done=_count(payload, "vhDeroule"),
                progress_pct=to_float(payload.get("progressionPct"), "progressionPct") or 0.0,
                presences=presences,
                absences=absences,
                attendance_percentage=rate,
            )
        )
        return self.get_result(result_id)

    def update_result(self, result_id: int, payload: Mapping[str, Any]) -> Dict[str, Any]:
        patch = result_patch_from_payload(payload)
        changes = patch_changes(patch)

        with self._results.transaction() as tx:
            current = tx.lock(int(result_id))
            if current is None:
                raise NotFoundError("Résultat non trouvé")
            if is_set(patch.presences) or is_set(patch.absences):
                presences = patch.presences if is_set(patch.presences) else current.presences
                absences = patch.absences if is_set(patch.absences) else current.absences
                changes["attendance_percentage"] = attendance_percentage(presences, absences)
            tx.update(int(result_id), changes)

        return self.get_result(result_id)

    def delete_result(self, result_id: int) -> None:
        if not self._results.delete(int(result_id)):
            raise NotFoundError("Résultat non trouvé")
