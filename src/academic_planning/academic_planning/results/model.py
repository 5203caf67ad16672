from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from ..common.datetime_utils import iso_or_none
from ..common.patch import UNSET


@dataclass(frozen=True)
class StudentResult:
    """Domain entity: a student's outcome in one module.

    ``attendance_percentage`` is derived from ``presences`` and ``absences``.
    """

    result_id: int
    student_number: str
    last_name: str
    first_name: str
    email: Optional[str]
    module_id: int
    cc_score: Optional[float]
    exam_score: Optional[float]
    final_score: Optional[float]
    status: str
    mention: Optional[str]
    hours_done: int = 0
    progress_pct: float = 0
    presences: int = 0
    absences: int = 0
    attendance_percentage: float = 0
    created_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.result_id,
            "numeroEtudiant": self.student_number,
            "nomEtudiant": self.last_name,
            "prenomEtudiant": self.first_name,
            "emailEtudiant": self.email,
            "moduleId": self.module_id,
            "noteCC": self.cc_score,
            "noteExamen": self.exam_score,
            "noteFinale": self.final_score,
            "statut": self.status,
            "mention": self.mention,
            "vhDeroule": self.hours_done,
            "progressionPct": self.progress_pct,
            "presences": self.presences,
            "absences": self.absences,
            "tauxPresence": self.attendance_percentage,
            "createdAt": iso_or_none(self.created_at),
        }


@dataclass(frozen=True)
class NewStudentResult:
    student_number: str
    last_name: str
    first_name: str
    email: Optional[str]
    module_id: int
    cc_score: Optional[float]
    exam_score: Optional[float]
    final_score: Optional[float]
    status: str
    mention: Optional[str]
    hours_done: int
    progress_pct: float
    presences: int
    absences: int
    attendance_percentage: float


@dataclass(frozen=True)
class StudentResultPatch:
    cc_score: Any = UNSET
    exam_score: Any = UNSET
    final_score: Any = UNSET
    status: Any = UNSET
    mention: Any = UNSET
    hours_done: Any = UNSET
    progress_pct: Any = UNSET
    presences: Any = UNSET
    absences: Any = UNSET
