from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Dict, Optional

from ..common.datetime_utils import iso_or_none
from ..core.enums import ProgramStatus


@dataclass(frozen=True)
class Program:
    """Domain entity: an academic curriculum owned by a user."""

    program_id: int
    code: str
    name: str
    description: Optional[str]
    semester: Optional[str]
    level: Optional[str]
    start_date: date
    end_date: date
    status: ProgramStatus
    user_id: int
    created_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.program_id,
            "code": self.code,
            "name": self.name,
            "description": self.description,
            "semestre": self.semester,
            "niveau": self.level,
            "dateDebut": iso_or_none(self.start_date),
            "dateFin": iso_or_none(self.end_date),
            "status": self.status.value,
            "userId": self.user_id,
            "createdAt": iso_or_none(self.created_at),
        }


@dataclass(frozen=True)
class Module:
    module_id: int
    program_id: int
    code: str
    name: str
    cm: int = 0
    td: int = 0
    tp: int = 0
    tpe: int = 0
    coefficient: float = 1
    credits: int = 0
    instructor_id: Optional[int] = None
    status: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.module_id,
            "programmeId": self.program_id,
            "code": self.code,
            "name": self.name,
            "cm": self.cm,
            "td": self.td,
            "tp": self.tp,
            "tpe": self.tpe,
            "coefficient": self.coefficient,
            "credits": self.credits,
            "intervenantId": self.instructor_id,
            "status": self.status,
        }


@dataclass(frozen=True)
class NewProgram:
    code: str
    name: str
    description: Optional[str]
    semester: Optional[str]
    level: Optional[str]
    start_date: date
    end_date: date
    status: ProgramStatus
    user_id: int


@dataclass(frozen=True)
class NewModule:
    code: str
    name: str
    cm: int = 0
    td: int = 0
    tp: int = 0
    tpe: int = 0
    coefficient: float = 1
    credits: int = 0

    @property
    def vht(self) -> int:
        """Total teaching hours."""
        return self.cm + self.td + self.tp + self.tpe


@dataclass(frozen=True)
class Instructor:
    instructor_id: int
    title: Optional[str]
    first_name: str
    last_name: str
    email: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.instructor_id,
            "civilite": self.title,
            "nom": self.last_name,
            "prenom": self.first_name,
            "email": self.email,
        }

    def contact_dict(self) -> Dict[str, Any]:
        return {"civilite": self.title, "nom": self.last_name, "prenom": self.first_name, "email": self.email}


@dataclass(frozen=True)
class ClassSession:
    """A scheduled teaching slot of a module."""

    session_id: int
    module_id: int
    instructor_id: Optional[int]
    session_date: date
    start_time: Optional[time]
    end_time: Optional[time]
    session_type: Optional[str]
    room: Optional[str]
    status: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.session_id,
            "moduleId": self.module_id,
            "intervenantId": self.instructor_id,
            "dateSeance": iso_or_none(self.session_date),
            "heureDebut": self.start_time.strftime("%H:%M") if self.start_time else None,
            "heureFin": self.end_time.strftime("%H:%M") if self.end_time else None,
            "typeSeance": self.session_type,
            "salle": self.room,
            "status": self.status,
        }
