from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Optional

from ..common.datetime_utils import iso_or_none
from ..common.patch import UNSET


@dataclass(frozen=True)
class Activity:
    """Domain entity: a planned academic event of one program in one period."""

    activity_id: int
    name: str
    description: Optional[str]
    type: str
    planned_date: Optional[date]
    actual_date: Optional[date]
    program_id: int
    period_id: int
    created_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.activity_id,
            "nom": self.name,
            "description": self.description,
            "type": self.type,
            "datePrevue": iso_or_none(self.planned_date),
            "dateReelle": iso_or_none(self.actual_date),
            "programmeId": self.program_id,
            "periodeId": self.period_id,
            "createdAt": iso_or_none(self.created_at),
        }


@dataclass(frozen=True)
class NewActivity:
    name: str
    description: Optional[str]
    type: str
    planned_date: Optional[date]
    actual_date: Optional[date]
    program_id: int
    period_id: int


@dataclass(frozen=True)
class ActivityPatch:
    name: Any = UNSET
    description: Any = UNSET
    type: Any = UNSET
    planned_date: Any = UNSET
    actual_date: Any = UNSET
