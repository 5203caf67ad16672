from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Optional

from ..common.datetime_utils import iso_or_none
from ..common.patch import UNSET


@dataclass(frozen=True)
class Period:
    """Domain entity: an academic year with its two semesters and holidays."""

    period_id: int
    name: str
    year: str
    s1_start: date
    s1_end: date
    s2_start: date
    s2_end: date
    christmas_start: date
    christmas_end: date
    easter_start: Optional[date] = None
    easter_end: Optional[date] = None
    active: bool = False
    created_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.period_id,
            "nom": self.name,
            "annee": self.year,
            "debutS1": iso_or_none(self.s1_start),
            "finS1": iso_or_none(self.s1_end),
            "debutS2": iso_or_none(self.s2_start),
            "finS2": iso_or_none(self.s2_end),
            "vacancesNoel": iso_or_none(self.christmas_start),
            "finVacancesNoel": iso_or_none(self.christmas_end),
            "vacancesPaques": iso_or_none(self.easter_start),
            "finVacancesPaques": iso_or_none(self.easter_end),
            "active": bool(self.active),
            "createdAt": iso_or_none(self.created_at),
        }


@dataclass(frozen=True)
class NewPeriod:
    name: str
    year: str
    s1_start: date
    s1_end: date
    s2_start: date
    s2_end: date
    christmas_start: date
    christmas_end: date
    easter_start: Optional[date]
    easter_end: Optional[date]
    active: bool


@dataclass(frozen=True)
class PeriodPatch:
    """Partial update; fields left as UNSET are not written."""

    name: Any = UNSET
    year: Any = UNSET
    s1_start: Any = UNSET
    s1_end: Any = UNSET
    s2_start: Any = UNSET
    s2_end: Any = UNSET
    christmas_start: Any = UNSET
    christmas_end: Any = UNSET
    easter_start: Any = UNSET
    easter_end: Any = UNSET
    active: Any = UNSET
