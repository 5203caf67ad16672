from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Optional

from ..common.datetime_utils import iso_or_none
from ..common.patch import UNSET


@dataclass(frozen=True)
class Indicator:
    """Domain entity: a measured quality/performance metric.

    ``owner_id`` is the responsible user, if any.
    """

    indicator_id: int
    name: str
    description: Optional[str]
    target_value: Optional[float]
    actual_value: Optional[float]
    periodicity: str
    calculation_method: Optional[str]
    unit: str
    type: str
    program_id: int
    period_id: int
    owner_id: Optional[int] = None
    collection_date: Optional[date] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.indicator_id,
            "nom": self.name,
            "description": self.description,
            "valeurCible": self.target_value,
            "valeurReelle": self.actual_value,
            "periodicite": self.periodicity,
            "methodeCalcul": self.calculation_method,
            "unite": self.unit,
            "type": self.type,
            "programmeId": self.program_id,
            "periodeId": self.period_id,
            "responsableId": self.owner_id,
            "dateCollecte": iso_or_none(self.collection_date),
            "createdAt": iso_or_none(self.created_at),
        }


@dataclass(frozen=True)
class NewIndicator:
    name: str
    description: Optional[str]
    target_value: Optional[float]
    actual_value: Optional[float]
    periodicity: str
    calculation_method: Optional[str]
    unit: str
    type: str
    program_id: int
    period_id: int
    owner_id: Optional[int]
    collection_date: Optional[date]


@dataclass(frozen=True)
class IndicatorPatch:
    name: Any = UNSET
    description: Any = UNSET
    target_value: Any = UNSET
    actual_value: Any = UNSET
    periodicity: Any = UNSET
    calculation_method: Any = UNSET
    unit: Any = UNSET
    type: Any = UNSET
    owner_id: Any = UNSET
    collection_date: Any = UNSET
