from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from ..common.patch import patch_changes
from ..common.payload import (
    patch_date,
    patch_float,
    patch_int,
    patch_optional_text,
    patch_text,
    to_date,
    to_float,
    to_int,
    to_text,
)
from ..common.validators import require_fields
from ..core.constants import DEFAULT_INDICATOR_UNIT
from ..core.exceptions import NotFoundError
from ..periods.repository import PeriodRepository
from ..programs.repository import ProgramRepository
from ..users.repository import UserRepository
from .model import IndicatorPatch, NewIndicator
from .repository import IndicatorRepository

INDICATOR_REQUIRED_FIELDS = ("nom", "type", "periodicite", "programmeId", "periodeId")


def indicator_patch_from_payload(payload: Mapping[str, Any]) -> IndicatorPatch:
    return IndicatorPatch(
        name=patch_text(payload, "nom"),
        description=patch_optional_text(payload, "description"),
        target_value=patch_float(payload, "valeurCible"),
        actual_value=patch_float(payload, "valeurReelle"),
        periodicity=patch_text(payload, "periodicite"),
        calculation_method=patch_optional_text(payload, "methodeCalcul"),
        unit=patch_text(payload, "unite"),
        type=patch_text(payload, "type"),
        owner_id=patch_int(payload, "responsableId"),
        collection_date=patch_date(payload, "dateCollecte"),
    )


class IndicatorService:
    def __init__(
        self,
        indicators: IndicatorRepository,
        programs: ProgramRepository,
        periods: PeriodRepository,
        users: UserRepository,
    ):
        self._indicators = indicators
        self._programs = programs
        self._periods = periods
        self._users = users

    def list_indicators(
        self,
        *,
        program_id: Optional[int] = None,
        period_id: Optional[int] = None,
        type: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        return list(self._indicators.list_rows(program_id=program_id, period_id=period_id, type=type or None))

    def get_indicator(self, indicator_id: int) -> Dict[str, Any]:
        indicator = self._indicators.get_by_id(int(indicator_id))
        if not indicator:
            raise NotFoundError("Indicateur non trouvé")

        out = indicator.to_dict()
        program = self._programs.get_by_id(indicator.program_id)
        period = self._periods.get_by_id(indicator.period_id)
        owner = self._users.get_by_id(indicator.owner_id) if indicator.owner_id is not None else None
        out["programme"] = program.to_dict() if program else None
        out["periode"] = period.to_dict() if period else None
        out["responsable"] = owner.public_dict() if owner else None
        return out

    def create_indicator(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        require_fields(payload, INDICATOR_REQUIRED_FIELDS)

        indicator_id = self._indicators.create(
            NewIndicator(
                name=str(payload["nom"]).strip(),
                description=to_text(payload.get("description")),
                target_value=to_float(payload.get("valeurCible"), "valeurCible"),
                actual_value=to_float(payload.get("valeurReelle"), "valeurReelle"),
                periodicity=str(payload["periodicite"]).strip(),
                calculation_method=to_text(payload.get("methodeCalcul")),
                unit=to_text(payload.get("unite")) or DEFAULT_INDICATOR_UNIT,
                type=str(payload["type"]).strip(),
                program_id=to_int(payload["programmeId"], "programmeId"),
                period_id=to_int(payload["periodeId"], "periodeId"),
                owner_id=to_int(payload.get("responsableId"), "responsableId"),
                collection_date=to_date(payload.get("dateCollecte"), "dateCollecte"),
            )
        )
        return self.get_indicator(indicator_id)

    def update_indicator(self, indicator_id: int, payload: Mapping[str, Any]) -> Dict[str, Any]:
        changes = patch_changes(indicator_patch_from_payload(payload))
        if not self._indicators.update(int(indicator_id), changes):
            raise NotFoundError("Indicateur non trouvé")
        return self.get_indicator(indicator_id)

    def delete_indicator(self, indicator_id: int) -> None:
        if not self._indicators.delete(int(indicator_id)):
            raise NotFoundError("Indicateur non trouvé")
