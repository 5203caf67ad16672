from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from ..common.patch import patch_changes
from ..common.payload import patch_date, patch_optional_text, patch_text, to_date, to_int, to_text
from ..common.validators import require_fields
from ..core.exceptions import NotFoundError
from ..periods.repository import PeriodRepository
from ..programs.repository import ProgramRepository
from .model import ActivityPatch, NewActivity
from .repository import ActivityRepository

ACTIVITY_REQUIRED_FIELDS = ("nom", "type", "programmeId", "periodeId")


def activity_patch_from_payload(payload: Mapping[str, Any]) -> ActivityPatch:
    return ActivityPatch(
        name=patch_text(payload, "nom"),
        description=patch_optional_text(payload, "description"),
        type=patch_text(payload, "type"),
        planned_date=patch_date(payload, "datePrevue"),
        actual_date=patch_date(payload, "dateReelle"),
    )


class ActivityService:
    def __init__(
        self,
        activities: ActivityRepository,
        programs: ProgramRepository,
        periods: PeriodRepository,
    ):
        self._activities = activities
        self._programs = programs
        self._periods = periods

    def list_activities(
        self,
        *,
        program_id: Optional[int] = None,
        period_id: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        return list(self._activities.list_rows(program_id=program_id, period_id=period_id))

    def get_activity(self, activity_id: int) -> Dict[str, Any]:
        activity = self._activities.get_by_id(int(activity_id))
        if not activity:
            raise NotFoundError("Activité non trouvée")

        out = activity.to_dict()
        program = self._programs.get_by_id(activity.program_id)
        period = self._periods.get_by_id(activity.period_id)
        out["programme"] = program.to_dict() if program else None
        out["periode"] = period.to_dict() if period else None
        return out

    def create_activity(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        require_fields(payload, ACTIVITY_REQUIRED_FIELDS)

        activity_id = self._activities.create(
            NewActivity(
                name=str(payload["nom"]).strip(),
                description=to_text(payload.get("description")),
                type=str(payload["type"]).strip(),
                planned_date=to_date(payload.get("datePrevue"), "datePrevue"),
                actual_date=to_date(payload.get("dateReelle"), "dateReelle"),
                program_id=to_int(payload["programmeId"], "programmeId"),
                period_id=to_int(payload["periodeId"], "periodeId"),
            )
        )
        return self.get_activity(activity_id)

    def update_activity(self, activity_id: int, payload: Mapping[str, Any]) -> Dict[str, Any]:
        changes = patch_changes(activity_patch_from_payload(payload))
        if not self._activities.update(int(activity_id), changes):
            raise NotFoundError("Activité non trouvée")
        return self.get_activity(activity_id)

    def delete_activity(self, activity_id: int) -> None:
        if not self._activities.delete(int(activity_id)):
            raise NotFoundError("Activité non trouvée")
