from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from ..activities.repository import ActivityRepository
from ..common.patch import patch_changes
from ..common.payload import patch_bool, patch_date, patch_required_date, patch_text, to_bool, to_date
from ..common.validators import require_fields
from ..core.exceptions import NotFoundError
from ..indicators.repository import IndicatorRepository
from .model import NewPeriod, PeriodPatch
from .repository import PeriodRepository

logger = logging.getLogger(__name__)

PERIOD_REQUIRED_FIELDS = (
    "nom",
    "annee",
    "debutS1",
    "finS1",
    "debutS2",
    "finS2",
    "vacancesNoel",
    "finVacancesNoel",
)


def period_patch_from_payload(payload: Mapping[str, Any]) -> PeriodPatch:
    return PeriodPatch(
        name=patch_text(payload, "nom"),
        year=patch_text(payload, "annee"),
        s1_start=patch_required_date(payload, "debutS1"),
        s1_end=patch_required_date(payload, "finS1"),
        s2_start=patch_required_date(payload, "debutS2"),
        s2_end=patch_required_date(payload, "finS2"),
        christmas_start=patch_required_date(payload, "vacancesNoel"),
        christmas_end=patch_required_date(payload, "finVacancesNoel"),
        easter_start=patch_date(payload, "vacancesPaques"),
        easter_end=patch_date(payload, "finVacancesPaques"),
        active=patch_bool(payload, "active"),
    )


class PeriodService:
    """Academic periods, with at most one active period at any time.

    Activation runs the sweep of the other active periods and the write of the
    activated one inside a single repository transaction.
    """

    def __init__(
        self,
        periods: PeriodRepository,
        activities: Optional[ActivityRepository] = None,
        indicators: Optional[IndicatorRepository] = None,
    ):
        self._periods = periods
        self._activities = activities
        self._indicators = indicators

    def list_periods(self) -> List[Dict[str, Any]]:
        return [p.to_dict() for p in self._periods.list_all()]

    def get_period(self, period_id: int) -> Dict[str, Any]:
        period = self._periods.get_by_id(int(period_id))
        if not period:
            raise NotFoundError("Période non trouvée")

        out = period.to_dict()
        out["activitesAcademiques"] = (
            list(self._activities.list_rows(period_id=period.period_id)) if self._activities else []
        )
        out["indicateursAcademiques"] = (
            list(self._indicators.list_rows(period_id=period.period_id)) if self._indicators else []
        )
        return out

    def get_active_period(self) -> Dict[str, Any]:
        period = self._periods.get_active()
        if not period:
            raise NotFoundError("Aucune période active")
        return period.to_dict()

    def create_period(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        require_fields(payload, PERIOD_REQUIRED_FIELDS)

        draft = NewPeriod(
            name=str(payload["nom"]).strip(),
            year=str(payload["annee"]).strip(),
            s1_start=to_date(payload["debutS1"], "debutS1"),
            s1_end=to_date(payload["finS1"], "finS1"),
            s2_start=to_date(payload["debutS2"], "debutS2"),
            s2_end=to_date(payload["finS2"], "finS2"),
            christmas_start=to_date(payload["vacancesNoel"], "vacancesNoel"),
            christmas_end=to_date(payload["finVacancesNoel"], "finVacancesNoel"),
            easter_start=to_date(payload.get("vacancesPaques"), "vacancesPaques"),
            easter_end=to_date(payload.get("finVacancesPaques"), "finVacancesPaques"),
            active=to_bool(payload.get("active", False)),
        )

        with self._periods.transaction() as tx:
            if draft.active:
                tx.lock_all()
                swept = tx.deactivate_others()
                logger.info("Activating new period %r, deactivated %d other(s)", draft.name, swept)
            period_id = tx.insert(draft)

        return self._require(period_id)

    def update_period(self, period_id: int, payload: Mapping[str, Any]) -> Dict[str, Any]:
        patch = period_patch_from_payload(payload)
        changes = patch_changes(patch)

        with self._periods.transaction() as tx:
            if changes.get("active") is True:
                # Whole-table lock first, then the target check inside it.
                if int(period_id) not in tx.lock_all():
                    raise NotFoundError("Période non trouvée")
                swept = tx.deactivate_others(keep_id=int(period_id))
                logger.info("Activating period %s, deactivated %d other(s)", period_id, swept)
            elif not tx.lock(int(period_id)):
                raise NotFoundError("Période non trouvée")
            tx.update(int(period_id), changes)

        return self._require(period_id)

    def delete_period(self, period_id: int) -> None:
        if not self._periods.delete(int(period_id)):
            raise NotFoundError("Période non trouvée")

    def _require(self, period_id: int) -> Dict[str, Any]:
        period = self._periods.get_by_id(int(period_id))
        if not period:
            raise NotFoundError("Période non trouvée")
        return period.to_dict()
