"""Program import from a filled-in copy of the Excel template."""
from __future__ import annotations

import io
import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple
from zipfile import BadZipFile

import pandas as pd
from openpyxl.utils.exceptions import InvalidFileException

from ..common.payload import to_date, to_float, to_int, to_text
from ..core.enums import ProgramStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..programs.model import NewModule, NewProgram
from ..programs.repository import ProgramRepository
from ..users.model import Identity
from .template import MODULES_SHEET, PROGRAM_SHEET

logger = logging.getLogger(__name__)

IMPORT_ROLES = (Role.COORDINATOR, Role.ADMIN)
PROGRAM_IMPORT_FIELDS = ("code", "name", "semestre", "niveau", "dateDebut", "dateFin")
MODULE_IMPORT_FIELDS = ("code", "name", "cm", "td", "tp", "tpe", "coefficient", "credits")


def _records(frame: pd.DataFrame) -> List[Dict[str, Any]]:
    frame = frame.dropna(how="all")
    frame.columns = [str(c).strip() for c in frame.columns]
    # empty cells come back as NaN
    return frame.astype(object).where(frame.notna(), None).to_dict(orient="records")


def read_program_workbook(content: bytes) -> Tuple[Dict[str, Any], List[Dict[str, Any]]]:
    """First row of the ``Programme`` sheet and every row of ``Modules``."""
    try:
        sheets = pd.read_excel(io.BytesIO(content), sheet_name=None, dtype=object, engine="openpyxl")
    except (BadZipFile, InvalidFileException, ValueError, KeyError) as e:
        raise ValidationError("Fichier Excel illisible") from e

    if PROGRAM_SHEET not in sheets or MODULES_SHEET not in sheets:
        raise ValidationError('Le fichier doit contenir deux feuilles: "Programme" et "Modules"')

    programs = _records(sheets[PROGRAM_SHEET])
    if not programs:
        raise ValidationError("Aucune donnée de programme trouvée")
    modules = _records(sheets[MODULES_SHEET])
    if not modules:
        raise ValidationError("Aucun module trouvé dans la feuille Modules")
    return programs[0], modules


def _missing(row: Dict[str, Any], fields: Sequence[str]) -> List[str]:
    return [f for f in fields if row.get(f) is None or not str(row[f]).strip()]


def _text(value: Any) -> str:
    # numeric codes typed in Excel arrive as int
    return str(value).strip()


def _day(value: Any, field_name: str) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    return to_date(value, field_name)


def _hours(row: Dict[str, Any], key: str, line: int) -> int:
    value = to_int(row[key], f"Module ligne {line}: {key}", default=0)
    if value < 0:
        raise ValidationError(f"Module ligne {line}: {key}: valeur négative")
    return value


def _module(row: Dict[str, Any], line: int) -> NewModule:
    return NewModule(
        code=_text(row["code"]),
        name=_text(row["name"]),
        cm=_hours(row, "cm", line),
        td=_hours(row, "td", line),
        tp=_hours(row, "tp", line),
        tpe=_hours(row, "tpe", line),
        coefficient=to_float(row["coefficient"], f"Module ligne {line}: coefficient"),
        credits=_hours(row, "credits", line),
    )


class ProgramImportService:
    """Creates a program and its modules from an uploaded workbook.

    Nothing is written unless the whole workbook is valid.
    """

    def __init__(self, programs: ProgramRepository):
        self._programs = programs

    def import_workbook(self, *, identity: Identity, content: Optional[bytes]) -> Dict[str, Any]:
        if identity.role not in IMPORT_ROLES:
            raise AuthorizationError("Accès non autorisé")
        if not content:
            raise ValidationError("Aucun fichier fourni")

        program_row, module_rows = read_program_workbook(content)

        missing = _missing(program_row, PROGRAM_IMPORT_FIELDS)
        if missing:
            raise ValidationError("Champs manquants dans la feuille Programme: " + ", ".join(missing))

        modules: List[NewModule] = []
        seen = set()
        for line, row in enumerate(module_rows, start=2):
            missing = _missing(row, MODULE_IMPORT_FIELDS)
            if missing:
                raise ValidationError(f"Module ligne {line}: Champs manquants: " + ", ".join(missing))
            module = _module(row, line)
            if module.code in seen:
                raise ValidationError(f'Module ligne {line}: code "{module.code}" en double')
            seen.add(module.code)
            modules.append(module)

        draft = NewProgram(
            code=_text(program_row["code"]),
            name=_text(program_row["name"]),
            description=to_text(program_row.get("description")) or "",
            semester=_text(program_row["semestre"]),
            level=_text(program_row["niveau"]),
            start_date=_day(program_row["dateDebut"], "dateDebut"),
            end_date=_day(program_row["dateFin"], "dateFin"),
            status=ProgramStatus.PLANIFIE,
            user_id=identity.user_id,
        )
        if draft.end_date < draft.start_date:
            raise ValidationError("dateFin ne peut pas précéder dateDebut")
        if self._programs.code_exists(draft.code):
            raise ValidationError(f'Un programme avec le code "{draft.code}" existe déjà')

        program_id = self._programs.create_with_modules(draft, modules)
        logger.info("Imported program %s with %d module(s) for user %s", draft.code, len(modules), identity.user_id)

        program = self._programs.get_by_id(program_id)
        if not program:
            raise NotFoundError("Programme non trouvé")
        return {
            "programme": program.to_dict(),
            "modulesCount": len(modules),
            "totalVHT": sum(m.vht for m in modules),
        }
