"""Excel import template for programs and their modules."""
from __future__ import annotations

import io

import pandas as pd

PROGRAM_SHEET = "Programme"
MODULES_SHEET = "Modules"

_PROGRAM_ROWS = [
    {
        "code": "L3-INFO-2024",
        "name": "Licence 3 Informatique",
        "semestre": "SEMESTRE_1",
        "niveau": "L3",
        "dateDebut": "2024-10-01",
        "dateFin": "2025-02-28",
        "description": "Programme de Licence 3 en Informatique",
    }
]

_MODULE_ROWS = [
    {
        "code": "INF301",
        "name": "Programmation Orientée Objet",
        "cm": 20,
        "td": 15,
        "tp": 10,
        "tpe": 5,
        "coefficient": 3,
        "credits": 5,
        "description": "Introduction à la POO avec Java",
    },
    {
        "code": "INF302",
        "name": "Bases de Données Avancées",
        "cm": 18,
        "td": 12,
        "tp": 15,
        "tpe": 5,
        "coefficient": 3,
        "credits": 5,
        "description": "SQL avancé et optimisation",
    },
    {
        "code": "INF303",
        "name": "Génie Logiciel",
        "cm": 15,
        "td": 10,
        "tp": 10,
        "tpe": 5,
        "coefficient": 2,
        "credits": 4,
        "description": "Méthodes agiles et UML",
    },
]

# Column letter -> width, in sheet column order.
_PROGRAM_WIDTHS = {"A": 15, "B": 30, "C": 15, "D": 10, "E": 12, "F": 12, "G": 40}
_MODULE_WIDTHS = {"A": 12, "B": 35, "C": 8, "D": 8, "E": 8, "F": 8, "G": 12, "H": 10, "I": 40}


def build_program_template() -> bytes:
    """Workbook with a ``Programme`` sheet and a ``Modules`` sheet, one sample each."""
    out = io.BytesIO()
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        pd.DataFrame(_PROGRAM_ROWS).to_excel(writer, sheet_name=PROGRAM_SHEET, index=False)
        pd.DataFrame(_MODULE_ROWS).to_excel(writer, sheet_name=MODULES_SHEET, index=False)

        for sheet_name, widths in ((PROGRAM_SHEET, _PROGRAM_WIDTHS), (MODULES_SHEET, _MODULE_WIDTHS)):
            sheet = writer.sheets[sheet_name]
            for column, width in widths.items():
                sheet.column_dimensions[column].width = width

    return out.getvalue()
