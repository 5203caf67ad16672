"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 30
DEFAULT_INDICATOR_UNIT = "%"
EXPORT_VERSION = "1.0"
EXPORT_FILENAME = "planning-fc-export.json"
TEMPLATE_FILENAME = "programme-template.xlsx"
XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
MAX_IMPORT_BYTES = 10 * 1024 * 1024

UNAUTHENTICATED_MESSAGE = "Non authentifié"
METHOD_NOT_ALLOWED_MESSAGE = "Méthode non autorisée"
SERVER_ERROR_MESSAGE = "Erreur serveur"

DEFAULT_PREFERENCES = {
    "language": "fr",
    "timezone": "Europe/Paris",
    "dateFormat": "dd/MM/yyyy",
    "notifications": {
        "email": True,
        "desktop": False,
        "newProgramme": True,
        "seanceReminder": True,
        "conflictAlert": True,
    },
    "theme": "light",
    "defaultView": "month",
}
