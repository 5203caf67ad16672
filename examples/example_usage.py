"""Example: drive the service layer directly, without Flask.

Controllers stay thin; the planning rules live in the services.
"""

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src" / "academic_planning"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from config import get_settings_module

from academic_planning.auth.settings import AuthSettings
from academic_planning.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=settings.DB_CONFIG,
        auth_settings=AuthSettings.from_settings(settings),
    )
    for period in container.period_service.list_periods():
        marker = "*" if period["active"] else " "
        print(f"{marker} {period['annee']} {period['nom']}")


if __name__ == "__main__":
    main()
