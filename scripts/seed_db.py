from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src" / "academic_planning"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from config import get_settings_module

from academic_planning.database.bootstrap import DEMO_USERS, apply_seed_sql, ensure_demo_users


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    ensure_demo_users(db_config)
    apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")

    print(
        "OK: Seeded database -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )
    for _, email, password, role in DEMO_USERS:
        print(f"OK: demo account {email} / {password} ({role.value})")


if __name__ == "__main__":
    main()
