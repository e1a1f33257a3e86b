from __future__ import annotations

import importlib
import sys
from pathlib import Path

SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from school_journal.config import get_settings_module
from school_journal.container import build_container


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    container = build_container(backend="mysql", db_config=db_config)
    # list_users seeds the initial roster when the users table is empty
    users = container.user_service.list_users()

    print(
        "OK: Seeded database -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')} "
        f"(users={len(users)})"
    )


if __name__ == "__main__":
    main()
