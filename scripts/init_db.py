from __future__ import annotations

import sys
from pathlib import Path

import importlib

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.outlet_attendance.outlet_attendance.database.bootstrap import apply_schema, ensure_demo_outlet
from src.outlet_attendance.outlet_attendance.database.connection import DBConfig


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    statements = apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
    if "--seed" in sys.argv[1:]:
        ensure_demo_outlet(db_config)

    print(f"OK: Applied schema.sql -> {DBConfig.from_mapping(db_config).describe()} (statements={statements})")


if __name__ == "__main__":
    main()
