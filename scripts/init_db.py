from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.timesheet_system.timesheet_system.common.weeks import now_local
from src.timesheet_system.timesheet_system.database.bootstrap import apply_schema, list_tables
from src.timesheet_system.timesheet_system.database.connection import DBConfig, DatabaseConnection
from src.timesheet_system.timesheet_system.holidays.mysql_holiday_repository import MySQLHolidayRepository
from src.timesheet_system.timesheet_system.holidays.service import french_public_holidays


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
    tables = list_tables(db_config)

    # Public holidays of the current and the next year
    holidays = MySQLHolidayRepository(DatabaseConnection.get_instance(DBConfig(**db_config)))
    year = now_local().year
    for y in (year, year + 1):
        for h in french_public_holidays(y):
            holidays.upsert(holiday_date=h.holiday_date, label=h.label)

    print(
        "OK: schema applied -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )
    print(f"    tables: {', '.join(sorted(tables))}")
    print(f"    holidays: {year}, {year + 1}")


if __name__ == "__main__":
    main()
