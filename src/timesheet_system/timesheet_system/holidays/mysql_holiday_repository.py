from __future__ import annotations

from datetime import date
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Holiday
from .repository import HolidayRepository


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_holiday(r: dict) -> Holiday:
        return Holiday(holiday_id=int(r["id"]), holiday_date=r["date_ferie"], label=r["libelle"])

    def list_between(self, start: date, end: date) -> Sequence[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, date_ferie, libelle
                FROM jours_feries
                WHERE date_ferie BETWEEN %s AND %s
                ORDER BY date_ferie
                """,
                (start, end),
            )
            return [self._to_holiday(r) for r in fetchall(cur)]

    def list_for_year(self, year: int) -> Sequence[Holiday]:
        return self.list_between(date(int(year), 1, 1), date(int(year), 12, 31))

    def upsert(self, *, holiday_date: date, label: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO jours_feries(date_ferie, libelle)
                VALUES(%s,%s)
                ON DUPLICATE KEY UPDATE libelle=VALUES(libelle)
                """,
                (holiday_date, label),
            )
