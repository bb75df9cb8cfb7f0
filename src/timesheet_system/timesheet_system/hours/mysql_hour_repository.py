from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Weekday, WeekStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_decimal
from .model import DayHours, HourEntry
from .repository import HourRepository

_DAY_COLUMNS = tuple(f"heure_{d.column}" for d in Weekday)

_SELECT = f"""
    SELECT id, salarie_id, projet_id, tache_id, annee, semaine,
           {", ".join(_DAY_COLUMNS)},
           commentaire, validation_status, updated_at
    FROM pointages
"""


class MySQLHourRepository(HourRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_entry(r: dict) -> HourEntry:
        return HourEntry(
            entry_id=int(r["id"]),
            employee_id=int(r["salarie_id"]),
            project_id=int(r["projet_id"]),
            task_id=int(r["tache_id"]),
            year=int(r["annee"]),
            iso_week=int(r["semaine"]),
            day_hours=tuple(to_decimal(r.get(c)) for c in _DAY_COLUMNS),  # type: ignore[arg-type]
            comment=r.get("commentaire"),
            status=WeekStatus(r["validation_status"]),
            updated_at=r.get("updated_at"),
        )

    def upsert(
        self,
        *,
        employee_id: int,
        project_id: int,
        task_id: int,
        year: int,
        iso_week: int,
        day_hours: DayHours,
        comment: Optional[str],
        status: WeekStatus,
    ) -> HourEntry:
        key = (int(employee_id), int(project_id), int(task_id), int(year), int(iso_week))
        updates = ", ".join(f"{c}=VALUES({c})" for c in _DAY_COLUMNS)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO pointages(
                    salarie_id, projet_id, tache_id, annee, semaine,
                    {", ".join(_DAY_COLUMNS)}, commentaire, validation_status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    {updates},
                    commentaire=VALUES(commentaire),
                    validation_status=VALUES(validation_status)
                """,
                key + tuple(day_hours) + (comment, status.value),
            )
            cur.execute(
                _SELECT + " WHERE salarie_id=%s AND projet_id=%s AND tache_id=%s AND annee=%s AND semaine=%s",
                key,
            )
            return self._to_entry(fetchone(cur))

    def get_by_id(self, entry_id: int) -> Optional[HourEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE id=%s", (int(entry_id),))
            r = fetchone(cur)
            return self._to_entry(r) if r else None

    def list_for_week(self, *, employee_id: int, year: int, iso_week: int) -> Sequence[HourEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE salarie_id=%s AND annee=%s AND semaine=%s ORDER BY id",
                (int(employee_id), int(year), int(iso_week)),
            )
            return [self._to_entry(r) for r in fetchall(cur)]

    def list_filtered(
        self,
        *,
        employee_id: Optional[int] = None,
        project_id: Optional[int] = None,
        year: Optional[int] = None,
        iso_week: Optional[int] = None,
        status: Optional[WeekStatus] = None,
        limit: int = 500,
    ) -> Sequence[HourEntry]:
        clauses = ["1=1"]
        params: list[object] = []

        if employee_id is not None:
            clauses.append("salarie_id=%s")
            params.append(int(employee_id))
        if project_id is not None:
            clauses.append("projet_id=%s")
            params.append(int(project_id))
        if year is not None:
            clauses.append("annee=%s")
            params.append(int(year))
        if iso_week is not None:
            clauses.append("semaine=%s")
            params.append(int(iso_week))
        if status is not None:
            clauses.append("validation_status=%s")
            params.append(status.value)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE {where} ORDER BY annee DESC, semaine DESC, id LIMIT %s",
                tuple(params + [int(limit)]),
            )
            return [self._to_entry(r) for r in fetchall(cur)]

    def employee_ids_for_week(self, *, year: int, iso_week: int) -> set[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT DISTINCT salarie_id FROM pointages WHERE annee=%s AND semaine=%s",
                (int(year), int(iso_week)),
            )
            return {int(r["salarie_id"]) for r in fetchall(cur)}

    def delete(self, *, entry_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM pointages WHERE id=%s", (int(entry_id),))
            return cur.rowcount > 0

    def set_status_for_week(self, *, employee_id: int, year: int, iso_week: int, status: WeekStatus) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE pointages
                SET validation_status=%s
                WHERE salarie_id=%s AND annee=%s AND semaine=%s
                """,
                (status.value, int(employee_id), int(year), int(iso_week)),
            )
            return int(cur.rowcount)
