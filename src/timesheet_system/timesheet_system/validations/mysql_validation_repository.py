from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import WeekStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, placeholders, to_decimal
from .model import WeekValidation
from .repository import WeekValidationRepository

_SELECT = """
    SELECT id, salarie_id, annee, semaine, status, total_heures, heures_dues,
           soumis_le, valide_par, valide_le, commentaire
    FROM validations_semaine
"""

# Statuses from which a week can be (re)submitted.
_SUBMITTABLE = f"status IN ('{WeekStatus.DRAFT.value}','{WeekStatus.REJECTED.value}')"


class MySQLWeekValidationRepository(WeekValidationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_validation(r: dict) -> WeekValidation:
        return WeekValidation(
            validation_id=int(r["id"]),
            employee_id=int(r["salarie_id"]),
            year=int(r["annee"]),
            iso_week=int(r["semaine"]),
            status=WeekStatus(r["status"]),
            total_hours=to_decimal(r.get("total_heures")),
            owed_hours=to_decimal(r.get("heures_dues")),
            submitted_at=r.get("soumis_le"),
            validated_by=int(r["valide_par"]) if r.get("valide_par") is not None else None,
            validated_at=r.get("valide_le"),
            comment=r.get("commentaire"),
        )

    def get(self, *, employee_id: int, year: int, iso_week: int) -> Optional[WeekValidation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE salarie_id=%s AND annee=%s AND semaine=%s",
                (int(employee_id), int(year), int(iso_week)),
            )
            r = fetchone(cur)
            return self._to_validation(r) if r else None

    def submit(self, *, employee_id: int, year: int, iso_week: int, total_hours: Decimal, owed_hours: Decimal) -> bool:
        key = (int(employee_id), int(year), int(iso_week))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE validations_semaine
                SET status=%s, total_heures=%s, heures_dues=%s, soumis_le=NOW(),
                    valide_par=NULL, valide_le=NULL, commentaire=NULL
                WHERE salarie_id=%s AND annee=%s AND semaine=%s AND {_SUBMITTABLE}
                """,
                (WeekStatus.SUBMITTED.value, total_hours, owed_hours) + key,
            )
            if cur.rowcount > 0:
                return True

            # No row yet: first submission of the week. An existing row in
            # any other status makes the insert a no-op.
            cur.execute(
                """
                INSERT IGNORE INTO validations_semaine(
                    salarie_id, annee, semaine, status, total_heures, heures_dues, soumis_le
                )
                VALUES(%s,%s,%s,%s,%s,%s,NOW())
                """,
                key + (WeekStatus.SUBMITTED.value, total_hours, owed_hours),
            )
            return cur.rowcount > 0

    def decide(
        self,
        *,
        employee_id: int,
        year: int,
        iso_week: int,
        status: WeekStatus,
        decided_by: int,
        comment: Optional[str],
        from_statuses: Sequence[WeekStatus],
    ) -> bool:
        allowed = [s.value for s in from_statuses]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE validations_semaine
                SET status=%s, valide_par=%s, valide_le=NOW(), commentaire=%s
                WHERE salarie_id=%s AND annee=%s AND semaine=%s
                  AND status IN ({placeholders(len(allowed))})
                """,
                (status.value, int(decided_by), comment, int(employee_id), int(year), int(iso_week), *allowed),
            )
            return cur.rowcount > 0

    def reset_to_draft(self, *, employee_id: int, year: int, iso_week: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE validations_semaine
                SET status=%s, valide_par=NULL, valide_le=NULL, commentaire=NULL
                WHERE salarie_id=%s AND annee=%s AND semaine=%s AND status<>%s
                """,
                (WeekStatus.DRAFT.value, int(employee_id), int(year), int(iso_week), WeekStatus.DRAFT.value),
            )
            return cur.rowcount > 0

    def list_by_status(self, status: WeekStatus) -> Sequence[WeekValidation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE status=%s ORDER BY annee, semaine, salarie_id",
                (status.value,),
            )
            return [self._to_validation(r) for r in fetchall(cur)]

    def list_for_week(self, *, year: int, iso_week: int) -> Sequence[WeekValidation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE annee=%s AND semaine=%s ORDER BY salarie_id",
                (int(year), int(iso_week)),
            )
            return [self._to_validation(r) for r in fetchall(cur)]
