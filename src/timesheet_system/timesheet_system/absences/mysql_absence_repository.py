from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import WORKDAYS, AbsenceType, WeekStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, placeholders
from .model import AbsenceRecord, WeekdayFlags
from .repository import AbsenceRepository

_FLAG_COLUMNS = tuple(f"cp_{d.column}" for d in WORKDAYS)

_SELECT = f"""
    SELECT id, salarie_id, annee, semaine, type_conge,
           {", ".join(_FLAG_COLUMNS)},
           motif, validation_status, statut_approbation, valide_par, valide_le, commentaire
    FROM conges
"""


class MySQLAbsenceRepository(AbsenceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_record(r: dict) -> AbsenceRecord:
        return AbsenceRecord(
            absence_id=int(r["id"]),
            employee_id=int(r["salarie_id"]),
            year=int(r["annee"]),
            iso_week=int(r["semaine"]),
            absence_type=AbsenceType(r["type_conge"]),
            flags=tuple(bool(r.get(c)) for c in _FLAG_COLUMNS),  # type: ignore[arg-type]
            reason=r.get("motif"),
            status=WeekStatus(r["validation_status"]),
            approval=WeekStatus(r["statut_approbation"]),
            decided_by=int(r["valide_par"]) if r.get("valide_par") is not None else None,
            decided_at=r.get("valide_le"),
            comment=r.get("commentaire"),
        )

    def upsert(
        self,
        *,
        employee_id: int,
        year: int,
        iso_week: int,
        absence_type: AbsenceType,
        flags: WeekdayFlags,
        reason: Optional[str],
        status: WeekStatus,
        approval: WeekStatus,
    ) -> AbsenceRecord:
        key = (int(employee_id), int(year), int(iso_week), absence_type.value)
        updates = ", ".join(f"{c}=VALUES({c})" for c in _FLAG_COLUMNS)
        values = key + tuple(int(f) for f in flags) + (reason, status.value, approval.value)
        # a rewritten leave back in Brouillon loses its previous decision
        draft = (WeekStatus.DRAFT.value,) * 3
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO conges(
                    salarie_id, annee, semaine, type_conge,
                    {", ".join(_FLAG_COLUMNS)}, motif, validation_status, statut_approbation
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    {updates},
                    motif=VALUES(motif),
                    validation_status=VALUES(validation_status),
                    valide_par=IF(VALUES(statut_approbation)=%s, NULL, valide_par),
                    valide_le=IF(VALUES(statut_approbation)=%s, NULL, valide_le),
                    commentaire=IF(VALUES(statut_approbation)=%s, NULL, commentaire),
                    statut_approbation=VALUES(statut_approbation)
                """,
                values + draft,
            )
            cur.execute(
                _SELECT + " WHERE salarie_id=%s AND annee=%s AND semaine=%s AND type_conge=%s",
                key,
            )
            return self._to_record(fetchone(cur))

    def get_by_id(self, absence_id: int) -> Optional[AbsenceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE id=%s", (int(absence_id),))
            r = fetchone(cur)
            return self._to_record(r) if r else None

    def list_for_week(self, *, employee_id: int, year: int, iso_week: int) -> Sequence[AbsenceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE salarie_id=%s AND annee=%s AND semaine=%s ORDER BY id",
                (int(employee_id), int(year), int(iso_week)),
            )
            return [self._to_record(r) for r in fetchall(cur)]

    def list_filtered(
        self,
        *,
        employee_id: Optional[int] = None,
        year: Optional[int] = None,
        iso_week: Optional[int] = None,
        status: Optional[WeekStatus] = None,
        approval: Optional[WeekStatus] = None,
        limit: int = 500,
    ) -> Sequence[AbsenceRecord]:
        clauses = ["1=1"]
        params: list[object] = []

        if employee_id is not None:
            clauses.append("salarie_id=%s")
            params.append(int(employee_id))
        if year is not None:
            clauses.append("annee=%s")
            params.append(int(year))
        if iso_week is not None:
            clauses.append("semaine=%s")
            params.append(int(iso_week))
        if status is not None:
            clauses.append("validation_status=%s")
            params.append(status.value)
        if approval is not None:
            clauses.append("statut_approbation=%s")
            params.append(approval.value)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE {where} ORDER BY annee DESC, semaine DESC, id LIMIT %s",
                tuple(params + [int(limit)]),
            )
            return [self._to_record(r) for r in fetchall(cur)]

    def employee_ids_for_week(self, *, year: int, iso_week: int) -> set[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT DISTINCT salarie_id FROM conges WHERE annee=%s AND semaine=%s",
                (int(year), int(iso_week)),
            )
            return {int(r["salarie_id"]) for r in fetchall(cur)}

    def delete(self, *, absence_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM conges WHERE id=%s", (int(absence_id),))
            return cur.rowcount > 0

    def delete_for_key(self, *, employee_id: int, year: int, iso_week: int, absence_type: AbsenceType) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM conges WHERE salarie_id=%s AND annee=%s AND semaine=%s AND type_conge=%s",
                (int(employee_id), int(year), int(iso_week), absence_type.value),
            )
            return cur.rowcount > 0

    def set_approval(
        self,
        *,
        absence_id: int,
        approval: WeekStatus,
        from_statuses: Sequence[WeekStatus],
        decided_by: Optional[int] = None,
        comment: Optional[str] = None,
    ) -> bool:
        allowed = [s.value for s in from_statuses]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE conges
                SET statut_approbation=%s,
                    valide_par=%s,
                    valide_le=IF(%s IS NULL, NULL, NOW()),
                    commentaire=%s
                WHERE id=%s AND statut_approbation IN ({placeholders(len(allowed))})
                """,
                (approval.value, decided_by, decided_by, comment, int(absence_id), *allowed),
            )
            return cur.rowcount > 0

    def set_status_for_week(self, *, employee_id: int, year: int, iso_week: int, status: WeekStatus) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE conges
                SET validation_status=%s
                WHERE salarie_id=%s AND annee=%s AND semaine=%s
                """,
                (status.value, int(employee_id), int(year), int(iso_week)),
            )
            return int(cur.rowcount)
