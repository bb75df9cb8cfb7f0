from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import AbsenceType, WeekStatus
from .model import AbsenceRecord, WeekdayFlags


class AbsenceRepository(Protocol):
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
        """Atomic insert-or-update keyed by (employee, year, week, type)."""

        raise NotImplementedError

    def get_by_id(self, absence_id: int) -> Optional[AbsenceRecord]:
        raise NotImplementedError

    def list_for_week(self, *, employee_id: int, year: int, iso_week: int) -> Sequence[AbsenceRecord]:
        raise NotImplementedError

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
        raise NotImplementedError

    def employee_ids_for_week(self, *, year: int, iso_week: int) -> set[int]:
        raise NotImplementedError

    def delete(self, *, absence_id: int) -> bool:
        raise NotImplementedError

    def delete_for_key(self, *, employee_id: int, year: int, iso_week: int, absence_type: AbsenceType) -> bool:
        raise NotImplementedError

    def set_approval(
        self,
        *,
        absence_id: int,
        approval: WeekStatus,
        from_statuses: Sequence[WeekStatus],
        decided_by: Optional[int] = None,
        comment: Optional[str] = None,
    ) -> bool:
        """Conditional decision on one leave; False when its approval is not in ``from_statuses``."""

        raise NotImplementedError

    def set_status_for_week(self, *, employee_id: int, year: int, iso_week: int, status: WeekStatus) -> int:
        """Mirror a week transition; leaves the approval columns untouched."""

        raise NotImplementedError
