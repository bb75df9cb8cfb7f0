from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import WeekStatus
from .model import DayHours, HourEntry


class HourRepository(Protocol):
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
        """Atomic insert-or-update keyed by the full composite identity."""

        raise NotImplementedError

    def get_by_id(self, entry_id: int) -> Optional[HourEntry]:
        raise NotImplementedError

    def list_for_week(self, *, employee_id: int, year: int, iso_week: int) -> Sequence[HourEntry]:
        raise NotImplementedError

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
        raise NotImplementedError

    def employee_ids_for_week(self, *, year: int, iso_week: int) -> set[int]:
        raise NotImplementedError

    def delete(self, *, entry_id: int) -> bool:
        raise NotImplementedError

    def set_status_for_week(self, *, employee_id: int, year: int, iso_week: int, status: WeekStatus) -> int:
        """Re-sync the status mirror of every row of the week; returns affected rows."""

        raise NotImplementedError
