from __future__ import annotations

import logging
from datetime import timedelta
from decimal import Decimal
from typing import Any, Iterable, Optional, Sequence

from ..absences.model import merged_week_flags
from ..absences.repository import AbsenceRepository
from ..common.validators import optional_text
from ..common.weeks import monday_of, validate_week
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import Weekday, WeekStatus
from ..core.exceptions import AuthorizationError, ConflictWithAbsenceError, LockedError, NotFoundError, ValidationError
from ..holidays.repository import HolidayRepository
from ..users.model import SessionUser
from ..validations.model import ensure_editable, status_of
from ..validations.repository import WeekValidationRepository
from .model import HourEntry, normalize_day_hours
from .repository import HourRepository

logger = logging.getLogger(__name__)


def aggregate_hours_by_day(entries: Iterable[HourEntry]) -> dict[Weekday, Decimal]:
    totals = {d: Decimal("0") for d in Weekday}
    for e in entries:
        for d in Weekday:
            totals[d] += e.hours_on(d)
    return totals


class HourLedgerService:
    """Use cases around hour entries (saisie des heures)."""

    def __init__(
        self,
        hours: HourRepository,
        absences: AbsenceRepository,
        validations: WeekValidationRepository,
        holidays: HolidayRepository,
    ):
        self._hours = hours
        self._absences = absences
        self._validations = validations
        self._holidays = holidays

    @staticmethod
    def _target_employee(current_user: SessionUser, employee_id: Optional[int]) -> int:
        if employee_id is None or int(employee_id) == current_user.user_id:
            return current_user.user_id
        if not current_user.is_manager:
            raise AuthorizationError("Vous ne pouvez saisir que vos propres heures")
        return int(employee_id)

    def upsert_entry(
        self,
        current_user: SessionUser,
        *,
        project_id: int,
        task_id: int,
        year: int,
        iso_week: int,
        day_hours: Any,
        comment: Optional[str] = None,
        employee_id: Optional[int] = None,
    ) -> HourEntry:
        target = self._target_employee(current_user, employee_id)
        key = validate_week(year, iso_week)
        hours = normalize_day_hours(day_hours)

        validation = self._validations.get(employee_id=target, year=key.year, iso_week=key.week)
        status = ensure_editable(validation, is_manager=current_user.is_manager)

        monday = monday_of(key.year, key.week)
        for h in self._holidays.list_between(monday, monday + timedelta(days=6)):
            day = Weekday(h.holiday_date.weekday())
            if hours[int(day)] > 0:
                raise ValidationError(f"Le {h.holiday_date.strftime('%d/%m/%Y')} est férié ({h.label})")

        records = self._absences.list_for_week(employee_id=target, year=key.year, iso_week=key.week)
        for day_absence in merged_week_flags(records):
            if day_absence.is_absent and hours[int(day_absence.day)] > 0:
                raise ConflictWithAbsenceError(
                    f"Absence ({day_absence.absence_type.label}) déjà déclarée le {day_absence.day.column}"
                )

        entry = self._hours.upsert(
            employee_id=target,
            project_id=int(project_id),
            task_id=int(task_id),
            year=key.year,
            iso_week=key.week,
            day_hours=hours,
            comment=optional_text(comment),
            status=status,
        )
        logger.info("Hours saved for employee %s on %s (entry %s)", target, key, entry.entry_id)
        return entry

    def delete_entry(self, current_user: SessionUser, entry_id: int) -> None:
        entry = self._hours.get_by_id(int(entry_id))
        if not entry:
            raise NotFoundError("Pointage introuvable")
        if entry.employee_id != current_user.user_id and not current_user.is_manager:
            raise AuthorizationError("Vous ne pouvez supprimer que vos propres pointages")

        validation = self._validations.get(employee_id=entry.employee_id, year=entry.year, iso_week=entry.iso_week)
        if status_of(validation) not in {WeekStatus.DRAFT, WeekStatus.REJECTED}:
            raise LockedError("Seuls les pointages d'une semaine en brouillon peuvent être supprimés")

        self._hours.delete(entry_id=entry.entry_id)
        logger.info("Entry %s deleted by user %s", entry.entry_id, current_user.user_id)

    def entries_for(self, employee_id: int, year: int, iso_week: int) -> Sequence[HourEntry]:
        key = validate_week(year, iso_week)
        return self._hours.list_for_week(employee_id=int(employee_id), year=key.year, iso_week=key.week)

    def list_entries(
        self,
        current_user: SessionUser,
        *,
        employee_id: Optional[int] = None,
        project_id: Optional[int] = None,
        year: Optional[int] = None,
        iso_week: Optional[int] = None,
        status: Optional[WeekStatus] = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Sequence[HourEntry]:
        if not current_user.is_manager:
            employee_id = current_user.user_id
        return self._hours.list_filtered(
            employee_id=employee_id,
            project_id=project_id,
            year=year,
            iso_week=iso_week,
            status=status,
            limit=limit,
        )
