from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from ..absences.model import AbsenceRecord, DayAbsence, merged_week_flags
from ..absences.repository import AbsenceRepository
from ..accounting.model import WeeklyTotals
from ..accounting.service import WeeklyAccountingService
from ..common.validators import optional_text
from ..common.weeks import WeekKey, validate_week, week_days
from ..core.enums import WeekStatus
from ..core.exceptions import (
    AlreadySubmittedError,
    AlreadyValidatedError,
    AuthorizationError,
    EmptyWeekError,
    InvalidTransitionError,
    LockedError,
    MissingCommentError,
    NotFoundError,
    NotSubmittedError,
)
from ..holidays.model import Holiday
from ..holidays.repository import HolidayRepository
from ..hours.model import HourEntry
from ..hours.repository import HourRepository
from ..users.model import SessionUser
from .model import WeekValidation
from .repository import WeekValidationRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WeekView:
    """Everything the weekly timesheet screen shows for one employee."""

    employee_id: int
    key: WeekKey
    days: tuple[date, ...]
    entries: Sequence[HourEntry]
    absences: Sequence[AbsenceRecord]
    day_absences: tuple[DayAbsence, ...]
    holidays: Sequence[Holiday]
    validation: WeekValidation
    totals: WeeklyTotals

    @property
    def monday(self) -> date:
        return self.days[0]

    @property
    def sunday(self) -> date:
        return self.days[-1]


class ValidationService:
    """Week lifecycle: Brouillon -> Soumis -> Valide / Rejete."""

    def __init__(
        self,
        validations: WeekValidationRepository,
        hours: HourRepository,
        absences: AbsenceRepository,
        holidays: HolidayRepository,
        accounting: WeeklyAccountingService,
    ):
        self._validations = validations
        self._hours = hours
        self._absences = absences
        self._holidays = holidays
        self._accounting = accounting

    @staticmethod
    def _require_manager(current_user: SessionUser) -> None:
        if not current_user.is_manager:
            raise AuthorizationError("Action réservée aux managers")

    def _cascade(self, employee_id: int, key: WeekKey, status: WeekStatus) -> None:
        n_hours = self._hours.set_status_for_week(employee_id=employee_id, year=key.year, iso_week=key.week, status=status)
        n_abs = self._absences.set_status_for_week(
            employee_id=employee_id, year=key.year, iso_week=key.week, status=status
        )
        logger.debug("Status %s mirrored on %d entries and %d absences", status.value, n_hours, n_abs)

    def get_status(self, employee_id: int, year: int, iso_week: int) -> WeekValidation:
        key = validate_week(year, iso_week)
        v = self._validations.get(employee_id=int(employee_id), year=key.year, iso_week=key.week)
        return v or WeekValidation(employee_id=int(employee_id), year=key.year, iso_week=key.week)

    def submit(self, current_user: SessionUser, year: int, iso_week: int) -> WeekValidation:
        key = validate_week(year, iso_week)
        employee_id = current_user.user_id

        current = self.get_status(employee_id, key.year, key.week)
        if current.status == WeekStatus.SUBMITTED:
            raise AlreadySubmittedError("Semaine déjà soumise")
        if current.status == WeekStatus.VALIDATED:
            raise LockedError("Semaine déjà validée")

        totals = self._accounting.totals_for(employee_id, key.year, key.week)
        if totals.total_hours <= 0:
            raise EmptyWeekError("Impossible de soumettre une semaine sans heures")

        ok = self._validations.submit(
            employee_id=employee_id,
            year=key.year,
            iso_week=key.week,
            total_hours=totals.total_hours,
            owed_hours=totals.owed_hours,
        )
        if not ok:
            raise AlreadySubmittedError("Semaine déjà soumise")

        self._cascade(employee_id, key, WeekStatus.SUBMITTED)
        logger.info("Week %s submitted by employee %s (%s h)", key, employee_id, totals.total_hours)
        return self.get_status(employee_id, key.year, key.week)

    def _decide(
        self,
        current_user: SessionUser,
        employee_id: int,
        key: WeekKey,
        status: WeekStatus,
        comment: Optional[str],
    ) -> WeekValidation:
        current = self._validations.get(employee_id=int(employee_id), year=key.year, iso_week=key.week)
        if not current:
            raise NotFoundError("Aucune soumission pour cette semaine")
        if current.status == WeekStatus.VALIDATED:
            raise AlreadyValidatedError("Semaine déjà validée")
        if current.status != WeekStatus.SUBMITTED:
            raise NotSubmittedError("La semaine n'est pas soumise")

        ok = self._validations.decide(
            employee_id=int(employee_id),
            year=key.year,
            iso_week=key.week,
            status=status,
            decided_by=current_user.user_id,
            comment=comment,
            from_statuses=(WeekStatus.SUBMITTED,),
        )
        if not ok:
            raise NotSubmittedError("La semaine n'est plus en attente de validation")

        self._cascade(int(employee_id), key, status)
        logger.info("Week %s of employee %s set to %s by %s", key, employee_id, status.value, current_user.user_id)
        return self.get_status(employee_id, key.year, key.week)

    def validate(
        self,
        current_user: SessionUser,
        employee_id: int,
        year: int,
        iso_week: int,
        comment: Optional[str] = None,
    ) -> WeekValidation:
        self._require_manager(current_user)
        key = validate_week(year, iso_week)
        return self._decide(current_user, employee_id, key, WeekStatus.VALIDATED, optional_text(comment))

    def reject(
        self,
        current_user: SessionUser,
        employee_id: int,
        year: int,
        iso_week: int,
        comment: Optional[str],
    ) -> WeekValidation:
        self._require_manager(current_user)
        text = optional_text(comment)
        if not text:
            raise MissingCommentError("Veuillez indiquer un motif de rejet")
        key = validate_week(year, iso_week)
        return self._decide(current_user, employee_id, key, WeekStatus.REJECTED, text)

    def reopen(self, current_user: SessionUser, employee_id: int, year: int, iso_week: int) -> WeekValidation:
        self._require_manager(current_user)
        key = validate_week(year, iso_week)

        current = self._validations.get(employee_id=int(employee_id), year=key.year, iso_week=key.week)
        if not current:
            raise NotFoundError("Aucune soumission pour cette semaine")
        if current.status == WeekStatus.DRAFT:
            raise InvalidTransitionError("La semaine est déjà en brouillon")

        if not self._validations.reset_to_draft(employee_id=int(employee_id), year=key.year, iso_week=key.week):
            raise InvalidTransitionError("La semaine est déjà en brouillon")

        self._cascade(int(employee_id), key, WeekStatus.DRAFT)
        logger.warning(
            "Week %s of employee %s reopened from %s by %s",
            key,
            employee_id,
            current.status.value,
            current_user.user_id,
        )
        return self.get_status(employee_id, key.year, key.week)

    def week_view(
        self,
        current_user: SessionUser,
        year: int,
        iso_week: int,
        employee_id: Optional[int] = None,
    ) -> WeekView:
        key = validate_week(year, iso_week)
        target = current_user.user_id if employee_id is None else int(employee_id)
        if target != current_user.user_id and not current_user.is_manager:
            raise AuthorizationError("Vous ne pouvez consulter que vos propres semaines")

        days = week_days(key.year, key.week)
        entries = self._hours.list_for_week(employee_id=target, year=key.year, iso_week=key.week)
        absences = self._absences.list_for_week(employee_id=target, year=key.year, iso_week=key.week)
        holidays = self._holidays.list_between(days[0], days[-1])

        return WeekView(
            employee_id=target,
            key=key,
            days=days,
            entries=entries,
            absences=absences,
            day_absences=merged_week_flags(absences),
            holidays=holidays,
            validation=self.get_status(target, key.year, key.week),
            totals=self._accounting.totals_for(target, key.year, key.week),
        )
