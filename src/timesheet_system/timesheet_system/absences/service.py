from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional, Sequence

from ..common.validators import optional_text
from ..common.weeks import validate_week
from ..core.constants import DEFAULT_LIST_LIMIT, HOURS_PER_ABSENCE_DAY
from ..core.enums import WORKDAYS, AbsenceType, Weekday, WeekStatus
from ..core.exceptions import (
    AlreadySubmittedError,
    AlreadyValidatedError,
    AuthorizationError,
    ConflictWithAbsenceError,
    HoursAlreadyLoggedError,
    MissingCommentError,
    NotFoundError,
    NotSubmittedError,
)
from ..hours.repository import HourRepository
from ..hours.service import aggregate_hours_by_day
from ..users.model import SessionUser
from ..validations.model import ensure_editable
from ..validations.repository import WeekValidationRepository
from .model import (
    NO_FLAGS,
    AbsenceRecord,
    WeekdayFlags,
    ensure_record_editable,
    normalize_flags,
    parse_absence_type,
)
from .repository import AbsenceRepository

logger = logging.getLogger(__name__)


class AbsenceService:
    """Use cases around absence declarations (congés)."""

    def __init__(
        self,
        absences: AbsenceRepository,
        hours: HourRepository,
        validations: WeekValidationRepository,
        hours_per_day: Decimal = HOURS_PER_ABSENCE_DAY,
    ):
        self._absences = absences
        self._hours = hours
        self._validations = validations
        self._hours_per_day = Decimal(hours_per_day)

    @staticmethod
    def _target(current_user: SessionUser, employee_id: Optional[int]) -> int:
        if employee_id is None or int(employee_id) == current_user.user_id:
            return current_user.user_id
        if current_user.is_manager:
            return int(employee_id)
        raise AuthorizationError("Vous ne pouvez déclarer que vos propres absences")

    @staticmethod
    def _approval_after_rewrite(existing: Optional[AbsenceRecord]) -> WeekStatus:
        # a manager correcting a pending leave keeps it pending
        if existing and existing.approval == WeekStatus.SUBMITTED:
            return WeekStatus.SUBMITTED
        return WeekStatus.DRAFT

    def _check_worked_days(self, employee_id: int, year: int, iso_week: int, days: Iterable[Weekday]) -> None:
        entries = self._hours.list_for_week(employee_id=employee_id, year=year, iso_week=iso_week)
        worked = aggregate_hours_by_day(entries)
        for day in days:
            if worked[day] > 0:
                raise HoursAlreadyLoggedError(f"Des heures sont déjà saisies le {day.column}")

    def set_absence(
        self,
        current_user: SessionUser,
        *,
        year: int,
        iso_week: int,
        absence_type: Any,
        weekday_flags: Any,
        reason: Optional[str] = None,
        employee_id: Optional[int] = None,
    ) -> Optional[AbsenceRecord]:
        """Create or replace the record of one type; returns None when every flag is off."""

        target = self._target(current_user, employee_id)
        key = validate_week(year, iso_week)
        kind = parse_absence_type(absence_type)
        flags = normalize_flags(weekday_flags)

        validation = self._validations.get(employee_id=target, year=key.year, iso_week=key.week)
        status = ensure_editable(validation, is_manager=current_user.is_manager)

        week_records = self._absences.list_for_week(employee_id=target, year=key.year, iso_week=key.week)
        existing = next((r for r in week_records if r.absence_type == kind), None)
        ensure_record_editable(existing, is_manager=current_user.is_manager)

        if not any(flags):
            self._absences.delete_for_key(employee_id=target, year=key.year, iso_week=key.week, absence_type=kind)
            logger.info("Absence %s cleared for employee %s on %s", kind.value, target, key)
            return None

        flagged = [Weekday(i) for i, f in enumerate(flags) if f]
        self._check_worked_days(target, key.year, key.week, flagged)
        for other in week_records:
            if other.absence_type == kind:
                continue
            for day in flagged:
                if other.is_flagged(day):
                    raise ConflictWithAbsenceError(
                        f"Le {day.column} est déjà déclaré en absence ({other.absence_type.label})"
                    )

        record = self._absences.upsert(
            employee_id=target,
            year=key.year,
            iso_week=key.week,
            absence_type=kind,
            flags=flags,
            reason=optional_text(reason),
            status=status,
            approval=self._approval_after_rewrite(existing),
        )
        logger.info("Absence %s saved for employee %s on %s (%d days)", kind.value, target, key, record.days_count)
        return record

    def replace_week_absences(
        self,
        current_user: SessionUser,
        *,
        year: int,
        iso_week: int,
        day_types: Mapping[Weekday, Any],
        reason: Optional[str] = None,
        employee_id: Optional[int] = None,
    ) -> Sequence[AbsenceRecord]:
        """Replace every absence of the week from a per-day type map.

        Days missing from ``day_types`` (or mapped to None) are not absent.
        Days are grouped by type into one record each; types no longer used
        are removed. Records whose days do not change are left as they are,
        decision and reason included.
        """

        target = self._target(current_user, employee_id)
        key = validate_week(year, iso_week)

        grouped: dict[AbsenceType, list[bool]] = {}
        for day in WORKDAYS:
            value = day_types.get(day)
            if value is None or value == "":
                continue
            grouped.setdefault(parse_absence_type(value), list(NO_FLAGS))[int(day)] = True
        wanted: dict[AbsenceType, WeekdayFlags] = {k: tuple(v) for k, v in grouped.items()}  # type: ignore[misc]

        validation = self._validations.get(employee_id=target, year=key.year, iso_week=key.week)
        status = ensure_editable(validation, is_manager=current_user.is_manager)

        current = {
            r.absence_type: r
            for r in self._absences.list_for_week(employee_id=target, year=key.year, iso_week=key.week)
        }
        changed = sorted(
            (k for k in set(current) | set(wanted) if k not in current or current[k].flags != wanted.get(k, NO_FLAGS)),
            key=lambda k: k.value,
        )
        for kind in changed:
            ensure_record_editable(current.get(kind), is_manager=current_user.is_manager)

        new_days = [d for d in WORKDAYS if any(wanted[k][int(d)] for k in changed if k in wanted)]
        self._check_worked_days(target, key.year, key.week, new_days)

        text = optional_text(reason)
        for kind in changed:
            if kind not in wanted:
                self._absences.delete_for_key(employee_id=target, year=key.year, iso_week=key.week, absence_type=kind)
                continue
            self._absences.upsert(
                employee_id=target,
                year=key.year,
                iso_week=key.week,
                absence_type=kind,
                flags=wanted[kind],
                reason=text,
                status=status,
                approval=self._approval_after_rewrite(current.get(kind)),
            )

        logger.info(
            "Absences of employee %s on %s replaced (%s)",
            target,
            key,
            ", ".join(f"{k.value}={sum(f)}" for k, f in sorted(wanted.items(), key=lambda kv: kv[0].value)) or "none",
        )
        return self._absences.list_for_week(employee_id=target, year=key.year, iso_week=key.week)

    def records_for(self, employee_id: int, year: int, iso_week: int) -> Sequence[AbsenceRecord]:
        key = validate_week(year, iso_week)
        return self._absences.list_for_week(employee_id=int(employee_id), year=key.year, iso_week=key.week)

    def absence_days_count(self, employee_id: int, year: int, iso_week: int, absence_type: Any) -> int:
        kind = parse_absence_type(absence_type)
        return sum(
            r.days_count
            for r in self.records_for(employee_id, year, iso_week)
            if r.absence_type == kind and r.counts_in_accounting
        )

    def absence_hours(self, employee_id: int, year: int, iso_week: int, absence_type: Any) -> Decimal:
        return self.absence_days_count(employee_id, year, iso_week, absence_type) * self._hours_per_day

    def list_absences(
        self,
        current_user: SessionUser,
        *,
        employee_id: Optional[int] = None,
        year: Optional[int] = None,
        iso_week: Optional[int] = None,
        status: Optional[WeekStatus] = None,
        approval: Optional[WeekStatus] = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Sequence[AbsenceRecord]:
        if not current_user.is_manager:
            employee_id = current_user.user_id
        return self._absences.list_filtered(
            employee_id=employee_id, year=year, iso_week=iso_week, status=status, approval=approval, limit=limit
        )

    # Per-record workflow

    def _get(self, absence_id: int) -> AbsenceRecord:
        rec = self._absences.get_by_id(int(absence_id))
        if not rec:
            raise NotFoundError("Absence introuvable")
        return rec

    @staticmethod
    def _transition_error(rec: AbsenceRecord):
        if rec.approval == WeekStatus.VALIDATED:
            return AlreadyValidatedError("Absence déjà validée")
        if rec.approval == WeekStatus.SUBMITTED:
            return AlreadySubmittedError("Absence déjà soumise")
        return NotSubmittedError("Absence non soumise")

    def submit_absence(self, current_user: SessionUser, absence_id: int) -> None:
        rec = self._get(absence_id)
        if rec.employee_id != current_user.user_id:
            raise AuthorizationError("Vous ne pouvez soumettre que vos propres absences")
        ok = self._absences.set_approval(
            absence_id=rec.absence_id,
            approval=WeekStatus.SUBMITTED,
            from_statuses=(WeekStatus.DRAFT, WeekStatus.REJECTED),
        )
        if not ok:
            raise self._transition_error(rec)
        logger.info("Absence %s submitted by user %s", rec.absence_id, current_user.user_id)

    def validate_absence(self, current_user: SessionUser, absence_id: int, comment: Optional[str] = None) -> None:
        if not current_user.is_manager:
            raise AuthorizationError("Action réservée aux managers")
        rec = self._get(absence_id)
        ok = self._absences.set_approval(
            absence_id=rec.absence_id,
            approval=WeekStatus.VALIDATED,
            from_statuses=(WeekStatus.SUBMITTED,),
            decided_by=current_user.user_id,
            comment=optional_text(comment),
        )
        if not ok:
            raise self._transition_error(rec)
        logger.info("Absence %s validated by user %s", rec.absence_id, current_user.user_id)

    def reject_absence(self, current_user: SessionUser, absence_id: int, comment: Optional[str]) -> None:
        if not current_user.is_manager:
            raise AuthorizationError("Action réservée aux managers")
        text = optional_text(comment)
        if not text:
            raise MissingCommentError("Veuillez indiquer un motif de rejet")
        rec = self._get(absence_id)
        ok = self._absences.set_approval(
            absence_id=rec.absence_id,
            approval=WeekStatus.REJECTED,
            from_statuses=(WeekStatus.SUBMITTED,),
            decided_by=current_user.user_id,
            comment=text,
        )
        if not ok:
            raise self._transition_error(rec)
        logger.info("Absence %s rejected by user %s", rec.absence_id, current_user.user_id)

    def delete_absence(self, current_user: SessionUser, absence_id: int) -> None:
        rec = self._get(absence_id)
        if rec.employee_id != current_user.user_id and not current_user.is_manager:
            raise AuthorizationError("Vous ne pouvez supprimer que vos propres absences")
        ensure_record_editable(rec, is_manager=current_user.is_manager)
        validation = self._validations.get(employee_id=rec.employee_id, year=rec.year, iso_week=rec.iso_week)
        ensure_editable(validation, is_manager=current_user.is_manager)

        self._absences.delete(absence_id=rec.absence_id)
        logger.info("Absence %s deleted by user %s", rec.absence_id, current_user.user_id)
