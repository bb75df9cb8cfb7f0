from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from types import MappingProxyType
from typing import Iterable, Mapping

from ..absences.repository import AbsenceRepository
from ..accounting.model import ZERO, WeeklyTotals
from ..accounting.service import WeeklyAccountingService
from ..common.weeks import WeekKey, validate_week
from ..core.enums import WeekStatus
from ..core.exceptions import AuthorizationError
from ..hours.repository import HourRepository
from ..users.model import SessionUser
from ..users.repository import UserRepository
from .model import status_of
from .repository import WeekValidationRepository


@dataclass(frozen=True)
class EmployeeWeekRow:
    """One line of the manager's weekly table."""

    employee_id: int
    full_name: str
    status: WeekStatus
    totals: WeeklyTotals
    hours_by_project: Mapping[int, Decimal]


@dataclass(frozen=True)
class WeekSummary:
    key: WeekKey
    rows: tuple[EmployeeWeekRow, ...]
    status_counts: Mapping[WeekStatus, int]
    total_hours: Decimal
    overtime_hours: Decimal
    owed_hours: Decimal


def summarize_week(key: WeekKey, rows: Iterable[EmployeeWeekRow]) -> WeekSummary:
    """Fold employee rows into the week table: rows by name, then id; every status counted."""

    ordered = tuple(sorted(rows, key=lambda r: (r.full_name.casefold(), r.employee_id)))
    counts = {s: 0 for s in WeekStatus}
    total = overtime = owed = ZERO
    for row in ordered:
        counts[row.status] += 1
        total += row.totals.total_hours
        overtime += row.totals.overtime_hours
        owed += row.totals.owed_hours
    return WeekSummary(
        key=key,
        rows=ordered,
        status_counts=MappingProxyType(counts),
        total_hours=total,
        overtime_hours=overtime,
        owed_hours=owed,
    )


class WeeklySummaryService:
    """Read-only: every employee with rows or a validation for one week."""

    def __init__(
        self,
        hours: HourRepository,
        absences: AbsenceRepository,
        validations: WeekValidationRepository,
        accounting: WeeklyAccountingService,
        users: UserRepository,
    ):
        self._hours = hours
        self._absences = absences
        self._validations = validations
        self._accounting = accounting
        self._users = users

    def week_summary(self, current_user: SessionUser, year: int, iso_week: int) -> WeekSummary:
        if not current_user.is_manager:
            raise AuthorizationError("Action réservée aux managers")
        key = validate_week(year, iso_week)

        validations = {v.employee_id: v for v in self._validations.list_for_week(year=key.year, iso_week=key.week)}
        employee_ids = (
            set(validations)
            | self._hours.employee_ids_for_week(year=key.year, iso_week=key.week)
            | self._absences.employee_ids_for_week(year=key.year, iso_week=key.week)
        )
        names = self._users.get_names(employee_ids)

        rows = []
        for employee_id in employee_ids:
            by_project: dict[int, Decimal] = {}
            for entry in self._hours.list_for_week(employee_id=employee_id, year=key.year, iso_week=key.week):
                by_project[entry.project_id] = by_project.get(entry.project_id, ZERO) + entry.total_hours
            rows.append(
                EmployeeWeekRow(
                    employee_id=employee_id,
                    full_name=names.get(employee_id, f"#{employee_id}"),
                    status=status_of(validations.get(employee_id)),
                    totals=self._accounting.totals_for(employee_id, key.year, key.week),
                    hours_by_project=MappingProxyType(by_project),
                )
            )
        return summarize_week(key, rows)
