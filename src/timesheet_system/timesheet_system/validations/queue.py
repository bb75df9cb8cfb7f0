from __future__ import annotations

from dataclasses import dataclass
from itertools import groupby
from operator import attrgetter
from typing import Iterable

from ..accounting.model import PeriodTotals, WeeklyTotals, sum_week_totals
from ..accounting.service import WeeklyAccountingService
from ..common.weeks import WeekKey
from ..core.enums import WeekStatus
from ..core.exceptions import AuthorizationError
from ..users.model import SessionUser
from ..users.repository import UserRepository
from .model import WeekValidation
from .repository import WeekValidationRepository


@dataclass(frozen=True)
class PendingWeek:
    validation: WeekValidation
    totals: WeeklyTotals

    @property
    def key(self) -> WeekKey:
        return self.validation.key


@dataclass(frozen=True)
class PendingEmployeeGroup:
    employee_id: int
    full_name: str
    weeks: tuple[PendingWeek, ...]
    totals: PeriodTotals

    @property
    def oldest(self) -> WeekKey:
        return self.weeks[0].key


def group_pending(weeks: Iterable[PendingWeek], names: dict[int, str]) -> tuple[PendingEmployeeGroup, ...]:
    """Fold pending weeks into one group per employee.

    Weeks inside a group are oldest first; groups are ordered by their
    oldest pending week, then by employee id.
    """

    by_employee = sorted(weeks, key=lambda p: (p.validation.employee_id, p.key))
    groups = []
    for employee_id, items in groupby(by_employee, key=lambda p: p.validation.employee_id):
        pending = tuple(items)
        groups.append(
            PendingEmployeeGroup(
                employee_id=employee_id,
                full_name=names.get(employee_id, f"#{employee_id}"),
                weeks=pending,
                totals=sum_week_totals(p.totals for p in pending),
            )
        )
    return tuple(sorted(groups, key=attrgetter("oldest", "employee_id")))


class ValidationQueueService:
    """Read-only: the weeks waiting for a manager decision."""

    def __init__(
        self,
        validations: WeekValidationRepository,
        accounting: WeeklyAccountingService,
        users: UserRepository,
    ):
        self._validations = validations
        self._accounting = accounting
        self._users = users

    def pending_for_manager(self, current_user: SessionUser) -> tuple[PendingEmployeeGroup, ...]:
        if not current_user.is_manager:
            raise AuthorizationError("Action réservée aux managers")

        rows = self._validations.list_by_status(WeekStatus.SUBMITTED)
        pending = [
            PendingWeek(validation=v, totals=self._accounting.totals_for(v.employee_id, v.year, v.iso_week))
            for v in rows
        ]
        names = self._users.get_names({v.employee_id for v in rows})
        return group_pending(pending, names)
