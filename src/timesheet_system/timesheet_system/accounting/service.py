from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from typing import Iterable, Optional

from ..absences.repository import AbsenceRepository
from ..common.weeks import WeekKey, monday_of, validate_week
from ..holidays.repository import HolidayRepository
from ..hours.repository import HourRepository
from .calculator.base import WeeklyCalculator
from .calculator.standard_calculator import StandardWeeklyCalculator
from .model import ZERO, PeriodTotals, WeeklyTotals, sum_week_totals


class WeeklyAccountingService:
    """Loads a week's rows and hands them to the calculator.

    Every view (own week, manager table, validation queue) goes through
    ``totals_for`` so they all agree on the figures.
    """

    def __init__(
        self,
        hours: HourRepository,
        absences: AbsenceRepository,
        holidays: HolidayRepository,
        *,
        calculator: Optional[WeeklyCalculator] = None,
    ):
        self._hours = hours
        self._absences = absences
        self._holidays = holidays
        self._calculator = calculator or StandardWeeklyCalculator()

    def totals_for(self, employee_id: int, year: int, iso_week: int, *, carried_over_owed: Decimal = ZERO) -> WeeklyTotals:
        key = validate_week(year, iso_week)
        monday = monday_of(key.year, key.week)
        return self._calculator.compute(
            self._hours.list_for_week(employee_id=int(employee_id), year=key.year, iso_week=key.week),
            self._absences.list_for_week(employee_id=int(employee_id), year=key.year, iso_week=key.week),
            holidays=self._holidays.list_between(monday, monday + timedelta(days=6)),
            carried_over_owed=carried_over_owed,
        )

    def summarize(self, employee_id: int, weeks: Iterable[WeekKey]) -> PeriodTotals:
        return sum_week_totals(self.totals_for(employee_id, k.year, k.week) for k in weeks)
