from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from types import MappingProxyType
from typing import Iterable, Mapping

from ..core.enums import AbsenceType, Weekday

ZERO = Decimal("0")


@dataclass(frozen=True)
class WeeklyTotals:
    """Accounting of one employee's week.

    ``overtime_hours`` is net of the hours recovered against the carried-over
    deficit; ``cumulative_owed`` is the deficit carried into the next week.
    """

    worked_hours: Decimal
    absence_hours: Mapping[AbsenceType, Decimal]
    payable_absence_hours: Decimal
    sick_hours: Decimal
    holiday_hours: Decimal
    total_hours: Decimal
    normal_hours: Decimal
    overtime_hours: Decimal
    owed_hours: Decimal
    carried_over_owed: Decimal = ZERO
    recovered_hours: Decimal = ZERO
    cumulative_owed: Decimal = ZERO
    hours_by_day: Mapping[Weekday, Decimal] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True)
class PeriodTotals:
    """Sum of independently computed weekly totals."""

    weeks: int = 0
    total_hours: Decimal = ZERO
    overtime_hours: Decimal = ZERO
    owed_hours: Decimal = ZERO
    recovered_hours: Decimal = ZERO


def sum_week_totals(totals: Iterable[WeeklyTotals]) -> PeriodTotals:
    out = PeriodTotals()
    for t in totals:
        out = PeriodTotals(
            weeks=out.weeks + 1,
            total_hours=out.total_hours + t.total_hours,
            overtime_hours=out.overtime_hours + t.overtime_hours,
            owed_hours=out.owed_hours + t.owed_hours,
            recovered_hours=out.recovered_hours + t.recovered_hours,
        )
    return out
