from __future__ import annotations

from decimal import Decimal
from types import MappingProxyType
from typing import Iterable

from ...absences.model import AbsenceRecord
from ...core.constants import HOURS_PER_ABSENCE_DAY, WEEKLY_NORMAL_THRESHOLD
from ...core.enums import AbsenceCategory, AbsenceType
from ...holidays.model import Holiday
from ...hours.model import HourEntry
from ...hours.service import aggregate_hours_by_day
from ..model import ZERO, WeeklyTotals
from .base import WeeklyCalculator


class StandardWeeklyCalculator(WeeklyCalculator):
    """35h rule.

    Paid leave and off-site days count as worked, sick days add to the
    deficit, other absences are reported only. A public holiday on a
    workday that is not flagged absent lowers the deficit by one day.
    Leaves rejected on their own are left out.
    """

    def __init__(
        self,
        threshold: Decimal = WEEKLY_NORMAL_THRESHOLD,
        hours_per_absence_day: Decimal = HOURS_PER_ABSENCE_DAY,
    ):
        self.threshold = Decimal(threshold)
        self.hours_per_absence_day = Decimal(hours_per_absence_day)

    def compute(
        self,
        entries: Iterable[HourEntry],
        absences: Iterable[AbsenceRecord],
        *,
        holidays: Iterable[Holiday] = (),
        carried_over_owed: Decimal = ZERO,
    ) -> WeeklyTotals:
        by_day = aggregate_hours_by_day(entries)
        worked = sum(by_day.values(), ZERO)

        absent_days = set()
        absence_hours = {t: ZERO for t in AbsenceType}
        for rec in absences:
            if not rec.counts_in_accounting:
                continue
            absence_hours[rec.absence_type] += rec.days_count * self.hours_per_absence_day
            absent_days.update(rec.flagged_days)

        payable = sum((h for t, h in absence_hours.items() if t.category == AbsenceCategory.PAYABLE), ZERO)
        sick = sum((h for t, h in absence_hours.items() if t.category == AbsenceCategory.SICK), ZERO)

        holiday_days = {h.weekday for h in holidays if h.weekday.is_workday} - absent_days
        holiday_hours = len(holiday_days) * self.hours_per_absence_day

        total = worked + payable
        normal = min(total, self.threshold)
        overtime = max(ZERO, total - self.threshold)
        owed = max(ZERO, self.threshold - total - holiday_hours) + sick

        carry = max(ZERO, Decimal(carried_over_owed))
        recovered = min(overtime, carry)

        return WeeklyTotals(
            worked_hours=worked,
            absence_hours=MappingProxyType(absence_hours),
            payable_absence_hours=payable,
            sick_hours=sick,
            holiday_hours=holiday_hours,
            total_hours=total,
            normal_hours=normal,
            overtime_hours=overtime - recovered,
            owed_hours=owed,
            carried_over_owed=carry,
            recovered_hours=recovered,
            cumulative_owed=carry - recovered + owed,
            hours_by_day=MappingProxyType(by_day),
        )


_default = StandardWeeklyCalculator()


def compute_week_totals(
    entries: Iterable[HourEntry],
    absences: Iterable[AbsenceRecord],
    *,
    holidays: Iterable[Holiday] = (),
    carried_over_owed: Decimal = ZERO,
) -> WeeklyTotals:
    return _default.compute(entries, absences, holidays=holidays, carried_over_owed=carried_over_owed)
