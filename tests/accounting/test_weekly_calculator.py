from datetime import date
from decimal import Decimal

import pytest

from src.timesheet_system.timesheet_system.absences.model import AbsenceRecord
from src.timesheet_system.timesheet_system.accounting.calculator.standard_calculator import (
    StandardWeeklyCalculator,
    compute_week_totals,
)
from src.timesheet_system.timesheet_system.accounting.model import sum_week_totals
from src.timesheet_system.timesheet_system.common.weeks import WeekKey
from src.timesheet_system.timesheet_system.core.enums import AbsenceType, Weekday
from src.timesheet_system.timesheet_system.holidays.model import Holiday
from src.timesheet_system.timesheet_system.hours.model import HourEntry


def _entry(hours, task_id=1, week=10):
    values = [Decimal(str(h)) for h in hours] + [Decimal("0")] * (7 - len(hours))
    return HourEntry(
        entry_id=task_id,
        employee_id=1,
        project_id=1,
        task_id=task_id,
        year=2025,
        iso_week=week,
        day_hours=tuple(values),
    )


def _absence(kind, flags, week=10):
    return AbsenceRecord(
        absence_id=1,
        employee_id=1,
        year=2025,
        iso_week=week,
        absence_type=kind,
        flags=tuple(bool(f) for f in flags),
    )


def test_scenario_a_forty_hours():
    t = compute_week_totals([_entry([8, 8, 8, 8, 8])], [])

    assert t.worked_hours == Decimal("40")
    assert t.total_hours == Decimal("40")
    assert t.normal_hours == Decimal("35")
    assert t.overtime_hours == Decimal("5")
    assert t.owed_hours == Decimal("0")


def test_scenario_b_paid_leave_completes_the_week():
    t = compute_week_totals([_entry([7, 7, 7, 7, 0])], [_absence(AbsenceType.PAID_LEAVE, [0, 0, 0, 0, 1])])

    assert t.worked_hours == Decimal("28")
    assert t.payable_absence_hours == Decimal("7")
    assert t.total_hours == Decimal("35")
    assert t.normal_hours == Decimal("35")
    assert t.overtime_hours == Decimal("0")
    assert t.owed_hours == Decimal("0")


@pytest.mark.parametrize("total", ["0", "12.5", "34.9", "35", "35.1", "48", "70"])
def test_threshold_arithmetic(total):
    t = compute_week_totals([_entry([total])], [])
    total = Decimal(total)

    if total >= 35:
        assert t.normal_hours + t.overtime_hours == total
        assert t.owed_hours == 0
    else:
        assert t.normal_hours == total
        assert t.overtime_hours == 0
        assert t.owed_hours == Decimal("35") - total
    assert not (t.overtime_hours > 0 and t.owed_hours > 0)


def test_exact_decimal_no_rounding():
    t = compute_week_totals([_entry(["7.25", "7.25", "7.25", "7.25", "7.1"])], [])
    assert t.total_hours == Decimal("36.10")
    assert t.overtime_hours == Decimal("1.10")


def test_sick_days_add_to_owed_hours():
    t = compute_week_totals([_entry([7, 7, 7, 0, 0])], [_absence(AbsenceType.SICK, [0, 0, 0, 1, 1])])

    assert t.total_hours == Decimal("21")
    assert t.sick_hours == Decimal("14")
    assert t.owed_hours == Decimal("14") + Decimal("14")


def test_off_site_counts_as_worked_and_unpaid_is_tracked_only():
    t = compute_week_totals(
        [_entry([7, 7, 7, 0, 0])],
        [_absence(AbsenceType.OFF_SITE, [0, 0, 0, 1, 0]), _absence(AbsenceType.UNPAID, [0, 0, 0, 0, 1])],
    )

    assert t.absence_hours[AbsenceType.OFF_SITE] == Decimal("7")
    assert t.absence_hours[AbsenceType.UNPAID] == Decimal("7")
    assert t.absence_hours[AbsenceType.OTHER] == Decimal("0")
    assert t.total_hours == Decimal("28")
    assert t.owed_hours == Decimal("7")


def test_holiday_excluded_from_deficit():
    may_8 = Holiday(holiday_id=1, holiday_date=date(2025, 5, 8), label="Victoire 1945")
    t = compute_week_totals([_entry([7, 7, 7, 0, 7], week=19)], [], holidays=[may_8])

    assert t.total_hours == Decimal("28")
    assert t.holiday_hours == Decimal("7")
    assert t.owed_hours == Decimal("0")


def test_weekend_holiday_does_not_count():
    nov_1 = Holiday(holiday_id=1, holiday_date=date(2025, 11, 1), label="Toussaint")
    t = compute_week_totals([_entry([7, 7, 7, 7, 0], week=44)], [], holidays=[nov_1])

    assert t.holiday_hours == Decimal("0")
    assert t.owed_hours == Decimal("7")


def test_carry_over_recovered_from_overtime():
    t = compute_week_totals([_entry([8, 8, 8, 8, 8])], [], carried_over_owed=Decimal("3"))

    assert t.recovered_hours == Decimal("3")
    assert t.overtime_hours == Decimal("2")
    assert t.cumulative_owed == Decimal("0")


def test_carry_over_larger_than_overtime():
    t = compute_week_totals([_entry([8, 8, 8, 8, 8])], [], carried_over_owed=Decimal("9"))

    assert t.recovered_hours == Decimal("5")
    assert t.overtime_hours == Decimal("0")
    assert t.cumulative_owed == Decimal("4")


def test_carry_over_adds_up_with_new_deficit():
    t = compute_week_totals([_entry([6, 6, 6, 6, 6])], [], carried_over_owed=Decimal("2"))

    assert t.owed_hours == Decimal("5")
    assert t.recovered_hours == Decimal("0")
    assert t.cumulative_owed == Decimal("7")


def test_hours_by_day_is_read_only():
    t = compute_week_totals([_entry([8, 8]), _entry([1, 0, 0, 0, 0, 2], task_id=2)], [])

    assert t.hours_by_day[Weekday.MONDAY] == Decimal("9")
    assert t.hours_by_day[Weekday.SATURDAY] == Decimal("2")
    with pytest.raises(TypeError):
        t.hours_by_day[Weekday.MONDAY] = Decimal("0")


def test_custom_threshold_strategy():
    calc = StandardWeeklyCalculator(threshold=Decimal("39"))
    t = calc.compute([_entry([8, 8, 8, 8, 8])], [])

    assert t.normal_hours == Decimal("39")
    assert t.overtime_hours == Decimal("1")


def test_sum_of_independent_weeks():
    w9 = compute_week_totals([_entry([8, 8, 8, 8, 8], week=9)], [])
    w10 = compute_week_totals([_entry([6, 6, 6, 6, 6])], [])

    period = sum_week_totals([w9, w10])
    assert period.weeks == 2
    assert period.total_hours == Decimal("70")
    assert period.overtime_hours == Decimal("5")
    assert period.owed_hours == Decimal("5")


def test_totals_for_loads_rows_and_holidays(container, holidays_repo, employee, log_week):
    holidays_repo.upsert(holiday_date=date(2025, 5, 8), label="Victoire 1945")
    log_week(employee, 2025, 19, [8, 8, 8, 0, 8])

    t = container.accounting_service.totals_for(employee.user_id, 2025, 19)
    assert t.total_hours == Decimal("32")
    assert t.overtime_hours == Decimal("0")
    assert t.owed_hours == Decimal("0")


def test_summarize_adds_weeks_independently(container, employee, log_week):
    log_week(employee, 2025, 10, [8, 8, 8, 8, 8])
    log_week(employee, 2025, 11, [6, 6, 6, 6, 6])

    period = container.accounting_service.summarize(
        employee.user_id, [WeekKey(2025, 10), WeekKey(2025, 11)]
    )
    assert period.weeks == 2
    assert period.total_hours == Decimal("70")
    assert period.overtime_hours == Decimal("5")
    assert period.owed_hours == Decimal("5")
    assert period.recovered_hours == Decimal("0")
