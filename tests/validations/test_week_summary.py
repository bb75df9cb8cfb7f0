from decimal import Decimal

import pytest

from src.timesheet_system.timesheet_system.accounting.calculator.standard_calculator import compute_week_totals
from src.timesheet_system.timesheet_system.common.weeks import WeekKey
from src.timesheet_system.timesheet_system.core.enums import AbsenceType, WeekStatus
from src.timesheet_system.timesheet_system.core.exceptions import AuthorizationError
from src.timesheet_system.timesheet_system.validations.summary import EmployeeWeekRow, summarize_week


def test_summary_lists_every_employee_of_the_week(container, employee, other_employee, manager, log_week):
    log_week(employee, 2025, 10, [8, 8, 8, 8, 8], project_id=1)
    log_week(employee, 2025, 10, [2], project_id=2, task_id=3)
    log_week(other_employee, 2025, 10, [6, 6, 6, 6, 6])
    container.validation_service.submit(other_employee, 2025, 10)
    container.absence_service.set_absence(
        manager, year=2025, iso_week=10, absence_type=AbsenceType.PAID_LEAVE, weekday_flags=[1, 0, 0, 0, 0]
    )
    log_week(employee, 2025, 11, [7, 7, 7, 7, 7])

    summary = container.summary_service.week_summary(manager, 2025, 10)

    assert [r.full_name for r in summary.rows] == ["Jean Dupont", "Marie Martin", "Paul Manager"]
    jean, marie, paul = summary.rows
    assert jean.totals.total_hours == Decimal("42")
    assert jean.totals.overtime_hours == Decimal("7")
    assert dict(jean.hours_by_project) == {1: Decimal("40"), 2: Decimal("2")}
    assert jean.status == WeekStatus.DRAFT
    assert marie.status == WeekStatus.SUBMITTED
    assert marie.totals.owed_hours == Decimal("5")
    assert paul.totals.total_hours == Decimal("7")
    assert paul.hours_by_project == {}

    assert summary.status_counts[WeekStatus.DRAFT] == 2
    assert summary.status_counts[WeekStatus.SUBMITTED] == 1
    assert summary.status_counts[WeekStatus.VALIDATED] == 0
    assert summary.total_hours == Decimal("79")
    assert summary.overtime_hours == Decimal("7")
    assert summary.owed_hours == Decimal("33")


def test_summary_of_an_empty_week(container, manager):
    summary = container.summary_service.week_summary(manager, 2025, 30)
    assert summary.rows == ()
    assert summary.total_hours == 0
    assert set(summary.status_counts.values()) == {0}


def test_summary_is_manager_only(container, employee):
    with pytest.raises(AuthorizationError):
        container.summary_service.week_summary(employee, 2025, 10)


def test_summarize_week_sorts_by_name_then_id():
    totals = compute_week_totals([], [])
    rows = [
        EmployeeWeekRow(3, "bernard", WeekStatus.DRAFT, totals, {}),
        EmployeeWeekRow(2, "Alice", WeekStatus.REJECTED, totals, {}),
        EmployeeWeekRow(1, "Bernard", WeekStatus.DRAFT, totals, {}),
    ]
    summary = summarize_week(WeekKey(2025, 10), rows)
    assert [r.employee_id for r in summary.rows] == [2, 1, 3]
    assert summary.status_counts[WeekStatus.REJECTED] == 1
    assert summary.owed_hours == Decimal("105")
