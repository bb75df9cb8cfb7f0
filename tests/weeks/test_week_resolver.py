from datetime import date, timedelta

import pytest

from src.timesheet_system.timesheet_system.common.weeks import (
    WeekKey,
    current_week,
    iso_week_of,
    monday_of,
    next_week,
    previous_week,
    selectable_years,
    validate_week,
    week_days,
    week_label,
    weeks_in_year,
    weeks_of_year,
)
from src.timesheet_system.timesheet_system.core.exceptions import ValidationError


def test_monday_of_week_10_2025():
    assert monday_of(2025, 10) == date(2025, 3, 3)


def test_week_1_contains_first_thursday():
    # 2025-01-02 is the first Thursday; its week starts on 2024-12-30
    assert monday_of(2025, 1) == date(2024, 12, 30)
    assert monday_of(2021, 1) == date(2021, 1, 4)


@pytest.mark.parametrize("year", [2015, 2020, 2021, 2024, 2025])
def test_round_trip_over_every_week_of_the_year(year):
    for w in range(1, weeks_in_year(year) + 1):
        days = week_days(year, w)
        assert len(days) == 7
        assert days[0].weekday() == 0
        assert all(b - a == timedelta(days=1) for a, b in zip(days, days[1:]))
        assert iso_week_of(days[0]) == WeekKey(year, w)
        assert iso_week_of(days[-1]) == WeekKey(year, w)


def test_weeks_in_year_52_or_53():
    assert weeks_in_year(2020) == 53
    assert weeks_in_year(2021) == 52
    assert weeks_in_year(2015) == 53


def test_next_and_previous_roll_over_year():
    assert next_week(2020, 53) == WeekKey(2021, 1)
    assert previous_week(2021, 1) == WeekKey(2020, 53)
    assert next_week(2024, 52) == WeekKey(2025, 1)
    assert previous_week(2025, 1) == WeekKey(2024, 52)
    assert next_week(2025, 10) == WeekKey(2025, 11)


def test_current_week_uses_iso_year():
    assert current_week(date(2021, 1, 1)) == WeekKey(2020, 53)
    assert current_week(date(2024, 12, 31)) == WeekKey(2025, 1)


def test_weeks_of_year_labels():
    weeks = weeks_of_year(2025)
    assert len(weeks) == 52
    assert weeks[9] == {"value": 10, "label": "S10 - 03/03"}


def test_week_label():
    assert week_label(2025, 10) == "Semaine 10 - 03/03 au 09/03/2025"


def test_invalid_week_or_year_rejected():
    with pytest.raises(ValidationError):
        validate_week(2021, 53)
    with pytest.raises(ValidationError):
        validate_week(2025, 0)
    with pytest.raises(ValidationError):
        monday_of(1800, 1)


def test_selectable_years_window():
    years = [y["value"] for y in selectable_years(date(2025, 6, 1))]
    assert years == [2020, 2021, 2022, 2023, 2024, 2025, 2026]


def test_week_key_sorts_chronologically():
    keys = [WeekKey(2025, 2), WeekKey(2024, 52), WeekKey(2025, 1)]
    assert sorted(keys) == [WeekKey(2024, 52), WeekKey(2025, 1), WeekKey(2025, 2)]
    assert str(WeekKey(2025, 3)) == "2025-W03"
