from datetime import date

import pytest

from src.timesheet_system.timesheet_system.core.exceptions import AuthorizationError
from src.timesheet_system.timesheet_system.holidays.service import easter_sunday, french_public_holidays


@pytest.mark.parametrize(
    "year, expected",
    [(2024, date(2024, 3, 31)), (2025, date(2025, 4, 20)), (2019, date(2019, 4, 21)), (2000, date(2000, 4, 23))],
)
def test_easter_sunday(year, expected):
    assert easter_sunday(year) == expected


def test_french_public_holidays_2025():
    days = {h.holiday_date: h.label for h in french_public_holidays(2025)}

    assert len(days) == 11
    assert days[date(2025, 4, 21)] == "Lundi de Pâques"
    assert days[date(2025, 5, 29)] == "Ascension"
    assert days[date(2025, 6, 9)] == "Lundi de Pentecôte"
    assert date(2025, 7, 14) in days
    assert list(days) == sorted(days)


def test_init_year_is_admin_only_and_idempotent(container, holidays_repo, manager, admin):
    with pytest.raises(AuthorizationError):
        container.holiday_service.init_year(manager, 2025)

    container.holiday_service.init_year(admin, 2025)
    container.holiday_service.init_year(admin, 2025)

    assert len(container.holiday_service.list_for_year(2025)) == 11


def test_holidays_for_week(container, admin):
    container.holiday_service.init_year(admin, 2025)

    week_19 = container.holiday_service.holidays_for_week(2025, 19)
    assert [h.holiday_date for h in week_19] == [date(2025, 5, 8)]
    assert container.holiday_service.holidays_for_week(2025, 10) == []
