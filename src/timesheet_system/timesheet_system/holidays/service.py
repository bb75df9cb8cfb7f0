from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Sequence

from ..common.weeks import check_year, monday_of, validate_week
from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from ..users.model import SessionUser
from .model import Holiday
from .repository import HolidayRepository

logger = logging.getLogger(__name__)


def easter_sunday(year: int) -> date:
    """Gregorian Easter Sunday (anonymous Gregorian / Meeus algorithm)."""
    a = year % 19
    b, c = divmod(year, 100)
    d, e = divmod(b, 4)
    f = (b + 8) // 25
    g = (b - f + 1) // 3
    h = (19 * a + b - d - g + 15) % 30
    i, k = divmod(c, 4)
    weekday_shift = (32 + 2 * e + 2 * i - h - k) % 7
    m = (a + 11 * h + 22 * weekday_shift) // 451
    month, day = divmod(h + weekday_shift - 7 * m + 114, 31)
    return date(year, month, day + 1)


def french_public_holidays(year: int) -> list[Holiday]:
    """The eleven French public holidays of ``year``, ordered by date."""
    check_year(year)
    easter = easter_sunday(year)
    days = [
        (date(year, 1, 1), "Jour de l'an"),
        (easter + timedelta(days=1), "Lundi de Pâques"),
        (date(year, 5, 1), "Fête du Travail"),
        (date(year, 5, 8), "Victoire 1945"),
        (easter + timedelta(days=39), "Ascension"),
        (easter + timedelta(days=50), "Lundi de Pentecôte"),
        (date(year, 7, 14), "Fête nationale"),
        (date(year, 8, 15), "Assomption"),
        (date(year, 11, 1), "Toussaint"),
        (date(year, 11, 11), "Armistice 1918"),
        (date(year, 12, 25), "Noël"),
    ]
    return [Holiday(holiday_id=None, holiday_date=d, label=label) for d, label in sorted(days)]


class HolidayService:
    """Read access to the holiday calendar, plus the yearly initialisation."""

    def __init__(self, holidays: HolidayRepository):
        self._holidays = holidays

    def holidays_for_week(self, year: int, iso_week: int) -> list[Holiday]:
        validate_week(year, iso_week)
        monday = monday_of(year, iso_week)
        return list(self._holidays.list_between(monday, monday + timedelta(days=6)))

    def list_for_year(self, year: int) -> Sequence[Holiday]:
        check_year(year)
        return self._holidays.list_for_year(int(year))

    def init_year(self, current_user: SessionUser, year: int) -> list[Holiday]:
        if current_user.role != Role.ADMIN:
            raise AuthorizationError("Seul un administrateur peut initialiser les jours fériés")

        created = french_public_holidays(int(year))
        for h in created:
            self._holidays.upsert(holiday_date=h.holiday_date, label=h.label)
        logger.info("Holidays initialised for %s by user %s (%d days)", year, current_user.user_id, len(created))
        return created
