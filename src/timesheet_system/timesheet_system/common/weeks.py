"""ISO-8601 week resolution.

Week 1 is the week containing the year's first Thursday (equivalently the
week of January 4th). Every (year, iso_week) key persisted by the ledger,
the absence overlay and the validation table is resolved through here.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

from ..core.constants import MAX_YEAR, MIN_YEAR, SELECTABLE_YEARS_AHEAD, SELECTABLE_YEARS_BACK
from ..core.exceptions import ValidationError


@dataclass(frozen=True, order=True)
class WeekKey:
    year: int
    week: int

    def __str__(self) -> str:
        return f"{self.year}-W{self.week:02d}"


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def weeks_in_year(year: int) -> int:
    """52 or 53; December 28th always falls in the last ISO week."""
    check_year(year)
    return date(year, 12, 28).isocalendar()[1]


def validate_week(year: int, iso_week: int) -> WeekKey:
    check_year(year)
    if not 1 <= int(iso_week) <= weeks_in_year(year):
        raise ValidationError(f"Semaine {iso_week} invalide pour l'année {year}")
    return WeekKey(int(year), int(iso_week))


def monday_of(year: int, iso_week: int) -> date:
    key = validate_week(year, iso_week)
    return date.fromisocalendar(key.year, key.week, 1)


def week_days(year: int, iso_week: int) -> tuple[date, ...]:
    """The seven dates of the week, Monday first."""
    monday = monday_of(year, iso_week)
    return tuple(monday + timedelta(days=i) for i in range(7))


def iso_week_of(day: date) -> WeekKey:
    iso_year, iso_week, _ = day.isocalendar()
    return WeekKey(iso_year, iso_week)


def current_week(today: Optional[date] = None) -> WeekKey:
    return iso_week_of(today or now_local().date())


def next_week(year: int, iso_week: int) -> WeekKey:
    return iso_week_of(monday_of(year, iso_week) + timedelta(weeks=1))


def previous_week(year: int, iso_week: int) -> WeekKey:
    return iso_week_of(monday_of(year, iso_week) - timedelta(weeks=1))


def week_label(year: int, iso_week: int) -> str:
    monday = monday_of(year, iso_week)
    sunday = monday + timedelta(days=6)
    return f"Semaine {iso_week} - {monday.strftime('%d/%m')} au {sunday.strftime('%d/%m/%Y')}"


def weeks_of_year(year: int) -> list[dict]:
    """Selectable week numbers with their short labels (``S10 - 03/03``)."""
    out: list[dict] = []
    for w in range(1, weeks_in_year(year) + 1):
        monday = date.fromisocalendar(year, w, 1)
        out.append({"value": w, "label": f"S{w} - {monday.strftime('%d/%m')}"})
    return out


def selectable_years(today: Optional[date] = None) -> list[dict]:
    current = (today or now_local().date()).year
    return [
        {"value": y, "label": str(y)}
        for y in range(current - SELECTABLE_YEARS_BACK, current + SELECTABLE_YEARS_AHEAD + 1)
    ]


def check_year(year: int) -> None:
    if not MIN_YEAR <= int(year) <= MAX_YEAR:
        raise ValidationError(f"Année {year} invalide")
