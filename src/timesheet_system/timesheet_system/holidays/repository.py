from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import Holiday


class HolidayRepository(Protocol):
    def list_between(self, start: date, end: date) -> Sequence[Holiday]:
        """Holidays with ``start <= date <= end``, ordered by date."""

        raise NotImplementedError

    def list_for_year(self, year: int) -> Sequence[Holiday]:
        raise NotImplementedError

    def upsert(self, *, holiday_date: date, label: str) -> None:
        raise NotImplementedError
