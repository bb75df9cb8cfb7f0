from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Iterable

from ...absences.model import AbsenceRecord
from ...holidays.model import Holiday
from ...hours.model import HourEntry
from ..model import WeeklyTotals


class WeeklyCalculator(ABC):
    """Calculator interface (Strategy Pattern for weekly accounting)."""

    @abstractmethod
    def compute(
        self,
        entries: Iterable[HourEntry],
        absences: Iterable[AbsenceRecord],
        *,
        holidays: Iterable[Holiday] = (),
        carried_over_owed: Decimal = Decimal("0"),
    ) -> WeeklyTotals:
        raise NotImplementedError
