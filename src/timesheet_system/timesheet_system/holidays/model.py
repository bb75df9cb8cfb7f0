from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import Weekday


@dataclass(frozen=True)
class Holiday:
    """A public holiday (jour férié)."""

    holiday_id: Optional[int]
    holiday_date: date
    label: str

    @property
    def weekday(self) -> Weekday:
        return Weekday(self.holiday_date.weekday())
