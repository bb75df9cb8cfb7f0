from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence, Union

from ..common.validators import parse_hours
from ..core.enums import Weekday, WeekStatus
from ..core.exceptions import ValidationError

DayHours = tuple[Decimal, Decimal, Decimal, Decimal, Decimal, Decimal, Decimal]

ZERO_WEEK: DayHours = (Decimal("0"),) * 7  # type: ignore[assignment]


@dataclass(frozen=True)
class HourEntry:
    """Domain entity: hours of one employee on one project/task for one ISO week.

    Identity key is (employee_id, project_id, task_id, year, iso_week);
    ``entry_id`` is the storage surrogate exposed by the API.
    """

    entry_id: int
    employee_id: int
    project_id: int
    task_id: int
    year: int
    iso_week: int
    day_hours: DayHours
    comment: Optional[str] = None
    status: WeekStatus = WeekStatus.DRAFT
    updated_at: Optional[datetime] = None

    @property
    def total_hours(self) -> Decimal:
        return sum(self.day_hours, Decimal("0"))

    def hours_on(self, day: Weekday) -> Decimal:
        return self.day_hours[int(day)]


def normalize_day_hours(values: Union[Mapping[Any, Any], Sequence[Any], None]) -> DayHours:
    """Build the 7 day-hour values from a weekday mapping or a Monday-first sequence.

    Missing days default to 0; each value must be within [0, 24].
    """

    if values is None:
        return ZERO_WEEK

    out = list(ZERO_WEEK)
    if isinstance(values, Mapping):
        for k, v in values.items():
            day = k if isinstance(k, Weekday) else Weekday(int(k))
            out[int(day)] = parse_hours(v, f"Heures du {day.column}")
    else:
        items = list(values)
        if len(items) > 7:
            raise ValidationError("Une semaine compte 7 jours")
        for i, v in enumerate(items):
            out[i] = parse_hours(v, f"Heures du {Weekday(i).column}")
    return tuple(out)  # type: ignore[return-value]
