from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from ..core.enums import WORKDAYS, AbsenceType, Weekday, WeekStatus
from ..core.exceptions import LockedError, ValidationError

WeekdayFlags = tuple[bool, bool, bool, bool, bool]

NO_FLAGS: WeekdayFlags = (False,) * 5  # type: ignore[assignment]


@dataclass(frozen=True)
class AbsenceRecord:
    """Absence days of one employee, of one type, within one ISO week (Mon..Fri).

    ``status`` mirrors the week's validation and is only written by week
    transitions. ``approval`` is the leave's own decision (with
    ``decided_by``/``decided_at``/``comment``); a rejected leave is ignored
    by the weekly accounting.
    """

    absence_id: int
    employee_id: int
    year: int
    iso_week: int
    absence_type: AbsenceType
    flags: WeekdayFlags
    reason: Optional[str] = None
    status: WeekStatus = WeekStatus.DRAFT
    approval: WeekStatus = WeekStatus.DRAFT
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None
    comment: Optional[str] = None

    @property
    def days_count(self) -> int:
        return sum(1 for f in self.flags if f)

    @property
    def flagged_days(self) -> tuple[Weekday, ...]:
        return tuple(d for d in WORKDAYS if self.flags[int(d)])

    def is_flagged(self, day: Weekday) -> bool:
        return day.is_workday and self.flags[int(day)]

    @property
    def counts_in_accounting(self) -> bool:
        return self.approval != WeekStatus.REJECTED


@dataclass(frozen=True)
class DayAbsence:
    """Merged view of one weekday across every absence type."""

    day: Weekday
    absence_type: Optional[AbsenceType]

    @property
    def is_absent(self) -> bool:
        return self.absence_type is not None


def normalize_flags(values: Union[Mapping[Any, Any], Sequence[Any], None]) -> WeekdayFlags:
    """Five Monday-first booleans from a weekday mapping or a sequence."""

    if values is None:
        return NO_FLAGS

    out = list(NO_FLAGS)
    if isinstance(values, Mapping):
        for k, v in values.items():
            day = k if isinstance(k, Weekday) else Weekday(int(k))
            if not day.is_workday:
                raise ValidationError("Une absence ne peut porter que sur les jours du lundi au vendredi")
            out[int(day)] = _as_flag(v)
    else:
        items = list(values)
        if len(items) > 5:
            raise ValidationError("Une absence ne peut porter que sur les jours du lundi au vendredi")
        for i, v in enumerate(items):
            out[i] = _as_flag(v)
    return tuple(out)  # type: ignore[return-value]


def _as_flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "on", "oui", "yes"}
    return bool(value)


def merged_week_flags(records: Iterable[AbsenceRecord]) -> tuple[DayAbsence, ...]:
    """Per weekday (Mon..Fri), the absence type flagging it, if any."""

    by_day: dict[Weekday, AbsenceType] = {}
    for rec in records:
        for day in rec.flagged_days:
            by_day.setdefault(day, rec.absence_type)
    return tuple(DayAbsence(day=d, absence_type=by_day.get(d)) for d in WORKDAYS)


def parse_absence_type(value: Any) -> AbsenceType:
    if isinstance(value, AbsenceType):
        return value
    try:
        return AbsenceType(str(value or "").strip())
    except ValueError:
        allowed = ", ".join(t.value for t in AbsenceType)
        raise ValidationError(f"Type d'absence non valide (attendu : {allowed})")


def ensure_record_editable(record: Optional[AbsenceRecord], *, is_manager: bool) -> None:
    """Raise when the leave's own approval forbids rewriting or deleting it."""

    if record is None:
        return
    if record.approval == WeekStatus.VALIDATED:
        raise LockedError("Absence validée : modification impossible")
    if record.approval == WeekStatus.SUBMITTED and not is_manager:
        raise LockedError("Absence soumise : modification impossible")
