from __future__ import annotations

from enum import Enum, IntEnum


class Role(str, Enum):
    """Caller roles used for authorization checks."""

    EMPLOYEE = "Salarie"
    MANAGER = "Manager"
    ADMIN = "Admin"

    @property
    def is_manager(self) -> bool:
        return self in {Role.MANAGER, Role.ADMIN}


class WeekStatus(str, Enum):
    """Lifecycle of a week; mirrored on hour and absence rows."""

    DRAFT = "Brouillon"
    SUBMITTED = "Soumis"
    VALIDATED = "Valide"
    REJECTED = "Rejete"

    @property
    def is_locked(self) -> bool:
        return self in {WeekStatus.SUBMITTED, WeekStatus.VALIDATED}


class AbsenceCategory(str, Enum):
    """How an absence day weighs in the weekly accounting."""

    PAYABLE = "payable"  # counts toward the weekly total as if worked
    SICK = "sick"  # adds to owed hours
    TRACKED = "tracked"  # reported only


class AbsenceType(str, Enum):
    PAID_LEAVE = "CP"
    SICK = "Maladie"
    OFF_SITE = "Deplacement"
    UNPAID = "Sans_solde"
    OTHER = "Autre"

    @property
    def category(self) -> AbsenceCategory:
        return ABSENCE_CATEGORIES[self]

    @property
    def label(self) -> str:
        return ABSENCE_LABELS[self]


ABSENCE_CATEGORIES: dict[AbsenceType, AbsenceCategory] = {
    AbsenceType.PAID_LEAVE: AbsenceCategory.PAYABLE,
    AbsenceType.SICK: AbsenceCategory.SICK,
    AbsenceType.OFF_SITE: AbsenceCategory.PAYABLE,
    AbsenceType.UNPAID: AbsenceCategory.TRACKED,
    AbsenceType.OTHER: AbsenceCategory.TRACKED,
}

ABSENCE_LABELS: dict[AbsenceType, str] = {
    AbsenceType.PAID_LEAVE: "Congé payé",
    AbsenceType.SICK: "Maladie",
    AbsenceType.OFF_SITE: "Déplacement",
    AbsenceType.UNPAID: "Sans solde",
    AbsenceType.OTHER: "Autre",
}

# Every absence type must be handled by each table above.
for _table in (ABSENCE_CATEGORIES, ABSENCE_LABELS):
    _missing = set(AbsenceType) - set(_table)
    if _missing:
        raise RuntimeError(f"Unhandled absence types: {sorted(t.value for t in _missing)}")


class Weekday(IntEnum):
    """ISO weekday index (Monday=0) with the French column suffix used in storage."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @property
    def column(self) -> str:
        return WEEKDAY_COLUMNS[self]

    @property
    def is_workday(self) -> bool:
        return self <= Weekday.FRIDAY


WEEKDAY_COLUMNS: dict[Weekday, str] = {
    Weekday.MONDAY: "lundi",
    Weekday.TUESDAY: "mardi",
    Weekday.WEDNESDAY: "mercredi",
    Weekday.THURSDAY: "jeudi",
    Weekday.FRIDAY: "vendredi",
    Weekday.SATURDAY: "samedi",
    Weekday.SUNDAY: "dimanche",
}

WORKDAYS: tuple[Weekday, ...] = tuple(d for d in Weekday if d.is_workday)
