from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..common.weeks import WeekKey
from ..core.enums import WeekStatus
from ..core.exceptions import LockedError


@dataclass(frozen=True)
class WeekValidation:
    """Approval state of one employee's week; the single source of truth for the lock.

    ``total_hours`` and ``owed_hours`` are frozen at submission time.
    """

    employee_id: int
    year: int
    iso_week: int
    status: WeekStatus = WeekStatus.DRAFT
    total_hours: Decimal = Decimal("0")
    owed_hours: Decimal = Decimal("0")
    submitted_at: Optional[datetime] = None
    validated_by: Optional[int] = None
    validated_at: Optional[datetime] = None
    comment: Optional[str] = None
    validation_id: Optional[int] = None

    @property
    def key(self) -> WeekKey:
        return WeekKey(self.year, self.iso_week)


def status_of(validation: Optional[WeekValidation]) -> WeekStatus:
    """A week without validation row is a Draft."""
    return validation.status if validation else WeekStatus.DRAFT


def ensure_editable(validation: Optional[WeekValidation], *, is_manager: bool) -> WeekStatus:
    """Return the week status, or raise when its rows may not be written.

    Validated weeks are locked for everybody; Submitted weeks only for
    non-manager callers.
    """

    status = status_of(validation)
    if status == WeekStatus.VALIDATED:
        raise LockedError("Semaine validée : modification impossible")
    if status == WeekStatus.SUBMITTED and not is_manager:
        raise LockedError("Semaine soumise : modification impossible")
    return status
