from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import WeekStatus
from .model import WeekValidation


class WeekValidationRepository(Protocol):
    def get(self, *, employee_id: int, year: int, iso_week: int) -> Optional[WeekValidation]:
        raise NotImplementedError

    def submit(self, *, employee_id: int, year: int, iso_week: int, total_hours: Decimal, owed_hours: Decimal) -> bool:
        """Draft/Rejected (or missing) -> Submitted, guarded by the current status.

        Freezes the totals, stamps ``submitted_at`` and clears the previous
        decision. Returns False when the row was in any other status.
        """

        raise NotImplementedError

    def decide(
        self,
        *,
        employee_id: int,
        year: int,
        iso_week: int,
        status: WeekStatus,
        decided_by: int,
        comment: Optional[str],
        from_statuses: Sequence[WeekStatus],
    ) -> bool:
        raise NotImplementedError

    def reset_to_draft(self, *, employee_id: int, year: int, iso_week: int) -> bool:
        """Back to Brouillon, dropping the previous decision and its comment."""

        raise NotImplementedError

    def list_by_status(self, status: WeekStatus) -> Sequence[WeekValidation]:
        raise NotImplementedError

    def list_for_week(self, *, year: int, iso_week: int) -> Sequence[WeekValidation]:
        raise NotImplementedError
