from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from ..core.constants import HOURS_STEP, MAX_DAY_HOURS
from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} non valide")
    return value.strip()


def optional_text(value: Optional[str]) -> Optional[str]:
    return (value or "").strip() or None


def parse_int(value: Any, field_name: str) -> int:
    """Parse an integer transmitted as number or decimal string."""
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} non valide")
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} non valide")


def parse_hours(value: Any, field_name: str) -> Decimal:
    """Parse one day-hour value; empty means 0, within [0, 24] with at most two decimals."""
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} non valide")
    try:
        hours = Decimal(str(value).strip().replace(",", "."))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} non valide")
    if not hours.is_finite() or hours < 0 or hours > MAX_DAY_HOURS:
        raise ValidationError(f"{field_name} doit être compris entre 0 et {MAX_DAY_HOURS}")
    if hours != hours.quantize(HOURS_STEP):
        raise ValidationError(f"{field_name} : deux décimales au maximum")
    return hours
