from __future__ import annotations
"""Field-level rules shared by create and update; each maps to one ValidationError message."""
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from cpd_portal.errors import ValidationError

MIN_CPD_POINTS = Decimal('0.5')
MAX_CPD_POINTS = Decimal('8.0')


def validate_status(new_status: str, allowed: Iterable[str], field_name: str = 'status') -> str:
    """Return new_status when it is in allowed, else raise a 400."""
    if new_status not in allowed:
        raise ValidationError(f"{field_name} invalid")
    return new_status


def validate_cpd_points(points: Optional[Decimal]) -> Optional[Decimal]:
    if points is None:
        return None
    if points < MIN_CPD_POINTS or points > MAX_CPD_POINTS:
        raise ValidationError('CPD points must be between 0.5 and 8.0')
    return points


def validate_date_order(start: Optional[date], end: Optional[date]):
    if start is not None and end is not None and end < start:
        raise ValidationError('End date must be after start date')


__all__ = ['validate_status', 'validate_cpd_points', 'validate_date_order', 'MIN_CPD_POINTS', 'MAX_CPD_POINTS']
