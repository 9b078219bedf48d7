"""Recurring rent schedule generation.

Due dates are ``start + k * step`` months, each computed from the start date
so month-end clamping never accumulates drift (Jan 31 -> Feb 29 -> Mar 31).
"""

from datetime import date
from decimal import Decimal
from typing import Any

from dateutil.relativedelta import relativedelta

from ...core.exceptions import ValidationError
from .models import Frequency, PaymentMethod, RentStatus

FREQUENCY_MONTHS = {
    Frequency.MONTHLY: 1,
    Frequency.QUARTERLY: 3,
    Frequency.YEARLY: 12,
}


def due_dates(
    start_date: date,
    end_date: date,
    frequency: Frequency,
    limit: int | None = None,
) -> list[date]:
    """Due dates from ``start_date`` through ``end_date`` inclusive.

    An empty list is returned when ``start_date`` is after ``end_date``.

    Raises:
        ValidationError: If more than ``limit`` dates would be produced
    """
    step = FREQUENCY_MONTHS[Frequency(frequency)]
    dates: list[date] = []
    k = 0
    while True:
        current = start_date + relativedelta(months=k * step)
        if current > end_date:
            break
        if limit is not None and len(dates) >= limit:
            raise ValidationError(
                f"Date range produces more than {limit} schedules",
                field="end_date",
                value=end_date.isoformat(),
            )
        dates.append(current)
        k += 1
    return dates


def generate_schedules(
    property_id: int,
    tenant_id: int,
    amount: Decimal,
    start_date: date,
    end_date: date,
    frequency: Frequency,
    payment_method: PaymentMethod | None = None,
    limit: int | None = None,
) -> list[dict[str, Any]]:
    """Rows for a batch of recurring pending schedules, in due-date order."""
    return [
        {
            "property_id": property_id,
            "tenant_id": tenant_id,
            "amount": amount,
            "due_date": due_date,
            "status": RentStatus.PENDING,
            "payment_method": payment_method or PaymentMethod.ONLINE,
            "recurring": True,
            "frequency": frequency,
        }
        for due_date in due_dates(start_date, end_date, frequency, limit)
    ]
