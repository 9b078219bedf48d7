"""Rent management module: rent schedules and payments."""

from .models import (
    Frequency,
    Payment,
    PaymentMethod,
    PaymentStatus,
    RentSchedule,
    RentStatus,
)

__all__ = [
    # Models
    "RentSchedule",
    "Payment",
    # Enums
    "RentStatus",
    "Frequency",
    "PaymentMethod",
    "PaymentStatus",
]
