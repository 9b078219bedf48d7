"""Recurring due-date generation and payment settlement rules."""

from datetime import date
from decimal import Decimal

import pytest

from rentroll_backend.core.exceptions import ValidationError
from rentroll_backend.modules.rent_management import generator, settlement
from rentroll_backend.modules.rent_management.models import (
    Frequency,
    PaymentMethod,
    RentStatus,
)


def test_monthly_range_is_inclusive():
    dates = generator.due_dates(date(2025, 1, 15), date(2025, 3, 15), Frequency.MONTHLY)
    assert dates == [date(2025, 1, 15), date(2025, 2, 15), date(2025, 3, 15)]


def test_start_after_end_is_empty():
    assert (
        generator.due_dates(date(2025, 6, 1), date(2025, 1, 1), Frequency.MONTHLY)
        == []
    )


def test_month_end_is_clamped_without_drift():
    dates = generator.due_dates(date(2024, 1, 31), date(2024, 4, 30), Frequency.MONTHLY)
    assert dates == [
        date(2024, 1, 31),
        date(2024, 2, 29),
        date(2024, 3, 31),
        date(2024, 4, 30),
    ]


def test_quarterly_and_yearly_steps():
    quarterly = generator.due_dates(
        date(2025, 1, 1), date(2025, 12, 31), Frequency.QUARTERLY
    )
    assert quarterly == [
        date(2025, 1, 1),
        date(2025, 4, 1),
        date(2025, 7, 1),
        date(2025, 10, 1),
    ]
    yearly = generator.due_dates(date(2024, 2, 29), date(2027, 3, 1), Frequency.YEARLY)
    assert yearly == [
        date(2024, 2, 29),
        date(2025, 2, 28),
        date(2026, 2, 28),
        date(2027, 2, 28),
    ]


def test_limit_rejects_oversized_range():
    with pytest.raises(ValidationError):
        generator.due_dates(
            date(2025, 1, 1), date(2026, 12, 1), Frequency.MONTHLY, limit=12
        )
    assert (
        len(
            generator.due_dates(
                date(2025, 1, 1), date(2025, 12, 1), Frequency.MONTHLY, limit=12
            )
        )
        == 12
    )


def test_generated_rows_are_pending_and_recurring():
    rows = generator.generate_schedules(
        property_id=1,
        tenant_id=2,
        amount=Decimal("950.00"),
        start_date=date(2025, 1, 1),
        end_date=date(2025, 2, 1),
        frequency=Frequency.MONTHLY,
    )
    assert len(rows) == 2
    for row in rows:
        assert row["status"] == RentStatus.PENDING
        assert row["recurring"] is True
        assert row["payment_method"] == PaymentMethod.ONLINE
        assert row["amount"] == Decimal("950.00")


@pytest.mark.parametrize(
    "current,payment,expected",
    [
        (RentStatus.PENDING, "1000", RentStatus.PAID),
        (RentStatus.PENDING, "1500", RentStatus.PAID),
        (RentStatus.PENDING, "400", RentStatus.PARTIAL),
        (RentStatus.PARTIAL, "400", RentStatus.PARTIAL),
        (RentStatus.PENDING, "0", RentStatus.PENDING),
        (RentStatus.OVERDUE, "0", RentStatus.OVERDUE),
        (RentStatus.PAID, "100", RentStatus.PARTIAL),
    ],
)
def test_payment_moves_schedule_status(current, payment, expected):
    assert (
        settlement.derive_schedule_status(current, Decimal("1000"), Decimal(payment))
        == expected
    )


def test_zero_amount_schedule_is_paid_by_zero_payment():
    assert (
        settlement.derive_schedule_status(RentStatus.PENDING, Decimal("0"), Decimal("0"))
        == RentStatus.PAID
    )


def test_partial_payment_flag():
    assert settlement.is_partial_payment(Decimal("1000"), Decimal("400"))
    assert not settlement.is_partial_payment(Decimal("1000"), Decimal("1000"))
    assert not settlement.is_partial_payment(Decimal("1000"), Decimal("0"))


def test_first_of_month_quarter():
    dates = generator.due_dates(date(2024, 1, 1), date(2024, 3, 1), Frequency.MONTHLY)
    assert dates == [date(2024, 1, 1), date(2024, 2, 1), date(2024, 3, 1)]
