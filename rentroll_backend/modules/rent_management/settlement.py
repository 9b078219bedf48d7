"""How a recorded payment moves its rent schedule's status.

Each payment is compared against the schedule amount on its own; earlier
payments are not accumulated.
"""

from decimal import Decimal

from .models import RentStatus


def derive_schedule_status(
    current: RentStatus, schedule_amount: Decimal, payment_amount: Decimal
) -> RentStatus:
    """Status the schedule should hold after a payment of ``payment_amount``.

    A payment covering the schedule amount marks it paid, a smaller positive
    payment marks it partial, and a zero payment leaves it as it was.
    """
    if payment_amount >= schedule_amount:
        return RentStatus.PAID
    if payment_amount > 0:
        return RentStatus.PARTIAL
    return RentStatus(current)


def is_partial_payment(schedule_amount: Decimal, payment_amount: Decimal) -> bool:
    return Decimal("0") < payment_amount < schedule_amount
