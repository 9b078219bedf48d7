"""Common utilities for the RentRoll backend."""

import secrets
import string
import time
from datetime import datetime, timezone

_BASE36 = string.digits + string.ascii_lowercase


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def generate_transaction_id(prefix: str = "TXN") -> str:
    """Generate a payment reference like TXN_1717171717171_k3j9x0a2b."""
    suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
    return f"{prefix}_{int(time.time() * 1000)}_{suffix}"
