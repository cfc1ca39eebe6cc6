"""Identifier generation.

Aggregate and entity identities are ULIDs: globally unique and
lexicographically sortable by creation time.
"""

from datetime import UTC, datetime

from ulid import ULID

ORDER_NUMBER_PREFIX = "ORD"


def generate_identity() -> str:
    """Return a fresh ULID string."""
    return str(ULID())


def generate_order_number(now: datetime | None = None) -> str:
    """Return a human-readable order number, e.g. ``ORD-20260119-7ZK3QX9A``."""
    now = now or datetime.now(UTC)
    return f"{ORDER_NUMBER_PREFIX}-{now:%Y%m%d}-{str(ULID())[-8:]}"
