"""Ordering bounded context for the order lifecycle.

Handles the order lifecycle (CQRS) together with the Payment and Shipment
records that hang off an order, and the orchestration that moves money
through an external payment gateway.
"""

import structlog
from protean.domain import Domain

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)
