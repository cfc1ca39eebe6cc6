"""Shipment domain events."""

from protean.fields import DateTime, Identifier, String

from ordering.domain import ordering


@ordering.event(part_of="Shipment")
class ShipmentCreated:
    """A shipment was created for a paid order."""

    shipment_id = Identifier(required=True)
    order_id = Identifier(required=True)
    shipping_method = String(required=True)
    address = String(required=True)
    created_at = DateTime(required=True)


@ordering.event(part_of="Shipment")
class ShipmentProcessingStarted:
    """The warehouse began preparing the shipment."""

    shipment_id = Identifier(required=True)
    order_id = Identifier(required=True)
    started_at = DateTime(required=True)


@ordering.event(part_of="Shipment")
class ShipmentShipped:
    """The shipment was handed to a carrier."""

    shipment_id = Identifier(required=True)
    order_id = Identifier(required=True)
    tracking_number = String(required=True)
    carrier = String()
    shipped_at = DateTime(required=True)


@ordering.event(part_of="Shipment")
class ShipmentDelivered:
    """The carrier confirmed delivery."""

    shipment_id = Identifier(required=True)
    order_id = Identifier(required=True)
    delivered_at = DateTime(required=True)


@ordering.event(part_of="Shipment")
class ShipmentCancelled:
    """The shipment was cancelled before delivery."""

    shipment_id = Identifier(required=True)
    order_id = Identifier(required=True)
    previous_status = String(required=True)
    cancelled_at = DateTime(required=True)
