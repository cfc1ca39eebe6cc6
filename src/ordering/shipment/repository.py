"""Repository for the Shipment aggregate."""

from protean.exceptions import ObjectNotFoundError

from ordering.domain import ordering
from ordering.errors import ShipmentNotFoundError
from ordering.shipment.shipment import Shipment


@ordering.repository(part_of=Shipment)
class ShipmentRepository:
    def find_by_id(self, shipment_id: str) -> Shipment:
        try:
            return self.get(shipment_id)
        except ObjectNotFoundError as exc:
            raise ShipmentNotFoundError({"shipment_id": [f"Shipment {shipment_id} not found"]}) from exc

    def find_by_order_id(self, order_id: str) -> Shipment:
        """Return the most recent shipment for an order."""
        result = self._dao.query.filter(order_id=order_id).order_by("-created_at").all()
        if not result.items:
            raise ShipmentNotFoundError({"order_id": [f"No shipment found for order {order_id}"]})
        return result.first

    def find_by_tracking_number(self, tracking_number: str) -> Shipment:
        result = self._dao.query.filter(tracking_number=tracking_number).all()
        if not result.items:
            raise ShipmentNotFoundError(
                {"tracking_number": [f"Shipment with tracking number {tracking_number} not found"]}
            )
        return result.first

    def list_by_order_id(self, order_id: str) -> list[Shipment]:
        return self._dao.query.filter(order_id=order_id).all().items
