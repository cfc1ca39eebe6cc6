"""Repository for the Order aggregate."""

from protean.exceptions import ObjectNotFoundError

from ordering.domain import ordering
from ordering.errors import OrderNotFoundError
from ordering.order.order import Order


@ordering.repository(part_of=Order)
class OrderRepository:
    """Order persistence with the lookups the lifecycle use cases need.

    ``add`` (inherited) both creates and updates.
    """

    def find_by_id(self, order_id: str) -> Order:
        try:
            return self.get(order_id)
        except ObjectNotFoundError as exc:
            raise OrderNotFoundError({"order_id": [f"Order {order_id} not found"]}) from exc

    def find_by_order_number(self, order_number: str) -> Order:
        result = self._dao.query.filter(order_number=order_number).all()
        if not result.items:
            raise OrderNotFoundError({"order_number": [f"Order {order_number} not found"]})
        return result.first

    def list_by_user_id(self, user_id: str, offset: int = 0, limit: int = 10) -> tuple[list[Order], int]:
        """Return one page of a user's orders, newest first, and the total count."""
        result = (
            self._dao.query.filter(user_id=user_id)
            .order_by("-created_at")
            .offset(offset)
            .limit(limit)
            .all()
        )
        return result.items, result.total

    def delete(self, order_id: str) -> None:
        order = self.find_by_id(order_id)
        self._dao.delete(order)
