"""
Order Placement

Turns cart lines into a stored order. Used by two flows:
    - self-service: a customer orders for themselves and picks a payment method
    - order entry: an admin orders on behalf of a customer or a walk-in, paid in cash

Placing an order never clears the cart; that is left to the caller once
the order has been stored.

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
from typing import Iterable, Optional, Union

from restodesk.core.config import get_settings
from restodesk.core.exceptions import OrderPlacementError, TenantNotFoundError
from restodesk.models import Order, PaymentMethod, utc_now
from restodesk.services.cart import CartLine, lines_total
from restodesk.services.repositories import OrderRepository, UserRepository, new_id

logger = logging.getLogger(__name__)

Line = Union[CartLine, dict]


def _line_to_dict(line: Line) -> dict:
    data = line.to_dict() if isinstance(line, CartLine) else dict(line)
    quantity = int(data["quantity"])
    if quantity < 1:
        raise OrderPlacementError(f"Line {data.get('menu_item_id')} has quantity {quantity}")
    return {
        "menu_item_id": data["menu_item_id"],
        "quantity": quantity,
        "price": float(data["price"]),
        "notes": data.get("notes") or None,
    }


class OrderService:
    """Creates orders and reads them back per restaurant."""

    def __init__(self, orders: OrderRepository, users: UserRepository):
        self.orders = orders
        self.users = users
        self.walk_in_id = get_settings().walk_in_id

    def place_order(
        self,
        lines: Iterable[Line],
        payment_method: Union[PaymentMethod, str],
        tenant_id: Optional[str],
        session_user_id: Optional[str] = None,
        placing_user_id: Optional[str] = None,
    ) -> Order:
        """
        Store a new order for the given restaurant.

        Args:
            lines: Cart lines (or line dicts) to order, at least one
            payment_method: cash, transfer or card
            tenant_id: Restaurant taking the order
            session_user_id: Logged-in user, used when no placing user is given
            placing_user_id: Customer id or walk-in sentinel chosen by an admin

        Returns:
            Order: The stored order

        Raises:
            OrderPlacementError: No lines, no restaurant, no placing user or an unknown payment method
            TenantNotFoundError: The restaurant id names no restaurant owner
        """
        items = [_line_to_dict(line) for line in lines]
        if not items:
            raise OrderPlacementError("Cannot place an order without items")
        if not tenant_id:
            raise OrderPlacementError("Cannot place an order without an active restaurant")
        if self.users.tenant_owner(tenant_id) is None:
            raise TenantNotFoundError(f"Restaurant {tenant_id} does not exist")

        user_id = placing_user_id or session_user_id
        if not user_id:
            raise OrderPlacementError("Cannot place an order without a placing user")

        try:
            method = PaymentMethod(payment_method)
        except ValueError:
            valid = [m.value for m in PaymentMethod]
            raise OrderPlacementError(f"Invalid payment method {payment_method!r}. Options: {valid}")

        order = Order(
            id=new_id("order"),
            user_id=user_id,
            items=items,
            total=lines_total(items),
            payment_method=method,
            restaurant_id=tenant_id,
            created_at=utc_now(),
        )
        self.orders.add(order)

        logger.info(
            f"🧾 Order {order.id} placed at {tenant_id} by {user_id}: "
            f"{len(items)} line(s), total {order.total:.2f} ({order.payment_method.value})"
        )
        return order

    def place_admin_order(
        self,
        lines: Iterable[Line],
        tenant_id: Optional[str],
        customer_id: Optional[str] = None,
    ) -> Order:
        """Order entry from the admin dashboard: cash, for a customer or a walk-in."""
        if customer_id and customer_id != self.walk_in_id:
            customer = self.users.by_id(customer_id)
            if customer is None or not customer.is_customer or customer.restaurant_id != tenant_id:
                raise OrderPlacementError(f"{customer_id} is not a customer of this restaurant")
        return self.place_order(
            lines,
            PaymentMethod.CASH,
            tenant_id,
            placing_user_id=customer_id or self.walk_in_id,
        )

    def orders_for_tenant(self, tenant_id: str) -> list[Order]:
        return self.orders.by_tenant(tenant_id)

    def orders_for_customer(self, tenant_id: str, user_id: str) -> list[Order]:
        return self.orders.by_customer(tenant_id, user_id)
