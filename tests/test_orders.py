import pytest

from restodesk.core.exceptions import OrderPlacementError, TenantNotFoundError
from restodesk.models import PaymentMethod
from restodesk.services.cart import Cart

from tests.helpers import DEMO_PASSWORD


def cart_with(system, tenant_id, *item_ids) -> Cart:
    cart = Cart()
    for item_id in item_ids:
        cart.add(system.catalog.get_item(tenant_id, item_id))
    return cart


def test_customer_places_order_for_themselves(system, madison_id):
    controller = system.new_controller()
    assert controller.login("john", DEMO_PASSWORD)
    cart = cart_with(system, madison_id, "2", "2", "4")
    cart.set_note("2", "well done")

    order = system.ordering.place_order(
        cart.lines(),
        PaymentMethod.CARD,
        controller.active_tenant_id,
        session_user_id=controller.current_user.id,
    )

    assert order.user_id == "user-2"
    assert order.restaurant_id == madison_id
    assert order.payment_method == PaymentMethod.CARD
    assert order.total == pytest.approx(34.0)
    assert order.items[0] == {"menu_item_id": "2", "quantity": 2, "price": 15.0, "notes": "well done"}
    assert order.placed_at.tzinfo is not None
    # Placing never empties the cart
    assert len(cart) == 2


def test_total_is_sum_of_lines(system, dave_id):
    cart = cart_with(system, dave_id, "9", "9", "10", "11", "11", "11")
    order = system.ordering.place_order(cart.lines(), "cash", dave_id, session_user_id="user-3")
    expected = sum(line["price"] * line["quantity"] for line in order.items)
    assert order.total == pytest.approx(expected)
    assert order.total == pytest.approx(47.5)


def test_empty_order_is_rejected(system, madison_id):
    before = len(system.orders.by_tenant(madison_id))
    with pytest.raises(OrderPlacementError):
        system.ordering.place_order([], PaymentMethod.CASH, madison_id, session_user_id="user-2")
    assert len(system.orders.by_tenant(madison_id)) == before


def test_order_requires_tenant(system, madison_id):
    cart = cart_with(system, madison_id, "1")
    with pytest.raises(OrderPlacementError):
        system.ordering.place_order(cart.lines(), PaymentMethod.CASH, None, session_user_id="user-2")
    with pytest.raises(TenantNotFoundError):
        system.ordering.place_order(cart.lines(), PaymentMethod.CASH, "user-2", session_user_id="user-2")


def test_invalid_payment_method_rejected(system, madison_id):
    before = len(system.orders.by_tenant(madison_id))
    cart = cart_with(system, madison_id, "1")
    with pytest.raises(OrderPlacementError):
        system.ordering.place_order(cart.lines(), "bitcoin", madison_id, session_user_id="user-2")
    assert len(system.orders.by_tenant(madison_id)) == before


def test_explicit_placing_user_wins(system, madison_id):
    cart = cart_with(system, madison_id, "1")
    order = system.ordering.place_order(
        cart.lines(), PaymentMethod.CASH, madison_id,
        session_user_id="user-1", placing_user_id="user-2",
    )
    assert order.user_id == "user-2"


def test_admin_order_defaults_to_walk_in_cash(system, madison_id):
    cart = cart_with(system, madison_id, "6")
    order = system.ordering.place_admin_order(cart.lines(), madison_id)
    assert order.user_id == "walk-in"
    assert order.payment_method == PaymentMethod.CASH


def test_admin_order_for_customer_of_other_tenant_rejected(system, madison_id):
    cart = cart_with(system, madison_id, "6")
    with pytest.raises(OrderPlacementError):
        system.ordering.place_admin_order(cart.lines(), madison_id, customer_id="user-3")


def test_orders_for_customer(system, madison_id, dave_id):
    assert [o.id for o in system.ordering.orders_for_customer(madison_id, "user-2")] == [
        "order-1", "order-2", "order-3", "order-4", "order-5",
    ]
    assert system.ordering.orders_for_customer(dave_id, "user-2") == []


def test_tenant_isolation_of_orders(system, madison_id, dave_id):
    cart = cart_with(system, dave_id, "9")
    system.ordering.place_order(cart.lines(), PaymentMethod.CASH, dave_id, session_user_id="user-3")

    for tenant_id in (madison_id, dave_id):
        assert all(o.restaurant_id == tenant_id for o in system.ordering.orders_for_tenant(tenant_id))
    assert len(system.ordering.orders_for_tenant(dave_id)) == 3
    assert len(system.ordering.orders_for_tenant(madison_id)) == 5
