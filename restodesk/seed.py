"""
Demo Seed Data

Two restaurants with their menus, customers and a week of past orders:
    - Madison's Italian Kitchen (owner: the superadmin, staff admin "admin")
    - Dave's Burger Shack (owner: "dave")

Seeded passwords come from settings (demo_password, superadmin_password)
and are hashed like any other password.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from restodesk.core.config import get_settings
from restodesk.core.security import hash_password
from restodesk.models import MenuCategory, MenuItem, Order, PaymentMethod, User, UserRole, utc_now

logger = logging.getLogger(__name__)

MADISON_ID = "user-madison-admin"
DAVE_ID = "user-dave-admin"

IMAGE_BASE = "https://images.pexels.com/photos"


def _image(photo_id: int) -> str:
    return f"{IMAGE_BASE}/{photo_id}/pexels-photo-{photo_id}.jpeg?auto=compress&cs=tinysrgb&w=800"


def build_users() -> list[User]:
    settings = get_settings()
    demo_hash = hash_password(settings.demo_password)

    def user(**fields) -> User:
        fields["username_key"] = fields["username"].lower()
        fields.setdefault("password_hash", demo_hash)
        return User(**fields)

    return [
        # Restaurant 1: Madison's Italian Kitchen
        user(
            id=MADISON_ID,
            username=settings.superadmin_username,
            password_hash=hash_password(settings.superadmin_password),
            contact="N/A",
            role=UserRole.ADMIN,
            restaurant_id=MADISON_ID,
            business_name="Madison's Italian Kitchen",
            is_active=True,
            is_superadmin=True,
        ),
        user(
            id="user-1",
            username="admin",
            contact="111-222-3333",
            role=UserRole.ADMIN,
            restaurant_id=MADISON_ID,
            business_name="Madison's Italian Kitchen",
            is_active=True,
        ),
        user(
            id="user-2",
            username="john",
            contact="444-555-6666",
            role=UserRole.CUSTOMER,
            restaurant_id=MADISON_ID,
            location={"city": "Madrid", "country": "ES"},
        ),
        # Restaurant 2: Dave's Burger Shack
        user(
            id=DAVE_ID,
            username="dave",
            contact="777-888-9999",
            role=UserRole.ADMIN,
            restaurant_id=DAVE_ID,
            business_name="Dave's Burger Shack",
            is_active=True,
        ),
        user(
            id="user-3",
            username="jane",
            contact="123-456-7890",
            role=UserRole.CUSTOMER,
            restaurant_id=DAVE_ID,
            location={"city": "Barcelona", "country": "ES"},
        ),
    ]


def build_menu() -> list[MenuItem]:
    rows = [
        # Restaurant 1 Menu
        ("1", "Bruschetta al Pomodoro", "Toasted bread with fresh tomatoes, garlic, basil and olive oil.",
         8.50, MenuCategory.APPETIZER, 5639433, False, MADISON_ID),
        ("2", "Lasagna alla Bolognese", "Layers of pasta with rich meat sauce, bechamel and parmesan.",
         15.00, MenuCategory.MAIN, 6070381, True, MADISON_ID),
        ("3", "Classic Tiramisu", "Coffee-soaked sponge with mascarpone cream and cocoa.",
         7.00, MenuCategory.DESSERT, 159887, False, MADISON_ID),
        ("4", "Fresh Lemonade", "Freshly squeezed lemon juice, water and a touch of sugar.",
         4.00, MenuCategory.BEVERAGE, 1187766, False, MADISON_ID),
        ("5", "Caprese Salad", "Fresh tomato, buffalo mozzarella, basil, salt and olive oil.",
         10.00, MenuCategory.APPETIZER, 1359325, False, MADISON_ID),
        ("6", "Pizza Margherita", "Tomato sauce, fresh mozzarella, basil, salt and oil.",
         12.50, MenuCategory.MAIN, 1146760, True, MADISON_ID),
        ("7", "Panna Cotta", "Cooked cream dessert topped with red berries.",
         6.50, MenuCategory.DESSERT, 1070850, False, MADISON_ID),
        ("8", "House Red Wine (Glass)", "Selection of the house red wine.",
         5.50, MenuCategory.BEVERAGE, 1283219, False, MADISON_ID),
        # Restaurant 2 Menu
        ("9", "Classic Burger", "Beef patty, lettuce, tomato, onion, and our special sauce.",
         11.00, MenuCategory.MAIN, 1639562, False, DAVE_ID),
        ("10", "Loaded Fries", "Crispy fries topped with cheese, bacon, and chives.",
         7.50, MenuCategory.APPETIZER, 1893555, True, DAVE_ID),
        ("11", "Chocolate Milkshake", "Thick and creamy chocolate milkshake.",
         6.00, MenuCategory.BEVERAGE, 3727196, False, DAVE_ID),
    ]
    return [
        MenuItem(
            id=item_id,
            name=name,
            description=description,
            price=price,
            category=category,
            image_url=_image(photo),
            is_special=special,
            restaurant_id=tenant,
        )
        for item_id, name, description, price, category, photo, special, tenant in rows
    ]


def build_orders(now: Optional[datetime] = None) -> list[Order]:
    now = now or utc_now()

    def days_ago(days: int) -> datetime:
        return now - timedelta(days=days)

    def line(menu_item_id: str, quantity: int, price: float) -> dict:
        return {"menu_item_id": menu_item_id, "quantity": quantity, "price": price, "notes": None}

    rows = [
        # Restaurant 1 Orders
        ("order-1", "user-2", [line("2", 1, 15.00), line("4", 1, 4.00)], 19.00, 1, PaymentMethod.CARD, MADISON_ID),
        ("order-2", "user-2", [line("6", 2, 12.50)], 25.00, 2, PaymentMethod.CASH, MADISON_ID),
        ("order-3", "user-2", [line("1", 1, 8.50), line("3", 1, 7.00)], 15.50, 3, PaymentMethod.TRANSFER, MADISON_ID),
        ("order-4", "user-2", [line("5", 1, 10.00)], 10.00, 5, PaymentMethod.CARD, MADISON_ID),
        ("order-5", "user-2", [line("2", 2, 15.00), line("8", 2, 5.50)], 41.00, 6, PaymentMethod.CASH, MADISON_ID),
        # Restaurant 2 Orders
        ("order-6", "user-3", [line("9", 2, 11.00), line("11", 2, 6.00)], 34.00, 1, PaymentMethod.CASH, DAVE_ID),
        ("order-7", "user-3", [line("10", 1, 7.50)], 7.50, 4, PaymentMethod.CARD, DAVE_ID),
    ]
    return [
        Order(
            id=order_id,
            user_id=user_id,
            items=items,
            total=total,
            payment_method=method,
            restaurant_id=tenant,
            created_at=days_ago(age),
        )
        for order_id, user_id, items, total, age, method, tenant in rows
    ]


def seed_demo_data(session: Session, now: Optional[datetime] = None) -> None:
    """Load the demo restaurants into an empty store."""
    users = build_users()
    session.add_all(users)
    session.flush()
    session.add_all(build_menu())
    session.add_all(build_orders(now))
    session.commit()
    logger.info(f"🌱 Seeded {len(users)} users across 2 demo restaurants")
