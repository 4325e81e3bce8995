"""
SQLAlchemy Database Models

The three stores of the ordering system:
- users: restaurant owners, staff admins and customers of every tenant
- menu_items: each dish belongs to exactly one restaurant
- orders: immutable once placed, lines are price snapshots

A tenant (restaurant) is identified by its owner's user id; menu items,
orders and customers all carry that id in restaurant_id.

Author: Khalil Bannouri
Version: 1.0.0
"""

import enum
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Float, DateTime, Text, Enum, Boolean, JSON, ForeignKey

from restodesk.database import Base


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """SQLite hands datetimes back naive; they are always stored as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class UserRole(str, enum.Enum):
    """Who a user is within its restaurant."""
    ADMIN = "admin"
    CUSTOMER = "customer"


class MenuCategory(str, enum.Enum):
    """Menu sections, in the order they are displayed."""
    APPETIZER = "appetizer"
    MAIN = "main"
    DESSERT = "dessert"
    BEVERAGE = "beverage"


class PaymentMethod(str, enum.Enum):
    """How an order was paid."""
    CASH = "cash"
    TRANSFER = "transfer"
    CARD = "card"


class User(Base):
    """
    Any account of the system.

    Admins whose id equals their restaurant_id own a restaurant; the tenant's
    active flag lives on that owner. Usernames are unique ignoring case,
    enforced through username_key.
    """
    __tablename__ = "users"

    row_id = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(64), unique=True, nullable=False, index=True)

    # =========================================================================
    # CREDENTIALS
    # =========================================================================
    username = Column(String(100), nullable=False)
    username_key = Column(String(100), unique=True, nullable=False, index=True)
    password_hash = Column(String(128), nullable=False)

    # =========================================================================
    # PROFILE
    # =========================================================================
    contact = Column(String(50), nullable=False, default="N/A")
    role = Column(Enum(UserRole), nullable=False, index=True)
    restaurant_id = Column(String(64), nullable=False, index=True)
    business_name = Column(String(150), nullable=True)
    location = Column(JSON, nullable=True)  # {"city": ..., "country": ...}

    # =========================================================================
    # STATUS
    # =========================================================================
    is_active = Column(Boolean, nullable=True)  # admins only, None means active
    is_superadmin = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_customer(self) -> bool:
        return self.role == UserRole.CUSTOMER

    @property
    def is_tenant_owner(self) -> bool:
        return self.is_admin and self.id == self.restaurant_id

    @property
    def active(self) -> bool:
        """Active flag with the unset default applied."""
        return True if self.is_active is None else bool(self.is_active)

    def __repr__(self):
        return f"<User {self.id} - {self.username} - {self.role.value} @ {self.restaurant_id}>"


class MenuItem(Base):
    """A dish or drink on one restaurant's menu."""
    __tablename__ = "menu_items"

    row_id = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(64), unique=True, nullable=False, index=True)

    name = Column(String(150), nullable=False)
    description = Column(Text, nullable=False, default="")
    price = Column(Float, nullable=False)
    category = Column(Enum(MenuCategory), nullable=False)
    image_url = Column(String(500), nullable=True)
    is_special = Column(Boolean, nullable=False, default=False)

    restaurant_id = Column(String(64), ForeignKey("users.id"), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    def __repr__(self):
        return f"<MenuItem {self.id} - {self.name} - {self.price:.2f} @ {self.restaurant_id}>"


class Order(Base):
    """
    A placed order.

    items is a JSON list of lines:
        {"menu_item_id": str, "quantity": int, "price": float, "notes": str | None}
    where price is the catalog price captured when the line was created.
    """
    __tablename__ = "orders"

    row_id = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(64), unique=True, nullable=False, index=True)

    # Registered customer id, the placing admin's own id, or the walk-in sentinel
    user_id = Column(String(64), nullable=False, index=True)

    items = Column(JSON, nullable=False)
    total = Column(Float, nullable=False)
    payment_method = Column(Enum(PaymentMethod), nullable=False)

    restaurant_id = Column(String(64), ForeignKey("users.id"), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    @property
    def placed_at(self) -> datetime:
        """Creation time as an aware UTC datetime."""
        return as_utc(self.created_at)

    def __repr__(self):
        return f"<Order {self.id} - {self.user_id} - {self.total:.2f} @ {self.restaurant_id}>"
