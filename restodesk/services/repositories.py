"""
Repositories

One repository per store (users, menu items, orders) over a shared
SQLAlchemy session. Tenant data is only reachable through tenant-scoped
queries (by_tenant, by_id with a tenant id), which keeps one restaurant's
menu and orders out of another's views.

Every mutating method commits, so each service operation leaves the store
fully consistent before it returns.

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from restodesk.models import MenuItem, Order, User, UserRole

logger = logging.getLogger(__name__)


def new_id(prefix: str) -> str:
    """Generate a fresh public identifier such as ``order-3f2a9c0d41be``."""
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


class UserRepository:
    """Identity store: admins and customers of all restaurants."""

    def __init__(self, session: Session):
        self.session = session

    def all(self) -> list[User]:
        return list(self.session.scalars(select(User).order_by(User.row_id)))

    def by_id(self, user_id: Optional[str]) -> Optional[User]:
        if not user_id:
            return None
        return self.session.scalars(select(User).where(User.id == user_id)).first()

    def by_username(self, username: str) -> Optional[User]:
        """Case-insensitive lookup."""
        key = username.strip().lower()
        return self.session.scalars(select(User).where(User.username_key == key)).first()

    def username_exists(self, username: str, exclude_id: Optional[str] = None) -> bool:
        user = self.by_username(username)
        return user is not None and user.id != exclude_id

    def by_tenant(self, tenant_id: str) -> list[User]:
        """Owner, staff admins and customers of one restaurant."""
        query = select(User).where(User.restaurant_id == tenant_id).order_by(User.row_id)
        return list(self.session.scalars(query))

    def customers(self, tenant_id: str) -> list[User]:
        return [u for u in self.by_tenant(tenant_id) if u.role == UserRole.CUSTOMER]

    def admins(self) -> list[User]:
        query = select(User).where(User.role == UserRole.ADMIN).order_by(User.row_id)
        return list(self.session.scalars(query))

    def first_admin(self) -> Optional[User]:
        query = select(User).where(User.role == UserRole.ADMIN).order_by(User.row_id).limit(1)
        return self.session.scalars(query).first()

    def tenant_owner(self, tenant_id: Optional[str]) -> Optional[User]:
        """The admin whose id is the tenant id, if any."""
        user = self.by_id(tenant_id)
        if user is None or user.role != UserRole.ADMIN:
            return None
        return user

    def add(self, user: User) -> User:
        user.username_key = user.username.strip().lower()
        self.session.add(user)
        self.session.commit()
        logger.debug(f"User stored: {user!r}")
        return user

    def save(self, user: User) -> User:
        user.username_key = user.username.strip().lower()
        self.session.commit()
        return user


class MenuRepository:
    """Catalog store: menu items, always queried per restaurant."""

    def __init__(self, session: Session):
        self.session = session

    def by_tenant(self, tenant_id: str) -> list[MenuItem]:
        query = select(MenuItem).where(MenuItem.restaurant_id == tenant_id).order_by(MenuItem.row_id)
        return list(self.session.scalars(query))

    def by_id(self, tenant_id: str, item_id: str) -> Optional[MenuItem]:
        query = select(MenuItem).where(
            MenuItem.restaurant_id == tenant_id,
            MenuItem.id == item_id,
        )
        return self.session.scalars(query).first()

    def add(self, item: MenuItem) -> MenuItem:
        self.session.add(item)
        self.session.commit()
        return item

    def save(self, item: MenuItem) -> MenuItem:
        self.session.commit()
        return item

    def delete(self, item: MenuItem) -> None:
        self.session.delete(item)
        self.session.commit()


class OrderRepository:
    """Order store: append-only, queried per restaurant."""

    def __init__(self, session: Session):
        self.session = session

    def by_tenant(self, tenant_id: str) -> list[Order]:
        """Orders of one restaurant in placement order."""
        query = select(Order).where(Order.restaurant_id == tenant_id).order_by(Order.row_id)
        return list(self.session.scalars(query))

    def by_customer(self, tenant_id: str, user_id: str) -> list[Order]:
        query = (
            select(Order)
            .where(Order.restaurant_id == tenant_id, Order.user_id == user_id)
            .order_by(Order.row_id)
        )
        return list(self.session.scalars(query))

    def add(self, order: Order) -> Order:
        self.session.add(order)
        self.session.commit()
        return order
