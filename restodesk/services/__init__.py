"""
                        Services Module

Business logic of the ordering system, wired together by OrderingSystem:

    - repositories: user / menu / order stores with tenant-scoped queries
    - tenant: restaurant resolution from shared links
    - session: login, registration, account and restaurant administration
    - cart: pending order lines with snapshotted prices
    - orders: order placement (self-service and admin order entry)
    - catalog: menu editing and the customer menu view
    - reporting: sales dashboard figures

Usage:
    from restodesk.services import get_ordering_system

    system = get_ordering_system()
    client = system.open_session("user-dave-admin")
    client.controller.login("jane", "password123")
"""

import logging
import secrets
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from functools import lru_cache
from typing import Optional

from restodesk.core.config import get_settings
from restodesk.database import create_session_factory, create_store_engine, init_db
from restodesk.models import utc_now
from restodesk.seed import seed_demo_data
from restodesk.services.cart import Cart, CartLine
from restodesk.services.catalog import CatalogService
from restodesk.services.orders import OrderService
from restodesk.services.reporting import SalesReport
from restodesk.services.repositories import MenuRepository, OrderRepository, UserRepository
from restodesk.services.session import AuthResult, SessionController
from restodesk.services.tenant import TenantContext, TenantResolver, parse_restaurant_fragment, shareable_url

logger = logging.getLogger(__name__)


@dataclass
class ClientSession:
    """One visitor: their session state and their open cart."""
    token: str
    controller: SessionController
    cart: Cart = field(default_factory=Cart)
    last_seen: datetime = field(default_factory=utc_now)

    def is_expired(self, ttl: timedelta, now: Optional[datetime] = None) -> bool:
        return (now or utc_now()) - self.last_seen > ttl


class OrderingSystem:
    """
    The whole application state: one in-memory store and the services over it.

    Args:
        database_url: SQLAlchemy URL (defaults to settings.database_url)
        seed: Load the demo restaurants (defaults to settings.should_seed)
    """

    def __init__(self, database_url: Optional[str] = None, seed: Optional[bool] = None):
        settings = get_settings()

        self.engine = create_store_engine(database_url)
        init_db(self.engine)
        self.db = create_session_factory(self.engine)()

        self.users = UserRepository(self.db)
        self.menu = MenuRepository(self.db)
        self.orders = OrderRepository(self.db)

        self.resolver = TenantResolver(self.users)
        self.catalog = CatalogService(self.menu, self.users)
        self.ordering = OrderService(self.orders, self.users)
        self.reports = SalesReport(self.orders, self.users, self.menu)

        self._sessions: dict[str, ClientSession] = {}
        self.session_ttl = timedelta(minutes=settings.session_ttl_minutes)

        if settings.should_seed if seed is None else seed:
            seed_demo_data(self.db)

    # =========================================================================
    # CLIENT SESSIONS
    # =========================================================================

    def new_controller(self, url_tenant_id: Optional[str] = None) -> SessionController:
        return SessionController(self.users, self.resolver, url_tenant_id)

    def open_session(self, url_tenant_id: Optional[str] = None) -> ClientSession:
        """Start an anonymous visitor session, optionally from a restaurant link."""
        self.prune_sessions()
        token = secrets.token_urlsafe(32)
        client = ClientSession(token=token, controller=self.new_controller(url_tenant_id))
        self._sessions[token] = client
        return client

    def get_session(self, token: Optional[str]) -> Optional[ClientSession]:
        """Live session for a token; each lookup extends its idle timeout."""
        if not token:
            return None
        client = self._sessions.get(token)
        if client is None:
            return None
        if client.is_expired(self.session_ttl):
            self.close_session(token)
            return None
        client.last_seen = utc_now()
        return client

    def close_session(self, token: str) -> None:
        client = self._sessions.pop(token, None)
        if client is not None:
            client.controller.logout()

    def prune_sessions(self, now: Optional[datetime] = None) -> int:
        """Close every session idle for longer than the session TTL."""
        expired = [
            token for token, client in self._sessions.items()
            if client.is_expired(self.session_ttl, now)
        ]
        for token in expired:
            self.close_session(token)
        if expired:
            logger.info(f"⌛ Expired {len(expired)} idle session(s)")
        return len(expired)

    @property
    def session_count(self) -> int:
        return len(self._sessions)

    def close(self) -> None:
        """Drop all sessions and the in-memory store."""
        self._sessions.clear()
        self.db.close()
        self.engine.dispose()


@lru_cache()
def get_ordering_system() -> OrderingSystem:
    """
    Get the process-wide ordering system.

    The instance is cached (singleton pattern): all API requests share one
    in-memory store, created and seeded on first use.
    """
    logger.info("Building in-memory ordering system")
    return OrderingSystem()


def reset_ordering_system() -> None:
    """
    Discard the cached ordering system and all of its state.

    The next call to get_ordering_system() builds a fresh store.
    """
    if get_ordering_system.cache_info().currsize:
        get_ordering_system().close()
    get_ordering_system.cache_clear()
    logger.debug("Ordering system cache cleared")


__all__ = [
    "OrderingSystem",
    "ClientSession",
    "get_ordering_system",
    "reset_ordering_system",
    "AuthResult",
    "SessionController",
    "TenantContext",
    "TenantResolver",
    "Cart",
    "CartLine",
    "CatalogService",
    "OrderService",
    "SalesReport",
    "parse_restaurant_fragment",
    "shareable_url",
]
