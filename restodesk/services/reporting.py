"""
Sales Reporting

Derived views behind the admin sales dashboard. Nothing here is stored:
every figure is recomputed from one restaurant's orders on each call.

Days are calendar days in the configured time zone (settings.timezone).
Walk-in orders (placed under the walk-in sentinel) count towards daily
sales but never towards per-customer statistics, since the sentinel is
not a customer.

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, tzinfo
from typing import Optional

from restodesk.core.config import get_settings
from restodesk.models import Order, User, as_utc, utc_now
from restodesk.services.repositories import MenuRepository, OrderRepository, UserRepository

logger = logging.getLogger(__name__)

UNKNOWN_ITEM = "Unknown Item"
WALK_IN_LABEL = "Walk-in"


@dataclass
class DailyTotals:
    """Today's sales split by walk-in and registered customers."""
    day: date
    walk_in_total: float
    registered_total: float
    total: float
    walk_in_orders: list[Order] = field(default_factory=list)
    registered_orders: list[Order] = field(default_factory=list)


@dataclass
class DaySales:
    """One point of the weekly sales series."""
    day: date
    label: str
    total: float


@dataclass
class CustomerStats:
    """Lifetime spend and order count of one customer at one restaurant."""
    user: User
    total_spent: float = 0.0
    order_count: int = 0


@dataclass
class OrderLineSummary:
    menu_item_id: str
    name: str
    quantity: int
    price: float
    notes: Optional[str] = None


@dataclass
class OrderSummary:
    """An order with its customer and dish names resolved for display."""
    order: Order
    customer_name: str
    lines: list[OrderLineSummary]


class SalesReport:
    """Sales views for one restaurant at a time."""

    def __init__(
        self,
        orders: OrderRepository,
        users: UserRepository,
        menu: MenuRepository,
        tz: Optional[tzinfo] = None,
    ):
        settings = get_settings()
        self.orders = orders
        self.users = users
        self.menu = menu
        self.tz = tz or settings.tzinfo
        self.walk_in_id = settings.walk_in_id
        self.top_limit = settings.top_customers_limit

    # =========================================================================
    # HELPERS
    # =========================================================================

    def local_day(self, moment: datetime) -> date:
        """Calendar day of a timestamp in the restaurant's time zone."""
        return as_utc(moment).astimezone(self.tz).date()

    def _today(self, now: Optional[datetime]) -> date:
        return self.local_day(now or utc_now())

    @staticmethod
    def _newest_first(orders: list[Order]) -> list[Order]:
        return sorted(orders, key=lambda o: o.placed_at, reverse=True)

    # =========================================================================
    # DAILY / WEEKLY
    # =========================================================================

    def daily_totals(self, tenant_id: str, now: Optional[datetime] = None) -> DailyTotals:
        today = self._today(now)
        todays = [o for o in self.orders.by_tenant(tenant_id) if self.local_day(o.placed_at) == today]
        todays = self._newest_first(todays)

        walk_ins = [o for o in todays if o.user_id == self.walk_in_id]
        registered = [o for o in todays if o.user_id != self.walk_in_id]

        walk_in_total = round(sum(o.total for o in walk_ins), 2)
        registered_total = round(sum(o.total for o in registered), 2)

        return DailyTotals(
            day=today,
            walk_in_total=walk_in_total,
            registered_total=registered_total,
            total=round(walk_in_total + registered_total, 2),
            walk_in_orders=walk_ins,
            registered_orders=registered,
        )

    def weekly_series(self, tenant_id: str, now: Optional[datetime] = None) -> list[DaySales]:
        """Sales of the last 7 days including today, oldest first, zero-filled."""
        today = self._today(now)
        days = [today - timedelta(days=offset) for offset in range(6, -1, -1)]
        totals = {day: 0.0 for day in days}

        for order in self.orders.by_tenant(tenant_id):
            day = self.local_day(order.placed_at)
            if day in totals:
                totals[day] += order.total

        return [
            DaySales(day=day, label=day.strftime("%a"), total=round(totals[day], 2))
            for day in days
        ]

    # =========================================================================
    # CUSTOMERS
    # =========================================================================

    def customer_stats(self, tenant_id: str) -> list[CustomerStats]:
        """Stats for every customer of the restaurant, in user store order."""
        stats = {u.id: CustomerStats(user=u) for u in self.users.customers(tenant_id)}

        for order in self.orders.by_tenant(tenant_id):
            entry = stats.get(order.user_id)
            if entry is None:
                # Walk-ins and orders an admin placed for themselves
                continue
            entry.total_spent += order.total
            entry.order_count += 1

        for entry in stats.values():
            entry.total_spent = round(entry.total_spent, 2)
        return list(stats.values())

    def top_spenders(self, tenant_id: str, limit: Optional[int] = None) -> list[CustomerStats]:
        if limit is None:
            limit = self.top_limit
        ranked = sorted(self.customer_stats(tenant_id), key=lambda s: s.total_spent, reverse=True)
        return ranked[:limit]

    def most_frequent(self, tenant_id: str, limit: Optional[int] = None) -> list[CustomerStats]:
        if limit is None:
            limit = self.top_limit
        ranked = sorted(self.customer_stats(tenant_id), key=lambda s: s.order_count, reverse=True)
        return ranked[:limit]

    # =========================================================================
    # HISTORY
    # =========================================================================

    def summarize(self, tenant_id: str, orders: list[Order]) -> list[OrderSummary]:
        """Resolve customer and dish names; deleted dishes show as "Unknown Item"."""
        names = {item.id: item.name for item in self.menu.by_tenant(tenant_id)}
        users = {u.id: u.username for u in self.users.by_tenant(tenant_id)}

        summaries = []
        for order in orders:
            if order.user_id == self.walk_in_id:
                customer_name = WALK_IN_LABEL
            else:
                customer_name = users.get(order.user_id, order.user_id)
            lines = [
                OrderLineSummary(
                    menu_item_id=line["menu_item_id"],
                    name=names.get(line["menu_item_id"], UNKNOWN_ITEM),
                    quantity=line["quantity"],
                    price=line["price"],
                    notes=line.get("notes"),
                )
                for line in order.items
            ]
            summaries.append(OrderSummary(order=order, customer_name=customer_name, lines=lines))
        return summaries

    def order_history(self, tenant_id: str) -> list[OrderSummary]:
        """All orders of the restaurant, newest first."""
        return self.summarize(tenant_id, self._newest_first(self.orders.by_tenant(tenant_id)))
