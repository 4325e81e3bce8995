"""
Catalog Management

Menu editing for restaurant admins and the grouped menu customers browse.
Every operation takes the restaurant id explicitly; nothing is inferred
from the items already on the menu.
"""

import logging
import math
from typing import Any, Optional

from restodesk.core.exceptions import InvalidMenuItemError, MenuItemNotFoundError, TenantNotFoundError
from restodesk.models import MenuCategory, MenuItem
from restodesk.services.repositories import MenuRepository, UserRepository, new_id

logger = logging.getLogger(__name__)

CATEGORY_ORDER = [
    MenuCategory.APPETIZER,
    MenuCategory.MAIN,
    MenuCategory.DESSERT,
    MenuCategory.BEVERAGE,
]


def parse_price(value: Any) -> float:
    """Price as a float; non-numeric, NaN, infinite and negative values are refused."""
    if isinstance(value, bool):
        raise InvalidMenuItemError(f"Invalid price: {value!r}")
    try:
        price = float(value)
    except (TypeError, ValueError):
        raise InvalidMenuItemError(f"Invalid price: {value!r}")
    if math.isnan(price) or math.isinf(price):
        raise InvalidMenuItemError(f"Invalid price: {value!r}")
    if price < 0:
        raise InvalidMenuItemError(f"Price cannot be negative: {price}")
    return round(price, 2)


def parse_category(value: Any) -> MenuCategory:
    try:
        return MenuCategory(value)
    except ValueError:
        valid = [c.value for c in MenuCategory]
        raise InvalidMenuItemError(f"Invalid category {value!r}. Options: {valid}")


class CatalogService:
    """Per-restaurant menu editing and views."""

    def __init__(self, menu: MenuRepository, users: UserRepository):
        self.menu = menu
        self.users = users

    def _require_tenant(self, tenant_id: Optional[str]) -> str:
        if not tenant_id or self.users.tenant_owner(tenant_id) is None:
            raise TenantNotFoundError(f"Restaurant {tenant_id} does not exist")
        return tenant_id

    def _get(self, tenant_id: str, item_id: str) -> MenuItem:
        item = self.menu.by_id(tenant_id, item_id)
        if item is None:
            raise MenuItemNotFoundError(f"Menu item {item_id} not found")
        return item

    # =========================================================================
    # EDITING
    # =========================================================================

    def add_or_update_item(self, tenant_id: str, data: dict[str, Any]) -> MenuItem:
        """
        Update the item named by data["id"], or create a new one.

        An id that does not belong to this restaurant creates a new item
        with a fresh id rather than touching another restaurant's menu.
        """
        tenant_id = self._require_tenant(tenant_id)
        existing = self.menu.by_id(tenant_id, data["id"]) if data.get("id") else None

        if existing is not None:
            # Validate everything before touching the stored item
            updates: dict[str, Any] = {}
            if "name" in data:
                updates["name"] = self._clean_name(data["name"])
            if "description" in data:
                updates["description"] = data["description"] or ""
            if "price" in data:
                updates["price"] = parse_price(data["price"])
            if "category" in data:
                updates["category"] = parse_category(data["category"])
            if "image_url" in data:
                updates["image_url"] = data["image_url"] or None
            if "is_special" in data:
                updates["is_special"] = bool(data["is_special"])
            for field, value in updates.items():
                setattr(existing, field, value)
            self.menu.save(existing)
            logger.info(f"✏️ Menu item {existing.id} updated at {tenant_id}")
            return existing

        item = MenuItem(
            id=new_id("menu"),
            name=self._clean_name(data.get("name")),
            description=data.get("description") or "",
            price=parse_price(data.get("price")),
            category=parse_category(data.get("category", MenuCategory.MAIN)),
            image_url=data.get("image_url") or None,
            is_special=bool(data.get("is_special", False)),
            restaurant_id=tenant_id,
        )
        self.menu.add(item)
        logger.info(f"🍽️ Menu item {item.id} '{item.name}' added at {tenant_id}")
        return item

    @staticmethod
    def _clean_name(name: Any) -> str:
        if not isinstance(name, str) or not name.strip():
            raise InvalidMenuItemError("Menu item name is required")
        return name.strip()

    def delete_item(self, tenant_id: str, item_id: str) -> None:
        item = self._get(tenant_id, item_id)
        self.menu.delete(item)
        logger.info(f"🗑️ Menu item {item_id} deleted at {tenant_id}")

    def toggle_special(self, tenant_id: str, item_id: str) -> MenuItem:
        item = self._get(tenant_id, item_id)
        item.is_special = not item.is_special
        self.menu.save(item)
        return item

    # =========================================================================
    # VIEWS
    # =========================================================================

    def items(self, tenant_id: str) -> list[MenuItem]:
        return self.menu.by_tenant(tenant_id)

    def get_item(self, tenant_id: str, item_id: str) -> MenuItem:
        return self._get(tenant_id, item_id)

    def specials(self, tenant_id: str) -> list[MenuItem]:
        return [item for item in self.menu.by_tenant(tenant_id) if item.is_special]

    def regular_items(self, tenant_id: str) -> list[MenuItem]:
        return [item for item in self.menu.by_tenant(tenant_id) if not item.is_special]

    def menu_by_category(
        self,
        tenant_id: str,
        items: Optional[list[MenuItem]] = None,
    ) -> dict[MenuCategory, list[MenuItem]]:
        """Items grouped in display order; empty categories are left out."""
        if items is None:
            items = self.menu.by_tenant(tenant_id)
        grouped: dict[MenuCategory, list[MenuItem]] = {}
        for category in CATEGORY_ORDER:
            in_category = [item for item in items if item.category == category]
            if in_category:
                grouped[category] = in_category
        return grouped
