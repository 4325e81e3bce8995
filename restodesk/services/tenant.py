"""
Tenant Resolution

Works out which restaurant a visitor is looking at. A shared link carries
the restaurant id in its fragment (``https://host/#restaurant=<id>``);
without one the first admin in the user store is used.

Resolution is a pure read of the current user store, so toggling a
restaurant's active flag is visible on the very next call.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import unquote

from restodesk.core.config import get_settings
from restodesk.models import User
from restodesk.services.repositories import UserRepository

logger = logging.getLogger(__name__)

RESTAURANT_PATTERN = re.compile(r"[#?&]?restaurant=([^&#]+)")

DEFAULT_BUSINESS_NAME = "Welcome"


def parse_restaurant_fragment(value: Optional[str]) -> Optional[str]:
    """
    Extract the restaurant id from a URL, fragment or query string.

    Example:
        >>> parse_restaurant_fragment("https://example.com/#restaurant=user-dave-admin")
        'user-dave-admin'
        >>> parse_restaurant_fragment("#lang=es") is None
        True
    """
    if not value:
        return None
    match = RESTAURANT_PATTERN.search(value)
    if not match:
        return None
    return unquote(match.group(1)) or None


def shareable_url(tenant_id: str, base_url: Optional[str] = None) -> str:
    """Link that opens the given restaurant's login/menu screen."""
    base = (base_url or get_settings().app_base_url).rstrip("/")
    return f"{base}/#restaurant={tenant_id}"


@dataclass
class TenantContext:
    """
    The restaurant a request is scoped to.

    Attributes:
        tenant_id: Restaurant id, None when nothing resolves
        admin: The restaurant owner, None when the id names no admin
        is_active: Owner's active flag (unset counts as active), False without owner
        business_name: Display name, "Welcome" unless the restaurant is active
    """
    tenant_id: Optional[str]
    admin: Optional[User]
    is_active: bool
    business_name: str

    @property
    def is_suspended(self) -> bool:
        """A restaurant was selected but it cannot take customers."""
        return self.tenant_id is not None and not self.is_active

    def to_dict(self) -> dict:
        return {
            "tenant_id": self.tenant_id,
            "business_name": self.business_name,
            "is_active": self.is_active,
            "is_suspended": self.is_suspended,
        }


class TenantResolver:
    """Derives the active restaurant from a URL-supplied id or the default."""

    def __init__(self, users: UserRepository):
        self.users = users

    def default_tenant_id(self) -> Optional[str]:
        """Id of the first admin in the store."""
        admin = self.users.first_admin()
        return admin.id if admin else None

    def initial_tenant_id(self, url_tenant_id: Optional[str]) -> Optional[str]:
        return url_tenant_id or self.default_tenant_id()

    def context_for(self, tenant_id: Optional[str]) -> TenantContext:
        """Context of an already chosen restaurant id."""
        admin = self.users.tenant_owner(tenant_id)
        is_active = admin.active if admin is not None else False
        if is_active and admin.business_name:
            business_name = admin.business_name
        else:
            business_name = DEFAULT_BUSINESS_NAME
        return TenantContext(
            tenant_id=tenant_id,
            admin=admin,
            is_active=is_active,
            business_name=business_name,
        )

    def resolve(self, url_tenant_id: Optional[str] = None) -> TenantContext:
        """Context for the URL-supplied id, falling back to the default restaurant."""
        return self.context_for(self.initial_tenant_id(url_tenant_id))

    def is_active(self, tenant_id: Optional[str]) -> bool:
        return self.context_for(tenant_id).is_active
