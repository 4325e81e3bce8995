"""
Session Controller

Authenticates, registers and logs out users, and scopes everything a
session does to its active restaurant.

Session states:
    Anonymous ──login/register──▶ Authenticated(admin | customer)
    Authenticated ──logout──▶ Anonymous

Suspension is a restaurant property checked at the login gate: customers
of a suspended restaurant are turned away, its admins may still log in to
manage it.

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from restodesk.core.exceptions import UserUpdateError
from restodesk.core.security import hash_password, verify_password
from restodesk.models import User, UserRole
from restodesk.services.repositories import UserRepository, new_id
from restodesk.services.tenant import TenantContext, TenantResolver

logger = logging.getLogger(__name__)


@dataclass
class AuthResult:
    """
    Outcome of a login or registration.

    Attributes:
        success: Whether a session was started
        user: The session user on success
        error_code: Machine-readable reason on failure
        error_message: Generic user-facing message on failure
    """
    success: bool
    user: Optional[User] = None
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    def __bool__(self) -> bool:
        return self.success

    @classmethod
    def failed(cls, error_code: str, error_message: str) -> "AuthResult":
        return cls(success=False, error_code=error_code, error_message=error_message)


LOGIN_FAILED = "Invalid username or password."
REGISTRATION_FAILED = "Registration failed. The username may already be taken."

# Profile fields a user may change on their own record
EDITABLE_FIELDS = ("username", "password", "contact", "business_name", "location")


class SessionController:
    """
    One visitor's session.

    Args:
        users: Identity store
        resolver: Restaurant resolver over the same store
        url_tenant_id: Restaurant id from the link the visitor arrived with
    """

    def __init__(
        self,
        users: UserRepository,
        resolver: TenantResolver,
        url_tenant_id: Optional[str] = None,
    ):
        self.users = users
        self.resolver = resolver
        self.url_tenant_id = url_tenant_id
        self.current_user: Optional[User] = None
        self.active_tenant_id: Optional[str] = resolver.initial_tenant_id(url_tenant_id)

    # =========================================================================
    # STATE
    # =========================================================================

    @property
    def is_authenticated(self) -> bool:
        return self.current_user is not None

    @property
    def is_admin(self) -> bool:
        return self.current_user is not None and self.current_user.role == UserRole.ADMIN

    @property
    def is_superadmin(self) -> bool:
        return self.is_admin and bool(self.current_user.is_superadmin)

    def tenant_context(self) -> TenantContext:
        """Resolved context of the active restaurant, recomputed on each call."""
        return self.resolver.context_for(self.active_tenant_id)

    # =========================================================================
    # AUTHENTICATION
    # =========================================================================

    def login(self, username: str, password: str) -> AuthResult:
        """
        Start a session for valid credentials.

        Customers of a suspended restaurant are refused even with the right
        password; admins are let in to manage their restaurant.
        """
        user = self.users.by_username(username or "")

        if user is None or not verify_password(password, user.password_hash):
            logger.warning(f"Login failed for '{username}'")
            return AuthResult.failed("invalid_credentials", LOGIN_FAILED)

        if user.role != UserRole.ADMIN and not self.resolver.is_active(user.restaurant_id):
            logger.warning(
                f"Login refused for customer '{user.username}': "
                f"restaurant {user.restaurant_id} is suspended"
            )
            return AuthResult.failed("tenant_suspended", LOGIN_FAILED)

        self.current_user = user
        self.active_tenant_id = user.restaurant_id
        logger.info(f"🔓 {user.role.value} '{user.username}' logged in to {user.restaurant_id}")
        return AuthResult(success=True, user=user)

    def register(
        self,
        username: str,
        password: str,
        contact: str,
        desired_role: UserRole = UserRole.CUSTOMER,
    ) -> AuthResult:
        """Create an account in the active restaurant and start a session as it."""
        context = self.tenant_context()

        if context.tenant_id is None:
            return AuthResult.failed("no_tenant", REGISTRATION_FAILED)
        if not context.is_active:
            logger.warning(f"Registration refused: restaurant {context.tenant_id} is suspended")
            return AuthResult.failed("tenant_suspended", REGISTRATION_FAILED)
        if not username or not username.strip() or not password:
            return AuthResult.failed("invalid_input", REGISTRATION_FAILED)
        if self.users.username_exists(username):
            logger.warning(f"Registration refused: username '{username}' is taken")
            return AuthResult.failed("username_taken", REGISTRATION_FAILED)

        user = User(
            id=new_id("user"),
            username=username.strip(),
            password_hash=hash_password(password),
            contact=contact or "N/A",
            role=UserRole(desired_role),
            restaurant_id=context.tenant_id,
        )
        self.users.add(user)

        self.current_user = user
        logger.info(f"🆕 Registered {user.role.value} '{user.username}' in {context.tenant_id}")
        return AuthResult(success=True, user=user)

    def logout(self) -> None:
        """End the session; the restaurant falls back to the link's or the default."""
        if self.current_user is not None:
            logger.info(f"🔒 '{self.current_user.username}' logged out")
        self.current_user = None
        self.active_tenant_id = self.resolver.initial_tenant_id(self.url_tenant_id)

    # =========================================================================
    # ACCOUNT MANAGEMENT
    # =========================================================================

    def update_user(self, user_id: str, changes: dict[str, Any]) -> User:
        """
        Replace fields of a stored user.

        A blank or missing password keeps the current one. Raises
        UserUpdateError for unknown users and usernames owned by someone else.
        """
        user = self.users.by_id(user_id)
        if user is None:
            raise UserUpdateError(f"User {user_id} not found")

        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise UserUpdateError(f"Fields cannot be edited: {sorted(unknown)}")

        new_username = changes.get("username")
        if new_username is not None:
            new_username = new_username.strip()
            if not new_username:
                raise UserUpdateError("Username cannot be blank")
            if self.users.username_exists(new_username, exclude_id=user.id):
                raise UserUpdateError(f"Username '{new_username}' is already taken")
            user.username = new_username

        if changes.get("password"):
            user.password_hash = hash_password(changes["password"])
        if "contact" in changes and changes["contact"] is not None:
            user.contact = changes["contact"]
        if "business_name" in changes:
            user.business_name = changes["business_name"]
        if "location" in changes:
            user.location = changes["location"]

        self.users.save(user)

        if self.current_user is not None and self.current_user.id == user.id:
            self.current_user = user
        logger.info(f"✏️ Updated account {user.id}")
        return user

    def create_admin(self, business_name: str, username: str, password: str) -> Optional[str]:
        """
        Provision a new restaurant owned by a new admin.

        Callers must check that the session user is a superadmin.

        Returns:
            The new restaurant id, or None if a field is blank or the username is taken
        """
        if not business_name or not username or not password:
            return None
        if self.users.username_exists(username):
            logger.warning(f"Restaurant provisioning refused: username '{username}' is taken")
            return None

        admin_id = new_id("user-admin")
        admin = User(
            id=admin_id,
            username=username.strip(),
            password_hash=hash_password(password),
            contact="N/A",
            role=UserRole.ADMIN,
            restaurant_id=admin_id,
            business_name=business_name,
            is_active=True,
        )
        self.users.add(admin)
        logger.info(f"🏪 Provisioned restaurant '{business_name}' ({admin_id})")
        return admin_id

    def toggle_admin_status(self, admin_id: str) -> Optional[User]:
        """Flip an admin's active flag. Non-admins and unknown ids are left alone."""
        admin = self.users.by_id(admin_id)
        if admin is None or admin.role != UserRole.ADMIN:
            return None

        admin.is_active = not admin.active
        self.users.save(admin)
        state = "activated" if admin.is_active else "suspended"
        logger.info(f"🔁 Admin {admin.id} {state}")
        return admin

    def manageable_admins(self) -> list[User]:
        """Every admin except the session user."""
        current_id = self.current_user.id if self.current_user else None
        return [a for a in self.users.admins() if a.id != current_id]
