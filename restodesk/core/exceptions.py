"""
Domain Exceptions

Raised by the services for input that can never succeed, such as an empty
order or a negative price. Expected business rejections
such as a wrong password are reported through result objects instead,
see restodesk.services.session.AuthResult.
"""


class RestodeskError(Exception):
    """Base class for all domain errors."""

    error_code = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class TenantNotFoundError(RestodeskError):
    """No restaurant owner exists for the given tenant id."""

    error_code = "tenant_not_found"


class OrderPlacementError(RestodeskError):
    """An order could not be created (no lines, no tenant)."""

    error_code = "order_rejected"


class InvalidMenuItemError(RestodeskError):
    """A menu item payload failed validation (price, category, name)."""

    error_code = "invalid_menu_item"


class MenuItemNotFoundError(RestodeskError):
    """No menu item with this id belongs to the tenant."""

    error_code = "menu_item_not_found"


class UserUpdateError(RestodeskError):
    """A profile change was refused (unknown user, username taken)."""

    error_code = "user_update_rejected"
