"""
Pydantic Schemas for Request/Response Validation

Covers the four areas of the API:
- Authentication and accounts
- Menu browsing and editing
- Cart and order placement
- Sales dashboard and restaurant administration

Author: Khalil Bannouri
Version: 1.0.0
"""

from datetime import date, datetime
from typing import Optional, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from restodesk.models import MenuCategory, PaymentMethod, UserRole


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class LoginRequest(BaseModel):
    """Credentials, plus the restaurant link the visitor came from."""
    username: str = Field(..., min_length=1, max_length=100, examples=["john"])
    password: str = Field(..., min_length=1, max_length=200)
    restaurant: Optional[str] = Field(None, examples=["user-madison-admin"])


class RegisterRequest(BaseModel):
    """
    New customer account in the restaurant named by the link (or the default one).

    Unknown fields such as a role are refused; admins are only created
    through restaurant provisioning.
    """
    model_config = ConfigDict(extra="forbid")

    username: str = Field(..., min_length=1, max_length=100, examples=["maria"])
    password: str = Field(..., min_length=1, max_length=200)
    contact: str = Field(..., min_length=1, max_length=50, examples=["600-111-222"])
    restaurant: Optional[str] = Field(None, examples=["user-dave-admin"])

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Username cannot be blank")
        return v.strip()


class AccountUpdate(BaseModel):
    """Profile changes; a blank password keeps the current one."""
    username: Optional[str] = Field(None, min_length=1, max_length=100)
    password: Optional[str] = Field(None, max_length=200)
    contact: Optional[str] = Field(None, max_length=50)
    business_name: Optional[str] = Field(None, max_length=150)


class MenuItemUpsert(BaseModel):
    """Create a menu item, or update the one named by id."""
    id: Optional[str] = None
    name: str = Field(..., min_length=1, max_length=150, examples=["Pizza Margherita"])
    description: str = Field(default="", max_length=1000)
    price: float = Field(..., ge=0, allow_inf_nan=False, examples=[12.5])
    category: MenuCategory = Field(default=MenuCategory.MAIN)
    image_url: Optional[str] = Field(None, max_length=500)
    is_special: bool = False


class CartItemRequest(BaseModel):
    menu_item_id: str = Field(..., min_length=1)


class CartNoteRequest(BaseModel):
    notes: Optional[str] = Field(None, max_length=200, examples=["No onions"])


class PlaceOrderRequest(BaseModel):
    """
    Submit the cart.

    Customers choose the payment method; admins taking an order pick the
    customer (omit for a walk-in) and are always recorded as cash.
    """
    payment_method: PaymentMethod = Field(default=PaymentMethod.CASH)
    customer_id: Optional[str] = Field(None, examples=["walk-in", "user-2"])


class CreateRestaurantRequest(BaseModel):
    """Superadmin: provision a restaurant and its owner account."""
    business_name: str = Field(..., min_length=1, max_length=150, examples=["La Trattoria de Luigi"])
    username: str = Field(..., min_length=1, max_length=100, examples=["luigi_admin"])
    password: str = Field(..., min_length=1, max_length=200)


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class UserResponse(BaseModel):
    """A user without credentials."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    contact: str
    role: UserRole
    restaurant_id: str
    business_name: Optional[str] = None
    is_active: Optional[bool] = None
    is_superadmin: bool = False
    location: Optional[dict] = None


class TenantResponse(BaseModel):
    tenant_id: Optional[str]
    business_name: str
    is_active: bool
    is_suspended: bool


class AuthResponse(BaseModel):
    """Successful login or registration."""
    token: str
    user: UserResponse
    tenant: TenantResponse


class MenuItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str
    price: float
    category: MenuCategory
    image_url: Optional[str] = None
    is_special: bool
    restaurant_id: str


class MenuCategoryGroup(BaseModel):
    category: MenuCategory
    items: List[MenuItemResponse]


class MenuResponse(BaseModel):
    """Customer menu: specials first, then the rest by category."""
    tenant: TenantResponse
    specials: List[MenuItemResponse]
    categories: List[MenuCategoryGroup]


class CartLineResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    menu_item_id: str
    quantity: int
    price: float
    notes: Optional[str] = None


class CartResponse(BaseModel):
    lines: List[CartLineResponse]
    total: float


class OrderLineResponse(BaseModel):
    menu_item_id: str
    name: Optional[str] = None
    quantity: int
    price: float
    notes: Optional[str] = None


class OrderResponse(BaseModel):
    id: str
    user_id: str
    customer_name: Optional[str] = None
    items: List[OrderLineResponse]
    total: float
    payment_method: PaymentMethod
    restaurant_id: str
    created_at: datetime


class OrderListResponse(BaseModel):
    total: int
    orders: List[OrderResponse]


class DailySalesResponse(BaseModel):
    day: date
    walk_in_total: float
    registered_total: float
    total: float
    walk_in_orders: List[OrderResponse]
    registered_orders: List[OrderResponse]


class DaySalesResponse(BaseModel):
    day: date
    label: str
    total: float


class CustomerStatsResponse(BaseModel):
    user_id: str
    username: str
    total_spent: float
    order_count: int


class SalesOverviewResponse(BaseModel):
    """Everything the admin sales tab shows."""
    today: DailySalesResponse
    weekly: List[DaySalesResponse]
    top_spenders: List[CustomerStatsResponse]
    most_frequent: List[CustomerStatsResponse]
    orders: List[OrderResponse]


class RestaurantLinkResponse(BaseModel):
    tenant_id: str
    link: str


class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    database: str
    restaurants: int
    timestamp: datetime
