"""
FastAPI Application Entry Point

Multi-tenant restaurant ordering API. Every restaurant (tenant) owns its
menu and orders; visitors arrive through a restaurant link and act inside
that restaurant only.

Endpoints:
    - GET  /api/tenant: Restaurant resolved from a link
    - POST /api/auth/login | register | logout, GET /api/auth/me
    - GET  /api/menu: Customer menu (specials + categories)
    - /api/cart: Add, remove, annotate and clear cart lines
    - POST /api/orders, GET /api/orders: Place the cart, list orders
    - PATCH /api/account: Profile and business name
    - /api/admin/...: Sales dashboard, menu editing, order entry customers
    - /api/admin/tenants: Superadmin restaurant provisioning and suspension
    - GET  /health: System health check

Sessions are identified by the token returned from login/registration,
sent back in the X-Session-Token header.

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Optional

from fastapi import Depends, FastAPI, Header, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from restodesk.core.config import get_settings, setup_logging
from restodesk.core.exceptions import (
    InvalidMenuItemError,
    MenuItemNotFoundError,
    OrderPlacementError,
    RestodeskError,
    TenantNotFoundError,
    UserUpdateError,
)
from restodesk.models import UserRole
from restodesk.schemas import (
    AccountUpdate,
    AuthResponse,
    CartItemRequest,
    CartLineResponse,
    CartNoteRequest,
    CartResponse,
    CreateRestaurantRequest,
    CustomerStatsResponse,
    DailySalesResponse,
    DaySalesResponse,
    ErrorResponse,
    HealthResponse,
    LoginRequest,
    MenuCategoryGroup,
    MenuItemResponse,
    MenuItemUpsert,
    MenuResponse,
    OrderLineResponse,
    OrderListResponse,
    OrderResponse,
    PlaceOrderRequest,
    RegisterRequest,
    RestaurantLinkResponse,
    SalesOverviewResponse,
    TenantResponse,
    UserResponse,
)
from restodesk.services import ClientSession, OrderingSystem, get_ordering_system, reset_ordering_system
from restodesk.services.reporting import CustomerStats, OrderSummary
from restodesk.services.tenant import TenantContext, shareable_url

# Initialize configuration and logging
settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown events.
    """
    # Startup
    logger.info("=" * 60)
    logger.info(f"🚀 Starting {settings.app_name}")
    logger.info(f"   Version: {settings.app_version}")
    logger.info(f"   Environment: {settings.env_mode.value}")
    logger.info(f"   Time zone: {settings.timezone}")
    logger.info("=" * 60)

    system = get_ordering_system()
    logger.info(f"✅ In-memory store ready ({len(system.users.admins())} admin account(s))")

    problems = settings.validate_production_config()
    if problems:
        logger.warning(f"⚠️ Settings still on demo defaults: {problems}")

    yield  # Application runs

    # Shutdown
    logger.info("Shutting down...")
    reset_ordering_system()
    logger.info("✅ Cleanup complete")


# =============================================================================
# APPLICATION INSTANCE
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description=(
        "Multi-tenant restaurant ordering: menus, carts, orders and sales "
        "reporting per restaurant, with superadmin restaurant provisioning."
    ),
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# DEPENDENCIES
# =============================================================================

async def get_system() -> OrderingSystem:
    return get_ordering_system()


async def optional_session(
    x_session_token: Optional[str] = Header(None, alias="X-Session-Token"),
    system: OrderingSystem = Depends(get_system),
) -> Optional[ClientSession]:
    client = system.get_session(x_session_token)
    if client is None or not client.controller.is_authenticated:
        return None
    return client


async def require_session(client: Optional[ClientSession] = Depends(optional_session)) -> ClientSession:
    if client is None:
        raise HTTPException(status_code=401, detail="Login required")
    return client


async def require_admin(client: ClientSession = Depends(require_session)) -> ClientSession:
    if not client.controller.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return client


async def require_superadmin(client: ClientSession = Depends(require_admin)) -> ClientSession:
    if not client.controller.is_superadmin:
        raise HTTPException(status_code=403, detail="Superadmin access required")
    return client


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def tenant_response(context: TenantContext) -> TenantResponse:
    return TenantResponse(**context.to_dict())


def order_response(summary: OrderSummary) -> OrderResponse:
    order = summary.order
    return OrderResponse(
        id=order.id,
        user_id=order.user_id,
        customer_name=summary.customer_name,
        items=[
            OrderLineResponse(
                menu_item_id=line.menu_item_id,
                name=line.name,
                quantity=line.quantity,
                price=line.price,
                notes=line.notes,
            )
            for line in summary.lines
        ],
        total=order.total,
        payment_method=order.payment_method,
        restaurant_id=order.restaurant_id,
        created_at=order.placed_at,
    )


def stats_response(stats: CustomerStats) -> CustomerStatsResponse:
    return CustomerStatsResponse(
        user_id=stats.user.id,
        username=stats.user.username,
        total_spent=stats.total_spent,
        order_count=stats.order_count,
    )


def cart_response(client: ClientSession) -> CartResponse:
    return CartResponse(
        lines=[CartLineResponse.model_validate(line) for line in client.cart.lines()],
        total=client.cart.total(),
    )


def auth_response(client: ClientSession) -> AuthResponse:
    return AuthResponse(
        token=client.token,
        user=UserResponse.model_validate(client.controller.current_user),
        tenant=tenant_response(client.controller.tenant_context()),
    )


def active_tenant(client: ClientSession) -> str:
    tenant_id = client.controller.active_tenant_id
    if tenant_id is None:
        raise HTTPException(status_code=404, detail="No restaurant selected")
    return tenant_id


# =============================================================================
# ROOT & HEALTH ENDPOINTS
# =============================================================================

@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """API root with navigation links."""
    return {
        "message": f"🍽️ Welcome to {settings.app_name}",
        "version": settings.app_version,
        "environment": settings.env_mode.value,
        "documentation": "/docs",
        "health": "/health",
    }


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="System Health Check",
)
async def health_check(system: OrderingSystem = Depends(get_system)) -> HealthResponse:
    """Verify the in-memory store answers queries."""
    db_status = "healthy"
    restaurants = 0
    try:
        system.db.execute(text("SELECT 1"))
        restaurants = sum(1 for admin in system.users.admins() if admin.is_tenant_owner)
    except Exception as e:
        db_status = f"unhealthy: {str(e)}"
        logger.error(f"Store health check failed: {e}")

    return HealthResponse(
        status="operational" if db_status == "healthy" else "degraded",
        database=db_status,
        restaurants=restaurants,
        timestamp=datetime.now(),
    )


# =============================================================================
# TENANT & AUTH ENDPOINTS
# =============================================================================

@app.get("/api/tenant", response_model=TenantResponse, tags=["Auth"])
async def get_tenant(
    restaurant: Optional[str] = Query(None, description="Restaurant id from the shared link"),
    system: OrderingSystem = Depends(get_system),
) -> TenantResponse:
    """Restaurant a visitor lands on, including whether it is suspended."""
    return tenant_response(system.resolver.resolve(restaurant))


@app.post(
    "/api/auth/login",
    response_model=AuthResponse,
    responses={401: {"model": ErrorResponse}},
    tags=["Auth"],
)
async def login(body: LoginRequest, system: OrderingSystem = Depends(get_system)) -> AuthResponse:
    client = system.open_session(body.restaurant)
    result = client.controller.login(body.username, body.password)
    if not result:
        system.close_session(client.token)
        raise HTTPException(status_code=401, detail=result.error_message)
    return auth_response(client)


@app.post(
    "/api/auth/register",
    response_model=AuthResponse,
    responses={400: {"model": ErrorResponse}},
    tags=["Auth"],
)
async def register(body: RegisterRequest, system: OrderingSystem = Depends(get_system)) -> AuthResponse:
    client = system.open_session(body.restaurant)
    result = client.controller.register(body.username, body.password, body.contact, UserRole.CUSTOMER)
    if not result:
        system.close_session(client.token)
        raise HTTPException(status_code=400, detail=result.error_message)
    return auth_response(client)


@app.post("/api/auth/logout", tags=["Auth"])
async def logout(
    client: ClientSession = Depends(require_session),
    system: OrderingSystem = Depends(get_system),
) -> dict[str, Any]:
    system.close_session(client.token)
    return {"success": True}


@app.get("/api/auth/me", response_model=AuthResponse, tags=["Auth"])
async def me(client: ClientSession = Depends(require_session)) -> AuthResponse:
    return auth_response(client)


@app.patch("/api/account", response_model=UserResponse, tags=["Auth"])
async def update_account(
    body: AccountUpdate,
    client: ClientSession = Depends(require_session),
) -> UserResponse:
    """Edit the session user's own profile; the business name belongs to the restaurant owner."""
    changes = body.model_dump(exclude_unset=True)
    if "business_name" in changes and not client.controller.current_user.is_tenant_owner:
        raise HTTPException(status_code=403, detail="Only the restaurant owner can change the business name")
    user = client.controller.update_user(client.controller.current_user.id, changes)
    return UserResponse.model_validate(user)


# =============================================================================
# MENU & CART ENDPOINTS
# =============================================================================

@app.get("/api/menu", response_model=MenuResponse, tags=["Menu"])
async def get_menu(
    restaurant: Optional[str] = Query(None),
    client: Optional[ClientSession] = Depends(optional_session),
    system: OrderingSystem = Depends(get_system),
) -> MenuResponse:
    """Customer menu of the session's restaurant, or of the linked one."""
    if client is not None:
        context = client.controller.tenant_context()
    else:
        context = system.resolver.resolve(restaurant)

    if context.tenant_id is None or context.admin is None:
        raise HTTPException(status_code=404, detail="Restaurant not found")
    if context.is_suspended and not (client is not None and client.controller.is_admin):
        raise HTTPException(status_code=403, detail="This restaurant is currently suspended")

    grouped = system.catalog.menu_by_category(
        context.tenant_id, system.catalog.regular_items(context.tenant_id)
    )
    return MenuResponse(
        tenant=tenant_response(context),
        specials=[MenuItemResponse.model_validate(i) for i in system.catalog.specials(context.tenant_id)],
        categories=[
            MenuCategoryGroup(
                category=category,
                items=[MenuItemResponse.model_validate(i) for i in items],
            )
            for category, items in grouped.items()
        ],
    )


@app.get("/api/cart", response_model=CartResponse, tags=["Cart"])
async def get_cart(client: ClientSession = Depends(require_session)) -> CartResponse:
    return cart_response(client)


@app.post("/api/cart/items", response_model=CartResponse, tags=["Cart"])
async def add_to_cart(
    body: CartItemRequest,
    client: ClientSession = Depends(require_session),
    system: OrderingSystem = Depends(get_system),
) -> CartResponse:
    item = system.catalog.get_item(active_tenant(client), body.menu_item_id)
    client.cart.add(item)
    return cart_response(client)


@app.delete("/api/cart/items/{menu_item_id}", response_model=CartResponse, tags=["Cart"])
async def remove_from_cart(
    menu_item_id: str,
    client: ClientSession = Depends(require_session),
) -> CartResponse:
    client.cart.remove(menu_item_id)
    return cart_response(client)


@app.put("/api/cart/items/{menu_item_id}/notes", response_model=CartResponse, tags=["Cart"])
async def set_cart_note(
    menu_item_id: str,
    body: CartNoteRequest,
    client: ClientSession = Depends(require_session),
) -> CartResponse:
    if client.cart.set_note(menu_item_id, body.notes) is None:
        raise HTTPException(status_code=404, detail=f"{menu_item_id} is not in the cart")
    return cart_response(client)


@app.delete("/api/cart", response_model=CartResponse, tags=["Cart"])
async def clear_cart(client: ClientSession = Depends(require_session)) -> CartResponse:
    client.cart.clear()
    return cart_response(client)


# =============================================================================
# ORDER ENDPOINTS
# =============================================================================

@app.post(
    "/api/orders",
    response_model=OrderResponse,
    responses={400: {"model": ErrorResponse}},
    tags=["Orders"],
)
async def place_order(
    body: PlaceOrderRequest,
    client: ClientSession = Depends(require_session),
    system: OrderingSystem = Depends(get_system),
) -> OrderResponse:
    """
    Turn the session's cart into an order and empty the cart.

    Admins place orders for a customer of their restaurant or a walk-in;
    customers order for themselves.
    """
    controller = client.controller
    tenant_id = active_tenant(client)

    if controller.is_admin:
        order = system.ordering.place_admin_order(client.cart.lines(), tenant_id, body.customer_id)
    else:
        if not controller.tenant_context().is_active:
            raise HTTPException(status_code=403, detail="This restaurant is currently suspended")
        order = system.ordering.place_order(
            client.cart.lines(),
            body.payment_method,
            tenant_id,
            session_user_id=controller.current_user.id,
        )

    client.cart.clear()
    return order_response(system.reports.summarize(tenant_id, [order])[0])


@app.get("/api/orders", response_model=OrderListResponse, tags=["Orders"])
async def list_orders(
    client: ClientSession = Depends(require_session),
    system: OrderingSystem = Depends(get_system),
) -> OrderListResponse:
    """All restaurant orders for admins, own orders for customers; newest first."""
    controller = client.controller
    tenant_id = active_tenant(client)

    if controller.is_admin:
        summaries = system.reports.order_history(tenant_id)
    else:
        own = system.ordering.orders_for_customer(tenant_id, controller.current_user.id)
        own.sort(key=lambda o: o.placed_at, reverse=True)
        summaries = system.reports.summarize(tenant_id, own)

    return OrderListResponse(
        total=len(summaries),
        orders=[order_response(s) for s in summaries],
    )


# =============================================================================
# ADMIN ENDPOINTS
# =============================================================================

@app.get("/api/admin/sales", response_model=SalesOverviewResponse, tags=["Admin"])
async def sales_overview(
    client: ClientSession = Depends(require_admin),
    system: OrderingSystem = Depends(get_system),
) -> SalesOverviewResponse:
    """Today's totals, the weekly series, best customers and the order history."""
    tenant_id = active_tenant(client)
    reports = system.reports
    today = reports.daily_totals(tenant_id)

    return SalesOverviewResponse(
        today=DailySalesResponse(
            day=today.day,
            walk_in_total=today.walk_in_total,
            registered_total=today.registered_total,
            total=today.total,
            walk_in_orders=[order_response(s) for s in reports.summarize(tenant_id, today.walk_in_orders)],
            registered_orders=[order_response(s) for s in reports.summarize(tenant_id, today.registered_orders)],
        ),
        weekly=[DaySalesResponse(day=d.day, label=d.label, total=d.total) for d in reports.weekly_series(tenant_id)],
        top_spenders=[stats_response(s) for s in reports.top_spenders(tenant_id)],
        most_frequent=[stats_response(s) for s in reports.most_frequent(tenant_id)],
        orders=[order_response(s) for s in reports.order_history(tenant_id)],
    )


@app.get("/api/admin/customers", response_model=list[UserResponse], tags=["Admin"])
async def list_customers(
    client: ClientSession = Depends(require_admin),
    system: OrderingSystem = Depends(get_system),
) -> list[UserResponse]:
    """Customers an admin can place an order for."""
    return [UserResponse.model_validate(u) for u in system.users.customers(active_tenant(client))]


@app.get("/api/admin/menu", response_model=list[MenuItemResponse], tags=["Admin"])
async def admin_menu(
    client: ClientSession = Depends(require_admin),
    system: OrderingSystem = Depends(get_system),
) -> list[MenuItemResponse]:
    tenant_id = active_tenant(client)
    grouped = system.catalog.menu_by_category(tenant_id)
    return [MenuItemResponse.model_validate(item) for items in grouped.values() for item in items]


@app.post("/api/admin/menu", response_model=MenuItemResponse, tags=["Admin"])
async def upsert_menu_item(
    body: MenuItemUpsert,
    client: ClientSession = Depends(require_admin),
    system: OrderingSystem = Depends(get_system),
) -> MenuItemResponse:
    item = system.catalog.add_or_update_item(active_tenant(client), body.model_dump())
    return MenuItemResponse.model_validate(item)


@app.delete("/api/admin/menu/{item_id}", tags=["Admin"])
async def delete_menu_item(
    item_id: str,
    client: ClientSession = Depends(require_admin),
    system: OrderingSystem = Depends(get_system),
) -> dict[str, Any]:
    system.catalog.delete_item(active_tenant(client), item_id)
    return {"success": True, "deleted": item_id}


@app.post("/api/admin/menu/{item_id}/special", response_model=MenuItemResponse, tags=["Admin"])
async def toggle_special(
    item_id: str,
    client: ClientSession = Depends(require_admin),
    system: OrderingSystem = Depends(get_system),
) -> MenuItemResponse:
    return MenuItemResponse.model_validate(system.catalog.toggle_special(active_tenant(client), item_id))


@app.get("/api/admin/share-link", response_model=RestaurantLinkResponse, tags=["Admin"])
async def share_link(client: ClientSession = Depends(require_admin)) -> RestaurantLinkResponse:
    """Link customers use to reach this restaurant."""
    tenant_id = client.controller.current_user.restaurant_id
    return RestaurantLinkResponse(tenant_id=tenant_id, link=shareable_url(tenant_id))


# =============================================================================
# SUPERADMIN ENDPOINTS
# =============================================================================

@app.get("/api/admin/tenants", response_model=list[UserResponse], tags=["Superadmin"])
async def list_admins(client: ClientSession = Depends(require_superadmin)) -> list[UserResponse]:
    """Admins the superadmin can suspend or reactivate."""
    return [UserResponse.model_validate(a) for a in client.controller.manageable_admins()]


@app.post(
    "/api/admin/tenants",
    response_model=RestaurantLinkResponse,
    responses={400: {"model": ErrorResponse}},
    tags=["Superadmin"],
)
async def create_restaurant(
    body: CreateRestaurantRequest,
    client: ClientSession = Depends(require_superadmin),
) -> RestaurantLinkResponse:
    tenant_id = client.controller.create_admin(body.business_name, body.username, body.password)
    if tenant_id is None:
        raise HTTPException(status_code=400, detail="Username already exists. Please choose another.")
    return RestaurantLinkResponse(tenant_id=tenant_id, link=shareable_url(tenant_id))


@app.post("/api/admin/tenants/{admin_id}/toggle", response_model=UserResponse, tags=["Superadmin"])
async def toggle_restaurant(
    admin_id: str,
    client: ClientSession = Depends(require_superadmin),
) -> UserResponse:
    admin = client.controller.toggle_admin_status(admin_id)
    if admin is None:
        raise HTTPException(status_code=404, detail=f"Admin {admin_id} not found")
    return UserResponse.model_validate(admin)


# =============================================================================
# ERROR HANDLERS
# =============================================================================

ERROR_STATUS = {
    TenantNotFoundError: 404,
    MenuItemNotFoundError: 404,
    OrderPlacementError: 400,
    InvalidMenuItemError: 400,
    UserUpdateError: 400,
}


@app.exception_handler(RestodeskError)
async def domain_exception_handler(request: Request, exc: RestodeskError) -> JSONResponse:
    """Domain rejections become 4xx responses."""
    status_code = ERROR_STATUS.get(type(exc), 400)
    logger.warning(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": exc.error_code, "detail": exc.message},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler."""
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal Server Error",
            "detail": str(exc) if settings.debug else "An unexpected error occurred",
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("restodesk.main:app", host=settings.api_host, port=settings.api_port)
