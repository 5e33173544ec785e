"""
FastAPI Application Entry Point

Mumma Tiffin - city-scoped meal ordering with multiple administrators.

Endpoints (all under /api):
    - GET  /menu, /notifications: Public reads
    - POST /register, /login, /admin/login: Authentication
    - /admin/*: Administrator management, menu CRUD, notifications, orders
    - /orders, /address: Customer orders and saved addresses
    - GET /health: System health check

Run:
    uvicorn tiffin.main:app --port 3000

Author: Mumma Tiffin Team
Version: 1.0.0
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tiffin.core.config import Settings, get_settings, setup_logging
from tiffin.core.exceptions import TiffinError
from tiffin.core.security import PasswordHasher, TokenClaims, TokenSigner
from tiffin.database import Database, get_db
from tiffin.dependencies import (
    get_address_book,
    get_authenticator,
    get_app_settings,
    get_menu_catalog,
    get_notification_feed,
    get_order_ledger,
    require_admin,
    require_user,
)
from tiffin.schemas import (
    AddressCreate,
    AddressListResponse,
    AddressResponse,
    AdminAuthResponse,
    AdminCreateRequest,
    AdminListResponse,
    AdminPublic,
    AuthResponse,
    ErrorResponse,
    HealthResponse,
    LoginRequest,
    MenuCreateResponse,
    MenuItemCreate,
    MenuItemResponse,
    MenuItemUpdate,
    MenuListResponse,
    NotificationCreate,
    NotificationListResponse,
    NotificationResponse,
    OkResponse,
    OrderCreate,
    OrderCreateResponse,
    OrderListResponse,
    OrderResponse,
    OrderStatusUpdate,
    RegisterRequest,
    UserPublic,
)
from tiffin.seed import seed_defaults
from tiffin.services.addresses import AddressBook
from tiffin.services.auth import Authenticator
from tiffin.services.menu import MenuCatalog
from tiffin.services.notifications import NotificationFeed
from tiffin.services.orders import OrderLedger

setup_logging()
logger = logging.getLogger(__name__)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
}


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Open the database on startup and dispose of it on shutdown.
    """
    settings: Settings = app.state.settings

    logger.info("=" * 60)
    logger.info(f"🚀 Starting {settings.app_name}")
    logger.info(f"   Version: {settings.app_version}")
    logger.info(f"   Environment: {settings.env_mode.value}")
    logger.info(f"   Debug: {settings.debug}")
    logger.info("=" * 60)

    database = Database(settings.database_url, echo=settings.database_echo)
    await database.create_all()
    app.state.database = database
    logger.info("✅ Database initialized")

    if settings.seed_defaults:
        async with database.session_maker() as session:
            await seed_defaults(
                Authenticator(session, app.state.hasher, app.state.signer), settings
            )
        logger.info("✅ Default data checked")

    missing = settings.validate_production_config()
    if missing:
        logger.warning(f"⚠️ Insecure configuration outside development: {missing}")

    logger.info("✅ Application ready!")

    yield  # Application runs

    logger.info("Shutting down...")
    await database.dispose()
    logger.info("✅ Cleanup complete")


# =============================================================================
# PUBLIC ENDPOINTS
# =============================================================================

router = APIRouter(prefix="/api", responses=ERROR_RESPONSES)


@router.get("/menu", response_model=MenuListResponse, tags=["Menu"])
async def public_menu(
    city: Optional[str] = Query(None, description="Only items for this city or for 'All'"),
    catalog: MenuCatalog = Depends(get_menu_catalog),
) -> MenuListResponse:
    """Active menu items, ordered by meal then id."""
    items = await catalog.public_list(city)
    return MenuListResponse(menu=[MenuItemResponse.model_validate(i) for i in items])


@router.get("/notifications", response_model=NotificationListResponse, tags=["Notifications"])
async def list_notifications(
    limit: Optional[int] = Query(None, ge=1, le=200),
    feed: NotificationFeed = Depends(get_notification_feed),
    settings: Settings = Depends(get_app_settings),
) -> NotificationListResponse:
    """Recent notifications for every city, newest first."""
    notifications = await feed.recent(limit or settings.notification_limit)
    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(n) for n in notifications]
    )


# =============================================================================
# AUTHENTICATION ENDPOINTS
# =============================================================================

@router.post("/register", response_model=AuthResponse, tags=["Auth"])
async def register(
    body: RegisterRequest,
    auth: Authenticator = Depends(get_authenticator),
) -> AuthResponse:
    user, token = await auth.register(body.email, body.password, body.name)
    return AuthResponse(user=UserPublic.model_validate(user), token=token)


@router.post("/login", response_model=AuthResponse, tags=["Auth"])
async def login(
    body: LoginRequest,
    auth: Authenticator = Depends(get_authenticator),
) -> AuthResponse:
    user, token = await auth.login(body.email, body.password)
    return AuthResponse(user=UserPublic.model_validate(user), token=token)


@router.post("/admin/login", response_model=AdminAuthResponse, tags=["Auth"])
async def admin_login(
    body: LoginRequest,
    auth: Authenticator = Depends(get_authenticator),
) -> AdminAuthResponse:
    admin, token = await auth.admin_login(body.email, body.password)
    return AdminAuthResponse(admin=AdminPublic.model_validate(admin), token=token)


# =============================================================================
# ADMINISTRATOR ENDPOINTS
# =============================================================================

@router.post("/admin/create", response_model=OkResponse, tags=["Admin"])
async def create_admin(
    body: AdminCreateRequest,
    claims: TokenClaims = Depends(require_admin),
    auth: Authenticator = Depends(get_authenticator),
) -> OkResponse:
    admin = await auth.create_admin(body.email, body.password, body.name, body.city)
    logger.info(f"Admin #{admin.id} created by admin #{claims.id}")
    return OkResponse()


@router.get("/admin/list", response_model=AdminListResponse, tags=["Admin"])
async def list_admins(
    claims: TokenClaims = Depends(require_admin),
    auth: Authenticator = Depends(get_authenticator),
) -> AdminListResponse:
    admins = await auth.list_admins()
    return AdminListResponse(admins=[AdminPublic.model_validate(a) for a in admins])


@router.post("/admin/menu", response_model=MenuCreateResponse, tags=["Admin"])
async def create_menu_item(
    body: MenuItemCreate,
    claims: TokenClaims = Depends(require_admin),
    catalog: MenuCatalog = Depends(get_menu_catalog),
) -> MenuCreateResponse:
    item = await catalog.create(body.model_dump())
    return MenuCreateResponse(id=item.id)


@router.put("/admin/menu/{item_id}", response_model=OkResponse, tags=["Admin"])
async def update_menu_item(
    item_id: str,
    body: MenuItemUpdate,
    claims: TokenClaims = Depends(require_admin),
    catalog: MenuCatalog = Depends(get_menu_catalog),
) -> OkResponse:
    await catalog.update(item_id, body.changes())
    return OkResponse()


@router.delete("/admin/menu/{item_id}", response_model=OkResponse, tags=["Admin"])
async def delete_menu_item(
    item_id: str,
    claims: TokenClaims = Depends(require_admin),
    catalog: MenuCatalog = Depends(get_menu_catalog),
) -> OkResponse:
    await catalog.delete(item_id)
    return OkResponse()


@router.post("/admin/notifications", response_model=OkResponse, tags=["Admin"])
async def post_notification(
    body: NotificationCreate,
    claims: TokenClaims = Depends(require_admin),
    feed: NotificationFeed = Depends(get_notification_feed),
) -> OkResponse:
    await feed.post(body.text, body.target_city)
    return OkResponse()


@router.get("/admin/orders", response_model=OrderListResponse, tags=["Admin"])
async def admin_orders(
    claims: TokenClaims = Depends(require_admin),
    ledger: OrderLedger = Depends(get_order_ledger),
) -> OrderListResponse:
    """Orders in the administrator's city (or every city for 'All'), newest first."""
    rows = await ledger.list_orders_for_admin(claims)
    return OrderListResponse(
        orders=[OrderResponse.from_order(order, user_email) for order, user_email in rows]
    )


@router.put("/admin/orders/{order_id}", response_model=OkResponse, tags=["Admin"])
async def update_order_status(
    order_id: int,
    body: OrderStatusUpdate,
    claims: TokenClaims = Depends(require_admin),
    ledger: OrderLedger = Depends(get_order_ledger),
) -> OkResponse:
    await ledger.update_status(order_id, body.status, claims)
    return OkResponse()


# =============================================================================
# CUSTOMER ENDPOINTS
# =============================================================================

@router.post("/orders", response_model=OrderCreateResponse, tags=["Orders"])
async def create_order(
    body: OrderCreate,
    claims: TokenClaims = Depends(require_user),
    ledger: OrderLedger = Depends(get_order_ledger),
) -> OrderCreateResponse:
    order = await ledger.create_order(
        user_id=claims.id,
        items=body.items,
        total=body.total,
        address=body.address,
        date=body.date,
        time=body.time,
        meal=body.meal,
    )
    return OrderCreateResponse(order_id=order.id)


@router.get("/orders", response_model=OrderListResponse, tags=["Orders"])
async def my_orders(
    claims: TokenClaims = Depends(require_user),
    ledger: OrderLedger = Depends(get_order_ledger),
) -> OrderListResponse:
    orders = await ledger.list_orders_for_user(claims.id)
    return OrderListResponse(orders=[OrderResponse.from_order(o) for o in orders])


@router.post("/address", response_model=OkResponse, tags=["Addresses"])
async def save_address(
    body: AddressCreate,
    claims: TokenClaims = Depends(require_user),
    book: AddressBook = Depends(get_address_book),
) -> OkResponse:
    await book.save(claims.id, body.name, body.line, body.landmark, body.pin, body.city)
    return OkResponse()


@router.get("/address", response_model=AddressListResponse, tags=["Addresses"])
async def my_addresses(
    claims: TokenClaims = Depends(require_user),
    book: AddressBook = Depends(get_address_book),
    settings: Settings = Depends(get_app_settings),
) -> AddressListResponse:
    addresses = await book.recent(claims.id, settings.address_limit)
    return AddressListResponse(addresses=[AddressResponse.model_validate(a) for a in addresses])


# =============================================================================
# APPLICATION FACTORY
# =============================================================================

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application for the given settings (environment by default).
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="City-scoped meal ordering with multiple administrators.",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings
    app.state.hasher = PasswordHasher.from_settings(settings)
    app.state.signer = TokenSigner.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)

    @app.get("/", tags=["Root"])
    async def root() -> dict[str, str]:
        """API root with navigation links."""
        return {
            "message": f"🍱 Welcome to {settings.app_name}",
            "version": settings.app_version,
            "environment": settings.env_mode.value,
            "documentation": "/docs",
            "menu": "/api/menu",
            "health": "/health",
        }

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check(db: AsyncSession = Depends(get_db)) -> HealthResponse:
        """Verify the database is reachable."""
        db_status = "healthy"
        try:
            await db.execute(select(1))
        except Exception as e:
            db_status = f"unhealthy: {str(e)}"
            logger.error(f"Database health check failed: {e}")

        return HealthResponse(
            status="operational" if db_status == "healthy" else "degraded",
            database=db_status,
            timestamp=datetime.now(),
        )

    # =========================================================================
    # ERROR HANDLERS
    # =========================================================================

    @app.exception_handler(TiffinError)
    async def tiffin_error_handler(request: Request, exc: TiffinError) -> JSONResponse:
        if exc.status_code >= 403:
            logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"error": "invalid input", "detail": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all exception handler."""
        logger.exception(f"Unhandled exception: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "error": str(exc) if settings.expose_internal_errors else "Internal Server Error",
            },
        )

    return app


app = create_app()
