"""
FastAPI Application Entry Point

Food Ordering API - customer accounts, menus and orders.

Endpoints:
    - POST /auth/register: Create a customer account
    - POST /auth/login: Exchange credentials for a session token
    - GET /profile: Claims of the caller's token
    - GET /customers: List customers (public fields)
    - POST /orders: Place an order
    - GET /orders/summary: Caller's total spend
    - GET /menus: Menu items with their restaurants
    - GET /health: System health check

Run with:
    uvicorn ordering_api.main:app --port 3000
"""

import logging
from datetime import datetime
from typing import Any, Optional
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from ordering_api.core.config import Settings, get_settings, setup_logging
from ordering_api.core.exceptions import AuthError, OrderingError, ServerError
from ordering_api.database import create_engine_from_settings, create_session_maker, get_db, init_db
from ordering_api.dependencies import (
    get_credential_store,
    get_current_user,
    get_order_engine,
    get_query_layer,
    get_token_service,
)
from ordering_api.schemas import (
    RegisterRequest,
    RegisterResponse,
    LoginRequest,
    TokenResponse,
    ProfileResponse,
    CustomerResponse,
    OrderCreate,
    OrderCreateResponse,
    OrderSummaryResponse,
    MenuResponse,
    ErrorResponse,
    HealthResponse,
)
from ordering_api.services import CredentialStore, Identity, OrderEngine, QueryLayer, TokenService

logger = logging.getLogger(__name__)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown events.
    """
    settings: Settings = app.state.settings

    # Startup
    logger.info("=" * 60)
    logger.info(f"🚀 Starting {settings.app_name}")
    logger.info(f"   Version: {settings.app_version}")
    logger.info(f"   Environment: {settings.env_mode.value}")
    logger.info(f"   Debug: {settings.debug}")
    logger.info("=" * 60)

    await init_db(app.state.engine)
    logger.info("✅ Database initialized")
    logger.info(f"✅ Session tokens: {settings.jwt_algorithm}, ttl={settings.token_ttl_seconds}s")
    logger.info("✅ Application ready!")

    yield  # Application runs

    # Shutdown
    logger.info("Shutting down...")
    await app.state.engine.dispose()
    logger.info("✅ Cleanup complete")


# =============================================================================
# ERROR HANDLERS
# =============================================================================

def _error_content(message: str, detail: Optional[str] = None) -> dict[str, Any]:
    content: dict[str, Any] = {"success": False, "error": message}
    if detail:
        content["detail"] = detail
    return content


async def ordering_error_handler(request: Request, exc: OrderingError) -> JSONResponse:
    """Render application errors with their mapped status code."""
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
    if exc.status_code >= 500:
        logger.error(f"{exc.error_code} at {request.url.path}: {exc.message}")
    else:
        logger.debug(f"{exc.error_code} at {request.url.path}: {exc.message}")

    return JSONResponse(
        status_code=exc.status_code,
        content=_error_content(exc.message),
        headers=headers,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies are client errors (400), like missing fields."""
    fields = [".".join(str(p) for p in err.get("loc", ()) if p != "body") for err in exc.errors()]
    logger.debug(f"Invalid request body at {request.url.path}: {fields}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_content("Invalid request body", ", ".join(f for f in fields if f) or None),
    )


def _server_error_response(request: Request, exc: Exception) -> JSONResponse:
    settings: Settings = request.app.state.settings
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_content(ServerError.default_message, str(exc) if settings.debug else None),
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception(f"Database error at {request.url.path}: {exc}")
    return _server_error_response(request, exc)


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler."""
    logger.exception(f"Unhandled exception at {request.url.path}: {exc}")
    return _server_error_response(request, exc)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(OrderingError, ordering_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)


# =============================================================================
# APPLICATION FACTORY
# =============================================================================

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Settings, the database engine and the token service are created once
    here and stored on ``app.state``.

    Raises:
        RuntimeError: Required configuration (e.g. JWT_SECRET) is missing
    """
    settings = settings or get_settings()
    setup_logging(settings)

    missing = settings.validate_required_config()
    if missing:
        logger.critical(f"❌ Missing required configuration: {missing}")
        raise RuntimeError(f"Missing required configuration: {', '.join(missing)}")

    app = FastAPI(
        title=settings.app_name,
        description="Customer accounts, menu browsing and order placement.",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.state.settings = settings
    app.state.engine = create_engine_from_settings(settings)
    app.state.session_maker = create_session_maker(app.state.engine)
    app.state.token_service = TokenService(
        secret_key=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        ttl_seconds=settings.token_ttl_seconds,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    register_routes(app)
    return app


# =============================================================================
# ROUTES
# =============================================================================

def register_routes(app: FastAPI) -> None:

    @app.get("/", tags=["Root"])
    async def root(request: Request) -> dict[str, str]:
        """API root with navigation links."""
        settings: Settings = request.app.state.settings
        return {
            "message": f"🍔 Welcome to {settings.app_name}",
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
    async def health_check(db: AsyncSession = Depends(get_db)) -> HealthResponse:
        """Verify the database is reachable."""
        db_status = "healthy"
        try:
            await db.execute(select(1))
        except SQLAlchemyError as e:
            db_status = "unhealthy"
            logger.error(f"Database health check failed: {e}")

        return HealthResponse(
            status="operational" if db_status == "healthy" else "degraded",
            database=db_status,
            timestamp=datetime.now(),
        )

    # -------------------------------------------------------------------------
    # AUTH
    # -------------------------------------------------------------------------

    @app.post(
        "/auth/register",
        response_model=RegisterResponse,
        status_code=status.HTTP_201_CREATED,
        responses=ERROR_RESPONSES,
        tags=["Auth"],
    )
    async def register(
        body: RegisterRequest,
        store: CredentialStore = Depends(get_credential_store),
    ) -> RegisterResponse:
        """Create a customer account."""
        customer_id = await store.register(
            fullname=body.fullname,
            address=body.address,
            phone=body.phone,
            email=body.email,
            username=body.username,
            password=body.password,
        )
        return RegisterResponse(message="User registered successfully", userId=customer_id)

    @app.post(
        "/auth/login",
        response_model=TokenResponse,
        responses=ERROR_RESPONSES,
        tags=["Auth"],
    )
    async def login(
        body: LoginRequest,
        store: CredentialStore = Depends(get_credential_store),
        token_service: TokenService = Depends(get_token_service),
    ) -> TokenResponse:
        """Exchange username and password for a session token."""
        identity = await store.authenticate(body.username, body.password)
        logger.info(f"Customer #{identity.id} logged in")
        return TokenResponse(token=token_service.issue(identity))

    @app.get(
        "/profile",
        response_model=ProfileResponse,
        responses=ERROR_RESPONSES,
        tags=["Auth"],
    )
    async def profile(user: Identity = Depends(get_current_user)) -> ProfileResponse:
        """Return the claims of the caller's token."""
        return ProfileResponse(message="Welcome!", user=user.to_dict())

    # -------------------------------------------------------------------------
    # CUSTOMERS & MENUS
    # -------------------------------------------------------------------------

    @app.get(
        "/customers",
        response_model=list[CustomerResponse],
        responses=ERROR_RESPONSES,
        dependencies=[Depends(get_current_user)],
        tags=["Customers"],
    )
    async def list_customers(
        queries: QueryLayer = Depends(get_query_layer),
    ) -> list[dict[str, Any]]:
        return await queries.list_customers()

    @app.get(
        "/menus",
        response_model=list[MenuResponse],
        responses=ERROR_RESPONSES,
        dependencies=[Depends(get_current_user)],
        tags=["Menus"],
    )
    async def list_menus(
        queries: QueryLayer = Depends(get_query_layer),
    ) -> list[dict[str, Any]]:
        """Menu items joined with their restaurants."""
        return await queries.list_menu()

    # -------------------------------------------------------------------------
    # ORDERS
    # -------------------------------------------------------------------------

    @app.post(
        "/orders",
        response_model=OrderCreateResponse,
        status_code=status.HTTP_201_CREATED,
        responses={**ERROR_RESPONSES, 404: {"model": ErrorResponse}},
        tags=["Orders"],
    )
    async def create_order(
        body: OrderCreate,
        user: Identity = Depends(get_current_user),
        engine: OrderEngine = Depends(get_order_engine),
    ) -> OrderCreateResponse:
        """Place an order for the authenticated customer."""
        placed = await engine.place_order(
            customer_id=user.id,
            menu_id=body.menu_id,
            quantity=body.quantity,
        )
        return OrderCreateResponse(
            message="Order placed successfully",
            orderId=placed.order_id,
            total_price=placed.total_price,
        )

    @app.get(
        "/orders/summary",
        response_model=OrderSummaryResponse,
        responses=ERROR_RESPONSES,
        tags=["Orders"],
    )
    async def order_summary(
        user: Identity = Depends(get_current_user),
        engine: OrderEngine = Depends(get_order_engine),
    ) -> OrderSummaryResponse:
        """Total spend of the authenticated customer."""
        summary = await engine.summarize(user.id)
        return OrderSummaryResponse(
            customer_name=summary.customer_name,
            total_amount=summary.total_amount,
        )


# Module-level instance for ``uvicorn ordering_api.main:app``
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("ordering_api.main:app", host=settings.api_host, port=settings.api_port)
