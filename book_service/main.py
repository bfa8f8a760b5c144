"""
FastAPI Application Entry Point

This module creates and configures the FastAPI application.

Key Concepts:
=============

1. Application Factory Pattern
   - create_app() returns a configured app
   - Stores, services and the permission gate are built here and kept on
     app.state; nothing is module-global, so tests build isolated apps
   - Any of them can be injected (tests pass their own stores and gates)

2. Lifespan Events
   - startup: create tables for the SQL backend
   - shutdown: close the user service client, dispose the engine

3. Exception Handlers
   - Every LibraryError carries a kind; the kind decides the status code
   - Unknown errors become a plain 500
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from book_service import __version__
from book_service.config import Settings, get_settings
from book_service.database import create_db_engine, create_session_factory, create_tables
from book_service.errors import ErrorKind, LibraryError
from book_service.permissions import PermissionChecker, StaticPermissionChecker
from book_service.routers import books_router, stock_router
from book_service.services.books import BookService
from book_service.services.stock import StockService
from book_service.services.users import UserServiceClient
from book_service.store import BookStore, StockStore
from book_service.store.memory import MemoryBookStore, MemoryStockStore
from book_service.store.sql import create_sql_stores

logger = logging.getLogger(__name__)


# =============================================================================
# Error Kind → HTTP Status
# =============================================================================
ERROR_STATUS_CODES: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.DUPLICATE_ID: 409,
    ErrorKind.INSUFFICIENT_STOCK: 409,
    ErrorKind.PERMISSION_DENIED: 403,
    ErrorKind.UPSTREAM_UNAVAILABLE: 502,
}


def configure_logging(settings: Settings) -> None:
    """Configure root logging from settings."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def build_permission_checker(settings: Settings) -> PermissionChecker:
    """Create the permission gate selected by settings.permission_backend."""
    if settings.permission_backend == "static":
        return StaticPermissionChecker(settings.static_permissions)
    return UserServiceClient(
        settings.user_service_url,
        timeout=settings.user_service_timeout,
    )


# =============================================================================
# Lifespan Events
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Prepare storage before the first request and release the engine and
    the user service connection pool afterwards.
    """
    settings: Settings = app.state.settings

    # ----- STARTUP -----
    logger.info(f"Starting {settings.app_name}...")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Storage backend: {settings.storage_backend}")
    logger.info(f"Permission backend: {settings.permission_backend}")

    engine = app.state.engine
    if engine is not None:
        create_tables(engine)
        logger.info("Database tables ready")

    yield  # Application runs here

    # ----- SHUTDOWN -----
    logger.info(f"Shutting down {settings.app_name}...")

    app.state.permission_checker.close()
    if engine is not None:
        engine.dispose()


# =============================================================================
# Application Factory
# =============================================================================
def create_app(
    settings: Settings | None = None,
    *,
    book_store: BookStore | None = None,
    stock_store: StockStore | None = None,
    permission_checker: PermissionChecker | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration; defaults to get_settings()
        book_store: Book store to use instead of the configured backend
        stock_store: Stock store to use instead of the configured backend
        permission_checker: Gate to use instead of the configured one

    Returns:
        Configured FastAPI application instance
    """
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        description="""
## Book Service

Library catalog: books and per-book stock.

### Permissions
Mutations need an `Authorization` header. The token is checked against the
user service, which grants each caller a capability bitmask.
        """,
        version=__version__,
        lifespan=lifespan,
    )

    # -------------------------------------------------------------------------
    # Stores, Services, Gate
    # -------------------------------------------------------------------------
    engine = None
    if settings.storage_backend == "sql" and (book_store is None or stock_store is None):
        engine = create_db_engine(settings.database_url, echo=settings.db_echo)
        sql_book_store, sql_stock_store = create_sql_stores(create_session_factory(engine))
        book_store = book_store or sql_book_store
        stock_store = stock_store or sql_stock_store

    app.state.settings = settings
    app.state.engine = engine
    app.state.book_service = BookService(book_store or MemoryBookStore())
    app.state.stock_service = StockService(stock_store or MemoryStockStore())
    app.state.permission_checker = permission_checker or build_permission_checker(settings)

    # -------------------------------------------------------------------------
    # CORS Middleware
    # -------------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -------------------------------------------------------------------------
    # Exception Handlers
    # -------------------------------------------------------------------------
    @app.exception_handler(LibraryError)
    async def library_exception_handler(
        request: Request,
        exc: LibraryError,
    ) -> JSONResponse:
        """
        Map an error kind to its status code.

        4xx outcomes are the caller's problem and are logged as warnings;
        5xx outcomes are logged as errors.
        """
        kind = exc.kind
        status_code = ERROR_STATUS_CODES.get(kind, 500) if kind else 500

        if status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc}")
        else:
            logger.warning(f"{request.method} {request.url.path} rejected: {exc}")

        return JSONResponse(
            status_code=status_code,
            content={"detail": str(exc), "kind": kind.value if kind else None},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """
        Anything outside the error taxonomy is a bug: 500, with the
        message exposed only when debug is on.
        """
        logger.error(f"Unhandled error: {exc}", exc_info=True)

        if settings.debug:
            return JSONResponse(
                status_code=500,
                content={"detail": str(exc)},
            )

        return JSONResponse(
            status_code=500,
            content={"detail": "An internal error occurred."},
        )

    # -------------------------------------------------------------------------
    # Register Routers
    # -------------------------------------------------------------------------
    api_prefix = f"/api/{settings.api_version}"
    app.include_router(books_router, prefix=api_prefix)
    app.include_router(stock_router, prefix=api_prefix)

    # -------------------------------------------------------------------------
    # Health Check Endpoint
    # -------------------------------------------------------------------------
    @app.get(
        "/health",
        tags=["Health"],
        summary="Health check",
    )
    def health_check() -> dict:
        """
        Health check endpoint for load balancers and probes.

        Does not call the user service: its availability is reported per
        request as 502 instead.
        """
        return {
            "status": "healthy",
            "app": settings.app_name,
            "version": __version__,
            "storage": settings.storage_backend,
            "permissions": settings.permission_backend,
        }

    @app.get(
        "/",
        tags=["Root"],
        summary="API root",
    )
    def root() -> dict:
        """Root endpoint with API information."""
        return {
            "message": f"Welcome to {settings.app_name}",
            "version": settings.api_version,
            "docs": "/docs",
            "health": "/health",
        }

    return app


# =============================================================================
# Development Server
# =============================================================================
# uvicorn book_service.main:create_app --factory
# or: python -m book_service.main

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "book_service.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
