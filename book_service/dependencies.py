"""
FastAPI Dependencies Module

Dependencies are reusable components injected into route handlers.

WHY Dependency Injection?
=========================
1. Testing: each test builds its own app with its own stores, and routes
   find them through the request, never through module globals
2. Separation of Concerns: routes only translate HTTP to service calls
3. The permission gate runs before the route body, so a denied request
   never reaches a service or a store

Where things live:
    create_app() puts the services and the permission checker on
    app.state; the dependencies below read them back per request.
"""

import logging
from collections.abc import Callable
from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request, status

from book_service.errors import PermissionDeniedError
from book_service.permissions import Permission, PermissionChecker
from book_service.services.books import BookService
from book_service.services.stock import StockService

logger = logging.getLogger(__name__)


# =============================================================================
# Services
# =============================================================================
def get_book_service(request: Request) -> BookService:
    """Book service of the application handling this request."""
    return request.app.state.book_service


def get_stock_service(request: Request) -> StockService:
    """Stock service of the application handling this request."""
    return request.app.state.stock_service


def get_permission_checker(request: Request) -> PermissionChecker:
    """Permission gate of the application handling this request."""
    return request.app.state.permission_checker


# Type aliases for cleaner route signatures
Books = Annotated[BookService, Depends(get_book_service)]
StockKeeper = Annotated[StockService, Depends(get_stock_service)]
Gate = Annotated[PermissionChecker, Depends(get_permission_checker)]


# =============================================================================
# Permission Gate
# =============================================================================
def get_token(
    authorization: str | None = Header(
        default=None,
        description="Caller token, forwarded as-is to the user service",
    ),
) -> str:
    """
    Extract the caller token from the Authorization header.

    The header value is passed to the user service unchanged.

    Raises:
        HTTPException: 401 if the header is missing or blank
    """
    token = (authorization or "").strip()
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing token",
        )
    return token


def require_permission(required: Permission) -> Callable[..., str]:
    """
    Build a dependency that admits only callers holding any bit of ``required``.

    Order of checks:
    1. No token → 401, the gate is not consulted
    2. Gate cannot answer → UpstreamUnavailableError (mapped to 502)
    3. Gate says no → PermissionDeniedError (mapped to 403)

    Usage:
        @router.delete("/{book_id}")
        def delete_book(..., _: str = Depends(require_permission(Permission.MANAGE_BOOKS))):
            ...

    Returns:
        A dependency returning the caller's token
    """

    def dependency(
        checker: Gate,
        token: Annotated[str, Depends(get_token)],
    ) -> str:
        if not checker.check_permissions(token, required):
            logger.info(f"Permission denied for required mask {required!r}")
            raise PermissionDeniedError("insufficient permissions")
        return token

    return dependency


# Type aliases for the masks the routes use
ManageBooks = Annotated[str, Depends(require_permission(Permission.MANAGE_BOOKS))]
QueryStock = Annotated[
    str,
    Depends(require_permission(Permission.QUERY_TOTAL_STOCK | Permission.QUERY_AVAILABLE_STOCK)),
]
CreateStock = Annotated[str, Depends(require_permission(Permission.CHANGE_TOTAL_STOCK))]
ChangeStock = Annotated[
    str,
    Depends(require_permission(Permission.CHANGE_TOTAL_STOCK | Permission.LOAN_BOOKS)),
]
