"""
Permission Bitmask and Permission Gate

The user service grants each caller a bitmask of capabilities. This
service never interprets a caller's mask beyond one test:

    granted & required != 0

so a required mask made of several bits is satisfied by ANY of them.

Some capabilities list another one as a prerequisite (for example
CHANGE_TOTAL_STOCK needs QUERY_TOTAL_STOCK). Prerequisites are the user
service's business when it grants permissions; they are not checked here.

Gate implementations:
- UserServiceClient (book_service.services.users): asks the remote user service
- StaticPermissionChecker: fixed token table, for local development and tests
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from enum import IntFlag

logger = logging.getLogger(__name__)


class Permission(IntFlag):
    """Capability bits as assigned by the user service."""

    # Add, edit and delete books.
    MANAGE_BOOKS = 1 << 0
    # Get the total stored copy count of a book.
    QUERY_TOTAL_STOCK = 1 << 1
    # Register changes to the total stored copy count.
    # Prerequisite: QUERY_TOTAL_STOCK.
    CHANGE_TOTAL_STOCK = 1 << 2
    # Get information about other users, including their permissions.
    QUERY_USERS = 1 << 3
    # Add, edit and delete other users. Prerequisite: QUERY_USERS.
    MANAGE_USERS = 1 << 4
    # Grant a subset of one's own permissions to others. Prerequisite: QUERY_USERS.
    GRANT_PERMISSIONS = 1 << 5
    # Register book takeouts and returns.
    LOAN_BOOKS = 1 << 6
    # Get the number of available (not lent out) copies of a book.
    QUERY_AVAILABLE_STOCK = 1 << 7
    # Get information related to book reservations.
    QUERY_RESERVATIONS = 1 << 8


def has_permission(granted: int, required: int) -> bool:
    """Check whether a granted mask intersects the required mask."""
    return (granted & required) != 0


class PermissionChecker(ABC):
    """
    Answers "does this token satisfy the required mask?".

    Implementations return False when the caller is determined not to be
    permitted, and raise UpstreamUnavailableError when the answer could not
    be determined. Callers must fail closed on the error, but report it as
    a server problem, not as a denial.
    """

    @abstractmethod
    def check_permissions(self, token: str, required: int) -> bool:
        """Return whether ``token`` is granted any bit of ``required``."""

    def close(self) -> None:
        """Release resources held by the checker."""


class StaticPermissionChecker(PermissionChecker):
    """
    Permission gate backed by a fixed token table.

    Unknown tokens are granted nothing.

    Usage:
        checker = StaticPermissionChecker({"librarian": Permission.MANAGE_BOOKS})
        checker.check_permissions("librarian", Permission.MANAGE_BOOKS)  # True
    """

    def __init__(self, grants: Mapping[str, int] | None = None) -> None:
        self._grants = {token: int(mask) for token, mask in (grants or {}).items()}

    def granted_mask(self, token: str) -> int:
        return self._grants.get(token, 0)

    def check_permissions(self, token: str, required: int) -> bool:
        granted = has_permission(self.granted_mask(token), required)
        if not granted:
            logger.debug(f"Static gate denied mask {int(required)}")
        return granted
