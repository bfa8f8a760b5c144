"""
Error Taxonomy

Every failure the stores, services and permission gate can report is a
LibraryError. Each concrete error carries an ErrorKind that callers
inspect programmatically (the HTTP layer maps kinds to status codes).

Two tiers:
- Store errors (NotFoundError, DuplicateIDError, ...) describe what went
  wrong with the data.
- Service errors (CreateBookError, ChangeStockError, ...) describe which
  operation failed. They are raised with ``raise ... from err`` and
  resolve their kind through ``__cause__``, so wrapping never hides the
  original kind.

Example:
    try:
        book_service.delete_book("6")
    except DeleteBookError as exc:
        exc.kind            # ErrorKind.NOT_FOUND
        exc.__cause__       # NotFoundError("book with id 6 not found")
"""

from enum import StrEnum


class ErrorKind(StrEnum):
    """Programmatically inspectable error categories."""

    NOT_FOUND = "not_found"
    DUPLICATE_ID = "duplicate_id"
    INSUFFICIENT_STOCK = "insufficient_stock"
    PERMISSION_DENIED = "permission_denied"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"


class LibraryError(Exception):
    """Base class for every error raised by the book service."""

    kind: ErrorKind | None = None


# =============================================================================
# Store / Gate Errors
# =============================================================================


class NotFoundError(LibraryError):
    """Entity absent for the given key."""

    kind = ErrorKind.NOT_FOUND


class DuplicateIDError(LibraryError):
    """An entity with the same key already exists."""

    kind = ErrorKind.DUPLICATE_ID


class InsufficientStockError(LibraryError):
    """A stock delta would drive available stock below zero."""

    kind = ErrorKind.INSUFFICIENT_STOCK

    def __init__(self, book_id: str, delta: int, available: int | None = None) -> None:
        self.book_id = book_id
        self.delta = delta
        self.available = available
        message = f"unavailable delta {delta} for book with id {book_id}"
        if available is not None:
            message += f" (available: {available})"
        super().__init__(message)


class PermissionDeniedError(LibraryError):
    """The gate determined that the caller lacks the required permission."""

    kind = ErrorKind.PERMISSION_DENIED


class UpstreamUnavailableError(LibraryError):
    """The user service or the database could not be reached or queried."""

    kind = ErrorKind.UPSTREAM_UNAVAILABLE


# =============================================================================
# Service Errors
# =============================================================================


class ServiceError(LibraryError):
    """
    Operation-level failure wrapping a store error.

    The kind is not fixed by the class: it is whatever the chained cause
    reports, so a CreateBookError caused by a DuplicateIDError still has
    kind DUPLICATE_ID.
    """

    @property
    def kind(self) -> ErrorKind | None:  # type: ignore[override]
        return error_kind(self.__cause__)


class LoadBooksError(ServiceError):
    """Could not load books."""


class CreateBookError(ServiceError):
    """Could not create book."""


class UpdateBookError(ServiceError):
    """Could not update book."""


class DeleteBookError(ServiceError):
    """Could not delete book."""


class LoadStockError(ServiceError):
    """Could not load stock."""


class SaveStockError(ServiceError):
    """Could not save stock."""


class ChangeStockError(ServiceError):
    """Could not change stock."""


def error_kind(exc: BaseException | None) -> ErrorKind | None:
    """
    Find the kind of an exception, following the ``__cause__`` chain.

    Returns None for exceptions that are not part of the taxonomy.
    """
    seen: set[int] = set()
    while exc is not None and id(exc) not in seen:
        seen.add(id(exc))
        if isinstance(exc, LibraryError) and not isinstance(exc, ServiceError):
            return exc.kind
        exc = exc.__cause__
    return None
