"""
Store Contracts

BookStore and StockStore define what a storage backend must do. The
services are written once against these interfaces and never know which
backend they talk to.

Implementations:
- memory.py: dictionaries guarded by a reader/writer lock
- sql.py: SQLAlchemy tables, same contract and same locking discipline

Failure contract (all backends):
- NotFoundError when the key is missing (load, update, delete)
- DuplicateIDError when creating a key that exists
- InsufficientStockError when a delta would make available stock negative
- UpstreamUnavailableError when the backing database cannot be reached
"""

from abc import ABC, abstractmethod

from book_service.schemas import Book, Stock


class BookStore(ABC):
    """Storage for Book records, keyed by book id."""

    @abstractmethod
    def load_books(self, criteria: str) -> list[Book]:
        """
        Return every book whose title, author or description contains
        ``criteria``.

        Matching is exact, case-sensitive substring containment. An empty
        criteria matches every book. Order is not part of the contract.
        """

    @abstractmethod
    def load_book_by_id(self, book_id: str) -> Book:
        """Return the book stored under ``book_id``."""

    @abstractmethod
    def save_book(self, book: Book) -> str:
        """Insert a new book and return its id."""

    @abstractmethod
    def update_book(self, book_id: str, book: Book) -> None:
        """Replace every field of the book stored under ``book_id`` but its id."""

    @abstractmethod
    def delete_book(self, book_id: str) -> None:
        """Remove the book stored under ``book_id``."""


class StockStore(ABC):
    """Storage for Stock records, keyed by book id."""

    @abstractmethod
    def load_stock(self, book_id: str) -> Stock:
        """Return the stock record for ``book_id``."""

    @abstractmethod
    def save_stock(self, stock: Stock) -> None:
        """Create the stock record for ``stock.book_id``."""

    @abstractmethod
    def update_stock(self, book_id: str, delta: int) -> Stock:
        """
        Add ``delta`` to available stock and return the updated record.

        Read, check and write happen atomically: no other adjustment of
        any record can interleave. A result below zero is rejected and the
        stored value is left unchanged.
        """


__all__ = ["BookStore", "StockStore"]
