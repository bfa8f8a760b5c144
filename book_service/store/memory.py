"""
In-Memory Stores

Each store is a dict guarded by one RWLock over the whole collection:
- load_* takes the lock shared, so reads run concurrently
- save/update/delete take it exclusive, so writes are serialized

There is no per-key locking: a write to one book blocks every other
read and write on the book store until it finishes. Book and stock
stores have separate locks, so a book mutation and a stock mutation are
never atomic together.

Records are frozen pydantic models, so handing out the stored instance
is safe.
"""

import logging

from book_service.errors import DuplicateIDError, InsufficientStockError, NotFoundError
from book_service.schemas import Book, Stock
from book_service.store import BookStore, StockStore
from book_service.utils import RWLock

logger = logging.getLogger(__name__)


class MemoryBookStore(BookStore):
    """Thread-safe in-memory book storage."""

    def __init__(self) -> None:
        self._books: dict[str, Book] = {}
        self._lock = RWLock()

    def load_books(self, criteria: str) -> list[Book]:
        with self._lock.read_lock():
            return [book for book in self._books.values() if book.matches(criteria)]

    def load_book_by_id(self, book_id: str) -> Book:
        with self._lock.read_lock():
            book = self._books.get(book_id)
        if book is None:
            raise NotFoundError(f"book with id {book_id} not found")
        return book

    def save_book(self, book: Book) -> str:
        with self._lock.write_lock():
            if book.id in self._books:
                raise DuplicateIDError(f"book with id {book.id} already exists")
            self._books[book.id] = book
        logger.debug(f"Saved book {book.id}")
        return book.id

    def update_book(self, book_id: str, book: Book) -> None:
        with self._lock.write_lock():
            if book_id not in self._books:
                raise NotFoundError(f"book with id {book_id} not found")
            # The key is the identity; the body's id is not trusted.
            self._books[book_id] = book.model_copy(update={"id": book_id})
        logger.debug(f"Updated book {book_id}")

    def delete_book(self, book_id: str) -> None:
        with self._lock.write_lock():
            if book_id not in self._books:
                raise NotFoundError(f"book with id {book_id} not found")
            del self._books[book_id]
        logger.debug(f"Deleted book {book_id}")


class MemoryStockStore(StockStore):
    """Thread-safe in-memory stock storage, keyed by book id."""

    def __init__(self) -> None:
        self._stocks: dict[str, Stock] = {}
        self._lock = RWLock()

    def load_stock(self, book_id: str) -> Stock:
        with self._lock.read_lock():
            stock = self._stocks.get(book_id)
        if stock is None:
            raise NotFoundError(f"stock for book with id {book_id} not found")
        return stock

    def save_stock(self, stock: Stock) -> None:
        with self._lock.write_lock():
            if stock.book_id in self._stocks:
                raise DuplicateIDError(f"stock for book with id {stock.book_id} already exists")
            self._stocks[stock.book_id] = stock
        logger.debug(f"Saved stock for book {stock.book_id}")

    def update_stock(self, book_id: str, delta: int) -> Stock:
        with self._lock.write_lock():
            stock = self._stocks.get(book_id)
            if stock is None:
                raise NotFoundError(f"stock for book with id {book_id} not found")

            if stock.available_stock + delta < 0:
                raise InsufficientStockError(book_id, delta, stock.available_stock)

            updated = stock.with_delta(delta)
            self._stocks[book_id] = updated
        logger.debug(f"Changed stock for book {book_id} by {delta}")
        return updated
