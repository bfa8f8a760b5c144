"""
SQL Stores

SQLAlchemy-backed implementations of BookStore and StockStore. They
satisfy exactly the same contract as the in-memory stores, so the
services cannot tell them apart.

Locking matches the in-memory stores: an RWLock held for the duration
of each transaction. Stores built by create_sql_stores() share one lock,
since they share one database. When the engine has a single connection
(SQLite ":memory:"), reads take the lock exclusively as well.

Error translation:
- IntegrityError on insert → DuplicateIDError
- OperationalError (database unreachable, locked, ...) → UpstreamUnavailableError

Search semantics:
    SQL LIKE is case-insensitive on some backends and treats % and _ as
    wildcards. The query uses an escaped LIKE only to narrow candidates;
    the final decision is Book.matches(), the same case-sensitive
    substring test the in-memory store uses.
"""

import logging
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session, sessionmaker

from book_service.database import is_single_connection
from book_service.errors import (
    DuplicateIDError,
    InsufficientStockError,
    NotFoundError,
    UpstreamUnavailableError,
)
from book_service.models import BookRecord, StockRecord
from book_service.schemas import Book, Stock
from book_service.store import BookStore, StockStore
from book_service.utils import RWLock

logger = logging.getLogger(__name__)


class _SQLStore:
    """Session handling shared by the SQL stores."""

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        lock: RWLock | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._lock = lock or RWLock()
        engine = session_factory.kw.get("bind")
        self._exclusive_reads = engine is not None and is_single_connection(engine)

    def _read_lock(self) -> AbstractContextManager[None]:
        if self._exclusive_reads:
            return self._lock.write_lock()
        return self._lock.read_lock()

    @contextmanager
    def _transaction(self) -> Iterator[Session]:
        """
        Yield a session inside one transaction.

        Commits when the block ends normally, rolls back on any exception.
        """
        try:
            with self._session_factory() as session, session.begin():
                yield session
        except OperationalError as exc:
            logger.error(f"Database error: {exc}")
            raise UpstreamUnavailableError(f"database unavailable: {exc.orig}") from exc


class SQLBookStore(_SQLStore, BookStore):
    """Book storage in the ``books`` table."""

    def load_books(self, criteria: str) -> list[Book]:
        stmt = select(BookRecord).order_by(BookRecord.id)
        if criteria:
            stmt = stmt.where(
                or_(
                    BookRecord.title.contains(criteria, autoescape=True),
                    BookRecord.author.contains(criteria, autoescape=True),
                    BookRecord.description.contains(criteria, autoescape=True),
                )
            )

        with self._read_lock(), self._transaction() as session:
            books = [record.to_book() for record in session.scalars(stmt)]

        return [book for book in books if book.matches(criteria)]

    def load_book_by_id(self, book_id: str) -> Book:
        with self._read_lock(), self._transaction() as session:
            record = session.get(BookRecord, book_id)
            if record is None:
                raise NotFoundError(f"book with id {book_id} not found")
            return record.to_book()

    def save_book(self, book: Book) -> str:
        with self._lock.write_lock():
            try:
                with self._transaction() as session:
                    if session.get(BookRecord, book.id) is not None:
                        raise DuplicateIDError(f"book with id {book.id} already exists")
                    session.add(BookRecord.from_book(book))
            except IntegrityError as exc:
                raise DuplicateIDError(f"book with id {book.id} already exists") from exc
        logger.debug(f"Saved book {book.id}")
        return book.id

    def update_book(self, book_id: str, book: Book) -> None:
        with self._lock.write_lock(), self._transaction() as session:
            record = session.get(BookRecord, book_id)
            if record is None:
                raise NotFoundError(f"book with id {book_id} not found")
            record.title = book.title
            record.author = book.author
            record.description = book.description
        logger.debug(f"Updated book {book_id}")

    def delete_book(self, book_id: str) -> None:
        with self._lock.write_lock(), self._transaction() as session:
            record = session.get(BookRecord, book_id)
            if record is None:
                raise NotFoundError(f"book with id {book_id} not found")
            session.delete(record)
        logger.debug(f"Deleted book {book_id}")


class SQLStockStore(_SQLStore, StockStore):
    """Stock storage in the ``stocks`` table."""

    def load_stock(self, book_id: str) -> Stock:
        with self._read_lock(), self._transaction() as session:
            record = session.get(StockRecord, book_id)
            if record is None:
                raise NotFoundError(f"stock for book with id {book_id} not found")
            return record.to_stock()

    def save_stock(self, stock: Stock) -> None:
        with self._lock.write_lock():
            try:
                with self._transaction() as session:
                    if session.get(StockRecord, stock.book_id) is not None:
                        raise DuplicateIDError(
                            f"stock for book with id {stock.book_id} already exists"
                        )
                    session.add(StockRecord.from_stock(stock))
            except IntegrityError as exc:
                raise DuplicateIDError(
                    f"stock for book with id {stock.book_id} already exists"
                ) from exc
        logger.debug(f"Saved stock for book {stock.book_id}")

    def update_stock(self, book_id: str, delta: int) -> Stock:
        with self._lock.write_lock(), self._transaction() as session:
            # FOR UPDATE guards against other processes sharing the database
            record = session.get(StockRecord, book_id, with_for_update=True)
            if record is None:
                raise NotFoundError(f"stock for book with id {book_id} not found")

            if record.available_stock + delta < 0:
                raise InsufficientStockError(book_id, delta, record.available_stock)

            record.available_stock += delta
            updated = record.to_stock()
        logger.debug(f"Changed stock for book {book_id} by {delta}")
        return updated


def create_sql_stores(
    session_factory: sessionmaker[Session],
) -> tuple[SQLBookStore, SQLStockStore]:
    """Build the book and stock stores over one database, sharing one lock."""
    lock = RWLock()
    return SQLBookStore(session_factory, lock), SQLStockStore(session_factory, lock)
