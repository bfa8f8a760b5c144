"""
pytest Fixtures for Book Service Tests

This file contains shared fixtures used across all test files.

FIXTURE LAYOUT:
===============
- settings: explicit Settings, never read from the developer's .env
- backend: "memory" or "sql"; store fixtures are parametrized over it so
  every store contract test runs against both implementations
- book_store / stock_store: a fresh, isolated store per test
- gate: a StaticPermissionChecker with one token per role
- client: a TestClient over an app built from the fixtures above

For the SQL backend we use SQLite in-memory:
- Fast: No disk I/O
- Isolated: each test gets its own engine, so its own database
"""

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import Engine

from book_service.config import Settings
from book_service.database import create_db_engine, create_session_factory, create_tables
from book_service.main import create_app
from book_service.permissions import Permission, StaticPermissionChecker
from book_service.schemas import Book, Stock
from book_service.services.books import BookService
from book_service.services.stock import StockService
from book_service.store import BookStore, StockStore
from book_service.store.memory import MemoryBookStore, MemoryStockStore
from book_service.store.sql import SQLBookStore, SQLStockStore, create_sql_stores

# =============================================================================
# TOKENS
# =============================================================================
LIBRARIAN_TOKEN = "librarian-token"
STOCK_KEEPER_TOKEN = "stock-keeper-token"
LENDER_TOKEN = "lender-token"
READER_TOKEN = "reader-token"
NOBODY_TOKEN = "nobody-token"

GRANTS = {
    LIBRARIAN_TOKEN: Permission.MANAGE_BOOKS,
    STOCK_KEEPER_TOKEN: Permission.QUERY_TOTAL_STOCK | Permission.CHANGE_TOTAL_STOCK,
    LENDER_TOKEN: Permission.LOAN_BOOKS | Permission.QUERY_AVAILABLE_STOCK,
    READER_TOKEN: Permission.QUERY_AVAILABLE_STOCK,
    NOBODY_TOKEN: 0,
}


def auth(token: str) -> dict[str, str]:
    """Authorization header for ``token``."""
    return {"Authorization": token}


# =============================================================================
# SETTINGS
# =============================================================================
@pytest.fixture
def settings() -> Settings:
    """Test settings; _env_file=None keeps a local .env out of the tests."""
    return Settings(
        _env_file=None,
        storage_backend="memory",
        permission_backend="static",
        log_level="DEBUG",
    )


# =============================================================================
# STORE FIXTURES
# =============================================================================
@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """A fresh SQLite in-memory database per test."""
    engine = create_db_engine("sqlite:///:memory:")
    create_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def sql_stores(engine: Engine) -> tuple[SQLBookStore, SQLStockStore]:
    """Book and stock stores over the test database, sharing one lock."""
    return create_sql_stores(create_session_factory(engine))


@pytest.fixture(params=["memory", "sql"])
def backend(request) -> str:
    """Run the requesting test once per storage backend."""
    return request.param


@pytest.fixture
def book_store(backend: str, request) -> BookStore:
    if backend == "sql":
        return request.getfixturevalue("sql_stores")[0]
    return MemoryBookStore()


@pytest.fixture
def stock_store(backend: str, request) -> StockStore:
    if backend == "sql":
        return request.getfixturevalue("sql_stores")[1]
    return MemoryStockStore()


@pytest.fixture
def book_service(book_store: BookStore) -> BookService:
    return BookService(book_store)


@pytest.fixture
def stock_service(stock_store: StockStore) -> StockService:
    return StockService(stock_store)


# =============================================================================
# APP FIXTURES
# =============================================================================
@pytest.fixture
def gate() -> StaticPermissionChecker:
    return StaticPermissionChecker(GRANTS)


@pytest.fixture
def client(
    settings: Settings,
    book_store: BookStore,
    stock_store: StockStore,
    gate: StaticPermissionChecker,
) -> Generator[TestClient, None, None]:
    """
    Create a test client over an isolated app.

    The stores are injected, so tests can inspect them directly to check
    what a request did (or did not) change.
    """
    app = create_app(
        settings,
        book_store=book_store,
        stock_store=stock_store,
        permission_checker=gate,
    )
    with TestClient(app) as test_client:
        yield test_client


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================
@pytest.fixture
def sample_book() -> Book:
    return Book(
        id="1",
        title="Go Programming",
        author="John Doe",
        description="A practical introduction to Go.",
    )


@pytest.fixture
def catalog(book_store: BookStore, sample_book: Book) -> list[Book]:
    """A small catalog with exactly one C++ title."""
    books = [
        sample_book,
        Book(
            id="2",
            title="The C++ Programming Language (4th Edition)",
            author="Bjarne Stroustrup",
            description="The definitive reference.",
        ),
        Book(
            id="3",
            title="Fluent Python",
            author="Luciano Ramalho",
            description="Clear, concise, and effective programming.",
        ),
        Book(
            id="4",
            title="The C Programming Language",
            author="Brian Kernighan, Dennis Ritchie",
            description="",
        ),
    ]
    for book in books:
        book_store.save_book(book)
    return books


@pytest.fixture
def sample_stock(stock_store: StockStore) -> Stock:
    stock = Stock(book_id="2", total_stock=5, lent_stock=0, available_stock=5)
    stock_store.save_stock(stock)
    return stock
