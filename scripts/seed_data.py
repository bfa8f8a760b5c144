#!/usr/bin/env python3
"""
Database Seed Script

Populates the SQL backend with sample books and stock for development.

USAGE:
    # From the project root, with DATABASE_URL pointing at the target database
    python scripts/seed_data.py
    python scripts/seed_data.py --clear

This script:
1. Connects to the database using the service settings
2. Optionally drops and recreates the tables
3. Creates sample books and their stock records through the services,
   so the same duplicate checks apply as for API calls
"""

import argparse
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from book_service.config import get_settings
from book_service.database import (
    create_db_engine,
    create_session_factory,
    create_tables,
    drop_tables,
)
from book_service.errors import ErrorKind, LibraryError
from book_service.schemas import Book, Stock
from book_service.services.books import BookService
from book_service.services.stock import StockService
from book_service.store.sql import create_sql_stores

SAMPLE_BOOKS = [
    Book(
        id="1",
        title="Go Programming",
        author="John Doe",
        description="A practical introduction to concurrent programming in Go.",
    ),
    Book(
        id="2",
        title="The C++ Programming Language (4th Edition)",
        author="Bjarne Stroustrup",
        description="The definitive reference from the creator of the language.",
    ),
    Book(
        id="3",
        title="Fluent Python",
        author="Luciano Ramalho",
        description="Clear, concise, and effective programming.",
    ),
    Book(
        id="4",
        title="Designing Data-Intensive Applications",
        author="Martin Kleppmann",
        description="The big ideas behind reliable, scalable, and maintainable systems.",
    ),
    Book(
        id="5",
        title="The Pragmatic Programmer",
        author="David Thomas, Andrew Hunt",
        description="Your journey to mastery.",
    ),
]

# book id -> (total, lent)
SAMPLE_STOCK = {
    "1": (5, 1),
    "2": (3, 0),
    "3": (8, 2),
    "4": (2, 2),
    "5": (4, 1),
}


def seed_books(books: BookService) -> int:
    """Create the sample books, skipping ids that already exist."""
    print("Creating books...")
    created = 0
    for book in SAMPLE_BOOKS:
        try:
            books.create_book(book)
            created += 1
        except LibraryError as e:
            if e.kind != ErrorKind.DUPLICATE_ID:
                raise
            print(f"  - Book {book.id} already exists, skipped")
    print(f"Created {created} books.")
    return created


def seed_stock(stock: StockService) -> int:
    """Create stock records for the sample books, skipping existing ones."""
    print("Creating stock...")
    created = 0
    for book_id, (total, lent) in SAMPLE_STOCK.items():
        record = Stock(
            book_id=book_id,
            total_stock=total,
            lent_stock=lent,
            available_stock=total - lent,
        )
        try:
            stock.save_stock(record)
            created += 1
        except LibraryError as e:
            if e.kind != ErrorKind.DUPLICATE_ID:
                raise
            print(f"  - Stock for book {book_id} already exists, skipped")
    print(f"Created {created} stock records.")
    return created


def seed_database(clear_existing: bool = False) -> None:
    """
    Main function to seed the database.

    Args:
        clear_existing: If True, drops all tables before seeding.
    """
    settings = get_settings()

    print("=" * 60)
    print(f"Seeding {settings.database_url}")
    print("=" * 60)

    engine = create_db_engine(settings.database_url, echo=settings.db_echo)
    try:
        if clear_existing:
            print("Dropping existing tables...")
            drop_tables(engine)
        create_tables(engine)

        book_store, stock_store = create_sql_stores(create_session_factory(engine))
        books = seed_books(BookService(book_store))
        stock = seed_stock(StockService(stock_store))

        print("=" * 60)
        print("Database seeding completed successfully!")
        print("=" * 60)
        print("\nSummary:")
        print(f"  - Books: {books}")
        print(f"  - Stock records: {stock}")
        print(f"\nStart the service with STORAGE_BACKEND=sql on port {settings.port}")
    finally:
        engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the book service database")
    parser.add_argument(
        "--clear",
        action="store_true",
        help="Drop all tables before seeding",
    )
    args = parser.parse_args()
    seed_database(clear_existing=args.clear)
