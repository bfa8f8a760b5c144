"""
Book Service

Thin orchestration over a BookStore. Each operation forwards to the
store and, on failure, raises an operation-level error chained to the
store error:

    get_books / get_book_by_id → LoadBooksError
    create_book                → CreateBookError
    update_book                → UpdateBookError
    delete_book                → DeleteBookError

The chained cause keeps its kind, so callers can still tell "not found"
from "duplicate id" without unwrapping by hand (see ServiceError.kind).

The service works with any BookStore; it is constructed with the store
it should use.
"""

import logging

from book_service.errors import (
    CreateBookError,
    DeleteBookError,
    LibraryError,
    LoadBooksError,
    UpdateBookError,
)
from book_service.schemas import Book
from book_service.store import BookStore

logger = logging.getLogger(__name__)


class BookService:
    """Business operations on books."""

    def __init__(self, store: BookStore) -> None:
        self.store = store

    def get_books(self, criteria: str = "") -> list[Book]:
        """
        Search books by substring of title, author or description.

        An empty criteria returns every book.
        """
        try:
            return self.store.load_books(criteria)
        except LibraryError as err:
            raise LoadBooksError(f"could not load books: {err}") from err

    def get_book_by_id(self, book_id: str) -> Book:
        try:
            return self.store.load_book_by_id(book_id)
        except LibraryError as err:
            raise LoadBooksError(f"could not load book with id {book_id}: {err}") from err

    def create_book(self, book: Book) -> str:
        """
        Store a new book.

        Returns:
            The id of the created book

        Raises:
            CreateBookError: With kind DUPLICATE_ID if the id is taken
        """
        try:
            book_id = self.store.save_book(book)
        except LibraryError as err:
            raise CreateBookError(f"could not create book: {err}") from err

        logger.info(f"Created book {book_id}")
        return book_id

    def update_book(self, book_id: str, book: Book) -> None:
        """
        Replace every field of an existing book except its id.

        Raises:
            UpdateBookError: With kind NOT_FOUND if there is no such book
        """
        try:
            self.store.update_book(book_id, book)
        except LibraryError as err:
            raise UpdateBookError(f"could not update book with id {book_id}: {err}") from err

        logger.info(f"Updated book {book_id}")

    def delete_book(self, book_id: str) -> None:
        try:
            self.store.delete_book(book_id)
        except LibraryError as err:
            raise DeleteBookError(f"could not delete book with id {book_id}: {err}") from err

        logger.info(f"Deleted book {book_id}")
