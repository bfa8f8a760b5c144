"""
Stock Service

Orchestrates a StockStore and owns one business rule: a delta must not
drive available stock below zero.

change_stock is a read-check-write sequence:
1. Load the current record
2. Reject early if available_stock + delta < 0, naming book and delta
3. Ask the store to apply the delta

Steps 1-2 and step 3 are separate critical sections, so two callers can
both pass the pre-check and then race in the store. That is fine: the
store repeats the check atomically and is the authority. The pre-check
only gives a faster, descriptive rejection in the common case.
"""

import logging

from book_service.errors import (
    ChangeStockError,
    InsufficientStockError,
    LibraryError,
    LoadStockError,
    SaveStockError,
)
from book_service.schemas import Stock
from book_service.store import StockStore

logger = logging.getLogger(__name__)


class StockService:
    """Business operations on stock records."""

    def __init__(self, store: StockStore) -> None:
        self.store = store

    def get_stock(self, book_id: str) -> Stock:
        try:
            return self.store.load_stock(book_id)
        except LibraryError as err:
            raise LoadStockError(
                f"could not load stock for book with id {book_id}: {err}"
            ) from err

    def save_stock(self, stock: Stock) -> None:
        """
        Create the stock record for a book.

        The book id is not checked against the book store.

        Raises:
            SaveStockError: With kind DUPLICATE_ID if a record exists
        """
        try:
            self.store.save_stock(stock)
        except LibraryError as err:
            raise SaveStockError(
                f"could not save stock for book with id {stock.book_id}: {err}"
            ) from err

        logger.info(f"Created stock for book {stock.book_id}")

    def change_stock(self, book_id: str, delta: int) -> Stock:
        """
        Apply ``delta`` to the available stock of a book.

        Returns:
            The updated stock record

        Raises:
            ChangeStockError: With kind NOT_FOUND if the book has no stock
                record, or INSUFFICIENT_STOCK if the result would be negative
                (the stored value is unchanged in that case)
        """
        try:
            stock = self.store.load_stock(book_id)
        except LibraryError as err:
            raise ChangeStockError(
                f"could not load stock for book with id {book_id}: {err}"
            ) from err

        if stock.available_stock + delta < 0:
            logger.info(
                f"Rejected delta {delta} for book {book_id}: "
                f"only {stock.available_stock} available"
            )
            cause = InsufficientStockError(book_id, delta, stock.available_stock)
            raise ChangeStockError(str(cause)) from cause

        try:
            updated = self.store.update_stock(book_id, delta)
        except LibraryError as err:
            # Lost a race with another change after the pre-check
            if isinstance(err, InsufficientStockError):
                logger.warning(f"Store rejected delta {delta} for book {book_id}")
            raise ChangeStockError(
                f"could not update stock for book with id {book_id}: {err}"
            ) from err

        logger.info(f"Changed stock for book {book_id} by {delta}")
        return updated
