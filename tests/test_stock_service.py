"""
Tests for StockService.

change_stock checks the delta before asking the store, and the store
checks again atomically. Both rejections surface as ChangeStockError with
kind INSUFFICIENT_STOCK.
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock

import pytest

from book_service.errors import (
    ChangeStockError,
    ErrorKind,
    InsufficientStockError,
    LoadStockError,
    NotFoundError,
    SaveStockError,
)
from book_service.schemas import Stock
from book_service.services.stock import StockService
from book_service.store import StockStore


class TestGetAndSaveStock:
    def test_get(self, stock_service, sample_stock):
        assert stock_service.get_stock("2") == sample_stock

    def test_get_missing(self, stock_service):
        with pytest.raises(LoadStockError) as exc_info:
            stock_service.get_stock("missing")

        assert exc_info.value.kind == ErrorKind.NOT_FOUND

    def test_save_duplicate(self, stock_service, sample_stock):
        with pytest.raises(SaveStockError) as exc_info:
            stock_service.save_stock(sample_stock)

        assert exc_info.value.kind == ErrorKind.DUPLICATE_ID


class TestChangeStock:
    def test_positive_delta(self, stock_service, stock_store):
        """5 available, +3 → 8."""
        stock_store.save_stock(Stock(book_id="3", available_stock=5))

        updated = stock_service.change_stock("3", 3)

        assert updated.available_stock == 8
        assert stock_store.load_stock("3").available_stock == 8

    def test_insufficient_stock(self, stock_service, stock_store):
        """3 available, -5 → rejected, still 3."""
        stock_store.save_stock(Stock(book_id="4", available_stock=3))

        with pytest.raises(ChangeStockError) as exc_info:
            stock_service.change_stock("4", -5)

        assert exc_info.value.kind == ErrorKind.INSUFFICIENT_STOCK
        assert "-5" in str(exc_info.value)
        assert "4" in str(exc_info.value)
        assert stock_store.load_stock("4").available_stock == 3

    def test_missing_record(self, stock_service):
        with pytest.raises(ChangeStockError) as exc_info:
            stock_service.change_stock("missing", 1)

        assert exc_info.value.kind == ErrorKind.NOT_FOUND
        assert isinstance(exc_info.value.__cause__, NotFoundError)

    def test_zero_delta(self, stock_service, sample_stock):
        assert stock_service.change_stock("2", 0).available_stock == 5


class TestChangeStockAgainstStore:
    """Interaction between the pre-check and the store."""

    def test_pre_check_skips_store_update(self):
        store = MagicMock(spec=StockStore)
        store.load_stock.return_value = Stock(book_id="4", available_stock=3)
        service = StockService(store)

        with pytest.raises(ChangeStockError) as exc_info:
            service.change_stock("4", -5)

        assert isinstance(exc_info.value.__cause__, InsufficientStockError)
        assert exc_info.value.__cause__.available == 3
        store.update_stock.assert_not_called()

    def test_store_rejection_after_pre_check(self):
        """Another change won the race between load and update."""
        store = MagicMock(spec=StockStore)
        store.load_stock.return_value = Stock(book_id="4", available_stock=1)
        store.update_stock.side_effect = InsufficientStockError("4", -1)
        service = StockService(store)

        with pytest.raises(ChangeStockError) as exc_info:
            service.change_stock("4", -1)

        assert exc_info.value.kind == ErrorKind.INSUFFICIENT_STOCK
        store.update_stock.assert_called_once_with("4", -1)

    def test_returns_store_result(self):
        store = MagicMock(spec=StockStore)
        store.load_stock.return_value = Stock(book_id="1", available_stock=1)
        store.update_stock.return_value = Stock(book_id="1", available_stock=2)
        service = StockService(store)

        assert service.change_stock("1", 1) == Stock(book_id="1", available_stock=2)

    def test_concurrent_changes_never_go_negative(self, stock_service, stock_store):
        stock_store.save_stock(Stock(book_id="race", available_stock=10))
        workers = 20
        barrier = threading.Barrier(workers)

        def take_one() -> ErrorKind | None:
            barrier.wait()
            try:
                stock_service.change_stock("race", -1)
                return None
            except ChangeStockError as exc:
                return exc.kind

        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(lambda _: take_one(), range(workers)))

        assert results.count(None) == 10
        assert results.count(ErrorKind.INSUFFICIENT_STOCK) == 10
        assert stock_store.load_stock("race").available_stock == 0

    def test_changes_race_with_book_searches(self, stock_service, stock_store, book_store, catalog):
        """
        Stock writes interleaved with book reads on the same database.

        Every decrement that fits must succeed; none may fail for any
        reason other than running out of stock.
        """
        stock_store.save_stock(Stock(book_id="race", available_stock=10))
        changers = 20
        searchers = 20
        barrier = threading.Barrier(changers + searchers)

        def take_one() -> ErrorKind | None:
            barrier.wait()
            try:
                stock_service.change_stock("race", -1)
                return None
            except ChangeStockError as exc:
                return exc.kind

        def search() -> int:
            barrier.wait()
            return len(book_store.load_books(""))

        with ThreadPoolExecutor(max_workers=changers + searchers) as pool:
            changes = [pool.submit(take_one) for _ in range(changers)]
            searches = [pool.submit(search) for _ in range(searchers)]
            results = [future.result() for future in changes]
            found = [future.result() for future in searches]

        assert results.count(None) == 10
        assert results.count(ErrorKind.INSUFFICIENT_STOCK) == 10
        assert found == [len(catalog)] * searchers
        assert stock_store.load_stock("race").available_stock == 0
