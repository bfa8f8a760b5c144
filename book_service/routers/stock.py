"""
Stock Router

Endpoints for per-book stock records.

Endpoints:
- GET  /stock/{book_id}          current record (QUERY_TOTAL_STOCK or QUERY_AVAILABLE_STOCK)
- POST /stock/new                create a record (CHANGE_TOTAL_STOCK)
- POST /stock/{book_id}/change   apply {"delta": n} (CHANGE_TOTAL_STOCK or LOAN_BOOKS)

Stock records are serialized with their wire names
(bookID, totalStock, lentStock, availableStock).
"""

from fastapi import APIRouter, status

from book_service.dependencies import ChangeStock, CreateStock, QueryStock, StockKeeper
from book_service.schemas import Stock, StockChange

router = APIRouter(
    prefix="/stock",
    tags=["Stock"],
    responses={
        404: {"description": "No stock record for this book"},
    },
)


@router.post(
    "/new",
    response_model=Stock,
    status_code=status.HTTP_201_CREATED,
    summary="Create a stock record",
    responses={409: {"description": "A stock record for this book already exists"}},
)
def create_stock(
    stock: Stock,
    stock_service: StockKeeper,
    _: CreateStock,
) -> Stock:
    """
    Create the stock record of a book.

    The book id is not checked against the book catalog.
    """
    stock_service.save_stock(stock)
    return stock


@router.get(
    "/{book_id}",
    response_model=Stock,
    summary="Get stock for a book",
)
def get_stock(
    book_id: str,
    stock_service: StockKeeper,
    _: QueryStock,
) -> Stock:
    return stock_service.get_stock(book_id)


@router.post(
    "/{book_id}/change",
    response_model=Stock,
    summary="Change available stock",
    description="Add a signed delta to availableStock. Rejected if the result would be negative.",
    responses={409: {"description": "Not enough stock for this delta"}},
)
def change_stock(
    book_id: str,
    change: StockChange,
    stock_service: StockKeeper,
    _: ChangeStock,
) -> Stock:
    """
    Apply a delta to the available stock.

    Returns:
        The updated stock record
    """
    return stock_service.change_stock(book_id, change.delta)
