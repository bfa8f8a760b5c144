"""
Pydantic Schemas Package

Records and request/response bodies.

Unlike a typical CRUD API, the records here (Book, Stock) are also the
domain values the stores hold, so there is no separate XxxResponse
layer: what the store returns is what the API serializes.

Schema Naming Convention:
- XxxBase: Shared fields
- Xxx: The full record
- XxxUpdate / XxxChange: Request bodies for mutations
"""

from book_service.schemas.book import (
    Book,
    BookBase,
    BookCreatedResponse,
    BookUpdate,
)
from book_service.schemas.stock import Stock, StockChange

__all__ = [
    "Book",
    "BookBase",
    "BookCreatedResponse",
    "BookUpdate",
    "Stock",
    "StockChange",
]
