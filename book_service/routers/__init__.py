"""
API Routers Package

Router Structure:
- books.py: /api/v1/books/* endpoints
- stock.py: /api/v1/stock/* endpoints

Each router is imported and registered in main.py.
"""

from book_service.routers.books import router as books_router
from book_service.routers.stock import router as stock_router

__all__ = [
    "books_router",
    "stock_router",
]
