"""
SQLAlchemy Models Package

Tables for the SQL storage backend. The in-memory backend does not use
them; both backends speak in the pydantic records from
book_service.schemas.

Import all models here to:
1. Make them available as: from book_service.models import BookRecord
2. Ensure Alembic discovers them for migrations
"""

from book_service.models.book import BookRecord
from book_service.models.stock import StockRecord

__all__ = [
    "BookRecord",
    "StockRecord",
]
