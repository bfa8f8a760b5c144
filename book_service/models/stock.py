"""
Stock Model

Table backing SQLStockStore.

book_id is deliberately not a foreign key to books: stock records are
allowed to reference ids the book store does not know, and deleting a
book leaves its stock row alone.
"""

from sqlalchemy import CheckConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from book_service.database import Base
from book_service.schemas import Stock


class StockRecord(Base):
    """
    Row of the stocks table.

    Table: stocks

    The CHECK constraint on available_stock mirrors the store's floor
    check, so even a hand-written UPDATE cannot push it below zero.
    """

    __tablename__ = "stocks"
    __table_args__ = (
        CheckConstraint("available_stock >= 0", name="ck_stocks_available_non_negative"),
    )

    book_id: Mapped[str] = mapped_column(String(255), primary_key=True)

    total_stock: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Nominal number of copies owned"
    )

    lent_stock: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Copies currently checked out"
    )

    available_stock: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Copies that can be handed out"
    )

    @classmethod
    def from_stock(cls, stock: Stock) -> "StockRecord":
        return cls(
            book_id=stock.book_id,
            total_stock=stock.total_stock,
            lent_stock=stock.lent_stock,
            available_stock=stock.available_stock,
        )

    def to_stock(self) -> Stock:
        return Stock(
            book_id=self.book_id,
            total_stock=self.total_stock,
            lent_stock=self.lent_stock,
            available_stock=self.available_stock,
        )

    def __repr__(self) -> str:
        return f"StockRecord(book_id='{self.book_id}', available={self.available_stock})"
