"""
Book Model

Table backing SQLBookStore.

The id is the caller-assigned string key, not a surrogate integer: the
API lets clients pick ids, and the store must reject duplicates, which
the primary key constraint does for us.
"""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from book_service.database import Base
from book_service.schemas import Book


class BookRecord(Base):
    """
    Row of the books table.

    Table: books

    Fields:
    - id: Caller-assigned identifier (primary key)
    - title, author, description: Free text, empty string when unset
    """

    __tablename__ = "books"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)

    title: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        comment="Book title"
    )

    author: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        comment="Author name(s)"
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        comment="Book description or summary"
    )

    @classmethod
    def from_book(cls, book: Book) -> "BookRecord":
        return cls(
            id=book.id,
            title=book.title,
            author=book.author,
            description=book.description,
        )

    def to_book(self) -> Book:
        return Book(
            id=self.id,
            title=self.title,
            author=self.author,
            description=self.description,
        )

    def __repr__(self) -> str:
        return f"BookRecord(id='{self.id}', title='{self.title}')"
