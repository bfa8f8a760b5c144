"""
Book Pydantic Schemas

Book is both the domain record the stores own and the JSON shape the
API exposes: {id, title, author, description}.

Records are frozen. A store can hand out the instance it holds without
a caller being able to change the stored data, and services can promise
never to mutate their input.
"""

from pydantic import BaseModel, ConfigDict, Field


class BookBase(BaseModel):
    """
    Fields shared by every book payload.

    All text fields are free-form and default to an empty string.
    """

    model_config = ConfigDict(frozen=True)

    title: str = Field(
        default="",
        description="Book title",
        examples=["Go Programming", "The C++ Programming Language (4th Edition)"],
    )

    author: str = Field(
        default="",
        description="Author name(s)",
        examples=["John Doe", "Bjarne Stroustrup"],
    )

    description: str = Field(
        default="",
        description="Book description or summary",
    )


class Book(BookBase):
    """
    A book record.

    The id is assigned by the caller, must be non-empty and never changes
    once the book is created.

    Example:
    {
        "id": "1",
        "title": "Go Programming",
        "author": "John Doe",
        "description": "An introduction to Go"
    }
    """

    id: str = Field(
        ...,
        min_length=1,
        description="Caller-assigned unique identifier",
        examples=["1", "isbn-9780321563842"],
    )

    def matches(self, criteria: str) -> bool:
        """
        Case-sensitive substring match against title, author or description.

        An empty criteria string is a substring of anything, so it matches
        every book.
        """
        return (
            criteria in self.title
            or criteria in self.author
            or criteria in self.description
        )


class BookUpdate(BookBase):
    """
    Request body for replacing a book.

    Every field except the id is replaced. An id in the body is accepted
    for compatibility with clients that send whole records, but it is
    ignored: the path decides which book is updated.
    """

    id: str | None = Field(
        default=None,
        description="Ignored; the book id comes from the URL",
    )

    def to_book(self, book_id: str) -> Book:
        """Build the full record stored under ``book_id``."""
        return Book(
            id=book_id,
            title=self.title,
            author=self.author,
            description=self.description,
        )


class BookCreatedResponse(BaseModel):
    """Response for a successful create: {"id": "..."}."""

    id: str
