"""
Books Router

CRUD endpoints for books.

Reads are public. Every mutation requires the MANAGE_BOOKS permission,
checked by the ManageBooks dependency before the route body runs.

Endpoints:
- GET    /books?criteria=...   search (empty criteria lists everything)
- GET    /books/{book_id}      one book
- POST   /books/new            create (caller supplies the id)
- POST   /books/{book_id}      replace (PUT is accepted as well)
- DELETE /books/{book_id}      delete

Service errors are not caught here: the exception handlers in main.py
map their kinds to status codes.
"""

from fastapi import APIRouter, Query, Response, status

from book_service.dependencies import Books, ManageBooks
from book_service.schemas import Book, BookCreatedResponse, BookUpdate

router = APIRouter(
    prefix="/books",
    tags=["Books"],
    responses={
        404: {"description": "Book not found"},
    },
)


@router.get(
    "",
    response_model=list[Book],
    summary="Search books",
    description="List books whose title, author or description contains the criteria.",
)
def get_books(
    books: Books,
    criteria: str = Query(
        default="",
        description="Case-sensitive substring; empty matches every book",
        examples=["C++", "Doe"],
    ),
) -> list[Book]:
    """
    Search books by substring.

    Examples:
        GET /api/v1/books
        GET /api/v1/books?criteria=C%2B%2B
    """
    return books.get_books(criteria)


@router.post(
    "/new",
    response_model=BookCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new book",
    description="Create a book with a caller-assigned id. Requires MANAGE_BOOKS.",
    responses={409: {"description": "A book with this id already exists"}},
)
def create_book(
    book: Book,
    books: Books,
    _: ManageBooks,
) -> BookCreatedResponse:
    """
    Create a new book.

    Returns:
        {"id": "<id of the created book>"}
    """
    return BookCreatedResponse(id=books.create_book(book))


@router.get(
    "/{book_id}",
    response_model=Book,
    summary="Get a book by ID",
)
def get_book(book_id: str, books: Books) -> Book:
    return books.get_book_by_id(book_id)


@router.api_route(
    "/{book_id}",
    methods=["POST", "PUT"],
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Update a book",
    description="Replace title, author and description of a book. Requires MANAGE_BOOKS.",
)
def update_book(
    book_id: str,
    book: BookUpdate,
    books: Books,
    _: ManageBooks,
) -> Response:
    """
    Replace a book.

    Every field except the id is overwritten; an id in the body is ignored.
    """
    books.update_book(book_id, book.to_book(book_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a book",
    description="Permanently delete a book. Requires MANAGE_BOOKS.",
)
def delete_book(
    book_id: str,
    books: Books,
    _: ManageBooks,
) -> Response:
    books.delete_book(book_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
