"""
Catalog and membership tools for the Library System.

1. get_book: Look up a book and its copies by ISBN
2. add_book: Add a new book (optionally with initial copies)
3. add_copies: Add copies to an existing book
4. add_member: Register a member
"""

import logging
from typing import Annotated, Any

from pydantic import Field, ValidationError

from ..config import get_config
from ..database.book_repository import BookCreateSchema
from ..database.member_repository import MemberCreateSchema
from ..errors import LibrarySystemError
from ..models.book import Book
from ..permissions import Role
from ..services.library_service import get_library_service
from .circulation import BookIsbn
from .responses import invalid_arguments_error, success_response, tool_error

logger = logging.getLogger(__name__)


def _book_summary(book: Book) -> str:
    return (
        f"'{book.title}' (ISBN {book.isbn}): {book.available_copies} of "
        f"{book.total_copies} copies available, {book.borrow_duration}-day loans"
    )


# =============================================================================
# GET BOOK
# =============================================================================


async def get_book_handler(book_isbn: BookIsbn) -> dict[str, Any]:
    """Handler for the get_book tool."""
    try:
        book = get_library_service().get_book(book_isbn)
    except LibrarySystemError as e:
        logger.info("Get book failed - %s: %s", e.kind, e)
        raise tool_error(e) from e

    return success_response(_book_summary(book), {"book": book.model_dump(mode="json")})


# =============================================================================
# ADD BOOK
# =============================================================================


async def add_book_handler(
    isbn: Annotated[str, Field(description="ISBN of the new book", min_length=1, max_length=20)],
    title: Annotated[str, Field(description="Title of the new book", min_length=1, max_length=500)],
    borrow_duration: Annotated[
        int | None,
        Field(description="Loan period in days; defaults to the configured period", ge=1, le=365),
    ] = None,
    copies: Annotated[
        int, Field(description="Number of copies to create with the book", ge=0, le=1000)
    ] = 1,
) -> dict[str, Any]:
    """Handler for the add_book tool."""
    try:
        book_data = BookCreateSchema(
            isbn=isbn,
            title=title,
            borrow_duration=borrow_duration or get_config().default_borrow_duration,
            copies=copies,
        )
    except ValidationError as e:
        raise invalid_arguments_error(e) from e

    try:
        book = get_library_service().add_book(book_data)
    except LibrarySystemError as e:
        logger.info("Add book failed - %s: %s", e.kind, e)
        raise tool_error(e) from e

    return success_response(f"Added {_book_summary(book)}", {"book": book.model_dump(mode="json")})


# =============================================================================
# ADD COPIES
# =============================================================================


async def add_copies_handler(
    book_isbn: BookIsbn,
    count: Annotated[int, Field(description="Number of copies to add", gt=0, le=1000)],
) -> dict[str, Any]:
    """Handler for the add_copies tool."""
    try:
        book = get_library_service().add_copies(book_isbn, count)
    except LibrarySystemError as e:
        logger.info("Add copies failed - %s: %s", e.kind, e)
        raise tool_error(e) from e

    return success_response(
        f"Added {count} copies. {_book_summary(book)}",
        {"book": book.model_dump(mode="json")},
    )


# =============================================================================
# ADD MEMBER
# =============================================================================


async def add_member_handler(
    name: Annotated[str, Field(description="Full name of the member", min_length=1, max_length=200)],
    email: Annotated[str | None, Field(description="Contact email", max_length=255)] = None,
    role: Annotated[Role, Field(description="Privilege level of the member")] = Role.NONE,
) -> dict[str, Any]:
    """Handler for the add_member tool."""
    try:
        member = get_library_service().add_member(
            MemberCreateSchema(name=name, email=email, role=role)
        )
    except LibrarySystemError as e:
        logger.info("Add member failed - %s: %s", e.kind, e)
        raise tool_error(e) from e

    return success_response(
        f"Registered member {member.name} with id {member.id}",
        {"member": member.model_dump(mode="json")},
    )


# =============================================================================
# TOOL DEFINITIONS
# =============================================================================

get_book = {
    "name": "get_book",
    "description": "Look up a book by ISBN, including every copy and its loan state.",
    "handler": get_book_handler,
}

add_book = {
    "name": "add_book",
    "description": (
        "Add a new book to the catalog with an optional number of initial copies. "
        "Requires admin privileges."
    ),
    "handler": add_book_handler,
}

add_copies = {
    "name": "add_copies",
    "description": "Add available copies to an existing book. Requires admin privileges.",
    "handler": add_copies_handler,
}

add_member = {
    "name": "add_member",
    "description": (
        "Register a library member with an empty checkout record. "
        "Requires admin privileges."
    ),
    "handler": add_member_handler,
}
