"""
Circulation tools for the Library System.

1. checkout_book: Lend the first available copy of a book to a member
2. view_checkout_record: Show a member's loan ledger
3. get_overdue_copies: List copies of a book that are past due

Handler parameters carry their Pydantic constraints, so FastMCP advertises
them as the tool's input schema and rejects bad arguments before the
handler runs. Library errors are raised as ``ToolError``.
"""

import logging
from typing import Annotated, Any

from pydantic import Field

from ..errors import LibrarySystemError
from ..services.library_service import get_library_service
from .responses import success_response, tool_error

logger = logging.getLogger(__name__)

MemberId = Annotated[
    int,
    Field(description="Identifier of the member", ge=0, examples=[1, 42]),
]

BookIsbn = Annotated[
    str,
    Field(description="ISBN of the book (hyphens allowed)", min_length=1, examples=["9780134685479"]),
]


# =============================================================================
# CHECKOUT
# =============================================================================


async def checkout_book_handler(member_id: MemberId, book_isbn: BookIsbn) -> dict[str, Any]:
    """Handler for the checkout_book tool."""
    try:
        member = get_library_service().checkout_book(member_id, book_isbn)
    except LibrarySystemError as e:
        logger.info("Checkout failed - %s: %s", e.kind, e)
        raise tool_error(e) from e

    entry = member.checkout_record.entries[-1]
    message = (
        f"Checked out '{book_isbn}' to member {member.name} ({member.id}). "
        f"Due date: {entry.due_date.strftime('%B %d, %Y')} "
        f"({entry.loan_period_days}-day loan)"
    )
    return success_response(
        message,
        {
            "member": member.model_dump(mode="json"),
            "entry": entry.model_dump(mode="json"),
        },
    )


# =============================================================================
# CHECKOUT RECORD
# =============================================================================


async def view_checkout_record_handler(member_id: MemberId) -> dict[str, Any]:
    """Handler for the view_checkout_record tool."""
    try:
        member = get_library_service().view_checkout_record(member_id)
    except LibrarySystemError as e:
        logger.info("View checkout record failed - %s: %s", e.kind, e)
        raise tool_error(e) from e

    count = member.checkout_count
    message = f"Member {member.name} ({member.id}) has {count} checkout entr{'y' if count == 1 else 'ies'}"
    return success_response(message, {"member": member.model_dump(mode="json")})


# =============================================================================
# OVERDUE COPIES
# =============================================================================


async def get_overdue_copies_handler(book_isbn: BookIsbn) -> dict[str, Any]:
    """Handler for the get_overdue_copies tool."""
    try:
        copies = get_library_service().get_overdue_copies(book_isbn)
    except LibrarySystemError as e:
        logger.info("Overdue query failed - %s: %s", e.kind, e)
        raise tool_error(e) from e

    if copies:
        lines = [
            f"- copy {c.copy_number} (member {c.member_id}, due {c.due_date:%Y-%m-%d})"
            for c in copies
        ]
        message = f"{len(copies)} overdue copies of '{book_isbn}':\n" + "\n".join(lines)
    else:
        message = f"No overdue copies of '{book_isbn}'"

    return success_response(
        message,
        {
            "book_isbn": book_isbn,
            "overdue_copies": [c.model_dump(mode="json") for c in copies],
        },
    )


# =============================================================================
# TOOL DEFINITIONS
# =============================================================================

checkout_book = {
    "name": "checkout_book",
    "description": (
        "Check out a book to a member. Takes the first available copy, marks it "
        "unavailable, sets its due date from the book's borrow duration and adds "
        "an entry to the member's checkout record. Requires librarian privileges."
    ),
    "handler": checkout_book_handler,
}

view_checkout_record = {
    "name": "view_checkout_record",
    "description": (
        "Show a member and every entry in their checkout record. "
        "Requires librarian privileges."
    ),
    "handler": view_checkout_record_handler,
}

get_overdue_copies = {
    "name": "get_overdue_copies",
    "description": (
        "List copies of a book that are checked out and past their due date. "
        "Requires librarian privileges."
    ),
    "handler": get_overdue_copies_handler,
}
