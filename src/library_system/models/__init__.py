"""
Pydantic models for the Library System.

These are detached, serializable views of the database rows. Relations are
expressed as keys (``book_id``, ``member_id``, ``copy_id``) rather than
object references, so a model never drags the rest of the entity graph along.
"""

from .book import Book, BookCopy
from .member import CheckoutEntry, CheckoutRecord, Member

__all__ = [
    "Book",
    "BookCopy",
    "CheckoutEntry",
    "CheckoutRecord",
    "Member",
]
