"""
Database package for the Library System.

This package provides:
- SQLAlchemy schema definitions (schema.py)
- Session management and the transaction boundary (session.py)
- Repositories for members and books
- Sample data generation (seed.py)
"""

from .book_repository import BookCreateSchema, BookRepository
from .member_repository import MemberCreateSchema, MemberRepository
from .repository import (
    BaseRepository,
    DuplicateError,
    RepositoryException,
    safe_flush,
    safe_query,
)
from .schema import (
    Base,
    Book,
    BookCopy,
    CheckoutEntry,
    CheckoutRecord,
    Member,
)
from .session import (
    DatabaseManager,
    get_db_manager,
    reset_db_manager,
)

__all__ = [
    "Base",
    "BaseRepository",
    "Book",
    "BookCopy",
    "BookCreateSchema",
    "BookRepository",
    "CheckoutEntry",
    "CheckoutRecord",
    "DatabaseManager",
    "DuplicateError",
    "Member",
    "MemberCreateSchema",
    "MemberRepository",
    "RepositoryException",
    "get_db_manager",
    "reset_db_manager",
    "safe_flush",
    "safe_query",
]
