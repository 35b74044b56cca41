"""
Library System.

A library-management business layer: checking out books, viewing checkout
records, listing overdue copies and maintaining the catalog, each operation
gated by the logged-in user's role and run in its own database transaction.

Key Components:
- models: Pydantic views of members, books and loans
- database: SQLAlchemy schema, repositories and session management
- permissions: Roles, permissions and the session context
- services: The operation layer (LibraryService)
- tools / server: MCP tool surface over the operations
"""

__version__ = "0.1.0"

from .errors import (
    AuthorizationError,
    ConflictError,
    InvalidInputError,
    LibrarySystemError,
    NoAvailableCopyError,
    NotFoundError,
    PersistenceError,
)
from .permissions import Permission, Role, SessionContext, SessionUser
from .services import LibraryService

__all__ = [
    "AuthorizationError",
    "ConflictError",
    "InvalidInputError",
    "LibraryService",
    "LibrarySystemError",
    "NoAvailableCopyError",
    "NotFoundError",
    "Permission",
    "PersistenceError",
    "Role",
    "SessionContext",
    "SessionUser",
    "__version__",
]
