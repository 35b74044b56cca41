"""
Error taxonomy for library operations.

Every error raised by the operation layer derives from ``LibrarySystemError``
and carries a ``kind`` so callers (the tool handlers, for instance) can branch
on the category without matching message text:

- ``validation``: bad arguments, raised before any transaction is opened
- ``authorization``: the logged-in user lacks the permission, raised before
  any transaction is opened
- ``not_found``: a member or book lookup came back empty
- ``conflict``: the request clashes with current state (no free copy,
  duplicate ISBN)
- ``persistence``: the database or transaction failed
"""


class LibrarySystemError(Exception):
    """Base class for all library operation errors."""

    kind = "library_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(LibrarySystemError):
    """Raised when an operation argument fails validation."""

    kind = "validation"


class AuthorizationError(LibrarySystemError):
    """Raised when the current session may not run an operation."""

    kind = "authorization"


class NotFoundError(LibrarySystemError):
    """Raised when a member or book doesn't exist."""

    kind = "not_found"


class ConflictError(LibrarySystemError):
    """Raised when an operation conflicts with stored state."""

    kind = "conflict"


class NoAvailableCopyError(ConflictError):
    """Raised when every copy of a book is already checked out."""


class PersistenceError(LibrarySystemError):
    """Raised when the database layer fails; the original error is the cause."""

    kind = "persistence"
