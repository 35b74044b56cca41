"""
Role and permission model for library operations.

A role is a named set of permissions. Operations ask for a single
``Permission`` and the check is plain set membership, so adding a role never
requires touching the operations themselves.
"""

import enum
import logging

from pydantic import BaseModel, Field

from .errors import AuthorizationError

logger = logging.getLogger(__name__)

PRIVILEGE_ERROR = "Current logged user doesn't have the privilege to execute this function"


class Permission(str, enum.Enum):
    """A single capability an operation can require."""

    CHECKOUT_BOOK = "checkout_book"
    VIEW_CHECKOUT_RECORD = "view_checkout_record"
    VIEW_OVERDUE_COPIES = "view_overdue_copies"
    VIEW_BOOK = "view_book"
    ADD_BOOK = "add_book"
    ADD_COPIES = "add_copies"
    ADD_MEMBER = "add_member"


LIBRARIAN_PERMISSIONS = frozenset(
    {
        Permission.CHECKOUT_BOOK,
        Permission.VIEW_CHECKOUT_RECORD,
        Permission.VIEW_OVERDUE_COPIES,
        Permission.VIEW_BOOK,
    }
)

ADMIN_PERMISSIONS = frozenset(
    {
        Permission.ADD_BOOK,
        Permission.ADD_COPIES,
        Permission.ADD_MEMBER,
    }
)


class Role(str, enum.Enum):
    """Privilege level of a library user."""

    NONE = "none"
    LIBRARIAN = "librarian"
    ADMIN = "admin"
    BOTH = "both"

    @property
    def permissions(self) -> frozenset[Permission]:
        """Permissions granted by this role."""
        return _ROLE_PERMISSIONS[self]

    def allows(self, permission: Permission) -> bool:
        return permission in self.permissions


_ROLE_PERMISSIONS: dict[Role, frozenset[Permission]] = {
    Role.NONE: frozenset(),
    Role.LIBRARIAN: LIBRARIAN_PERMISSIONS,
    Role.ADMIN: ADMIN_PERMISSIONS,
    Role.BOTH: LIBRARIAN_PERMISSIONS | ADMIN_PERMISSIONS,
}


class SessionUser(BaseModel):
    """The authenticated user a session acts on behalf of."""

    name: str = Field(..., min_length=1, description="Display name of the user")
    role: Role = Field(default=Role.NONE, description="Privilege level")
    member_id: int | None = Field(
        default=None,
        ge=0,
        description="Member row backing this user, if any",
    )


class SessionContext:
    """
    Holds the currently logged-in user.

    Authentication happens elsewhere; this object only remembers who logged in
    and answers permission checks for the operation layer.
    """

    def __init__(self, user: SessionUser | None = None):
        self._current_user = user

    @property
    def current_user(self) -> SessionUser | None:
        return self._current_user

    @property
    def is_authenticated(self) -> bool:
        return self._current_user is not None

    def login(self, user: SessionUser) -> None:
        logger.info("User %s logged in with role %s", user.name, user.role.value)
        self._current_user = user

    def logout(self) -> None:
        if self._current_user is not None:
            logger.info("User %s logged out", self._current_user.name)
        self._current_user = None

    def has_permission(self, permission: Permission) -> bool:
        return self._current_user is not None and self._current_user.role.allows(permission)

    def require(self, permission: Permission) -> SessionUser:
        """
        Return the current user if it holds ``permission``.

        Raises:
            AuthorizationError: If nobody is logged in or the role lacks it
        """
        if not self.has_permission(permission):
            name = self._current_user.name if self._current_user else "<anonymous>"
            logger.warning("Permission %s denied for %s", permission.value, name)
            raise AuthorizationError(PRIVILEGE_ERROR)
        return self._current_user
