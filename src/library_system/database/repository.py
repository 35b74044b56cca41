"""
Repository pattern implementation for the Library System.

Repositories are the data-access layer: key lookups, adds and updates for one
entity type. They work on the caller's session and never commit; the
operation layer owns the transaction through ``session_scope``.

Database failures surface as ``RepositoryException`` (or ``DuplicateError``
for constraint violations) with the SQLAlchemy error chained as the cause.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .schema import Base

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)
ResponseSchemaType = TypeVar("ResponseSchemaType", bound=BaseModel)
T = TypeVar("T")


class RepositoryException(Exception):
    """Base exception for repository operations."""


class DuplicateError(RepositoryException):
    """Raised when a write violates a uniqueness or integrity constraint."""


def safe_query(session: Session, query_func: Callable[[Session], T], error_msg: str) -> T:
    """
    Execute a query, converting database errors.

    Args:
        session: The database session
        query_func: Function that performs the query
        error_msg: Message for the raised error

    Raises:
        RepositoryException: If the query fails
    """
    try:
        return query_func(session)
    except SQLAlchemyError as e:
        logger.exception("Query failed")
        raise RepositoryException(f"{error_msg}: Database query failed") from e


def is_unique_violation(error: IntegrityError) -> bool:
    """True when ``error`` was caused by a UNIQUE or primary key constraint."""
    # PostgreSQL reports unique_violation as SQLSTATE 23505
    if getattr(error.orig, "pgcode", None) == "23505":
        return True
    return "UNIQUE constraint failed" in str(error.orig)


def safe_flush(session: Session, operation: str) -> None:
    """
    Send pending changes to the database without committing.

    Raises:
        DuplicateError: If a unique constraint is violated
        RepositoryException: On other database errors, including CHECK and
            foreign key violations
    """
    try:
        session.flush()
    except IntegrityError as e:
        if is_unique_violation(e):
            raise DuplicateError(f"Database operation '{operation}' hit a duplicate key") from e
        raise RepositoryException(
            f"Database operation '{operation}' violated a constraint"
        ) from e
    except SQLAlchemyError as e:
        raise RepositoryException(f"Database operation '{operation}' failed: {e!s}") from e


class BaseRepository(ABC, Generic[ModelType, ResponseSchemaType]):
    """
    Abstract base repository providing key lookup, add and update.

    Lookups return session-bound rows so the caller can mutate them inside
    its transaction; ``to_response_model`` detaches a row into its Pydantic
    view.
    """

    def __init__(self, session: Session):
        self.session = session

    @property
    @abstractmethod
    def model_class(self) -> type[ModelType]:
        """Return the SQLAlchemy model class."""

    @property
    @abstractmethod
    def response_schema(self) -> type[ResponseSchemaType]:
        """Return the Pydantic response schema."""

    def to_response_model(self, db_obj: ModelType) -> ResponseSchemaType:
        """Convert database model to Pydantic response model."""
        return self.response_schema.model_validate(db_obj, from_attributes=True)

    def get(self, id: int) -> ModelType | None:
        """
        Get entity by primary key.

        Returns:
            The row, or None if not found

        Raises:
            RepositoryException: On database errors
        """
        return safe_query(
            self.session,
            lambda s: s.get(self.model_class, id),
            f"Failed to get {self.model_class.__name__} by ID",
        )

    def add(self, db_obj: ModelType) -> ModelType:
        """
        Add a new entity and flush it so generated keys are assigned.

        Raises:
            DuplicateError: If entity already exists
            RepositoryException: On other database errors
        """
        self.session.add(db_obj)
        safe_flush(self.session, f"add {self.model_class.__name__}")
        return db_obj

    def update(self, db_obj: ModelType) -> ModelType:
        """
        Persist changes made to a loaded entity.

        Raises:
            RepositoryException: On database errors
        """
        merged = self.session.merge(db_obj)
        safe_flush(self.session, f"update {self.model_class.__name__}")
        return merged

    def count(self) -> int:
        query = select(func.count()).select_from(self.model_class)
        return safe_query(
            self.session, lambda s: s.execute(query).scalar(), "Failed to count rows"
        ) or 0
