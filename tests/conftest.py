"""Test configuration and fixtures for the Library System.

1. Isolated databases - every test gets a fresh in-memory SQLite database
2. Sessions per role - services logged in as librarian, admin, both or none
3. A fixed clock - due dates are deterministic
4. Global state cleanup - config and singletons are reset after each test
"""

import os
from collections.abc import Callable, Generator
from datetime import datetime

import pytest

from library_system.config import reset_config
from library_system.database import (
    BookCreateSchema,
    BookRepository,
    DatabaseManager,
    MemberCreateSchema,
    MemberRepository,
    reset_db_manager,
)
from library_system.permissions import Role, SessionContext, SessionUser
from library_system.services import LibraryService, reset_library_service

FIXED_NOW = datetime(2024, 1, 1, 9, 30)

BOOK_ISBN = "9780134685479"


# === Database Fixtures ===


@pytest.fixture
def db_manager() -> Generator[DatabaseManager, None, None]:
    """Provide a database manager on a fresh in-memory database."""
    manager = DatabaseManager("sqlite:///:memory:")
    manager.init_database()
    yield manager
    manager.close()


@pytest.fixture
def db_session(db_manager):
    """Provide a session inside a transaction that commits on exit."""
    with db_manager.session_scope() as session:
        yield session


# === Session / Service Fixtures ===


@pytest.fixture
def make_service(db_manager) -> Callable[..., LibraryService]:
    """Factory for services logged in with a given role."""

    def _make(role: Role | None = Role.BOTH, now: datetime = FIXED_NOW) -> LibraryService:
        context = SessionContext()
        if role is not None:
            context.login(SessionUser(name=f"{role.value}-user", role=role))
        return LibraryService(db_manager, context, clock=lambda: now)

    return _make


@pytest.fixture
def librarian_service(make_service) -> LibraryService:
    return make_service(Role.LIBRARIAN)


@pytest.fixture
def admin_service(make_service) -> LibraryService:
    return make_service(Role.ADMIN)


@pytest.fixture
def service(make_service) -> LibraryService:
    """Service logged in with both roles."""
    return make_service(Role.BOTH)


# === Test Data Fixtures ===


@pytest.fixture
def sample_member(db_manager) -> int:
    """Create a regular member and return its id."""
    with db_manager.session_scope() as session:
        member = MemberRepository(session).create(
            MemberCreateSchema(name="Jane Reader", email="jane@example.com")
        )
        return member.id


@pytest.fixture
def make_book(db_manager) -> Callable[..., str]:
    """Factory that creates a book and returns its ISBN."""

    def _make(isbn: str = BOOK_ISBN, copies: int = 3, borrow_duration: int = 14) -> str:
        with db_manager.session_scope() as session:
            BookRepository(session).create(
                BookCreateSchema(
                    isbn=isbn,
                    title=f"Book {isbn}",
                    borrow_duration=borrow_duration,
                    copies=copies,
                )
            )
        return isbn

    return _make


@pytest.fixture
def sample_book(make_book) -> str:
    """Create a book with three copies and a 14-day loan period."""
    return make_book()


# === Cleanup Fixtures ===


@pytest.fixture(autouse=True)
def cleanup_after_test():
    """Reset global configuration and singletons after each test."""
    yield

    reset_config()
    reset_library_service()
    reset_db_manager()

    for key in list(os.environ.keys()):
        if key.startswith("LIBRARY_SYSTEM_TEST_"):
            del os.environ[key]
