"""
Library operations.

``LibraryService`` is the operation layer: one method per use case, each
following the same sequence:

1. Validate the arguments (``InvalidInputError``)
2. Check the session's permission (``AuthorizationError``)
3. Open a transaction and load rows by key
4. Mutate the loaded rows and persist them through the repositories
5. Commit and return a detached Pydantic view

Steps 1 and 2 happen before any database work. Once the transaction is open,
any exception rolls it back; database failures are logged and re-raised as
``PersistenceError`` with the original error as the cause.
"""

import logging
from collections.abc import Callable, Generator
from contextlib import contextmanager
from datetime import datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import get_config
from ..database.book_repository import BookCreateSchema, BookRepository, normalize_isbn
from ..database.member_repository import MemberCreateSchema, MemberRepository
from ..database.repository import DuplicateError, RepositoryException
from ..database.schema import BookCopy as BookCopyDB
from ..database.schema import CheckoutEntry as CheckoutEntryDB
from ..database.schema import CheckoutRecord as CheckoutRecordDB
from ..database.session import DatabaseManager, get_db_manager
from ..errors import (
    ConflictError,
    InvalidInputError,
    LibrarySystemError,
    NoAvailableCopyError,
    NotFoundError,
    PersistenceError,
)
from ..models.book import Book as BookModel
from ..models.book import BookCopy as BookCopyModel
from ..models.member import Member as MemberModel
from ..permissions import Permission, Role, SessionContext, SessionUser

logger = logging.getLogger(__name__)

DATABASE_ERROR = "Error happened while dealing with the database!"


def _validate_member_id(member_id: int) -> None:
    if member_id is None or member_id < 0:
        raise InvalidInputError("Member ID can't be negative")


def _validate_isbn(isbn: str) -> None:
    # Lookups match on the normalized form, so "---" is as empty as ""
    if isbn is None or not normalize_isbn(isbn):
        raise InvalidInputError("Book ISBN can't be empty")


class LibraryService:
    """
    Checkout, record and catalog operations for the logged-in user.

    Args:
        db_manager: Source of transactional sessions
        session_context: Who is logged in
        clock: Returns the current time; injectable for tests
    """

    def __init__(
        self,
        db_manager: DatabaseManager,
        session_context: SessionContext,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.db_manager = db_manager
        self.session_context = session_context
        self.clock = clock

    @contextmanager
    def _transaction(self, operation: str) -> Generator[Session, None, None]:
        """Run one operation in its own transaction, translating database errors."""
        try:
            with self.db_manager.session_scope() as session:
                yield session
        except LibrarySystemError as e:
            logger.info("%s rolled back: %s", operation, e)
            raise
        except DuplicateError as e:
            logger.warning("%s rejected by a constraint: %s", operation, e)
            raise ConflictError("A record with the same key already exists") from e
        except (RepositoryException, SQLAlchemyError) as e:
            logger.exception("Database failure during %s", operation)
            raise PersistenceError(DATABASE_ERROR) from e

    # ------------------------------------------------------------------
    # Circulation
    # ------------------------------------------------------------------

    def checkout_book(self, member_id: int, isbn: str) -> MemberModel:
        """
        Lend the first available copy of a book to a member.

        The copy becomes unavailable, is linked to the member and gets a due
        date of now plus the book's borrow duration. A matching entry with a
        zero fine is appended to the member's checkout record.

        Returns:
            The updated member, including its checkout record

        Raises:
            InvalidInputError: Negative member id or empty ISBN
            AuthorizationError: Session lacks ``CHECKOUT_BOOK``
            NotFoundError: Member or book doesn't exist
            NoAvailableCopyError: Every copy is already checked out
            PersistenceError: The database failed
        """
        _validate_member_id(member_id)
        _validate_isbn(isbn)
        self.session_context.require(Permission.CHECKOUT_BOOK)

        with self._transaction("checkout_book") as session:
            members = MemberRepository(session)
            books = BookRepository(session)

            member = members.get(member_id)
            book = books.get_by_isbn(isbn)

            if member is None:
                raise NotFoundError("Member not found")
            if book is None:
                raise NotFoundError("Book not found")

            copy = next((c for c in book.copies if c.available), None)
            if copy is None:
                raise NoAvailableCopyError("There is no available copies")

            now = self.clock()
            due_date = now + timedelta(days=book.borrow_duration)

            copy.available = False
            copy.member_id = member.id
            copy.due_date = due_date

            if member.checkout_record is None:
                member.checkout_record = CheckoutRecordDB()
            member.checkout_record.entries.append(
                CheckoutEntryDB(
                    copy=copy,
                    checkout_date=now,
                    due_date=due_date,
                    fine=0.0,
                )
            )

            member = members.update(member)
            books.update(book)
            result = members.to_response_model(member)

        logger.info(
            "Checked out copy %d of %s to member %d, due %s",
            copy.copy_number,
            book.isbn,
            member_id,
            due_date.isoformat(),
        )
        return result

    def view_checkout_record(self, member_id: int) -> MemberModel:
        """
        Load a member together with its checkout record.

        Raises:
            InvalidInputError: Negative member id
            AuthorizationError: Session lacks ``VIEW_CHECKOUT_RECORD``
            NotFoundError: Member doesn't exist
            PersistenceError: The database failed
        """
        _validate_member_id(member_id)
        self.session_context.require(Permission.VIEW_CHECKOUT_RECORD)

        with self._transaction("view_checkout_record") as session:
            members = MemberRepository(session)
            member = members.get(member_id)
            if member is None:
                raise NotFoundError("Member not found")
            return members.to_response_model(member)

    def get_overdue_copies(self, isbn: str) -> list[BookCopyModel]:
        """
        List the copies of a book that are on loan past their due date.

        A copy is overdue when it is unavailable and its due date is strictly
        before now. Copies come back in stored order.

        Raises:
            InvalidInputError: Empty ISBN
            AuthorizationError: Session lacks ``VIEW_OVERDUE_COPIES``
            NotFoundError: Book doesn't exist
            PersistenceError: The database failed
        """
        _validate_isbn(isbn)
        self.session_context.require(Permission.VIEW_OVERDUE_COPIES)

        with self._transaction("get_overdue_copies") as session:
            book = BookRepository(session).get_by_isbn(isbn)
            if book is None:
                raise NotFoundError("Book not found")

            now = self.clock()
            copies = [BookCopyModel.model_validate(c) for c in book.copies]
            return [copy for copy in copies if copy.is_overdue(now)]

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    def add_book(self, book: BookCreateSchema | None) -> BookModel:
        """
        Add a new book to the catalog.

        Returns:
            The persisted book with its assigned id

        Raises:
            InvalidInputError: No book given
            AuthorizationError: Session lacks ``ADD_BOOK``
            ConflictError: The ISBN is already in the catalog
            PersistenceError: The database failed
        """
        if book is None:
            raise InvalidInputError("Book is null")
        self.session_context.require(Permission.ADD_BOOK)

        with self._transaction("add_book") as session:
            books = BookRepository(session)
            if books.exists_isbn(book.isbn):
                raise ConflictError(f"Book with ISBN {book.isbn} already exists")
            created = books.create(book)
            result = books.to_response_model(created)

        logger.info("Added book %s with %d copies", result.isbn, result.total_copies)
        return result

    def add_copies(self, isbn: str, count: int) -> BookModel:
        """
        Append ``count`` new available copies to a book.

        Raises:
            InvalidInputError: ``count`` is not positive or the ISBN is empty
            AuthorizationError: Session lacks ``ADD_COPIES``
            NotFoundError: Book doesn't exist
            PersistenceError: The database failed
        """
        if count is None or count <= 0:
            raise InvalidInputError("Book copies can't be 0 or negative")
        _validate_isbn(isbn)
        self.session_context.require(Permission.ADD_COPIES)

        with self._transaction("add_copies") as session:
            books = BookRepository(session)
            book = books.get_by_isbn(isbn)
            if book is None:
                raise NotFoundError("Book not found")

            next_number = max((c.copy_number for c in book.copies), default=0) + 1
            for number in range(next_number, next_number + count):
                book.copies.append(
                    BookCopyDB(copy_number=number, available=True, member_id=None, due_date=None)
                )

            book = books.update(book)
            result = books.to_response_model(book)

        logger.info("Added %d copies to %s (now %d)", count, result.isbn, result.total_copies)
        return result

    def get_book(self, isbn: str) -> BookModel:
        """
        Look up a book by ISBN.

        Raises:
            InvalidInputError: Empty ISBN
            AuthorizationError: Session lacks ``VIEW_BOOK``
            NotFoundError: Book doesn't exist
            PersistenceError: The database failed
        """
        _validate_isbn(isbn)
        self.session_context.require(Permission.VIEW_BOOK)

        with self._transaction("get_book") as session:
            books = BookRepository(session)
            book = books.get_by_isbn(isbn)
            if book is None:
                raise NotFoundError("Book not found")
            return books.to_response_model(book)

    # ------------------------------------------------------------------
    # Members
    # ------------------------------------------------------------------

    def add_member(self, member: MemberCreateSchema | None) -> MemberModel:
        """
        Register a member along with an empty checkout record.

        Raises:
            InvalidInputError: No member given
            AuthorizationError: Session lacks ``ADD_MEMBER``
            ConflictError: The email is already registered
            PersistenceError: The database failed
        """
        if member is None:
            raise InvalidInputError("Member is null")
        self.session_context.require(Permission.ADD_MEMBER)

        with self._transaction("add_member") as session:
            members = MemberRepository(session)
            created = members.create(member)
            result = members.to_response_model(created)

        logger.info("Added member %d (%s)", result.id, result.role.value)
        return result


_library_service: LibraryService | None = None


def get_library_service() -> LibraryService:
    """
    Get the service the tool server runs with.

    It uses the global database manager and a session logged in as the
    configured operator.
    """
    global _library_service  # noqa: PLW0603

    if _library_service is None:
        config = get_config()
        operator = SessionUser(name=config.operator_name, role=Role(config.operator_role))
        _library_service = LibraryService(get_db_manager(), SessionContext(operator))

    return _library_service


def reset_library_service() -> None:
    global _library_service  # noqa: PLW0603
    _library_service = None
