"""
Book repository implementation for the Library System.

Books are addressed by ISBN from the outside; copies are always loaded with
the book, ordered by ``copy_number`` so scans see them in stored order.
"""

from pydantic import BaseModel, Field, field_validator
from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from ..models.book import Book as BookModel
from .repository import BaseRepository, safe_query
from .schema import Book as BookDB
from .schema import BookCopy as BookCopyDB


class BookCreateSchema(BaseModel):
    """Schema for adding a new book to the catalog."""

    isbn: str = Field(
        ...,
        description="ISBN of the book (hyphens allowed)",
        min_length=1,
        max_length=20,
        examples=["978-0-134-68547-9", "9780134685479"],
    )

    title: str = Field(
        ...,
        description="The title of the book",
        min_length=1,
        max_length=500,
    )

    borrow_duration: int = Field(
        default=14,
        description="Loan period in days",
        ge=1,
        le=365,
    )

    copies: int = Field(
        default=0,
        description="Number of copies to create with the book",
        ge=0,
        le=1000,
    )

    @field_validator("isbn")
    @classmethod
    def normalize_isbn(cls, v: str) -> str:
        """Strip whitespace and hyphens for consistent storage."""
        normalized = v.strip().replace("-", "")
        if not normalized:
            raise ValueError("Book ISBN can't be empty")
        return normalized


def normalize_isbn(isbn: str) -> str:
    """Normalize an ISBN the same way ``BookCreateSchema`` stores it."""
    return isbn.strip().replace("-", "")


class BookRepository(BaseRepository[BookDB, BookModel]):
    """Repository for book data access."""

    @property
    def model_class(self):
        return BookDB

    @property
    def response_schema(self):
        return BookModel

    def get_by_isbn(self, isbn: str) -> BookDB | None:
        """
        Get a book by ISBN with its copies loaded.

        Args:
            isbn: ISBN with or without hyphens

        Returns:
            The book row or None if not found
        """
        query = (
            select(BookDB)
            .where(BookDB.isbn == normalize_isbn(isbn))
            .options(selectinload(BookDB.copies))
        )
        return safe_query(
            self.session,
            lambda s: s.execute(query).scalar_one_or_none(),
            "Failed to get book by ISBN",
        )

    def exists_isbn(self, isbn: str) -> bool:
        query = (
            select(func.count()).select_from(BookDB).where(BookDB.isbn == normalize_isbn(isbn))
        )
        count = safe_query(
            self.session, lambda s: s.execute(query).scalar(), "Failed to check ISBN"
        )
        return bool(count)

    def create(self, data: BookCreateSchema) -> BookDB:
        """
        Add a book and its initial copies.

        Raises:
            DuplicateError: If the ISBN already exists
            RepositoryException: On other database errors
        """
        book = BookDB(
            isbn=data.isbn,
            title=data.title,
            borrow_duration=data.borrow_duration,
        )
        book.copies = [BookCopyDB(copy_number=n, available=True) for n in range(1, data.copies + 1)]
        return self.add(book)
