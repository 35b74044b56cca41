"""
Book models for the Library System.

Detached views of catalog rows. A ``Book`` lists its copies in stored order;
each ``BookCopy`` refers back to its book and borrower by key only.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class BookCopy(BaseModel):
    """One loanable copy of a book."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Unique identifier of the copy", ge=1)

    book_id: int = Field(..., description="Key of the book this copy belongs to", ge=1)

    copy_number: int = Field(
        ...,
        description="Position of the copy within its book, starting at 1",
        ge=1,
    )

    available: bool = Field(
        default=True,
        description="Whether the copy can be checked out",
    )

    due_date: datetime | None = Field(
        default=None,
        description="When the current loan is due, if checked out",
    )

    member_id: int | None = Field(
        default=None,
        description="Key of the member currently borrowing the copy",
    )

    @property
    def is_checked_out(self) -> bool:
        return not self.available and self.member_id is not None and self.due_date is not None

    def is_overdue(self, now: datetime) -> bool:
        """True when the copy is on loan and its due date is before ``now``."""
        return not self.available and self.due_date is not None and self.due_date < now


class Book(BaseModel):
    """
    Represents a book in the library catalog.

    The ISBN is the external identifier; ``id`` is assigned when the book is
    first persisted.
    """

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "isbn": "9780134685479",
                "title": "Effective Java",
                "borrow_duration": 14,
                "copies": [
                    {
                        "id": 1,
                        "book_id": 1,
                        "copy_number": 1,
                        "available": True,
                        "due_date": None,
                        "member_id": None,
                    }
                ],
            }
        },
    )

    id: int = Field(..., description="Unique identifier of the book", ge=1)

    isbn: str = Field(
        ...,
        description="International Standard Book Number, stored without hyphens",
        min_length=1,
        examples=["9780134685479"],
    )

    title: str = Field(..., description="The title of the book", min_length=1)

    borrow_duration: int = Field(
        ...,
        description="Loan period in days",
        ge=1,
    )

    copies: list[BookCopy] = Field(
        default_factory=list,
        description="Copies of the book in stored order",
    )

    @property
    def total_copies(self) -> int:
        return len(self.copies)

    @property
    def available_copies(self) -> int:
        return sum(1 for copy in self.copies if copy.available)
