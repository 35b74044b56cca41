"""
SQLAlchemy database schema for the Library System.

Entities are rows keyed by identifier and related through foreign keys:

    members 1--1 checkout_records 1--* checkout_entries *--1 book_copies
    books   1--* book_copies      *--0..1 members (current borrower)

The operation layer loads rows inside a transaction, mutates them and hands
them back to the repositories for persistence.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base, relationship, validates
from sqlalchemy.sql import func

from ..permissions import Role

Base = declarative_base()


class Member(Base):
    """
    Members table - library users and staff.

    Each member owns exactly one checkout record, created alongside it.
    """

    __tablename__ = "members"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False, index=True)
    email = Column(String(255), nullable=True, unique=True)
    role = Column(Enum(Role), nullable=False, default=Role.NONE)

    created_at = Column(DateTime, nullable=False, default=func.now())
    updated_at = Column(DateTime, nullable=False, default=func.now(), onupdate=func.now())

    checkout_record = relationship(
        "CheckoutRecord",
        back_populates="member",
        uselist=False,
        cascade="all, delete-orphan",
    )

    __table_args__ = (CheckConstraint("id >= 0", name="check_member_id_non_negative"),)


class CheckoutRecord(Base):
    """Checkout records table - one loan ledger per member."""

    __tablename__ = "checkout_records"

    id = Column(Integer, primary_key=True, autoincrement=True)
    member_id = Column(Integer, ForeignKey("members.id"), nullable=False, unique=True)

    member = relationship("Member", back_populates="checkout_record")
    entries = relationship(
        "CheckoutEntry",
        back_populates="record",
        order_by="CheckoutEntry.id",
        cascade="all, delete-orphan",
    )


class CheckoutEntry(Base):
    """
    Checkout entries table - one line per loan.

    Entries are written once at checkout; only ``fine`` may change later.
    """

    __tablename__ = "checkout_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    record_id = Column(Integer, ForeignKey("checkout_records.id"), nullable=False)
    copy_id = Column(Integer, ForeignKey("book_copies.id"), nullable=False)
    checkout_date = Column(DateTime, nullable=False)
    due_date = Column(DateTime, nullable=False)
    fine = Column(Float, nullable=False, default=0.0)

    record = relationship("CheckoutRecord", back_populates="entries")
    copy = relationship("BookCopy")

    __table_args__ = (
        Index("idx_entry_record", "record_id"),
        Index("idx_entry_copy", "copy_id"),
        CheckConstraint("fine >= 0", name="check_fine_non_negative"),
        CheckConstraint("due_date >= checkout_date", name="check_due_after_checkout"),
    )


class Book(Base):
    """Books table - the catalog, one row per ISBN."""

    __tablename__ = "books"

    id = Column(Integer, primary_key=True, autoincrement=True)
    isbn = Column(String(20), nullable=False, unique=True)
    title = Column(String(500), nullable=False, index=True)
    borrow_duration = Column(Integer, nullable=False, default=14)

    created_at = Column(DateTime, nullable=False, default=func.now())
    updated_at = Column(DateTime, nullable=True, default=func.now(), onupdate=func.now())

    copies = relationship(
        "BookCopy",
        back_populates="book",
        order_by="BookCopy.copy_number",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("idx_book_isbn", "isbn"),
        CheckConstraint("borrow_duration > 0", name="check_borrow_duration_positive"),
    )

    @validates("isbn")
    def validate_isbn(self, key, value):  # noqa: ARG002
        if not value:
            raise ValueError("Book ISBN can't be empty")
        return value


class BookCopy(Base):
    """
    Book copies table - individual loanable items.

    A copy is checked out exactly when ``available`` is false and both
    ``member_id`` and ``due_date`` are set.
    """

    __tablename__ = "book_copies"

    id = Column(Integer, primary_key=True, autoincrement=True)
    book_id = Column(Integer, ForeignKey("books.id"), nullable=False)
    copy_number = Column(Integer, nullable=False)
    available = Column(Boolean, nullable=False, default=True)
    due_date = Column(DateTime, nullable=True)
    member_id = Column(Integer, ForeignKey("members.id"), nullable=True)

    book = relationship("Book", back_populates="copies")
    member = relationship("Member")

    __table_args__ = (
        Index("idx_copy_book", "book_id"),
        Index("idx_copy_member", "member_id"),
        UniqueConstraint("book_id", "copy_number", name="unique_copy_number"),
        CheckConstraint("copy_number > 0", name="check_copy_number_positive"),
        CheckConstraint(
            "(available = 1 AND member_id IS NULL AND due_date IS NULL) OR "
            "(available = 0 AND member_id IS NOT NULL AND due_date IS NOT NULL)",
            name="check_copy_loan_state",
        ),
    )

    @property
    def is_checked_out(self) -> bool:
        return not self.available and self.member_id is not None and self.due_date is not None
