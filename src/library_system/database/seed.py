"""
Sample data generation for the Library System.

Generates staff, members and a catalog with Faker so a fresh database has
something to check out. Some copies are put on loan with due dates in the
past so the overdue query has results.
"""

import logging
import random
from datetime import datetime, timedelta

from faker import Faker
from sqlalchemy.orm import Session

from ..permissions import Role
from .book_repository import BookCreateSchema, BookRepository
from .member_repository import MemberCreateSchema, MemberRepository
from .schema import CheckoutEntry

logger = logging.getLogger(__name__)


def generate_isbn13(rng: random.Random) -> str:
    """Generate a valid ISBN-13 number."""
    body = f"978{rng.randint(0, 9)}{rng.randint(1000, 9999)}{rng.randint(1000, 9999)}"
    total = sum(int(digit) * (3 if i % 2 else 1) for i, digit in enumerate(body))
    return f"{body}{(10 - total % 10) % 10}"


def seed_database(
    session: Session,
    members: int = 20,
    books: int = 30,
    max_copies: int = 4,
    loans: int = 15,
    seed: int = 42,
    now: datetime | None = None,
) -> dict[str, int]:
    """
    Populate the database with sample data.

    Creates one librarian, one admin and one member with both roles in
    addition to ``members`` regular members. Runs in the caller's session;
    the caller commits.

    Returns:
        Counts of created members, books, copies and loans
    """
    fake = Faker()
    Faker.seed(seed)
    rng = random.Random(seed)
    now = now or datetime.now()

    member_repo = MemberRepository(session)
    book_repo = BookRepository(session)

    staff = [
        MemberCreateSchema(name="Head Librarian", email="librarian@library.test", role=Role.LIBRARIAN),
        MemberCreateSchema(name="Catalog Admin", email="admin@library.test", role=Role.ADMIN),
        MemberCreateSchema(name="Branch Manager", email="manager@library.test", role=Role.BOTH),
    ]
    created_members = [member_repo.create(data) for data in staff]
    for _ in range(members):
        created_members.append(
            member_repo.create(MemberCreateSchema(name=fake.name(), email=fake.unique.email()))
        )

    created_books = []
    seen_isbns: set[str] = set()
    while len(created_books) < books:
        isbn = generate_isbn13(rng)
        if isbn in seen_isbns:
            continue
        seen_isbns.add(isbn)
        created_books.append(
            book_repo.create(
                BookCreateSchema(
                    isbn=isbn,
                    title=fake.catch_phrase().title(),
                    borrow_duration=rng.choice([7, 14, 21, 28]),
                    copies=rng.randint(1, max_copies),
                )
            )
        )

    loaned = 0
    for _ in range(loans):
        book = rng.choice(created_books)
        copy = next((c for c in book.copies if c.available), None)
        if copy is None:
            continue
        member = rng.choice(created_members)
        checkout_date = now - timedelta(days=rng.randint(1, 40))
        due_date = checkout_date + timedelta(days=book.borrow_duration)

        copy.available = False
        copy.member_id = member.id
        copy.due_date = due_date
        member.checkout_record.entries.append(
            CheckoutEntry(copy=copy, checkout_date=checkout_date, due_date=due_date, fine=0.0)
        )
        loaned += 1

    session.flush()

    counts = {
        "members": len(created_members),
        "books": len(created_books),
        "copies": sum(len(b.copies) for b in created_books),
        "loans": loaned,
    }
    logger.info("Seeded database: %s", counts)
    return counts
