"""
Member repository implementation for the Library System.

Members are looked up by integer key. Creating a member also creates its
(empty) checkout record so the 1:1 relation always holds.
"""

from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from ..models.member import Member as MemberModel
from ..permissions import Role
from .repository import BaseRepository, safe_query
from .schema import CheckoutRecord as CheckoutRecordDB
from .schema import Member as MemberDB


class MemberCreateSchema(BaseModel):
    """Schema for creating a member."""

    name: str = Field(..., min_length=1, max_length=200)
    email: str | None = Field(default=None, max_length=255)
    role: Role = Role.NONE


class MemberRepository(BaseRepository[MemberDB, MemberModel]):
    """Repository for member data access."""

    @property
    def model_class(self):
        return MemberDB

    @property
    def response_schema(self):
        return MemberModel

    def get(self, id: int) -> MemberDB | None:
        """
        Get a member with its checkout record and entries loaded.

        Args:
            id: Member key

        Returns:
            The member row or None if not found
        """
        query = (
            select(MemberDB)
            .where(MemberDB.id == id)
            .options(selectinload(MemberDB.checkout_record).selectinload(CheckoutRecordDB.entries))
        )
        return safe_query(
            self.session,
            lambda s: s.execute(query).scalar_one_or_none(),
            "Failed to get member by ID",
        )

    def create(self, data: MemberCreateSchema) -> MemberDB:
        """
        Create a member together with its checkout record.

        Raises:
            DuplicateError: If the email is already registered
            RepositoryException: On other database errors
        """
        member = MemberDB(**data.model_dump())
        member.checkout_record = CheckoutRecordDB()
        return self.add(member)
