"""
Member and checkout ledger models for the Library System.

A ``Member`` owns one ``CheckoutRecord``, which holds the ordered list of
``CheckoutEntry`` lines, one per loan. Entries point at the copy they lent by
``copy_id``.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..permissions import Role


class CheckoutEntry(BaseModel):
    """A single loan in a member's ledger."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Unique identifier of the entry", ge=1)

    record_id: int = Field(..., description="Key of the owning checkout record", ge=1)

    copy_id: int = Field(..., description="Key of the borrowed copy", ge=1)

    checkout_date: datetime = Field(..., description="When the copy was checked out")

    due_date: datetime = Field(..., description="When the copy must be returned")

    fine: float = Field(
        default=0.0,
        description="Fine accumulated on this loan",
        ge=0.0,
    )

    @model_validator(mode="after")
    def validate_dates(self) -> "CheckoutEntry":
        if self.due_date < self.checkout_date:
            raise ValueError("Due date cannot be before checkout date")
        return self

    @property
    def loan_period_days(self) -> int:
        return (self.due_date - self.checkout_date).days

    def is_overdue(self, now: datetime) -> bool:
        return self.due_date < now


class CheckoutRecord(BaseModel):
    """A member's loan ledger."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., ge=1)

    member_id: int = Field(..., description="Key of the owning member", ge=0)

    entries: list[CheckoutEntry] = Field(
        default_factory=list,
        description="Loans in the order they were made",
    )

    @property
    def total_fines(self) -> float:
        return sum(entry.fine for entry in self.entries)


class Member(BaseModel):
    """
    Represents a library member.

    Staff are members too; ``role`` decides what a session logged in as this
    member may do.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Unique identifier of the member", ge=0)

    name: str = Field(..., description="Full name", min_length=1, max_length=200)

    email: str | None = Field(default=None, description="Contact email")

    role: Role = Field(default=Role.NONE, description="Privilege level")

    checkout_record: CheckoutRecord | None = Field(
        default=None,
        description="The member's loan ledger",
    )

    @property
    def checkout_count(self) -> int:
        if self.checkout_record is None:
            return 0
        return len(self.checkout_record.entries)
