from sqlalchemy import String, ForeignKey, Boolean, DateTime, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import List, Optional, TYPE_CHECKING
from datetime import datetime
import enum
from hearth.models.base import BaseModel
from hearth.core.exception import ValidationException

if TYPE_CHECKING:
    from hearth.models.member import Member
    from hearth.models.tag import Tag
    from hearth.models.task import Task
    from hearth.models.permission import Permission


class HouseholdMemberRole(str, enum.Enum):
    """Role of a member inside a household. Only admins may invite."""

    ADMIN = "admin"
    MEMBER = "member"

    @classmethod
    def parse(cls, value) -> "HouseholdMemberRole":
        """Accept a role instance, its name or its value, case-insensitively."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower()
            for role in cls:
                if normalized in (role.value, role.name.lower()):
                    return role
        raise ValidationException(f"'{value}' is not a valid household role", field="role")


class HouseholdMemberStatus(str, enum.Enum):
    """Membership state derived from is_active and joined_at"""

    ACTIVE = "active"
    INVITED = "invited"
    # Reserved: nothing transitions a membership here yet
    INACTIVE = "inactive"


class Household(BaseModel):
    """
    Household model: a shared group under which members collaborate on tasks.
    Always created together with its creator's admin membership.
    """

    __tablename__ = "households"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(String(500), nullable=False, default="")

    created_by_id: Mapped[str] = mapped_column(
        ForeignKey("members.id", ondelete="CASCADE"), nullable=False
    )

    # Relationships
    memberships: Mapped[List["HouseholdMember"]] = relationship(
        "HouseholdMember",
        back_populates="household",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    created_by: Mapped["Member"] = relationship(
        "Member", foreign_keys=[created_by_id], lazy="selectin"
    )

    tags: Mapped[List["Tag"]] = relationship(
        "Tag",
        back_populates="household",
        cascade="all, delete-orphan",
        lazy="select",
    )

    tasks: Mapped[List["Task"]] = relationship(
        "Task",
        back_populates="household",
        cascade="all, delete-orphan",
        lazy="select",
    )


class HouseholdMember(BaseModel):
    """
    Join entity binding a Member to a Household with a role and activation state.
    Exactly one row exists per (household, member) pair.
    """

    __tablename__ = "household_members"
    __table_args__ = (
        UniqueConstraint("household_id", "member_id", name="uq_household_member"),
    )

    household_id: Mapped[str] = mapped_column(
        ForeignKey("households.id", ondelete="CASCADE"), nullable=False, index=True
    )
    member_id: Mapped[str] = mapped_column(
        ForeignKey("members.id", ondelete="CASCADE"), nullable=False, index=True
    )
    role: Mapped[HouseholdMemberRole] = mapped_column(
        SQLEnum(HouseholdMemberRole), nullable=False, default=HouseholdMemberRole.MEMBER
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    invited_by_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("members.id", ondelete="SET NULL"), nullable=True, default=None
    )
    joined_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None
    )

    # Relationships
    household: Mapped["Household"] = relationship(
        "Household", back_populates="memberships", lazy="selectin"
    )
    member: Mapped["Member"] = relationship(
        "Member",
        back_populates="memberships",
        foreign_keys=[member_id],
        lazy="selectin",
    )
    permission: Mapped[Optional["Permission"]] = relationship(
        "Permission",
        back_populates="household_member",
        cascade="all, delete-orphan",
        uselist=False,
        lazy="select",
    )

    @property
    def is_admin(self) -> bool:
        return self.role == HouseholdMemberRole.ADMIN

    @property
    def status(self) -> HouseholdMemberStatus:
        if self.is_active:
            return HouseholdMemberStatus.ACTIVE
        if self.joined_at is None:
            return HouseholdMemberStatus.INVITED
        return HouseholdMemberStatus.INACTIVE
