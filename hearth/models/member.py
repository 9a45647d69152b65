from sqlalchemy import String, Integer
from sqlalchemy.orm import relationship, Mapped, mapped_column
from typing import Optional, List, TYPE_CHECKING
from hearth.models.base import BaseModel
if TYPE_CHECKING:
    from hearth.models.household import HouseholdMember
    from hearth.models.refresh_token import RefreshToken


class Member(BaseModel):
    __tablename__ = "members"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    hashed_password: Mapped[str] = mapped_column(String(255))

    # Profile
    age: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, default=None)
    gender: Mapped[Optional[str]] = mapped_column(String(50), nullable=True, default=None)

    # Relationships
    memberships: Mapped[List["HouseholdMember"]] = relationship(
        "HouseholdMember",
        back_populates="member",
        foreign_keys="[HouseholdMember.member_id]",
        lazy="selectin"
    )
    refresh_tokens: Mapped[List["RefreshToken"]] = relationship(
        "RefreshToken",
        back_populates="member",
        cascade="all, delete-orphan",
        lazy="select"
    )
