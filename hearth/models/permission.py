from sqlalchemy import String, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import List, TYPE_CHECKING
from hearth.models.base import BaseModel

if TYPE_CHECKING:
    from hearth.models.household import HouseholdMember
    from hearth.models.tag import Tag


class Permission(BaseModel):
    """
    Anchors one household member's tag-visibility grants.
    A member without a Permission sees no tagged tasks.
    """

    __tablename__ = "permissions"

    household_member_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("household_members.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )

    household_member: Mapped["HouseholdMember"] = relationship(
        "HouseholdMember", back_populates="permission", lazy="select"
    )
    tag_permissions: Mapped[List["TagPermission"]] = relationship(
        "TagPermission",
        back_populates="permission",
        cascade="all, delete-orphan",
        lazy="select",
    )


class TagPermission(BaseModel):
    """A single grant of visibility for one tag to one Permission"""

    __tablename__ = "tag_permissions"
    __table_args__ = (
        UniqueConstraint("permission_id", "tag_id", name="uq_permission_tag"),
    )

    permission_id: Mapped[str] = mapped_column(
        ForeignKey("permissions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    tag_id: Mapped[str] = mapped_column(
        ForeignKey("tags.id", ondelete="CASCADE"), nullable=False, index=True
    )

    permission: Mapped["Permission"] = relationship(
        "Permission", back_populates="tag_permissions", lazy="select"
    )
    tag: Mapped["Tag"] = relationship("Tag", lazy="select")
