from sqlalchemy import String, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING
from hearth.models.base import BaseModel

if TYPE_CHECKING:
    from hearth.models.household import Household


class Tag(BaseModel):
    """Household-scoped label attached to tasks; visibility is granted per tag."""

    __tablename__ = "tags"

    name: Mapped[str] = mapped_column(String(50), nullable=False)
    color: Mapped[str] = mapped_column(String(7), nullable=False)
    household_id: Mapped[str] = mapped_column(
        ForeignKey("households.id", ondelete="CASCADE"), nullable=False, index=True
    )

    household: Mapped["Household"] = relationship(
        "Household", back_populates="tags", lazy="select"
    )
