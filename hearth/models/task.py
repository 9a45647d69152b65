from sqlalchemy import String, ForeignKey, DateTime, Text, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import Optional, TYPE_CHECKING
from datetime import datetime
import enum
from hearth.models.base import BaseModel
if TYPE_CHECKING:
    from hearth.models.household import Household
    from hearth.models.member import Member


class TaskStatus(str, enum.Enum):
    """Task progress status"""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Task(BaseModel):
    """
    Shared household task. Tags are linked through the task_tags table and
    decide which household members may see the task.
    """

    __tablename__ = "tasks"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    due_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None, index=True
    )
    status: Mapped[TaskStatus] = mapped_column(
        SQLEnum(TaskStatus), default=TaskStatus.PENDING, nullable=False
    )
    completed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None, index=True
    )

    created_by_id: Mapped[str] = mapped_column(
        ForeignKey("members.id", ondelete="CASCADE"), nullable=False
    )
    household_id: Mapped[str] = mapped_column(
        ForeignKey("households.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Relationships
    household: Mapped["Household"] = relationship(
        "Household", back_populates="tasks", lazy="select"
    )
    created_by: Mapped["Member"] = relationship(
        "Member", foreign_keys=[created_by_id], lazy="select"
    )

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED
