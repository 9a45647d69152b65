from sqlalchemy.orm import Session
from sqlalchemy import select
from datetime import datetime
from typing import List, Optional
from hearth.models.task import Task
from hearth.repositories.repository import BaseRepository


class TaskRepository(BaseRepository[Task]):
    """Repository for household tasks."""

    def __init__(self, db: Session):
        super().__init__(Task, db)

    def find_by_household_ids_with_date_filters(
        self,
        household_ids: List[str],
        due_date_from: Optional[datetime] = None,
        due_date_to: Optional[datetime] = None,
        completed_date_from: Optional[datetime] = None,
        completed_date_to: Optional[datetime] = None,
    ) -> List[Task]:
        """
        Get tasks for several households, optionally bounded by due and
        completion dates (bounds are inclusive).
        """
        if not household_ids:
            return []

        stmt = select(Task).where(Task.household_id.in_(household_ids))

        if due_date_from is not None:
            stmt = stmt.where(Task.due_date >= due_date_from)
        if due_date_to is not None:
            stmt = stmt.where(Task.due_date <= due_date_to)
        if completed_date_from is not None:
            stmt = stmt.where(Task.completed_at >= completed_date_from)
        if completed_date_to is not None:
            stmt = stmt.where(Task.completed_at <= completed_date_to)

        stmt = stmt.order_by(Task.created_at, Task.id)
        return list(self.db.execute(stmt).scalars().all())
