from sqlalchemy.orm import Session
from sqlalchemy import select, insert, delete
from datetime import datetime, timezone
from typing import Dict, List
from hearth.models.tag import Tag
from hearth.models.associations import task_tags
from hearth.repositories.repository import BaseRepository


class TagRepository(BaseRepository[Tag]):
    """Repository for household tags."""

    def __init__(self, db: Session):
        super().__init__(Tag, db)

    def find_by_household_id(self, household_id: str) -> List[Tag]:
        """Get all tags of a household ordered by name."""
        stmt = select(Tag).where(Tag.household_id == household_id).order_by(Tag.name)
        return list(self.db.execute(stmt).scalars().all())


class TaskTagRepository:
    """Reads and writes the task_tags association table."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_task_id(self, task_id: str) -> List[str]:
        """Get the tag IDs linked to a task."""
        stmt = select(task_tags.c.tag_id).where(task_tags.c.task_id == task_id)
        return list(self.db.execute(stmt).scalars().all())

    def find_by_task_ids(self, task_ids: List[str]) -> Dict[str, List[str]]:
        """
        Get tag IDs for many tasks in a single query.

        Returns:
            Mapping of task ID to its tag IDs; tasks without tags are absent
        """
        if not task_ids:
            return {}

        stmt = select(task_tags.c.task_id, task_tags.c.tag_id).where(
            task_tags.c.task_id.in_(task_ids)
        )
        result: Dict[str, List[str]] = {}
        for row in self.db.execute(stmt).all():
            result.setdefault(row.task_id, []).append(row.tag_id)
        return result

    def create_many(self, task_id: str, tag_ids: List[str]) -> None:
        """Link a task to each tag in tag_ids."""
        if not tag_ids:
            return
        now = datetime.now(timezone.utc)
        self.db.execute(
            insert(task_tags),
            [{"task_id": task_id, "tag_id": tag_id, "created_at": now} for tag_id in tag_ids],
        )

    def delete_by_task_id(self, task_id: str) -> int:
        """Unlink every tag from a task. Returns the number of links removed."""
        result = self.db.execute(delete(task_tags).where(task_tags.c.task_id == task_id))
        return result.rowcount

    def delete_by_tag_id(self, tag_id: str) -> int:
        """Unlink a tag from every task. Returns the number of links removed."""
        result = self.db.execute(delete(task_tags).where(task_tags.c.tag_id == tag_id))
        return result.rowcount
