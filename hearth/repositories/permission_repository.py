from sqlalchemy.orm import Session
from sqlalchemy import select, delete
from typing import List, Optional
from hearth.models.permission import Permission, TagPermission
from hearth.repositories.repository import BaseRepository


class PermissionRepository(BaseRepository[Permission]):
    """Repository for per-member permission records."""

    def __init__(self, db: Session):
        super().__init__(Permission, db)

    def find_by_household_member_id(self, household_member_id: str) -> Optional[Permission]:
        """Get the permission record of a membership row, if any."""
        stmt = select(Permission).where(Permission.household_member_id == household_member_id)
        return self.db.execute(stmt).scalar_one_or_none()


class TagPermissionRepository(BaseRepository[TagPermission]):
    """Repository for single tag grants."""

    def __init__(self, db: Session):
        super().__init__(TagPermission, db)

    def find_by_permission_id(self, permission_id: str) -> List[TagPermission]:
        """Get every tag grant hanging off a permission record."""
        stmt = (
            select(TagPermission)
            .where(TagPermission.permission_id == permission_id)
            .order_by(TagPermission.created_at)
        )
        return list(self.db.execute(stmt).scalars().all())

    def delete_by_tag_id(self, tag_id: str) -> int:
        """Drop every grant of a tag. Returns the number of grants removed."""
        result = self.db.execute(delete(TagPermission).where(TagPermission.tag_id == tag_id))
        return result.rowcount
