from hearth.models.base import Base, BaseModel
from hearth.models.member import Member
from hearth.models.household import (
    Household,
    HouseholdMember,
    HouseholdMemberRole,
    HouseholdMemberStatus,
)
from hearth.models.permission import Permission, TagPermission
from hearth.models.tag import Tag
from hearth.models.task import Task, TaskStatus
from hearth.models.associations import task_tags
from hearth.models.refresh_token import RefreshToken

__all__ = [
    # Base
    "Base",
    "BaseModel",
    # Member
    "Member",
    # Household
    "Household",
    "HouseholdMember",
    "HouseholdMemberRole",
    "HouseholdMemberStatus",
    # Permissions
    "Permission",
    "TagPermission",
    # Tags & tasks
    "Tag",
    "Task",
    "TaskStatus",
    "task_tags",
    # Auth
    "RefreshToken",
]
