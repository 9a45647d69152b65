from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime
import uuid

from hearth.models.task import TaskStatus
from hearth.schemas.validators import ensure_guid, ensure_guid_list


class TaskBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field("", max_length=2000)
    due_date: Optional[datetime] = None
    status: TaskStatus = TaskStatus.PENDING
    tag_ids: List[str] = Field(default_factory=list)

    @field_validator("tag_ids")
    @classmethod
    def check_tag_ids(cls, value: List[str]) -> List[str]:
        return ensure_guid_list(value)


class TaskCreate(TaskBase):
    """Schema for creating a task. The client may choose the ID."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    household_id: str

    @field_validator("id", "household_id")
    @classmethod
    def check_ids(cls, value: str) -> str:
        return ensure_guid(value)


class TaskUpdate(TaskBase):
    """Schema for replacing a task's editable fields and tags."""
    pass


class TaskFilter(BaseModel):
    """Filters for listing tasks; no household IDs means every active household."""
    household_ids: List[str] = Field(default_factory=list)
    due_date_from: Optional[datetime] = None
    due_date_to: Optional[datetime] = None
    completed_date_from: Optional[datetime] = None
    completed_date_to: Optional[datetime] = None

    @field_validator("household_ids")
    @classmethod
    def check_household_ids(cls, value: List[str]) -> List[str]:
        return ensure_guid_list(value)


class TaskResponse(BaseModel):
    id: str
    title: str
    description: str
    due_date: Optional[datetime] = None
    status: TaskStatus
    completed_at: Optional[datetime] = None
    created_by_id: str
    household_id: str
    tag_ids: List[str] = Field(default_factory=list)
