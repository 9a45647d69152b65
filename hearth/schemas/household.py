from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List
import uuid

from hearth.schemas.validators import ensure_guid, ensure_guid_list


class HouseholdBase(BaseModel):
    """Base household schema with common fields."""
    name: str = Field(..., min_length=1, max_length=100, description="Household name")
    description: str = Field("", max_length=500, description="Household description")


class HouseholdCreate(HouseholdBase):
    """Schema for creating a new household. The client may choose the ID."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))

    @field_validator("id")
    @classmethod
    def check_id(cls, value: str) -> str:
        return ensure_guid(value)


class HouseholdResponse(HouseholdBase):
    """Schema for household response."""
    id: str
    created_by_id: str

    model_config = ConfigDict(from_attributes=True)


class HouseholdInviteMemberRequest(BaseModel):
    """Schema for inviting a member into a household."""
    member_id: str = Field(..., description="ID of the member to invite")
    # Kept as a plain string; the household service parses and rejects unknown roles
    role: str = Field(..., min_length=1, description="'admin' or 'member'")
    tag_ids: List[str] = Field(default_factory=list, description="Tags the invitee may see")

    @field_validator("member_id")
    @classmethod
    def check_member_id(cls, value: str) -> str:
        return ensure_guid(value)

    @field_validator("tag_ids")
    @classmethod
    def check_tag_ids(cls, value: List[str]) -> List[str]:
        return ensure_guid_list(value)


class TagPermissionRequest(BaseModel):
    """Schema for granting tag visibility to a household member."""
    tag_ids: List[str] = Field(default_factory=list)

    @field_validator("tag_ids")
    @classmethod
    def check_tag_ids(cls, value: List[str]) -> List[str]:
        return ensure_guid_list(value)


class PermissionResponse(BaseModel):
    id: str
    household_member_id: str
    tag_ids: List[str]
