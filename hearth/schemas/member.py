from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional
from datetime import datetime

from hearth.models.household import HouseholdMemberRole, HouseholdMemberStatus


class MemberUpdate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    age: Optional[int] = Field(None, ge=0, le=150)
    gender: Optional[str] = Field(None, max_length=50)


class MemberResponse(BaseModel):
    id: str
    name: str
    email: EmailStr
    age: Optional[int] = None
    gender: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class HouseholdMemberResponse(BaseModel):
    """Membership row of a household together with the member's profile."""
    id: str
    household_id: str
    member_id: str
    name: str
    email: str
    role: HouseholdMemberRole
    is_active: bool
    status: HouseholdMemberStatus
    invited_by_id: Optional[str] = None
    joined_at: Optional[datetime] = None
