from fastapi import APIRouter, Depends

from hearth.dependencies import get_current_member_id, get_member_service
from hearth.schemas.member import MemberUpdate, MemberResponse
from hearth.schemas.result import Result
from hearth.services.member_service import MemberService

router = APIRouter()


@router.get("/{member_id}", response_model=Result[MemberResponse])
async def get_member(
    member_id: str,
    current_member_id: str = Depends(get_current_member_id),
    service: MemberService = Depends(get_member_service),
):
    """Get a member profile."""
    member = service.get_member(member_id)
    return Result.successful(data=MemberResponse.model_validate(member))


@router.put("/{member_id}", response_model=Result[MemberResponse])
async def update_member(
    member_id: str,
    member_data: MemberUpdate,
    current_member_id: str = Depends(get_current_member_id),
    service: MemberService = Depends(get_member_service),
):
    """Update the current member's own profile."""
    member = service.update_member(current_member_id, member_id, member_data)
    return Result.successful(data=MemberResponse.model_validate(member))
