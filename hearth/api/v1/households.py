from fastapi import APIRouter, Depends, status
from typing import List

from hearth.dependencies import (
    get_current_member_id,
    get_household_service,
    get_member_service,
)
from hearth.schemas.household import (
    HouseholdCreate,
    HouseholdResponse,
    HouseholdInviteMemberRequest,
    TagPermissionRequest,
    PermissionResponse,
)
from hearth.schemas.member import HouseholdMemberResponse
from hearth.schemas.result import Result
from hearth.services.household_service import HouseholdService
from hearth.services.member_service import MemberService

router = APIRouter()


@router.post("", response_model=Result[HouseholdResponse], status_code=status.HTTP_201_CREATED)
async def create_household(
    household_data: HouseholdCreate,
    member_id: str = Depends(get_current_member_id),
    service: HouseholdService = Depends(get_household_service),
):
    """Create a new household with the current member as admin."""
    household = service.create_household(member_id, household_data)
    return Result.successful(data=HouseholdResponse.model_validate(household))


@router.get("", response_model=Result[List[HouseholdResponse]])
async def get_my_households(
    member_id: str = Depends(get_current_member_id),
    service: HouseholdService = Depends(get_household_service),
):
    """Get all households the current member is active in."""
    households = service.get_households(member_id)
    return Result.successful(
        data=[HouseholdResponse.model_validate(household) for household in households]
    )


@router.get("/{household_id}", response_model=Result[HouseholdResponse])
async def get_household(
    household_id: str,
    member_id: str = Depends(get_current_member_id),
    service: HouseholdService = Depends(get_household_service),
):
    """Get household details."""
    household = service.get_household(member_id, household_id)
    return Result.successful(data=HouseholdResponse.model_validate(household))


@router.post(
    "/{household_id}/members",
    response_model=Result[HouseholdMemberResponse],
    status_code=status.HTTP_201_CREATED,
)
async def invite_member(
    household_id: str,
    invite: HouseholdInviteMemberRequest,
    member_id: str = Depends(get_current_member_id),
    service: HouseholdService = Depends(get_household_service),
):
    """Invite a member into the household (admin only)."""
    invited = service.invite_member(
        member_id, household_id, invite.member_id, invite.role, invite.tag_ids
    )
    return Result.successful(data=HouseholdMemberResponse(**invited))


@router.post("/{household_id}/accept-invite", response_model=Result[HouseholdMemberResponse])
async def accept_invite(
    household_id: str,
    member_id: str = Depends(get_current_member_id),
    service: HouseholdService = Depends(get_household_service),
):
    """Accept a pending invitation to the household."""
    accepted = service.accept_invite(member_id, household_id)
    return Result.successful(data=HouseholdMemberResponse(**accepted))


@router.get("/{household_id}/members", response_model=Result[List[HouseholdMemberResponse]])
async def get_members(
    household_id: str,
    member_id: str = Depends(get_current_member_id),
    service: MemberService = Depends(get_member_service),
):
    """Get household members, pending invitations included."""
    members = service.get_household_members(member_id, household_id)
    return Result.successful(data=[HouseholdMemberResponse(**member) for member in members])


@router.post(
    "/{household_id}/members/{household_member_id}/permissions",
    response_model=Result[PermissionResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_member_permission(
    household_id: str,
    household_member_id: str,
    request: TagPermissionRequest,
    member_id: str = Depends(get_current_member_id),
    service: HouseholdService = Depends(get_household_service),
):
    """Create a household member's tag permissions (admin only)."""
    permission = service.create_member_permission(
        member_id, household_id, household_member_id, request.tag_ids
    )
    return Result.successful(data=PermissionResponse(**permission))


@router.post(
    "/{household_id}/members/{household_member_id}/permissions/tags",
    response_model=Result[PermissionResponse],
)
async def grant_member_tags(
    household_id: str,
    household_member_id: str,
    request: TagPermissionRequest,
    member_id: str = Depends(get_current_member_id),
    service: HouseholdService = Depends(get_household_service),
):
    """Grant additional tags to a household member (admin only)."""
    permission = service.grant_member_tags(
        member_id, household_id, household_member_id, request.tag_ids
    )
    return Result.successful(data=PermissionResponse(**permission))
