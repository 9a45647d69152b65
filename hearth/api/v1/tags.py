from fastapi import APIRouter, Depends, status
from typing import List

from hearth.dependencies import get_current_member_id, get_tag_service
from hearth.schemas.tag import TagCreate, TagUpdate, TagResponse
from hearth.schemas.result import Result
from hearth.services.tag_service import TagService

router = APIRouter()


@router.get("/{household_id}/tags", response_model=Result[List[TagResponse]])
async def get_tags(
    household_id: str,
    member_id: str = Depends(get_current_member_id),
    service: TagService = Depends(get_tag_service),
):
    """Get the household tags visible to the current member."""
    tags = service.get_tags(member_id, household_id)
    return Result.successful(data=[TagResponse.model_validate(tag) for tag in tags])


@router.post(
    "/{household_id}/tags",
    response_model=Result[TagResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_tag(
    household_id: str,
    tag_data: TagCreate,
    member_id: str = Depends(get_current_member_id),
    service: TagService = Depends(get_tag_service),
):
    """Create a tag; the creator can see it straight away."""
    tag = service.create_tag(member_id, household_id, tag_data)
    return Result.successful(data=TagResponse.model_validate(tag))


@router.put("/{household_id}/tags/{tag_id}", response_model=Result[TagResponse])
async def update_tag(
    household_id: str,
    tag_id: str,
    tag_data: TagUpdate,
    member_id: str = Depends(get_current_member_id),
    service: TagService = Depends(get_tag_service),
):
    tag = service.update_tag(member_id, household_id, tag_id, tag_data)
    return Result.successful(data=TagResponse.model_validate(tag))


@router.delete("/{household_id}/tags/{tag_id}", response_model=Result[dict])
async def delete_tag(
    household_id: str,
    tag_id: str,
    member_id: str = Depends(get_current_member_id),
    service: TagService = Depends(get_tag_service),
):
    """Delete a tag and detach it from every task."""
    service.delete_tag(member_id, household_id, tag_id)
    return Result.successful(data={"message": "Tag deleted successfully"})
