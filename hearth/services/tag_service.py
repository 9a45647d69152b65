import logging
from typing import List, Optional
from hearth.models.tag import Tag
from hearth.repositories.unit_of_work import UnitOfWork, UnitOfWorkContext
from hearth.schemas.tag import TagCreate, TagUpdate
from hearth.services.household_member_validator import HouseholdMemberValidator
from hearth.services.tag_permission_manager import TagPermissionManager
from hearth.core.exception import DuplicateResourceException, ResourceNotFoundException

logger = logging.getLogger(__name__)


class TagService:
    """Service layer for household tag operations."""

    def __init__(
        self,
        unit_of_work: UnitOfWork,
        validator: HouseholdMemberValidator,
        tag_permission_manager: TagPermissionManager,
    ):
        self.unit_of_work = unit_of_work
        self.validator = validator
        self.tag_permission_manager = tag_permission_manager

    def get_tags(self, member_id: str, household_id: str) -> List[Tag]:
        """Get the household tags the member has been granted."""
        with self.unit_of_work.transaction() as context:
            household_member = self.validator.validate(context, household_id, member_id)
            return [
                tag
                for tag in self.tag_permission_manager.get_user_viewable_tags(
                    context, household_member.id
                )
                if tag.household_id == household_id
            ]

    def create_tag(self, member_id: str, household_id: str, data: TagCreate) -> Tag:
        """
        Create a tag in a household and grant it to its creator.

        Raises:
            DuplicateResourceException: If the household already has a tag with that name
        """
        with self.unit_of_work.transaction() as context:
            household_member = self.validator.validate(context, household_id, member_id)
            self._ensure_unique_name(context, household_id, data.name)

            tag = context.tags.create(
                Tag(name=data.name, color=data.color, household_id=household_id)
            )

            if context.permissions.find_by_household_member_id(household_member.id) is None:
                self.tag_permission_manager.create_permissions_with_tags(
                    context, household_member.id, [tag.id]
                )
            else:
                self.tag_permission_manager.give_tag_permissions_to_member(
                    context, household_member.id, [tag.id]
                )

            logger.info(f"Member {member_id} created tag {tag.id} in household {household_id}")
            return tag

    def update_tag(self, member_id: str, household_id: str, tag_id: str, data: TagUpdate) -> Tag:
        """
        Rename or recolor a tag.

        Raises:
            ResourceNotFoundException: If the tag is not in the household
            DuplicateResourceException: If another tag already has the new name
        """
        with self.unit_of_work.transaction() as context:
            self.validator.validate(context, household_id, member_id)
            self._get_household_tag(context, household_id, tag_id)
            self._ensure_unique_name(context, household_id, data.name, exclude_id=tag_id)

            return context.tags.update(tag_id, {"name": data.name, "color": data.color})

    def delete_tag(self, member_id: str, household_id: str, tag_id: str) -> None:
        """
        Delete a tag, detaching it from every task and permission first.

        Raises:
            ResourceNotFoundException: If the tag is not in the household
        """
        with self.unit_of_work.transaction() as context:
            self.validator.validate(context, household_id, member_id)
            self._get_household_tag(context, household_id, tag_id)

            context.task_tags.delete_by_tag_id(tag_id)
            context.tag_permissions.delete_by_tag_id(tag_id)
            context.tags.delete_by_id(tag_id)

            logger.info(f"Member {member_id} deleted tag {tag_id} from household {household_id}")

    def _get_household_tag(self, context: UnitOfWorkContext, household_id: str, tag_id: str) -> Tag:
        tag = context.tags.find_by_id(tag_id)
        if tag is None or tag.household_id != household_id:
            raise ResourceNotFoundException("Tag", tag_id)
        return tag

    def _ensure_unique_name(
        self,
        context: UnitOfWorkContext,
        household_id: str,
        name: str,
        exclude_id: Optional[str] = None,
    ) -> None:
        # Names compare case-insensitively within a household
        for tag in context.tags.find_by_household_id(household_id):
            if tag.id != exclude_id and tag.name.lower() == name.lower():
                raise DuplicateResourceException("Tag", name)
