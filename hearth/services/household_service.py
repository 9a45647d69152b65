import logging
from datetime import datetime, timezone
from typing import List, Sequence, Union
from hearth.models.household import Household, HouseholdMember, HouseholdMemberRole
from hearth.models.permission import Permission, TagPermission
from hearth.repositories.unit_of_work import UnitOfWork, UnitOfWorkContext
from hearth.schemas.household import HouseholdCreate
from hearth.services.household_member_validator import HouseholdMemberValidator
from hearth.services.tag_permission_manager import TagPermissionManager
from hearth.services.default_tag_service import DefaultTagService
from hearth.core.exception import (
    AuthorizationException,
    DuplicateResourceException,
    ResourceNotFoundException,
    ValidationException,
)

logger = logging.getLogger(__name__)


def membership_view(household_member: HouseholdMember) -> dict:
    """Flatten a membership row and its member profile for responses."""
    return {
        "id": household_member.id,
        "household_id": household_member.household_id,
        "member_id": household_member.member_id,
        "name": household_member.member.name,
        "email": household_member.member.email,
        "role": household_member.role,
        "is_active": household_member.is_active,
        "status": household_member.status,
        "invited_by_id": household_member.invited_by_id,
        "joined_at": household_member.joined_at,
    }


class HouseholdService:
    """Service layer for household lifecycle: creation, invites and permissions."""

    def __init__(
        self,
        unit_of_work: UnitOfWork,
        validator: HouseholdMemberValidator,
        tag_permission_manager: TagPermissionManager,
        default_tag_service: DefaultTagService,
    ):
        self.unit_of_work = unit_of_work
        self.validator = validator
        self.tag_permission_manager = tag_permission_manager
        self.default_tag_service = default_tag_service

    def create_household(self, member_id: str, data: HouseholdCreate) -> Household:
        """
        Create a new household with the member as its active admin.

        The household is seeded with the default tags, all of which are
        granted to the creator.

        Args:
            member_id: ID of member creating the household
            data: Household creation data

        Returns:
            Created household
        """
        with self.unit_of_work.transaction() as context:
            household = context.households.create(
                Household(
                    id=data.id,
                    name=data.name,
                    description=data.description,
                    created_by_id=member_id,
                )
            )

            creator = context.households.create_member(
                HouseholdMember(
                    household_id=household.id,
                    member_id=member_id,
                    role=HouseholdMemberRole.ADMIN,
                    is_active=True,
                    invited_by_id=member_id,
                    joined_at=datetime.now(timezone.utc),
                )
            )

            tags = self.default_tag_service.create_default_tags(context, household.id)
            self.tag_permission_manager.create_permissions_with_tags(
                context, creator.id, [tag.id for tag in tags]
            )

            logger.info(f"Member {member_id} created household {household.id}")
            return household

    def get_households(self, member_id: str) -> List[Household]:
        """Get all households where the member is active."""
        with self.unit_of_work.transaction() as context:
            return context.households.find_by_member_id(member_id)

    def get_household(self, member_id: str, household_id: str) -> Household:
        """
        Get household details.

        Raises:
            ResourceNotFoundException: If household not found
            AuthorizationException: If member is not an active member
        """
        with self.unit_of_work.transaction() as context:
            self.validator.validate(context, household_id, member_id)
            return context.households.find_by_id(household_id)

    def invite_member(
        self,
        member_id: str,
        household_id: str,
        target_member_id: str,
        role: Union[str, HouseholdMemberRole],
        tag_ids: Sequence[str] = (),
    ) -> dict:
        """
        Invite a member into a household (admin only).

        The invitation is an inactive membership row until the invitee
        accepts it. When tag_ids are given the invitee's Permission is
        created with them in the same transaction.

        Args:
            member_id: Inviting member, must be an admin of the household
            household_id: Household ID
            target_member_id: Member being invited
            role: Role name, 'admin' or 'member'
            tag_ids: Tags the invitee may see

        Returns:
            The new, inactive membership row with the invitee profile

        Raises:
            ValidationException: If role is not a known role
            AuthorizationException: If the inviter is not an active admin
            ResourceNotFoundException: If the invited member does not exist
            DuplicateResourceException: If the invited member already has a row
            ValidationException: If a tag is unknown or belongs to another household
        """
        parsed_role = HouseholdMemberRole.parse(role)

        with self.unit_of_work.transaction() as context:
            inviter = context.households.find_member_by_id(household_id, member_id)
            if inviter is None:
                raise AuthorizationException("Member is not a member of the household")

            if not inviter.is_active:
                raise AuthorizationException("Member is not an active member of the household")

            if not inviter.is_admin:
                raise AuthorizationException("Member is not an admin of the household")

            if context.members.find_by_id(target_member_id) is None:
                raise ResourceNotFoundException("Member", target_member_id)

            if context.households.find_member_by_id(household_id, target_member_id) is not None:
                raise DuplicateResourceException(
                    "Household member",
                    message="Member is already a member of the household",
                )

            tag_ids = self._require_household_tags(context, household_id, tag_ids)

            invited = context.households.create_member(
                HouseholdMember(
                    household_id=household_id,
                    member_id=target_member_id,
                    role=parsed_role,
                    is_active=False,
                    invited_by_id=member_id,
                    joined_at=None,
                )
            )

            if tag_ids:
                self.tag_permission_manager.create_permissions_with_tags(
                    context, invited.id, tag_ids
                )

            logger.info(
                f"Member {member_id} invited {target_member_id} to household "
                f"{household_id} as {parsed_role.value}"
            )
            return membership_view(invited)

    def accept_invite(self, member_id: str, household_id: str) -> dict:
        """
        Accept an invitation, activating the member's row.

        Accepting again re-stamps joined_at.

        Raises:
            AuthorizationException: If the member was never invited
        """
        with self.unit_of_work.transaction() as context:
            invitation = context.households.find_member_by_id(household_id, member_id)
            if invitation is None:
                raise AuthorizationException("Member has not been invited to the household")

            accepted = context.households.update_member(
                household_id,
                member_id,
                is_active=True,
                joined_at=datetime.now(timezone.utc),
            )

            logger.info(f"Member {member_id} joined household {household_id}")
            return membership_view(accepted)

    def create_member_permission(
        self,
        member_id: str,
        household_id: str,
        household_member_id: str,
        tag_ids: Sequence[str],
    ) -> dict:
        """
        Create the Permission record of a household member (admin only).

        Raises:
            DuplicateResourceException: If the member already has a Permission
            ValidationException: If a tag is unknown or belongs to another household
        """
        with self.unit_of_work.transaction() as context:
            target = self._get_administered_membership(
                context, member_id, household_id, household_member_id
            )

            if context.permissions.find_by_household_member_id(target.id) is not None:
                raise DuplicateResourceException(
                    "Permission",
                    message=f"Household member {target.id} already has a permission record",
                )

            permission = self.tag_permission_manager.create_permissions_with_tags(
                context, target.id, self._require_household_tags(context, household_id, tag_ids)
            )
            return self._permission_view(context, permission)

    def grant_member_tags(
        self,
        member_id: str,
        household_id: str,
        household_member_id: str,
        tag_ids: Sequence[str],
    ) -> dict:
        """
        Grant additional tags to a household member (admin only).

        Raises:
            ResourceNotFoundException: If the member has no Permission yet
            ValidationException: If a tag is unknown or belongs to another household
        """
        with self.unit_of_work.transaction() as context:
            target = self._get_administered_membership(
                context, member_id, household_id, household_member_id
            )

            self.tag_permission_manager.give_tag_permissions_to_member(
                context, target.id, self._require_household_tags(context, household_id, tag_ids)
            )
            return self._permission_view(
                context, context.permissions.find_by_household_member_id(target.id)
            )

    def _get_administered_membership(
        self,
        context: UnitOfWorkContext,
        member_id: str,
        household_id: str,
        household_member_id: str,
    ) -> HouseholdMember:
        caller = self.validator.validate(context, household_id, member_id)
        if not caller.is_admin:
            raise AuthorizationException("Member is not an admin of the household")

        target = context.households.find_membership(household_member_id)
        if target is None or target.household_id != household_id:
            raise ResourceNotFoundException("Household member", household_member_id)
        return target

    def _permission_view(self, context: UnitOfWorkContext, permission: Permission) -> dict:
        grants: List[TagPermission] = context.tag_permissions.find_by_permission_id(permission.id)
        return {
            "id": permission.id,
            "household_member_id": permission.household_member_id,
            "tag_ids": [grant.tag_id for grant in grants],
        }

    def _require_household_tags(
        self, context: UnitOfWorkContext, household_id: str, tag_ids: Sequence[str]
    ) -> List[str]:
        """Deduplicate tag_ids, rejecting unknown tags and tags of other households."""
        tag_ids = list(dict.fromkeys(tag_ids))
        tags_by_id = {tag.id: tag for tag in context.tags.find_by_ids(tag_ids)}

        for tag_id in tag_ids:
            tag = tags_by_id.get(tag_id)
            if tag is None:
                raise ValidationException(f"Tag {tag_id} not found")
            if tag.household_id != household_id:
                raise ValidationException(
                    f"Tag {tag_id} does not belong to household {household_id}"
                )
        return tag_ids
