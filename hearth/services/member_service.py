import logging
from typing import List
from hearth.models.member import Member
from hearth.repositories.unit_of_work import UnitOfWork
from hearth.schemas.member import MemberUpdate
from hearth.services.household_member_validator import HouseholdMemberValidator
from hearth.services.household_service import membership_view
from hearth.core.exception import AuthorizationException, ResourceNotFoundException

logger = logging.getLogger(__name__)


class MemberService:
    """Service layer for member profiles."""

    def __init__(self, unit_of_work: UnitOfWork, validator: HouseholdMemberValidator):
        self.unit_of_work = unit_of_work
        self.validator = validator

    def get_household_members(self, member_id: str, household_id: str) -> List[dict]:
        """
        Get every membership row of a household, invited ones included.

        Raises:
            ResourceNotFoundException: If household not found
            AuthorizationException: If member is not an active member
        """
        with self.unit_of_work.transaction() as context:
            self.validator.validate(context, household_id, member_id)
            return [
                membership_view(household_member)
                for household_member in context.households.find_members(household_id)
            ]

    def get_member(self, member_id: str) -> Member:
        """Get member by ID."""
        with self.unit_of_work.transaction() as context:
            member = context.members.find_by_id(member_id)
            if member is None:
                raise ResourceNotFoundException("Member", member_id)
            return member

    def update_member(self, caller_id: str, member_id: str, data: MemberUpdate) -> Member:
        """
        Update a member profile. Members may only edit their own.

        Raises:
            AuthorizationException: If caller_id is not member_id
            ResourceNotFoundException: If the member does not exist
        """
        if caller_id != member_id:
            raise AuthorizationException("Members can only update their own profile")

        with self.unit_of_work.transaction() as context:
            if context.members.find_by_id(member_id) is None:
                raise ResourceNotFoundException("Member", member_id)

            member = context.members.update(
                member_id, {"name": data.name, "age": data.age, "gender": data.gender}
            )
            logger.info(f"Member {member_id} updated their profile")
            return member
