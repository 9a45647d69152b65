from hearth.models.household import HouseholdMember
from hearth.repositories.unit_of_work import UnitOfWorkContext
from hearth.utils.security import is_valid_guid
from hearth.core.exception import (
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
)


class HouseholdMemberValidator:
    """Gate used before any household-scoped read or write."""

    def validate(
        self,
        context: UnitOfWorkContext,
        household_id: str,
        member_id: str,
    ) -> HouseholdMember:
        """
        Confirm that member_id is an active participant of household_id.

        Args:
            context: Repositories of the current unit of work
            household_id: Household being accessed
            member_id: Authenticated caller

        Returns:
            The caller's active membership row

        Raises:
            ValidationException: If either identifier is not a GUID
            ResourceNotFoundException: If the household does not exist
            AuthorizationException: If the caller has no membership row, or
                has one that is not active yet
        """
        if not is_valid_guid(household_id) or not is_valid_guid(member_id):
            raise ValidationException("Household ID and member ID must be valid GUIDs")

        if context.households.find_by_id(household_id) is None:
            raise ResourceNotFoundException("Household", message="Household not found")

        household_member = context.households.find_member_by_id(household_id, member_id)
        if household_member is None:
            raise AuthorizationException("Member is not a member of the household")

        if not household_member.is_active:
            raise AuthorizationException("Member is not an active member of the household")

        return household_member
