import uuid
import pytest
from hearth.schemas.household import HouseholdCreate
from hearth.core.exception import (
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
)


@pytest.mark.unit
class TestHouseholdMemberValidator:
    """Unit tests for HouseholdMemberValidator."""

    def test_validate_active_member(self, unit_of_work, validator, household_service, make_member):
        """An active member gets their membership row back."""
        owner = make_member("Owner")
        household = household_service.create_household(owner.id, HouseholdCreate(name="Home"))

        with unit_of_work.transaction() as context:
            household_member = validator.validate(context, household.id, owner.id)

        assert household_member.household_id == household.id
        assert household_member.member_id == owner.id
        assert household_member.is_active is True

    def test_validate_rejects_malformed_ids(self, unit_of_work, validator):
        """Identifiers that are not GUIDs fail validation."""
        with unit_of_work.transaction() as context:
            with pytest.raises(ValidationException) as exc_info:
                validator.validate(context, "not-a-guid", str(uuid.uuid4()))

        assert "must be valid GUIDs" in str(exc_info.value)

    def test_validate_missing_household(self, unit_of_work, validator, make_member):
        """An unknown household is reported as not found."""
        member = make_member("Lonely")

        with unit_of_work.transaction() as context:
            with pytest.raises(ResourceNotFoundException) as exc_info:
                validator.validate(context, str(uuid.uuid4()), member.id)

        assert "Household not found" in str(exc_info.value)

    def test_validate_non_member(self, unit_of_work, validator, household_service, make_member):
        """A member without a row is not a member of the household."""
        owner = make_member("Owner")
        outsider = make_member("Outsider")
        household = household_service.create_household(owner.id, HouseholdCreate(name="Home"))

        with unit_of_work.transaction() as context:
            with pytest.raises(AuthorizationException) as exc_info:
                validator.validate(context, household.id, outsider.id)

        assert str(exc_info.value) == "Member is not a member of the household"

    def test_validate_invited_but_inactive(self, unit_of_work, validator, household_service, make_member):
        """A pending invitation is rejected with its own message."""
        owner = make_member("Owner")
        invitee = make_member("Invitee")
        household = household_service.create_household(owner.id, HouseholdCreate(name="Home"))
        household_service.invite_member(owner.id, household.id, invitee.id, "member")

        with unit_of_work.transaction() as context:
            with pytest.raises(AuthorizationException) as exc_info:
                validator.validate(context, household.id, invitee.id)

        assert str(exc_info.value) == "Member is not an active member of the household"
