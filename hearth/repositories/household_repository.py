from sqlalchemy.orm import Session
from sqlalchemy import select, and_, update
from datetime import datetime
from typing import List, Optional
from hearth.models.household import Household, HouseholdMember
from hearth.repositories.repository import BaseRepository
from hearth.core.exception import StorageException


class HouseholdRepository(BaseRepository[Household]):
    """Repository for households and their membership rows."""

    def __init__(self, db: Session):
        super().__init__(Household, db)

    def find_by_member_id(self, member_id: str) -> List[Household]:
        """Get all households where the member holds an active membership."""
        stmt = (
            select(Household)
            .join(HouseholdMember, HouseholdMember.household_id == Household.id)
            .where(
                and_(
                    HouseholdMember.member_id == member_id,
                    HouseholdMember.is_active.is_(True),
                )
            )
            .order_by(Household.created_at.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def find_member_by_id(self, household_id: str, member_id: str) -> Optional[HouseholdMember]:
        """Get the membership row for a (household, member) pair."""
        stmt = select(HouseholdMember).where(
            and_(
                HouseholdMember.household_id == household_id,
                HouseholdMember.member_id == member_id,
            )
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def find_members(self, household_id: str) -> List[HouseholdMember]:
        """Get every membership row of a household, oldest invite first."""
        stmt = (
            select(HouseholdMember)
            .where(HouseholdMember.household_id == household_id)
            .order_by(HouseholdMember.created_at)
        )
        return list(self.db.execute(stmt).scalars().all())

    def find_membership(self, household_member_id: str) -> Optional[HouseholdMember]:
        """Get a membership row by its own ID."""
        return self.db.get(HouseholdMember, household_member_id)

    def create_member(self, household_member: HouseholdMember) -> HouseholdMember:
        """
        Insert a membership row.

        Raises:
            StorageException: If the row cannot be read back after the insert
        """
        self.db.add(household_member)
        self.db.flush()

        created = self.find_member_by_id(household_member.household_id, household_member.member_id)
        if created is None:
            raise StorageException("Failed to create household member")
        return created

    def update_member(
        self,
        household_id: str,
        member_id: str,
        is_active: bool,
        joined_at: Optional[datetime],
    ) -> HouseholdMember:
        """
        Persist the activation state of a membership row.

        Raises:
            StorageException: If no row was updated
        """
        stmt = (
            update(HouseholdMember)
            .where(
                and_(
                    HouseholdMember.household_id == household_id,
                    HouseholdMember.member_id == member_id,
                )
            )
            .values(is_active=is_active, joined_at=joined_at)
            .execution_options(synchronize_session="fetch")
        )
        result = self.db.execute(stmt)
        if result.rowcount == 0:
            raise StorageException("Failed to update household member")

        updated = self.find_member_by_id(household_id, member_id)
        if updated is None:
            raise StorageException("Household member not found after update")
        return updated
