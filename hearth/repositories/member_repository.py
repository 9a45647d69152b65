from sqlalchemy.orm import Session
from sqlalchemy import select
from typing import List, Optional
from hearth.models.member import Member
from hearth.models.household import HouseholdMember
from hearth.repositories.repository import BaseRepository


class MemberRepository(BaseRepository[Member]):
    """Repository for Member operations."""

    def __init__(self, db: Session):
        super().__init__(Member, db)

    def find_by_email(self, email: str) -> Optional[Member]:
        """Get member by email."""
        return self.db.query(Member).filter(Member.email == email).first()

    def email_exists(self, email: str) -> bool:
        """Check if email already exists."""
        return self.db.query(Member).filter(Member.email == email).count() > 0

    def find_by_household_id(self, household_id: str) -> List[Member]:
        """Get every member holding a membership row in the household."""
        stmt = (
            select(Member)
            .join(HouseholdMember, HouseholdMember.member_id == Member.id)
            .where(HouseholdMember.household_id == household_id)
            .order_by(HouseholdMember.created_at)
        )
        return list(self.db.execute(stmt).scalars().all())
