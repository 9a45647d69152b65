from sqlalchemy.orm import Session
from sqlalchemy import update
from typing import Optional
from hearth.models.refresh_token import RefreshToken
from hearth.repositories.repository import BaseRepository
from hearth.core.exception import StorageException


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    """Repository for issued refresh tokens."""

    def __init__(self, db: Session):
        super().__init__(RefreshToken, db)

    def find_by_token(self, token: str) -> Optional[RefreshToken]:
        """Get a stored refresh token by its encoded value."""
        return self.db.query(RefreshToken).filter(RefreshToken.token == token).first()

    def revoke_token(self, token: str) -> None:
        """
        Mark a stored refresh token as revoked.

        Raises:
            StorageException: If no stored token matched
        """
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.token == token)
            .values(is_revoked=True)
            .execution_options(synchronize_session="fetch")
        )
        result = self.db.execute(stmt)
        if result.rowcount == 0:
            raise StorageException("Failed to revoke refresh token")
