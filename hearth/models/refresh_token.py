from sqlalchemy import String, ForeignKey, Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING
from datetime import datetime, timezone
from hearth.models.base import BaseModel
if TYPE_CHECKING:
    from hearth.models.member import Member


class RefreshToken(BaseModel):
    """Issued refresh token; rotated on every refresh and revoked on logout."""

    __tablename__ = "refresh_tokens"

    token: Mapped[str] = mapped_column(String(1024), unique=True, nullable=False)
    member_id: Mapped[str] = mapped_column(
        ForeignKey("members.id", ondelete="CASCADE"), nullable=False, index=True
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    is_revoked: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    member: Mapped["Member"] = relationship(
        "Member", back_populates="refresh_tokens", lazy="select"
    )

    def is_expired(self, now: datetime | None = None) -> bool:
        now = now or datetime.now(timezone.utc)
        expires_at = self.expires_at
        # SQLite hands back naive datetimes
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return expires_at <= now
