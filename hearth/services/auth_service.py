import logging
from datetime import datetime, timezone
from hearth.models.member import Member
from hearth.models.refresh_token import RefreshToken
from hearth.repositories.unit_of_work import UnitOfWork, UnitOfWorkContext
from hearth.schemas.auth import RegistrationRequest, RegistrationResponse, Token
from hearth.utils.security import TokenManager, get_password_hash, verify_password
from hearth.core.exception import AuthenticationException, DuplicateResourceException

logger = logging.getLogger(__name__)


class AuthService:
    """Service layer for authentication operations."""

    def __init__(self, unit_of_work: UnitOfWork, token_manager: TokenManager):
        self.unit_of_work = unit_of_work
        self.token_manager = token_manager

    def register(self, data: RegistrationRequest) -> RegistrationResponse:
        """
        Register a new member and sign them in.

        Raises:
            DuplicateResourceException: If the email is already registered
        """
        with self.unit_of_work.transaction() as context:
            if context.members.email_exists(data.email):
                raise DuplicateResourceException("Member", data.email)

            member = context.members.create(
                Member(
                    name=data.name,
                    email=data.email,
                    hashed_password=get_password_hash(data.password),
                )
            )
            token = self._issue_tokens(context, member.id)

            logger.info(f"Registered member {member.id}")
            return RegistrationResponse(id=member.id, **token.model_dump())

    def login(self, email: str, password: str) -> Token:
        """
        Login member and return an access/refresh token pair.

        Raises:
            AuthenticationException: If the email is unknown or the password is wrong
        """
        with self.unit_of_work.transaction() as context:
            member = context.members.find_by_email(email)
            if member is None or not verify_password(password, member.hashed_password):
                raise AuthenticationException("Invalid email or password")

            return self._issue_tokens(context, member.id)

    def refresh(self, refresh_token: str) -> Token:
        """
        Exchange a refresh token for a new pair. The presented token is
        revoked, so each refresh token works once.

        Raises:
            AuthenticationException: If the token is invalid, unknown, revoked,
                expired or issued to someone else
        """
        with self.unit_of_work.transaction() as context:
            member_id = self._verify_refresh_token(context, refresh_token)
            context.refresh_tokens.revoke_token(refresh_token)
            return self._issue_tokens(context, member_id)

    def logout(self, refresh_token: str) -> None:
        """
        Revoke a refresh token.

        Raises:
            AuthenticationException: If the token is invalid, unknown, revoked
                or expired
        """
        with self.unit_of_work.transaction() as context:
            member_id = self._verify_refresh_token(context, refresh_token)
            context.refresh_tokens.revoke_token(refresh_token)
            logger.info(f"Member {member_id} logged out")

    def _issue_tokens(self, context: UnitOfWorkContext, member_id: str) -> Token:
        pair = self.token_manager.create_token_pair(member_id)
        context.refresh_tokens.create(
            RefreshToken(
                token=pair.refresh_token,
                member_id=member_id,
                expires_at=datetime.now(timezone.utc) + self.token_manager.refresh_token_lifetime,
            )
        )
        return Token(access_token=pair.access_token, refresh_token=pair.refresh_token)

    def _verify_refresh_token(self, context: UnitOfWorkContext, refresh_token: str) -> str:
        payload = self.token_manager.decode_refresh_token(refresh_token)
        if payload is None:
            raise AuthenticationException("Could not validate refresh token")

        stored = context.refresh_tokens.find_by_token(refresh_token)
        if stored is None:
            raise AuthenticationException("Refresh token not recognised")

        if stored.is_revoked:
            raise AuthenticationException("Refresh token has been revoked")

        if stored.is_expired():
            raise AuthenticationException("Refresh token has expired")

        if stored.member_id != payload.get("sub"):
            raise AuthenticationException("Refresh token does not belong to this member")

        return stored.member_id
