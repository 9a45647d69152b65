from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
import uuid
import jwt
from jwt.exceptions import PyJWTError
from passlib.context import CryptContext
from hearth.config import JwtSettings

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def is_valid_guid(value: Optional[str]) -> bool:
    """Check that value is a canonical UUID string."""
    if not isinstance(value, str):
        return False
    try:
        uuid.UUID(value)
    except ValueError:
        return False
    return True


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


class TokenManager:
    """
    Issues and verifies access and refresh JWTs.

    The signing configuration is passed in explicitly; nothing here reads the
    environment.
    """

    def __init__(self, config: JwtSettings):
        self.config = config

    def _encode(self, member_id: str, token_type: str, secret: str, expires_delta: timedelta) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": member_id,
            "type": token_type,
            "iss": self.config.issuer,
            "aud": self.config.audience,
            "iat": now,
            "exp": now + expires_delta,
            # Keeps tokens issued within the same second distinct
            "jti": str(uuid.uuid4()),
        }
        return jwt.encode(payload, secret, algorithm=self.config.algorithm)

    def _decode(self, token: str, token_type: str, secret: str) -> Optional[dict]:
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[self.config.algorithm],
                audience=self.config.audience,
                issuer=self.config.issuer,
                options={"require": ["exp", "sub", "type"]},
            )
        except PyJWTError:
            return None
        if payload.get("type") != token_type:
            return None
        return payload

    def create_access_token(self, member_id: str, expires_delta: Optional[timedelta] = None) -> str:
        """
        Create a JWT access token.

        Args:
            member_id: Subject of the token
            expires_delta: Optional expiration time delta

        Returns:
            Encoded JWT token
        """
        return self._encode(
            member_id,
            ACCESS_TOKEN_TYPE,
            self.config.secret,
            expires_delta or timedelta(minutes=self.config.access_token_expire_minutes),
        )

    def create_refresh_token(self, member_id: str, expires_delta: Optional[timedelta] = None) -> str:
        """Create a refresh token (longer expiration, separate secret)."""
        return self._encode(
            member_id,
            REFRESH_TOKEN_TYPE,
            self.config.refresh_secret,
            expires_delta or self.refresh_token_lifetime,
        )

    def create_token_pair(self, member_id: str) -> TokenPair:
        return TokenPair(
            access_token=self.create_access_token(member_id),
            refresh_token=self.create_refresh_token(member_id),
        )

    @property
    def refresh_token_lifetime(self) -> timedelta:
        return timedelta(days=self.config.refresh_token_expire_days)

    def decode_access_token(self, token: str) -> Optional[dict]:
        """
        Decode an access token.

        Returns:
            Decoded token payload or None if invalid, expired or not an access token
        """
        return self._decode(token, ACCESS_TOKEN_TYPE, self.config.secret)

    def decode_refresh_token(self, token: str) -> Optional[dict]:
        """Decode a refresh token; None if invalid."""
        return self._decode(token, REFRESH_TOKEN_TYPE, self.config.refresh_secret)
