import pytest
from datetime import datetime, timedelta, timezone
from hearth.schemas.auth import RegistrationRequest
from hearth.core.exception import AuthenticationException, DuplicateResourceException


@pytest.fixture
def registered(auth_service):
    """Register a member with a known password."""
    return auth_service.register(
        RegistrationRequest(name="Test Member", email="test@example.com", password="testpass123")
    )


@pytest.mark.unit
class TestAuthService:
    """Unit tests for AuthService."""

    def test_register_success(self, unit_of_work, token_manager, registered):
        """Registration stores a hashed password and signs the member in."""
        with unit_of_work.transaction() as context:
            member = context.members.find_by_id(registered.id)
            stored = context.refresh_tokens.find_by_token(registered.refresh_token)

        assert member.email == "test@example.com"
        assert member.hashed_password != "testpass123"
        assert registered.token_type == "bearer"
        assert token_manager.decode_access_token(registered.access_token)["sub"] == registered.id
        assert stored is not None and stored.member_id == registered.id

    def test_register_duplicate_email(self, auth_service, registered):
        with pytest.raises(DuplicateResourceException):
            auth_service.register(
                RegistrationRequest(name="Again", email="test@example.com", password="password123")
            )

    def test_login_success(self, auth_service, token_manager, registered):
        token = auth_service.login("test@example.com", "testpass123")

        payload = token_manager.decode_access_token(token.access_token)
        assert payload is not None
        assert payload["sub"] == registered.id
        assert token.refresh_token != registered.refresh_token

    def test_login_unknown_email(self, auth_service):
        with pytest.raises(AuthenticationException) as exc_info:
            auth_service.login("nobody@example.com", "password123")

        assert "Invalid email or password" in str(exc_info.value)

    def test_login_invalid_password(self, auth_service, registered):
        with pytest.raises(AuthenticationException) as exc_info:
            auth_service.login("test@example.com", "wrongpassword")

        assert "Invalid email or password" in str(exc_info.value)

    def test_refresh_rotates_token(self, auth_service, registered):
        """A refresh token can be exchanged exactly once."""
        new_token = auth_service.refresh(registered.refresh_token)

        assert new_token.access_token
        assert new_token.refresh_token != registered.refresh_token

        with pytest.raises(AuthenticationException) as exc_info:
            auth_service.refresh(registered.refresh_token)

        assert "revoked" in str(exc_info.value)
        assert auth_service.refresh(new_token.refresh_token).access_token

    def test_refresh_with_invalid_token(self, auth_service):
        with pytest.raises(AuthenticationException):
            auth_service.refresh("invalid.token.here")

    def test_refresh_with_access_token(self, auth_service, registered):
        """Access tokens are not accepted where a refresh token is expected."""
        with pytest.raises(AuthenticationException):
            auth_service.refresh(registered.access_token)

    def test_refresh_with_unstored_token(self, auth_service, token_manager, registered):
        stray = token_manager.create_refresh_token(registered.id)

        with pytest.raises(AuthenticationException) as exc_info:
            auth_service.refresh(stray)

        assert "not recognised" in str(exc_info.value)

    def test_refresh_with_expired_stored_token(self, unit_of_work, auth_service, registered):
        with unit_of_work.transaction() as context:
            stored = context.refresh_tokens.find_by_token(registered.refresh_token)
            context.refresh_tokens.update(
                stored.id, {"expires_at": datetime.now(timezone.utc) - timedelta(minutes=1)}
            )

        with pytest.raises(AuthenticationException) as exc_info:
            auth_service.refresh(registered.refresh_token)

        assert "expired" in str(exc_info.value)

    def test_logout_revokes(self, auth_service, registered):
        auth_service.logout(registered.refresh_token)

        with pytest.raises(AuthenticationException):
            auth_service.refresh(registered.refresh_token)

        with pytest.raises(AuthenticationException):
            auth_service.logout(registered.refresh_token)
