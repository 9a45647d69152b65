import os
import pytest
from fastapi.testclient import TestClient

# Set required environment variables for testing
os.environ["API_V1_STR"] = "/api/v1"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only-0123456789"
os.environ["REFRESH_SECRET_KEY"] = "test-refresh-secret-key-for-testing-0123456789"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"

from hearth.main import app
from hearth.database import build_engine, build_session_factory
from hearth.config import JwtSettings
from hearth.dependencies import get_token_manager, get_unit_of_work
from hearth.models import Base, Member
from hearth.repositories.unit_of_work import UnitOfWork
from hearth.utils.security import TokenManager
from hearth.services.household_member_validator import HouseholdMemberValidator
from hearth.services.task_tag_manager import TaskTagManager
from hearth.services.tag_permission_manager import TagPermissionManager
from hearth.services.default_tag_service import DefaultTagService
from hearth.services.household_service import HouseholdService
from hearth.services.tag_service import TagService
from hearth.services.task_service import TaskService
from hearth.services.member_service import MemberService
from hearth.services.auth_service import AuthService

TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture
def engine():
    """Create a fresh in-memory database for each test."""
    engine = build_engine(TEST_DATABASE_URL)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def unit_of_work(engine) -> UnitOfWork:
    """Unit of work over the test database."""
    return UnitOfWork(build_session_factory(engine))


@pytest.fixture
def token_manager() -> TokenManager:
    return TokenManager(
        JwtSettings(
            secret="test-secret-key-for-testing-only-0123456789",
            refresh_secret="test-refresh-secret-key-for-testing-0123456789",
            algorithm="HS256",
            issuer="hearth-tests",
            audience="hearth-test-clients",
            access_token_expire_minutes=15,
            refresh_token_expire_days=7,
        )
    )


@pytest.fixture
def validator() -> HouseholdMemberValidator:
    return HouseholdMemberValidator()


@pytest.fixture
def task_tag_manager() -> TaskTagManager:
    return TaskTagManager()


@pytest.fixture
def tag_permission_manager(task_tag_manager) -> TagPermissionManager:
    return TagPermissionManager(task_tag_manager)


@pytest.fixture
def household_service(unit_of_work, validator, tag_permission_manager) -> HouseholdService:
    return HouseholdService(unit_of_work, validator, tag_permission_manager, DefaultTagService())


@pytest.fixture
def tag_service(unit_of_work, validator, tag_permission_manager) -> TagService:
    return TagService(unit_of_work, validator, tag_permission_manager)


@pytest.fixture
def task_service(unit_of_work, validator, task_tag_manager, tag_permission_manager) -> TaskService:
    return TaskService(unit_of_work, validator, task_tag_manager, tag_permission_manager)


@pytest.fixture
def member_service(unit_of_work, validator) -> MemberService:
    return MemberService(unit_of_work, validator)


@pytest.fixture
def auth_service(unit_of_work, token_manager) -> AuthService:
    return AuthService(unit_of_work, token_manager)


@pytest.fixture
def make_member(unit_of_work):
    """Factory persisting a member directly; the password hash is not a real one."""

    def _make_member(name: str = "Member", email: str | None = None) -> Member:
        with unit_of_work.transaction() as context:
            return context.members.create(
                Member(
                    name=name,
                    email=email or f"{name.lower().replace(' ', '.')}@example.com",
                    hashed_password="not-a-real-hash",
                )
            )

    return _make_member


@pytest.fixture
def client(unit_of_work, token_manager):
    """Create a FastAPI TestClient bound to the test database."""
    app.dependency_overrides[get_unit_of_work] = lambda: unit_of_work
    app.dependency_overrides[get_token_manager] = lambda: token_manager
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def register(client):
    """Register a member over HTTP; returns (member_id, auth headers)."""

    def _register(name: str = "Test Member", email: str = "test@example.com", password: str = "testpass123"):
        response = client.post(
            "/api/v1/auth/register",
            json={"name": name, "email": email, "password": password},
        )
        assert response.status_code == 201, response.text
        data = response.json()["data"]
        return data["id"], {"Authorization": f"Bearer {data['access_token']}"}

    return _register
