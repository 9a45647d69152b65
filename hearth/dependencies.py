from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer

from .config import settings
from .database import SessionLocal
from .repositories.unit_of_work import UnitOfWork
from .utils.security import TokenManager, is_valid_guid
from .core.exception import AuthenticationException
from .services.household_member_validator import HouseholdMemberValidator
from .services.task_tag_manager import TaskTagManager
from .services.tag_permission_manager import TagPermissionManager
from .services.default_tag_service import DefaultTagService
from .services.household_service import HouseholdService
from .services.tag_service import TagService
from .services.task_service import TaskService
from .services.member_service import MemberService
from .services.auth_service import AuthService

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/swagger-login")


def get_unit_of_work() -> UnitOfWork:
    """Unit of work bound to the application session factory."""
    return UnitOfWork(SessionLocal)


def get_token_manager() -> TokenManager:
    return TokenManager(settings.jwt_settings())


async def get_current_member_id(
    token: str = Depends(oauth2_scheme),
    token_manager: TokenManager = Depends(get_token_manager),
) -> str:
    """
    Dependency resolving the bearer token to the caller's member ID.
    Raises CustomException instead of HTTPException for consistent error handling.

    Example:
        @router.get("/protected")
        async def protected_route(member_id: str = Depends(get_current_member_id)):
            return {"member_id": member_id}
    """
    payload = token_manager.decode_access_token(token)
    if payload is None:
        raise AuthenticationException("Could not validate credentials")

    member_id: str | None = payload.get("sub")
    if not is_valid_guid(member_id):
        raise AuthenticationException("Invalid token format")

    return member_id


def get_tag_permission_manager() -> TagPermissionManager:
    return TagPermissionManager(TaskTagManager())


def get_household_service(
    unit_of_work: UnitOfWork = Depends(get_unit_of_work),
    tag_permission_manager: TagPermissionManager = Depends(get_tag_permission_manager),
) -> HouseholdService:
    return HouseholdService(
        unit_of_work,
        HouseholdMemberValidator(),
        tag_permission_manager,
        DefaultTagService(),
    )


def get_tag_service(
    unit_of_work: UnitOfWork = Depends(get_unit_of_work),
    tag_permission_manager: TagPermissionManager = Depends(get_tag_permission_manager),
) -> TagService:
    return TagService(unit_of_work, HouseholdMemberValidator(), tag_permission_manager)


def get_task_service(
    unit_of_work: UnitOfWork = Depends(get_unit_of_work),
    tag_permission_manager: TagPermissionManager = Depends(get_tag_permission_manager),
) -> TaskService:
    return TaskService(
        unit_of_work,
        HouseholdMemberValidator(),
        tag_permission_manager.task_tag_manager,
        tag_permission_manager,
    )


def get_member_service(unit_of_work: UnitOfWork = Depends(get_unit_of_work)) -> MemberService:
    return MemberService(unit_of_work, HouseholdMemberValidator())


def get_auth_service(
    unit_of_work: UnitOfWork = Depends(get_unit_of_work),
    token_manager: TokenManager = Depends(get_token_manager),
) -> AuthService:
    return AuthService(unit_of_work, token_manager)
