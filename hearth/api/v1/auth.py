from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm

from ...schemas.auth import (
    RegistrationRequest,
    RegistrationResponse,
    LoginRequest,
    TokenRefreshRequest,
    LogoutRequest,
    Token,
)
from ...schemas.result import Result
from ...services.auth_service import AuthService
from ...dependencies import get_auth_service

router = APIRouter()


@router.post(
    "/register",
    response_model=Result[RegistrationResponse],
    status_code=status.HTTP_201_CREATED,
)
async def register(
    registration: RegistrationRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Register a new member.

    - **name**: Display name
    - **email**: Valid email address (unique)
    - **password**: Password (8-72 chars)

    Returns:
        Result[RegistrationResponse]: The new member ID with a token pair
    """
    return Result.successful(data=auth_service.register(registration))


@router.post("/swagger-login", response_model=Token)
async def swagger_login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    auth_service: AuthService = Depends(get_auth_service),
):
    # The OpenAPI "Authorize" form sends the email in the username field
    return auth_service.login(form_data.username, form_data.password)


@router.post("/login", response_model=Result[Token])
async def login(
    credentials: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Login with email and password.

    Returns:
        Result[Token]: Success result with access and refresh tokens
    """
    token = auth_service.login(credentials.email, credentials.password)
    return Result.successful(data=token)


@router.post("/refresh", response_model=Result[Token])
async def refresh(
    request: TokenRefreshRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Exchange a refresh token for a new token pair; the old one stops working."""
    return Result.successful(data=auth_service.refresh(request.refresh_token))


@router.post("/logout", response_model=Result[dict])
async def logout(
    request: LogoutRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Revoke a refresh token."""
    auth_service.logout(request.refresh_token)
    return Result.successful(data={"message": "Logged out successfully"})
