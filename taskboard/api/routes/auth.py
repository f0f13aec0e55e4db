"""
Authentication routes.
"""

from fastapi import APIRouter, Depends, status

from taskboard.core.auth import CurrentPrincipal, CurrentUser
from taskboard.schemas.auth import (
    AuthResponse,
    ForgotPasswordRequest,
    LoginRequest,
    RefreshResponse,
    RefreshTokenRequest,
    RegisterRequest,
)
from taskboard.schemas.common import MessageResponse
from taskboard.schemas.user import UserResponse
from taskboard.services.auth import AuthService
from taskboard.api.dependencies.services import get_auth_service

router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    data: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Register a new user."""
    user, tokens = await auth_service.register(
        email=data.email,
        password=data.password,
        name=data.name,
    )
    return AuthResponse(
        user=UserResponse.model_validate(user),
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Login with email and password."""
    user, tokens = await auth_service.login(email=data.email, password=data.password)
    return AuthResponse(
        user=UserResponse.model_validate(user),
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
    )


@router.post("/refresh", response_model=RefreshResponse)
async def refresh_token(
    data: RefreshTokenRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Exchange a refresh token for a new access token."""
    access_token = await auth_service.refresh(data.refresh_token)
    return RefreshResponse(access_token=access_token)


@router.get("/profile", response_model=UserResponse)
async def get_profile(current_user: CurrentUser):
    """Get the authenticated user."""
    return UserResponse.model_validate(current_user)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    principal: CurrentPrincipal,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Logout (stateless; the client discards its tokens)."""
    await auth_service.logout(principal.user_id)
    return MessageResponse(
        message="Logout successful. Please remove the token from client storage."
    )


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    data: ForgotPasswordRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Request a password reset link."""
    return MessageResponse(message=auth_service.forgot_password(data.email))
