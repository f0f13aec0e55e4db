"""
Authentication schemas.
"""

from pydantic import AliasChoices, BaseModel, EmailStr, Field

from .user import UserResponse


class RegisterRequest(BaseModel):
    """User registration request."""
    email: EmailStr
    password: str = Field(min_length=6)
    name: str | None = Field(None, max_length=255)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class RefreshTokenRequest(BaseModel):
    """Refresh token request."""
    refresh_token: str = Field(
        min_length=1,
        validation_alias=AliasChoices("refresh_token", "refreshToken"),
    )


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class AuthResponse(BaseModel):
    """Login/registration response with user and tokens."""
    user: UserResponse
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class RefreshResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
