"""
Schemas package
"""
from storefront.login_service.schemas.user import (
    UserRegister,
    LoginRequest,
    ProfileUpdate,
    PasswordChange,
    TokenVerifyRequest,
    UserResponse,
    UserClaims,
    RegisterResponse,
    LoginResponse,
    UserUpdateResponse,
    TokenVerifyResponse,
    MessageResponse,
    CleanupResponse,
    UserStatsResponse
)

__all__ = [
    "UserRegister",
    "LoginRequest",
    "ProfileUpdate",
    "PasswordChange",
    "TokenVerifyRequest",
    "UserResponse",
    "UserClaims",
    "RegisterResponse",
    "LoginResponse",
    "UserUpdateResponse",
    "TokenVerifyResponse",
    "MessageResponse",
    "CleanupResponse",
    "UserStatsResponse"
]
