"""
Pydantic schemas for request/response validation
"""
from pydantic import BaseModel, Field, EmailStr, ConfigDict
from typing import Optional
from datetime import datetime


class UserRegister(BaseModel):
    """Schema for registering a new user"""
    username: str = Field(..., min_length=1, max_length=50, description="Unique username")
    email: EmailStr = Field(..., description="Unique email address")
    password: str = Field(..., min_length=1, description="Plain password")
    first_name: Optional[str] = Field(None, max_length=50)
    last_name: Optional[str] = Field(None, max_length=50)


class LoginRequest(BaseModel):
    """Schema for logging in with username or email"""
    username_or_email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class ProfileUpdate(BaseModel):
    """Schema for updating the caller's profile (all fields optional)"""
    first_name: Optional[str] = Field(None, max_length=50)
    last_name: Optional[str] = Field(None, max_length=50)
    email: Optional[EmailStr] = None


class PasswordChange(BaseModel):
    """Schema for changing the caller's password"""
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=1)


class TokenVerifyRequest(BaseModel):
    """Schema for verifying a token on behalf of another service"""
    token: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    """Schema for user response"""
    id: int
    username: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserClaims(BaseModel):
    """Identity carried inside a session token"""
    user_id: int
    username: str
    email: str
    exp: int
    iat: int


class RegisterResponse(BaseModel):
    message: str
    user: UserResponse


class LoginResponse(BaseModel):
    message: str
    token: str
    user: UserResponse


class UserUpdateResponse(BaseModel):
    message: str
    user: UserResponse


class TokenVerifyResponse(BaseModel):
    valid: bool
    user: UserClaims


class MessageResponse(BaseModel):
    message: str


class CleanupResponse(BaseModel):
    message: str
    deleted: int


class UserStatsResponse(BaseModel):
    """Schema for user statistics"""
    total_users: int
    active_users: int
    inactive_users: int
    new_users_last_30_days: int
    active_sessions: int
