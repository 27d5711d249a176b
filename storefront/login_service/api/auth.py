"""
Auth API endpoints
"""
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from storefront.errors import AuthError
from storefront.login_service.api.dependencies import (
    get_auth_service,
    get_bearer_token,
    get_current_user,
)
from storefront.login_service.schemas.user import (
    CleanupResponse,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    PasswordChange,
    ProfileUpdate,
    RegisterResponse,
    TokenVerifyRequest,
    TokenVerifyResponse,
    UserClaims,
    UserRegister,
    UserResponse,
    UserUpdateResponse,
)
from storefront.login_service.services.auth_service import AuthService

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED, summary="Register user")
def register(
    user_data: UserRegister,
    service: AuthService = Depends(get_auth_service)
):
    """
    Register a new user

    - **username**: Unique username (required)
    - **email**: Unique email (required)
    - **password**: Password, at least 6 characters (required)
    - **first_name** / **last_name**: Optional
    """
    user = service.register(user_data)
    return RegisterResponse(message="User registered successfully", user=UserResponse.model_validate(user))


@router.post("/login", response_model=LoginResponse, summary="Log in")
def login(
    credentials: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """
    Authenticate with username or email and open a 24h session
    """
    token, user = service.login(credentials.username_or_email, credentials.password)
    return LoginResponse(message="Login successful", token=token, user=UserResponse.model_validate(user))


@router.post("/logout", response_model=MessageResponse, summary="Log out")
def logout(
    claims: UserClaims = Depends(get_current_user),
    token: str = Depends(get_bearer_token),
    service: AuthService = Depends(get_auth_service)
):
    """Revoke the session behind the presented token"""
    service.logout(token)
    return MessageResponse(message="Logout successful")


@router.get("/profile", response_model=UserResponse, summary="Get own profile")
def get_profile(
    claims: UserClaims = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service)
):
    return service.get_profile(claims.user_id)


@router.put("/profile", response_model=UserUpdateResponse, summary="Update own profile")
def update_profile(
    profile_data: ProfileUpdate,
    claims: UserClaims = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service)
):
    """
    Update first name, last name or email

    Only provided fields are changed.
    """
    user = service.update_profile(claims.user_id, profile_data)
    return UserUpdateResponse(message="Profile updated successfully", user=UserResponse.model_validate(user))


@router.post("/change-password", response_model=MessageResponse, summary="Change password")
def change_password(
    password_data: PasswordChange,
    claims: UserClaims = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service)
):
    """Change password; every session of the user is revoked"""
    service.change_password(claims.user_id, password_data)
    return MessageResponse(message="Password changed successfully. Please login again.")


@router.post("/verify", response_model=TokenVerifyResponse, summary="Verify token")
def verify_token(
    payload: TokenVerifyRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Token check for other services"""
    try:
        claims = service.verify(payload.token)
    except AuthError as e:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"valid": False, "error": e.message}
        )
    return TokenVerifyResponse(valid=True, user=claims)


@router.post("/cleanup-sessions", response_model=CleanupResponse, summary="Delete expired sessions")
def cleanup_sessions(service: AuthService = Depends(get_auth_service)):
    deleted = service.cleanup_sessions()
    return CleanupResponse(message=f"Cleaned up {deleted} expired sessions", deleted=deleted)
