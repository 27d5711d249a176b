"""
User administration endpoints
"""
from fastapi import APIRouter, Depends
from typing import List

from storefront.login_service.api.dependencies import get_auth_service, get_current_user
from storefront.login_service.schemas.user import (
    UserResponse,
    UserStatsResponse,
    UserUpdateResponse,
)
from storefront.login_service.services.auth_service import AuthService

router = APIRouter(
    prefix="/api/users",
    tags=["users"],
    dependencies=[Depends(get_current_user)]
)


@router.get("", response_model=List[UserResponse], summary="Get all users")
def get_users(service: AuthService = Depends(get_auth_service)):
    """Retrieve every user, newest first"""
    return service.list_users()


@router.get("/stats", response_model=UserStatsResponse, summary="Get user statistics")
def get_user_stats(service: AuthService = Depends(get_auth_service)):
    """
    User counts and number of live sessions

    - **new_users_last_30_days**: Accounts created in the last 30 days
    """
    return service.stats()


@router.get("/{user_id}", response_model=UserResponse, summary="Get user by ID")
def get_user(
    user_id: int,
    service: AuthService = Depends(get_auth_service)
):
    return service.get_user(user_id)


@router.patch("/{user_id}/deactivate", response_model=UserUpdateResponse, summary="Deactivate user")
def deactivate_user(
    user_id: int,
    service: AuthService = Depends(get_auth_service)
):
    """Soft delete the account and revoke all of its sessions"""
    user = service.deactivate(user_id)
    return UserUpdateResponse(
        message="User account deactivated successfully",
        user=UserResponse.model_validate(user)
    )
