"""
Shared FastAPI dependencies for the login service
"""
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from storefront.database import get_db
from storefront.errors import AuthError
from storefront.login_service.schemas.user import UserClaims
from storefront.login_service.services.auth_service import AuthService

bearer_scheme = HTTPBearer(auto_error=False)


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    """Dependency to get AuthService instance"""
    return AuthService(db)


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> str:
    """Extract the bearer token; missing header is an auth failure"""
    if credentials is None or not credentials.credentials:
        raise AuthError("Access token required")
    return credentials.credentials


def get_current_user(
    token: str = Depends(get_bearer_token),
    service: AuthService = Depends(get_auth_service)
) -> UserClaims:
    """Claims of the authenticated caller"""
    return service.verify(token)
