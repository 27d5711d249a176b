"""
Auth Service - Business Logic Layer
"""
import logging
from typing import List, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.database import atomic
from storefront.errors import AuthError, ConflictError, NotFoundError, ValidationError
from storefront.login_service.config import settings
from storefront.login_service.models.user import User
from storefront.login_service.repositories.user_repository import SessionRepository, UserRepository
from storefront.login_service.schemas.user import (
    PasswordChange,
    ProfileUpdate,
    UserClaims,
    UserRegister,
)
from storefront.login_service.security import (
    create_session_token,
    decode_session_token,
    hash_password,
    hash_token,
    verify_password,
)

logger = logging.getLogger(__name__)


class AuthService:
    """Service layer for accounts and session tokens"""

    def __init__(self, db: Session):
        self.db = db
        self.users = UserRepository(db)
        self.sessions = SessionRepository(db)

    # -- sessions ---------------------------------------------------------

    def issue_session(self, user: User) -> str:
        """Sign a token for the user and persist its session row"""
        token, expires_at = create_session_token(user.id, user.username, user.email)
        self.sessions.create(user.id, hash_token(token), expires_at)
        return token

    def verify(self, token: str) -> UserClaims:
        """
        Resolve a bearer token to its claims

        Both the signature and a live session row are required, so deleting
        the row revokes the token immediately. Every failure raises the same
        AuthError.
        """
        payload = decode_session_token(token)
        if payload is None:
            logger.info("Token rejected: bad signature or expired")
            raise AuthError()

        if self.sessions.get_live(hash_token(token)) is None:
            logger.info("Token rejected: no live session for user %s", payload.get("user_id"))
            raise AuthError()

        try:
            return UserClaims.model_validate(payload)
        except ValueError:
            logger.warning("Token rejected: unexpected claims")
            raise AuthError()

    def revoke(self, token: str) -> None:
        """Delete the session row of one token"""
        with atomic(self.db):
            self.sessions.delete_by_token(hash_token(token))

    def revoke_all(self, user_id: int) -> int:
        """Delete every session of a user"""
        with atomic(self.db):
            return self.sessions.delete_for_user(user_id)

    def cleanup_sessions(self) -> int:
        """Delete expired sessions"""
        with atomic(self.db):
            deleted = self.sessions.delete_expired()
        logger.info("Cleaned up %d expired sessions", deleted)
        return deleted

    # -- accounts ---------------------------------------------------------

    def register(self, data: UserRegister) -> User:
        """
        Register a new user

        Raises:
            ValidationError: If the password is too short
            ConflictError: If the username or email is taken
        """
        self._check_password_strength(data.password)

        if self.users.exists_with_username_or_email(data.username, data.email):
            raise ConflictError("Username or email already exists")

        try:
            with atomic(self.db):
                user = self.users.create({
                    "username": data.username,
                    "email": data.email,
                    "password_hash": hash_password(data.password),
                    "first_name": data.first_name,
                    "last_name": data.last_name,
                })
        except IntegrityError:
            # lost a race with a concurrent registration
            raise ConflictError("Username or email already exists")

        self.db.refresh(user)
        logger.info("User registered: %s (id=%s)", user.username, user.id)
        return user

    def login(self, username_or_email: str, password: str) -> Tuple[str, User]:
        """
        Authenticate and open a session

        Raises:
            AuthError: If the user is unknown, inactive or the password is wrong
        """
        user = self.users.get_active_by_login(username_or_email)
        if user is None or not verify_password(password, user.password_hash):
            logger.info("Failed login for %s", username_or_email)
            raise AuthError("Invalid credentials")

        with atomic(self.db):
            token = self.issue_session(user)
        logger.info("User %s logged in", user.id)
        return token, user

    def logout(self, token: str) -> None:
        self.revoke(token)

    def get_profile(self, user_id: int) -> User:
        user = self.users.get_active_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def update_profile(self, user_id: int, data: ProfileUpdate) -> User:
        """Update names and email of an active user; unset fields keep their value"""
        user = self.get_profile(user_id)
        update_data = data.model_dump(exclude_unset=True, exclude_none=True)

        if "email" in update_data and self.users.email_taken_by_other(update_data["email"], user_id):
            raise ConflictError("Email already exists")

        try:
            with atomic(self.db):
                for field, value in update_data.items():
                    setattr(user, field, value)
        except IntegrityError:
            raise ConflictError("Email already exists")

        self.db.refresh(user)
        return user

    def change_password(self, user_id: int, data: PasswordChange) -> None:
        """
        Replace the password and revoke every session of the user

        Raises:
            ValidationError: If the new password is too short
            NotFoundError: If the user is gone or inactive
            AuthError: If the current password is wrong
        """
        self._check_password_strength(data.new_password, label="New password")
        user = self.get_profile(user_id)

        if not verify_password(data.current_password, user.password_hash):
            raise AuthError("Current password is incorrect")

        with atomic(self.db):
            user.password_hash = hash_password(data.new_password)
            self.sessions.delete_for_user(user_id)
        logger.info("Password changed for user %s, sessions revoked", user_id)

    def deactivate(self, user_id: int) -> User:
        """Soft delete a user and revoke all of their sessions"""
        user = self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")

        with atomic(self.db):
            user.is_active = False
            self.sessions.delete_for_user(user_id)

        self.db.refresh(user)
        logger.info("User %s deactivated", user_id)
        return user

    def list_users(self) -> List[User]:
        return self.users.get_all()

    def get_user(self, user_id: int) -> User:
        user = self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def stats(self) -> dict:
        stats = self.users.stats()
        stats["active_sessions"] = self.sessions.count_live()
        return stats

    @staticmethod
    def _check_password_strength(password: str, label: str = "Password") -> None:
        if len(password) < settings.MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"{label} must be at least {settings.MIN_PASSWORD_LENGTH} characters long"
            )
