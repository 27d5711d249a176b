"""
User Repository - Data Access Layer
"""
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from sqlalchemy import case, delete, desc, func, or_, select
from sqlalchemy.orm import Session

from storefront.login_service.models.user import User, UserSession


class UserRepository:
    """Repository for User CRUD operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_all(self) -> List[User]:
        """Get all users, newest first"""
        return self.db.scalars(
            select(User).order_by(desc(User.created_at), desc(User.id))
        ).all()

    def get_by_id(self, user_id: int) -> Optional[User]:
        """Get user by ID"""
        return self.db.get(User, user_id)

    def get_active_by_id(self, user_id: int) -> Optional[User]:
        """Get user by ID if the account is active"""
        return self.db.scalars(
            select(User).where(User.id == user_id, User.is_active.is_(True))
        ).first()

    def get_active_by_login(self, username_or_email: str) -> Optional[User]:
        """Get active user whose username or email matches"""
        return self.db.scalars(
            select(User).where(
                or_(User.username == username_or_email, User.email == username_or_email),
                User.is_active.is_(True)
            )
        ).first()

    def exists_with_username_or_email(self, username: str, email: str) -> bool:
        """Check whether the username or email is already taken"""
        return self.db.scalars(
            select(User.id).where(or_(User.username == username, User.email == email))
        ).first() is not None

    def email_taken_by_other(self, email: str, user_id: int) -> bool:
        """Check whether another user already has this email"""
        return self.db.scalars(
            select(User.id).where(User.email == email, User.id != user_id)
        ).first() is not None

    def create(self, user_data: dict) -> User:
        """Create new user (flushed, not committed)"""
        user = User(**user_data)
        self.db.add(user)
        self.db.flush()
        return user

    def stats(self) -> dict:
        """Counts of total, active, inactive and recently created users"""
        since = datetime.now(timezone.utc) - timedelta(days=30)
        row = self.db.execute(
            select(
                func.count(User.id),
                func.count(case((User.is_active.is_(True), 1))),
                func.count(case((User.is_active.is_(False), 1))),
                func.count(case((User.created_at >= since, 1))),
            )
        ).one()
        return {
            "total_users": row[0],
            "active_users": row[1],
            "inactive_users": row[2],
            "new_users_last_30_days": row[3],
        }


class SessionRepository:
    """Repository for session records backing bearer tokens"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, user_id: int, token_hash: str, expires_at: datetime) -> UserSession:
        """Persist a session row (flushed, not committed)"""
        session = UserSession(user_id=user_id, session_token=token_hash, expires_at=expires_at)
        self.db.add(session)
        self.db.flush()
        return session

    def get_live(self, token_hash: str) -> Optional[UserSession]:
        """Get the session for a token if it has not expired"""
        return self.db.scalars(
            select(UserSession).where(
                UserSession.session_token == token_hash,
                UserSession.expires_at > datetime.now(timezone.utc)
            )
        ).first()

    def delete_by_token(self, token_hash: str) -> int:
        """Delete a single session; returns number of rows removed"""
        result = self.db.execute(
            delete(UserSession).where(UserSession.session_token == token_hash)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def delete_for_user(self, user_id: int) -> int:
        """Delete every session of a user"""
        result = self.db.execute(
            delete(UserSession).where(UserSession.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def delete_expired(self) -> int:
        """Delete sessions whose expiry has passed"""
        result = self.db.execute(
            delete(UserSession).where(UserSession.expires_at <= datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def count_live(self) -> int:
        """Count sessions that have not expired"""
        return self.db.scalar(
            select(func.count(UserSession.id)).where(
                UserSession.expires_at > datetime.now(timezone.utc)
            )
        )
