"""
Password hashing and session token primitives
"""
import hashlib
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from jose import JWTError, jwt
from passlib.context import CryptContext

from storefront.login_service.config import settings

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


def hash_password(plain_password: str) -> str:
    return pwd_context.hash(plain_password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    try:
        return pwd_context.verify(plain_password, password_hash)
    except ValueError:
        # malformed or foreign hash in the column
        return False


def create_session_token(user_id: int, username: str, email: str) -> Tuple[str, datetime]:
    """
    Sign a token for a user

    Returns the token and its expiry. The random jti keeps two tokens issued
    in the same second distinct.
    """
    now = datetime.now(timezone.utc)
    expires_at = now + timedelta(hours=settings.SESSION_TTL_HOURS)
    payload = {
        "user_id": user_id,
        "username": username,
        "email": email,
        "iat": int(now.timestamp()),
        "exp": int(expires_at.timestamp()),
        "jti": secrets.token_hex(16),
    }
    token = jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
    return token, expires_at


def decode_session_token(token: str) -> Optional[dict]:
    """Verify signature and expiry; None when either fails"""
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None


def hash_token(token: str) -> str:
    """Digest stored in user_sessions instead of the bearer token itself"""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()
