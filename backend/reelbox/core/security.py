from datetime import datetime, timedelta, timezone
from typing import Optional
import bcrypt
import jwt
from ..core.config import settings


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    salt = bcrypt.gensalt(rounds=rounds or settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')


def verify_password(password: str, password_hash: str) -> bool:
    # bcrypt raises on a malformed stored hash; that is a failed login, not a fault
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        return False


def issue_user_token(user_id: int, email: str, expires_minutes: Optional[int] = None) -> str:
    """Signed token identifying the user an upload belongs to."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "email": email,
        "iat": now,
        "exp": now + timedelta(minutes=expires_minutes or settings.access_token_expire_minutes),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def read_user_token(token: str) -> tuple[int, str]:
    """Return ``(user_id, email)``; raises jwt.InvalidTokenError on anything unusable."""
    payload = jwt.decode(
        token,
        settings.jwt_secret,
        algorithms=[settings.jwt_algorithm],
        options={"require": ["sub", "email", "exp"]},
    )
    sub = payload["sub"]
    if not str(sub).isdigit():
        raise jwt.InvalidTokenError("sub is not a user id")
    return int(sub), payload["email"]
