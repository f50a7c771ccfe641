import logging
import re
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from ..core.errors import AuthError, ConflictError, InternalError, ValidationError
from ..core.security import hash_password, verify_password
from ..models import User

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
# bcrypt only looks at the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72


def validate_email(email: str) -> None:
    if not EMAIL_RE.fullmatch(email):
        raise ValidationError("Invalid email format")


class AuthService:
    """Signup and login against the users table.

    Both operations touch nothing but the credential store. Login failures
    for an unknown email and for a wrong password raise the same AuthError.
    """

    def __init__(self, db: Session):
        self.db = db

    def signup(self, username: str | None, email: str | None, password: str | None) -> User:
        if not username or not email or not password:
            raise ValidationError("Username, email, and password are required")
        validate_email(email)
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")

        user = User(username=username, email=email, password_hash=hash_password(password))
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.info("auth.signup_conflict email=%s", email)
            raise ConflictError() from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("auth.signup_failed email=%s", email)
            raise InternalError() from e
        self.db.refresh(user)
        logger.info("auth.signup user_id=%s", user.id)
        return user

    def login(self, email: str | None, password: str | None) -> User:
        if not email or not password:
            raise ValidationError("Email and password are required")
        validate_email(email)

        try:
            user = self.db.query(User).filter(User.email == email).first()
        except SQLAlchemyError as e:
            logger.exception("auth.login_lookup_failed")
            raise InternalError() from e

        if not user or not verify_password(password, user.password_hash):
            logger.info("auth.login_rejected")
            raise AuthError()
        logger.info("auth.login user_id=%s", user.id)
        return user
