import jwt
import pytest

from reelbox.core.config import settings
from reelbox.core.errors import AuthError, ConflictError, ValidationError
from reelbox.core.security import issue_user_token, read_user_token, verify_password
from reelbox.models import User
from reelbox.services.auth import AuthService


def test_signup_stores_hash_not_plaintext(db) -> None:
    user = AuthService(db).signup("alice", "alice@example.com", "Secret123!")

    assert user.id == 1
    assert user.username == "alice"
    assert user.email == "alice@example.com"
    assert user.password_hash != "Secret123!"
    assert verify_password("Secret123!", user.password_hash)


@pytest.mark.parametrize(
    "username, email, password",
    [
        ("", "a@example.com", "pw"),
        ("alice", "", "pw"),
        ("alice", "a@example.com", ""),
        (None, "a@example.com", "pw"),
        ("alice", "not-an-email", "pw"),
        ("alice", "alice@example", "pw"),
        ("alice", "al ice@example.com", "pw"),
        ("alice", "alice@example.com\n", "pw"),
    ],
)
def test_signup_rejects_invalid_input(db, username, email, password) -> None:
    with pytest.raises(ValidationError):
        AuthService(db).signup(username, email, password)
    assert db.query(User).count() == 0


def test_signup_rejects_password_over_bcrypt_limit(db) -> None:
    with pytest.raises(ValidationError):
        AuthService(db).signup("alice", "alice@example.com", "x" * 73)


def test_signup_duplicate_email_conflicts_without_new_row(db) -> None:
    service = AuthService(db)
    service.signup("alice", "alice@example.com", "Secret123!")

    with pytest.raises(ConflictError) as exc:
        service.signup("alice2", "alice@example.com", "Other456!")

    assert exc.value.message == "Username or email already exists"
    assert db.query(User).filter(User.email == "alice@example.com").count() == 1


def test_signup_then_login_round_trip(db) -> None:
    service = AuthService(db)
    created = service.signup("alice", "alice@example.com", "Secret123!")

    user = service.login("alice@example.com", "Secret123!")

    assert user.id == created.id
    assert user.email == "alice@example.com"


def test_login_unknown_email_and_wrong_password_are_indistinguishable(db) -> None:
    service = AuthService(db)
    service.signup("alice", "alice@example.com", "Secret123!")

    with pytest.raises(AuthError) as wrong_password:
        service.login("alice@example.com", "wrong")
    with pytest.raises(AuthError) as unknown_email:
        service.login("bob@example.com", "Secret123!")

    assert type(wrong_password.value) is type(unknown_email.value)
    assert wrong_password.value.message == unknown_email.value.message == "Invalid email or password"


def test_login_never_accepts_the_stored_hash_as_password(db) -> None:
    service = AuthService(db)
    user = service.signup("alice", "alice@example.com", "Secret123!")

    with pytest.raises(AuthError):
        service.login("alice@example.com", user.password_hash)


@pytest.mark.parametrize(
    "email, password",
    [("", "pw"), ("a@example.com", ""), ("bad-email", "pw"), ("alice@example.com\n", "Secret123!")],
)
def test_login_rejects_invalid_input(db, email, password) -> None:
    with pytest.raises(ValidationError):
        AuthService(db).login(email, password)


def test_trailing_newline_does_not_register_a_second_account(db) -> None:
    service = AuthService(db)
    service.signup("alice", "alice@example.com", "Secret123!")

    with pytest.raises(ValidationError):
        service.signup("alice2", "alice@example.com\n", "Secret123!")

    assert db.query(User).count() == 1


def test_user_token_carries_id_and_email() -> None:
    token = issue_user_token(42, "alice@example.com")

    claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])

    assert claims["sub"] == "42"
    assert claims["email"] == "alice@example.com"
    assert read_user_token(token) == (42, "alice@example.com")


def test_expired_user_token_is_rejected() -> None:
    with pytest.raises(jwt.ExpiredSignatureError):
        read_user_token(issue_user_token(1, "alice@example.com", expires_minutes=-1))


@pytest.mark.parametrize(
    "claims",
    [
        {"sub": "1", "exp": 4102444800},
        {"sub": "alice", "email": "alice@example.com", "exp": 4102444800},
        {"email": "alice@example.com", "exp": 4102444800},
    ],
)
def test_user_token_without_usable_identity_is_rejected(claims) -> None:
    token = jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    with pytest.raises(jwt.InvalidTokenError):
        read_user_token(token)


def test_user_token_signed_with_other_secret_is_rejected() -> None:
    token = jwt.encode({"sub": "1", "email": "alice@example.com", "exp": 4102444800}, "not-the-secret", algorithm="HS256")
    with pytest.raises(jwt.InvalidTokenError):
        read_user_token(token)
