import jwt
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from ..db.session import get_db
from ..core.errors import AuthError
from ..core.security import issue_user_token, read_user_token
from ..models import User
from ..schemas.auth import LoginRequest, LoginResponse, SignupRequest, SignupResponse, UserSummary
from ..services.auth import AuthService

router = APIRouter()


@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
def signup(payload: SignupRequest, db: Session = Depends(get_db)):
    user = AuthService(db).signup(payload.username, payload.email, payload.password)
    token = issue_user_token(user.id, user.email)
    return SignupResponse(username=user.username, email=user.email, user_id=user.id, access_token=token)


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = AuthService(db).login(payload.email, payload.password)
    token = issue_user_token(user.id, user.email)
    return LoginResponse(user=UserSummary.model_validate(user), access_token=token)


def parse_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    if not authorization.lower().startswith("bearer "):
        raise AuthError("Invalid Authorization header")
    return authorization.split(" ", 1)[1]


def get_optional_user(authorization: str | None, db: Session) -> User | None:
    token = parse_token(authorization)
    if token is None:
        return None
    try:
        user_id, email = read_user_token(token)
    except jwt.InvalidTokenError:
        raise AuthError("Invalid token")
    user = db.get(User, user_id)
    if not user or user.email != email:
        raise AuthError("User not found")
    return user
