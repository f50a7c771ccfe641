import logging
from ..core.errors import InternalError, error_for_status
from ..schemas.auth import UserSummary
from .http import ApiClient, error_message, is_success
from .session import SessionContext, SessionUser

logger = logging.getLogger(__name__)


class AuthClient:
    def __init__(self, api: ApiClient, session: SessionContext):
        self.api = api
        self.session = session

    async def _post(self, path: str, payload: dict) -> dict:
        status, body = await self.api.request("POST", path, json=payload)
        if not is_success(status):
            raise error_for_status(status, error_message(body, f"{path} failed with status {status}"))
        if not isinstance(body, dict):
            raise InternalError(f"Unexpected response from {path}")
        return body

    async def signup(self, username: str, email: str, password: str) -> UserSummary:
        body = await self._post("/signup", {"username": username, "email": email, "password": password})
        user = UserSummary(id=body["userId"], username=body["username"], email=body["email"])
        self.session.login(SessionUser(id=user.id, name=user.username, email=user.email, access_token=body.get("access_token")))
        self.session.mark_new_signup(True)
        logger.info("client.signup user_id=%s", user.id)
        return user

    async def login(self, email: str, password: str) -> UserSummary:
        body = await self._post("/login", {"email": email, "password": password})
        user = UserSummary.model_validate(body["user"])
        self.session.login(SessionUser(id=user.id, name=user.username, email=user.email, access_token=body.get("access_token")))
        self.session.mark_new_signup(False)
        logger.info("client.login user_id=%s", user.id)
        return user

    def logout(self) -> None:
        self.session.logout()
