from dataclasses import dataclass, field

MASKED_PASSWORD = "********"


@dataclass(frozen=True)
class SessionUser:
    name: str
    email: str
    id: int | None = None
    # never the real password or hash
    password: str = MASKED_PASSWORD
    access_token: str | None = field(default=None, repr=False)


class SessionContext:
    """In-memory holder of the signed-in user.

    One instance is created per app process and handed to the services that
    need it. It starts empty, changes only through login/logout, and is never
    written to disk.
    """

    def __init__(self):
        self._user: SessionUser | None = None
        self._is_new_signup = False

    @property
    def user(self) -> SessionUser | None:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    @property
    def is_new_signup(self) -> bool:
        return self._is_new_signup

    @property
    def access_token(self) -> str | None:
        return self._user.access_token if self._user else None

    def login(self, user: SessionUser) -> None:
        self._user = user

    def logout(self) -> None:
        self._user = None
        self._is_new_signup = False

    def mark_new_signup(self, flag: bool) -> None:
        self._is_new_signup = flag

    def greeting(self) -> str:
        if self._user is None:
            return "You are not signed in."
        if self._is_new_signup:
            return f"Welcome, {self._user.name}! Your account has been created."
        return f"Welcome back, {self._user.name}!"
