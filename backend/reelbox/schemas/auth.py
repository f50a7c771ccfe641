from pydantic import BaseModel, ConfigDict, Field

class SignupRequest(BaseModel):
    username: str | None = None
    email: str | None = None
    password: str | None = None

class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None

class UserSummary(BaseModel):
    id: int
    username: str
    email: str

    model_config = ConfigDict(from_attributes=True)

class SignupResponse(BaseModel):
    success: bool = True
    message: str = "User created successfully"
    username: str
    email: str
    user_id: int = Field(alias="userId")
    access_token: str | None = None
    token_type: str = "bearer"

    model_config = ConfigDict(populate_by_name=True)

class LoginResponse(BaseModel):
    success: bool = True
    message: str = "Login successful"
    user: UserSummary
    access_token: str | None = None
    token_type: str = "bearer"
