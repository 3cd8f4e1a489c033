from pydantic import Field

from quizly.schemas.common import CamelModel, UtcDatetime


class UserRead(CamelModel):
    id: int
    email: str
    name: str
    role: str
    created_at: UtcDatetime | None = None


class UserEnvelope(CamelModel):
    success: bool = True
    user: UserRead
    message: str | None = None


class UserListResponse(CamelModel):
    success: bool = True
    users: list[UserRead]


class UserAction(CamelModel):
    action: str
    new_role: str | None = None


class ProfileUpdate(CamelModel):
    name: str | None = Field(default=None, max_length=255)
    current_password: str | None = None
    new_password: str | None = Field(default=None, min_length=6, max_length=72)
