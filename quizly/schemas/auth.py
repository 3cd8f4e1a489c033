from pydantic import EmailStr, Field, model_validator

from quizly.schemas.common import CamelModel
from quizly.schemas.user import UserRead


class RegisterRequest(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(min_length=6, max_length=72)
    confirm_password: str | None = None

    @model_validator(mode="after")
    def _passwords_match(self):
        if self.confirm_password is not None and self.confirm_password != self.password:
            raise ValueError("Passwords do not match")
        return self


class LoginRequest(CamelModel):
    email: EmailStr
    password: str


class TokenPayload(CamelModel):
    """Decoded session token."""

    user_id: int
    email: str
    name: str = ""
    role: str = "student"
    iat: int | None = None
    exp: int | None = None


class AuthResponse(CamelModel):
    success: bool = True
    user: UserRead
    token: str
