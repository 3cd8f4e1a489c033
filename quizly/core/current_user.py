from fastapi import Depends, Request
from pydantic import ValidationError as PayloadError
from sqlalchemy.orm import Session

from quizly.core.config import AUTH_COOKIE_NAME
from quizly.core.deps import get_db
from quizly.core.errors import NotFound, Unauthorized
from quizly.core.security import decode_access_token
from quizly.models.user import User
from quizly.schemas.auth import TokenPayload


def _token_from_request(request: Request) -> str | None:
    # An explicit Authorization header takes precedence over the cookie
    header = request.headers.get("Authorization")
    if header and header.startswith("Bearer "):
        token = header[len("Bearer "):].strip()
        if token:
            return token
    return request.cookies.get(AUTH_COOKIE_NAME) or None


def _decode_identity(token: str) -> TokenPayload | None:
    payload = decode_access_token(token)
    if payload is None:
        return None
    try:
        return TokenPayload.model_validate(payload)
    except PayloadError:
        return None


def get_identity_optional(request: Request) -> TokenPayload | None:
    """Identity for routes that also serve anonymous callers (quiz submit)."""
    token = _token_from_request(request)
    if not token:
        return None
    identity = _decode_identity(token)
    if identity is not None:
        request.state.identity = identity
    return identity


def get_identity(request: Request) -> TokenPayload:
    token = _token_from_request(request)
    if not token:
        raise Unauthorized("Unauthorized - No token")

    identity = _decode_identity(token)
    if identity is None:
        raise Unauthorized("Invalid token")

    request.state.identity = identity
    return identity


def get_current_user(
    identity: TokenPayload = Depends(get_identity),
    db: Session = Depends(get_db),
) -> User:
    user = db.get(User, identity.user_id)
    if not user:
        raise NotFound("User not found")
    return user
