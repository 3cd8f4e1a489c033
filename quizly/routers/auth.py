import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from quizly.core.config import (
    ACCESS_TOKEN_EXPIRE,
    AUTH_COOKIE_NAME,
    DEFAULT_ROLE,
    settings,
)
from quizly.core.current_user import get_current_user
from quizly.core.deps import get_db
from quizly.core.errors import InvalidCredentials, UserExists
from quizly.core.security import create_access_token, hash_password, verify_password
from quizly.models.user import User
from quizly.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from quizly.schemas.common import MessageResponse
from quizly.schemas.user import UserEnvelope

router = APIRouter()
logger = logging.getLogger(__name__)


def _start_session(response: Response, user: User) -> str:
    """Sign a session token for the user and set it as the auth cookie."""
    token = create_access_token(
        data={
            "userId": user.id,
            "email": user.email,
            "name": user.name,
            "role": user.role or DEFAULT_ROLE,
        },
        expires_delta=ACCESS_TOKEN_EXPIRE,
    )
    response.set_cookie(
        key=AUTH_COOKIE_NAME,
        value=token,
        max_age=int(ACCESS_TOKEN_EXPIRE.total_seconds()),
        httponly=True,
        samesite="lax",
        secure=settings.COOKIE_SECURE,
        path="/",
    )
    return token


@router.post(
    "/register",
    response_model=AuthResponse,
    responses={
        400: {"description": "User already exists"},
    },
)
def register(payload: RegisterRequest, response: Response, db: Session = Depends(get_db)):
    existing_user = db.query(User).filter(User.email == payload.email).first()
    if existing_user:
        raise UserExists()

    user = User(
        email=payload.email,
        name=payload.name,
        role=DEFAULT_ROLE,
        hashed_password=hash_password(payload.password),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # lost a race with a concurrent registration for the same email
        db.rollback()
        raise UserExists()

    db.refresh(user)
    logger.info("Registered user %s (id=%s)", user.email, user.id)

    token = _start_session(response, user)
    return {"success": True, "user": user, "token": token}


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={
        401: {"description": "Invalid credentials"},
    },
)
def login(payload: LoginRequest, response: Response, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == payload.email).first()
    if not user:
        raise InvalidCredentials()

    if not verify_password(payload.password, user.hashed_password):
        raise InvalidCredentials()

    token = _start_session(response, user)
    return {"success": True, "user": user, "token": token}


@router.post("/logout", response_model=MessageResponse)
def logout(response: Response):
    response.delete_cookie(AUTH_COOKIE_NAME, path="/")
    return {"success": True, "message": "Logged out"}


@router.get("/me", response_model=UserEnvelope)
def me(current_user: User = Depends(get_current_user)):
    return {"success": True, "user": current_user}
