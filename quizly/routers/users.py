import logging
from enum import Enum

from fastapi import APIRouter, Depends, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session

from quizly.core.config import RESET_PASSWORD_VALUE, ROLES
from quizly.core.deps import get_db
from quizly.core.errors import NotFound, ValidationError
from quizly.core.permissions import require_admin
from quizly.core.security import hash_password
from quizly.db.base_class import fits_row_id
from quizly.models.user import User
from quizly.schemas.auth import TokenPayload
from quizly.schemas.common import MessageResponse
from quizly.schemas.user import UserAction, UserEnvelope, UserListResponse

router = APIRouter()
logger = logging.getLogger(__name__)


class UserSort(str, Enum):
    newest = "newest"
    oldest = "oldest"
    name = "name"
    email = "email"


_ORDERING = {
    UserSort.newest: (User.created_at.desc(), User.id.desc()),
    UserSort.oldest: (User.created_at.asc(), User.id.asc()),
    UserSort.name: (User.name.asc(), User.id.asc()),
    UserSort.email: (User.email.asc(),),
}


def _get_user_or_404(db: Session, user_id: int) -> User:
    user = db.get(User, user_id) if fits_row_id(user_id) else None
    if not user:
        raise NotFound("User not found")
    return user


@router.get("", response_model=UserListResponse)
def list_users(
    role: str | None = Query(None),
    search: str | None = Query(None),
    sort: UserSort = Query(UserSort.newest),
    db: Session = Depends(get_db),
    admin: TokenPayload = Depends(require_admin),
):
    q = db.query(User)
    if role:
        q = q.filter(User.role == role)
    if search:
        pattern = f"%{search.strip()}%"
        q = q.filter(or_(User.name.ilike(pattern), User.email.ilike(pattern)))

    users = q.order_by(*_ORDERING[sort]).all()
    return {"success": True, "users": users}


@router.get("/{user_id}", response_model=UserEnvelope)
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    admin: TokenPayload = Depends(require_admin),
):
    return {"success": True, "user": _get_user_or_404(db, user_id)}


@router.patch("/{user_id}", response_model=UserEnvelope)
def update_user(
    user_id: int,
    payload: UserAction,
    db: Session = Depends(get_db),
    admin: TokenPayload = Depends(require_admin),
):
    user = _get_user_or_404(db, user_id)

    if payload.action == "changeRole":
        if payload.new_role not in ROLES:
            raise ValidationError("Invalid role")
        user.role = payload.new_role
        message = "User role updated successfully"
    elif payload.action == "resetPassword":
        user.hashed_password = hash_password(RESET_PASSWORD_VALUE)
        message = "Password reset successfully"
    else:
        raise ValidationError("Invalid action")

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(user)
    logger.info("Admin %s applied %s to user %s", admin.user_id, payload.action, user.id)
    return {"success": True, "user": user, "message": message}


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    admin: TokenPayload = Depends(require_admin),
):
    if user_id == admin.user_id:
        raise ValidationError("Cannot delete your own account")

    user = _get_user_or_404(db, user_id)

    email = user.email
    # quizzes and submissions of the user stay behind
    db.delete(user)
    db.commit()

    logger.warning("Admin %s deleted user %s (%s)", admin.user_id, user_id, email)
    return {"success": True, "message": "User deleted successfully"}
