from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from quizly.core.current_user import get_current_user
from quizly.core.deps import get_db
from quizly.core.errors import ValidationError
from quizly.core.security import hash_password, verify_password
from quizly.models.user import User
from quizly.schemas.user import ProfileUpdate, UserEnvelope

router = APIRouter()


@router.get("/profile", response_model=UserEnvelope)
def get_profile(current_user: User = Depends(get_current_user)):
    return {"success": True, "user": current_user}


@router.put("/profile", response_model=UserEnvelope)
def update_profile(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if payload.name and payload.name != current_user.name:
        current_user.name = payload.name

    if payload.new_password:
        if not payload.current_password:
            raise ValidationError("Current password is required")
        if not verify_password(payload.current_password, current_user.hashed_password):
            raise ValidationError("Current password is incorrect")
        current_user.hashed_password = hash_password(payload.new_password)

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(current_user)
    return {"success": True, "user": current_user, "message": "Profile updated successfully"}
