import logging

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from quizly.core.deps import get_db
from quizly.core.errors import NotFound, ValidationError
from quizly.core.permissions import require_admin
from quizly.db.base_class import fits_row_id
from quizly.models.quiz import Quiz
from quizly.models.submission import Submission
from quizly.models.user import User
from quizly.schemas.auth import TokenPayload
from quizly.schemas.common import MessageResponse
from quizly.schemas.quiz import AdminQuizDelete, UserQuizListResponse
from quizly.services.quizzes import list_owned_quizzes, serialize_quiz_with_stats

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/user/{user_id}", response_model=UserQuizListResponse)
def list_user_quizzes(
    user_id: int,
    db: Session = Depends(get_db),
    admin: TokenPayload = Depends(require_admin),
):
    user = db.get(User, user_id) if fits_row_id(user_id) else None
    if not user:
        raise NotFound("User not found")

    quizzes = list_owned_quizzes(db, user.id)
    return {
        "success": True,
        "user": user,
        "quizzes": [serialize_quiz_with_stats(db, q, user.name) for q in quizzes],
    }


@router.delete("/user/{user_id}", response_model=MessageResponse)
def delete_user_quiz(
    user_id: int,
    payload: AdminQuizDelete | None = Body(default=None),
    db: Session = Depends(get_db),
    admin: TokenPayload = Depends(require_admin),
):
    if payload is None or payload.quiz_id is None:
        raise ValidationError("Quiz ID is required")

    quiz = None
    if fits_row_id(payload.quiz_id) and fits_row_id(user_id):
        quiz = (
            db.query(Quiz)
            .filter(Quiz.id == payload.quiz_id, Quiz.owner_id == user_id)
            .first()
        )
    if not quiz:
        raise NotFound("Quiz not found or access denied")

    quiz_id = quiz.id
    db.delete(quiz)
    db.commit()

    # Separate step: a failure here leaves orphaned submissions behind,
    # never a half-deleted quiz.
    removed = (
        db.query(Submission)
        .filter(Submission.quiz_id == quiz_id)
        .delete(synchronize_session=False)
    )
    db.commit()

    logger.info(
        "Admin %s deleted quiz %s of user %s with %s submissions",
        admin.user_id,
        quiz_id,
        user_id,
        removed,
    )
    return {"success": True, "message": "Quiz and related submissions deleted successfully"}
