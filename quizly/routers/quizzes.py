import logging
import math

from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from quizly.core.config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from quizly.core.current_user import get_identity, get_identity_optional
from quizly.core.deps import get_db
from quizly.core.errors import ValidationError
from quizly.core.permissions import ensure_quiz_owner
from quizly.core.security import hash_password, verify_password
from quizly.db.base_class import utcnow
from quizly.models.quiz import Quiz
from quizly.models.submission import Submission
from quizly.schemas.auth import TokenPayload
from quizly.schemas.common import MessageResponse
from quizly.schemas.quiz import (
    PasswordCheckRequest,
    PasswordCheckResponse,
    PublicQuizEnvelope,
    QuizCreate,
    QuizEnvelope,
    QuizListResponse,
    QuizUpdate,
)
from quizly.schemas.submission import (
    StatisticsEnvelope,
    SubmissionCreate,
    SubmissionEnvelope,
    SubmissionPage,
)
from quizly.services.quizzes import (
    creator_name,
    get_quiz_or_404,
    list_owned_quizzes,
    serialize_quiz,
    serialize_quiz_with_stats,
)
from quizly.services.scoring import elapsed_seconds, score_answers
from quizly.services.slugs import generate_link_token, generate_unique_slug
from quizly.services.stats import quiz_statistics

router = APIRouter()
logger = logging.getLogger(__name__)

# slug collisions between concurrent creates surface as IntegrityError
SLUG_RETRIES = 3


# Fixed paths first: "/create", "/my-quizzes" and "/submit" would otherwise
# be captured by "/{identifier}".


@router.post("/create", response_model=QuizEnvelope)
def create_quiz(
    payload: QuizCreate,
    db: Session = Depends(get_db),
    author: TokenPayload = Depends(get_identity),
):
    hashed_password = hash_password(payload.password) if payload.password else None
    questions = [q.model_dump() for q in payload.questions]

    for attempt in range(1, SLUG_RETRIES + 1):
        quiz = Quiz(
            title=payload.title,
            display_name=payload.display_name,
            thumbnail=payload.thumbnail,
            time_limit=payload.time_limit,
            hashed_password=hashed_password,
            questions=questions,
            owner_id=author.user_id,
            slug=generate_unique_slug(db, payload.title),
            link_token=generate_link_token(db),
        )
        db.add(quiz)
        try:
            db.commit()
            break
        except IntegrityError:
            db.rollback()
            if attempt == SLUG_RETRIES:
                raise

    db.refresh(quiz)
    logger.info("User %s created quiz %s (%s)", author.user_id, quiz.id, quiz.slug)
    return {"success": True, "quiz": serialize_quiz(quiz, author.name)}


@router.get("/my-quizzes", response_model=QuizListResponse)
def my_quizzes(
    db: Session = Depends(get_db),
    identity: TokenPayload = Depends(get_identity),
):
    quizzes = list_owned_quizzes(db, identity.user_id)
    return {
        "success": True,
        "quizzes": [serialize_quiz_with_stats(db, q, identity.name) for q in quizzes],
    }


@router.post("/submit", response_model=SubmissionEnvelope)
def submit_quiz(
    payload: SubmissionCreate,
    db: Session = Depends(get_db),
    identity: TokenPayload | None = Depends(get_identity_optional),
):
    quiz = get_quiz_or_404(db, str(payload.quiz_id))

    result = score_answers(quiz.questions, payload.answers)

    submission = Submission(
        quiz_id=quiz.id,
        user_id=identity.user_id if identity else None,
        student_name=payload.student_name,
        answers=list(payload.answers),
        score=result.score,
        start_time=payload.start_time,
        end_time=payload.end_time,
        time_spent=elapsed_seconds(payload.start_time, payload.end_time),
    )
    db.add(submission)

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(submission)
    logger.info(
        "Submission %s on quiz %s: %s/%s (%s%%)",
        submission.id,
        quiz.id,
        result.correct,
        result.total,
        result.score,
    )

    return {
        "success": True,
        "submission": {
            "id": submission.id,
            "quiz_id": submission.quiz_id,
            "student_name": submission.student_name,
            "answers": submission.answers,
            "score": submission.score,
            "time_spent": submission.time_spent,
            "submitted_at": submission.submitted_at,
            "total_questions": result.total,
            "correct_answers": result.correct,
        },
    }


@router.get("/{identifier}", response_model=PublicQuizEnvelope)
def get_quiz(identifier: str, db: Session = Depends(get_db)):
    quiz = get_quiz_or_404(db, identifier)
    return {"success": True, "quiz": serialize_quiz(quiz, creator_name(db, quiz))}


@router.post("/{identifier}", response_model=PasswordCheckResponse)
def verify_quiz_password(
    identifier: str,
    payload: PasswordCheckRequest | None = None,
    db: Session = Depends(get_db),
):
    """Check a quiz password.

    Only answers whether the password matches; submitting does not require
    a prior successful check.
    """
    quiz = get_quiz_or_404(db, identifier)

    if not quiz.hashed_password:
        return {"success": True, "valid": True}

    password = payload.password if payload else None
    if not password:
        raise ValidationError("Password is required")

    return {"success": True, "valid": verify_password(password, quiz.hashed_password)}


@router.put("/{identifier}", response_model=QuizEnvelope)
def update_quiz(
    identifier: str,
    payload: QuizUpdate,
    db: Session = Depends(get_db),
    identity: TokenPayload = Depends(get_identity),
):
    quiz = get_quiz_or_404(db, identifier)
    ensure_quiz_owner(quiz, identity)

    # whole-document replacement, last writer wins
    quiz.title = payload.title
    quiz.display_name = payload.display_name
    quiz.thumbnail = payload.thumbnail
    quiz.time_limit = payload.time_limit
    quiz.questions = [q.model_dump() for q in payload.questions]

    if "password" in payload.model_fields_set:
        quiz.hashed_password = hash_password(payload.password) if payload.password else None

    quiz.updated_at = utcnow()

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(quiz)
    return {"success": True, "quiz": serialize_quiz(quiz, creator_name(db, quiz))}


@router.delete("/{identifier}", response_model=MessageResponse)
def delete_quiz(
    identifier: str,
    db: Session = Depends(get_db),
    identity: TokenPayload = Depends(get_identity),
):
    quiz = get_quiz_or_404(db, identifier)
    ensure_quiz_owner(quiz, identity)

    quiz_id = quiz.id
    # submissions are kept; only the admin delete path removes them
    db.delete(quiz)
    db.commit()

    logger.info("User %s deleted quiz %s", identity.user_id, quiz_id)
    return {"success": True, "message": "Quiz deleted successfully"}


@router.get("/{identifier}/submissions", response_model=SubmissionPage)
def list_quiz_submissions(
    identifier: str,
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    identity: TokenPayload = Depends(get_identity),
):
    quiz = get_quiz_or_404(db, identifier)
    ensure_quiz_owner(quiz, identity)

    base = db.query(Submission).filter(Submission.quiz_id == quiz.id)
    total = base.count()
    submissions = (
        base.order_by(Submission.submitted_at.desc(), Submission.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    total_pages = math.ceil(total / limit)
    return {
        "success": True,
        "submissions": submissions,
        "pagination": {
            "current_page": page,
            "total_pages": total_pages,
            "total_submissions": total,
            "has_next": page < total_pages,
            "has_prev": page > 1,
        },
    }


@router.get("/{identifier}/statistics", response_model=StatisticsEnvelope)
def get_quiz_statistics(
    identifier: str,
    db: Session = Depends(get_db),
    identity: TokenPayload = Depends(get_identity),
):
    quiz = get_quiz_or_404(db, identifier)
    ensure_quiz_owner(quiz, identity)
    return {"success": True, "statistics": quiz_statistics(db, quiz.id)}
