from typing import Any

from sqlalchemy import func
from sqlalchemy.orm import Session

from quizly.core.errors import NotFound
from quizly.db.base_class import fits_row_id
from quizly.models.quiz import Quiz
from quizly.models.submission import Submission
from quizly.models.user import User
from quizly.services.scoring import round_half_up

UNKNOWN_CREATOR = "Unknown"


def find_quiz(db: Session, identifier: str) -> Quiz | None:
    """Look a quiz up by slug, falling back to its numeric id."""
    quiz = db.query(Quiz).filter(Quiz.slug == identifier).first()
    if quiz is None and identifier.isascii() and identifier.isdigit():
        quiz_id = int(identifier)
        if fits_row_id(quiz_id):
            quiz = db.get(Quiz, quiz_id)
    return quiz


def get_quiz_or_404(db: Session, identifier: str) -> Quiz:
    quiz = find_quiz(db, identifier)
    if not quiz:
        raise NotFound("Quiz not found")
    return quiz


def creator_name(db: Session, quiz: Quiz) -> str:
    owner = db.get(User, quiz.owner_id)
    return owner.name if owner else UNKNOWN_CREATOR


def submission_aggregates(db: Session, quiz_id: int) -> tuple[int, int | None]:
    """(submissions count, rounded average score), recomputed on every call."""
    count, total = (
        db.query(
            func.count(Submission.id),
            func.coalesce(func.sum(Submission.score), 0),
        )
        .filter(Submission.quiz_id == quiz_id)
        .one()
    )
    count = int(count or 0)
    if count == 0:
        return 0, None
    return count, round_half_up(int(total), count)


def serialize_quiz(quiz: Quiz, creator: str) -> dict[str, Any]:
    # response models pick the fields they expose; the hash never leaves here
    return {
        "id": quiz.id,
        "slug": quiz.slug,
        "title": quiz.title,
        "display_name": quiz.display_name,
        "thumbnail": quiz.thumbnail,
        "time_limit": quiz.time_limit,
        "questions": quiz.questions,
        "creator_name": creator,
        "has_password": bool(quiz.hashed_password),
        "link_token": quiz.link_token,
        "created_at": quiz.created_at,
        "updated_at": quiz.updated_at,
    }


def serialize_quiz_with_stats(db: Session, quiz: Quiz, creator: str) -> dict[str, Any]:
    count, average = submission_aggregates(db, quiz.id)
    data = serialize_quiz(quiz, creator)
    data["submissions_count"] = count
    data["average_score"] = average
    return data


def list_owned_quizzes(db: Session, owner_id: int) -> list[Quiz]:
    return (
        db.query(Quiz)
        .filter(Quiz.owner_id == owner_id)
        .order_by(Quiz.created_at.desc(), Quiz.id.desc())
        .all()
    )
