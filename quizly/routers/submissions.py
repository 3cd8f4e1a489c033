from fastapi import APIRouter, Depends
from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from quizly.core.current_user import get_identity
from quizly.core.deps import get_db
from quizly.models.quiz import Quiz
from quizly.models.submission import Submission
from quizly.schemas.auth import TokenPayload
from quizly.schemas.submission import MySubmissionsResponse

router = APIRouter()


def _owned_by(identity: TokenPayload):
    """Submissions made while logged in, plus anonymous ones under the same name."""
    return or_(
        Submission.user_id == identity.user_id,
        and_(
            Submission.user_id.is_(None),
            Submission.student_name == identity.name,
        ),
    )


@router.get("/my-submissions", response_model=MySubmissionsResponse)
def my_submissions(
    db: Session = Depends(get_db),
    identity: TokenPayload = Depends(get_identity),
):
    subs = (
        db.query(Submission)
        .filter(_owned_by(identity))
        .order_by(Submission.submitted_at.desc(), Submission.id.desc())
        .all()
    )

    quiz_ids = {s.quiz_id for s in subs}
    quizzes = {}
    if quiz_ids:
        quizzes = {q.id: q for q in db.query(Quiz).filter(Quiz.id.in_(quiz_ids)).all()}

    items = []
    for s in subs:
        quiz = quizzes.get(s.quiz_id)
        if quiz is None:
            # quiz deleted by its owner; the submission stays but is not listed
            continue
        items.append(
            {
                "id": s.id,
                "quiz_id": s.quiz_id,
                "student_name": s.student_name,
                "answers": s.answers,
                "score": s.score,
                "time_spent": s.time_spent,
                "submitted_at": s.submitted_at,
                "quiz": {
                    "title": quiz.title,
                    "questions_count": len(quiz.questions),
                    "questions": quiz.questions,
                    "created_at": quiz.created_at,
                    "time_limit": quiz.time_limit,
                },
            }
        )

    return {"success": True, "submissions": items}
