import logging
from enum import Enum

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from quizly.core.current_user import get_identity
from quizly.core.deps import get_db
from quizly.core.errors import Forbidden, NotFound
from quizly.core.permissions import ensure_quiz_owner
from quizly.db.base_class import fits_row_id
from quizly.models.quiz import Quiz
from quizly.models.submission import Submission
from quizly.schemas.auth import TokenPayload
from quizly.services.export_pdf import PDF_MEDIA_TYPE, submission_pdf, submissions_pdf
from quizly.services.export_xlsx import (
    XLSX_MEDIA_TYPE,
    submission_workbook,
    submissions_workbook,
)
from quizly.services.quizzes import get_quiz_or_404
from quizly.services.reports import safe_filename

router = APIRouter()
logger = logging.getLogger(__name__)


class ExportFormat(str, Enum):
    xlsx = "xlsx"
    pdf = "pdf"


def _attachment(content: bytes, media_type: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/quiz/{identifier}/submissions/export")
def export_quiz_submissions(
    identifier: str,
    format: ExportFormat = Query(ExportFormat.xlsx),
    db: Session = Depends(get_db),
    identity: TokenPayload = Depends(get_identity),
):
    quiz = get_quiz_or_404(db, identifier)
    ensure_quiz_owner(quiz, identity)

    submissions = (
        db.query(Submission)
        .filter(Submission.quiz_id == quiz.id)
        .order_by(Submission.submitted_at.desc(), Submission.id.desc())
        .all()
    )
    logger.info("Exporting %s submissions of quiz %s as %s", len(submissions), quiz.id, format.value)

    stem = f"{quiz.title}_results"
    if format is ExportFormat.pdf:
        return _attachment(submissions_pdf(quiz, submissions), PDF_MEDIA_TYPE, safe_filename(stem, "pdf"))
    return _attachment(
        submissions_workbook(quiz, submissions), XLSX_MEDIA_TYPE, safe_filename(stem, "xlsx")
    )


@router.get("/submissions/{submission_id}/export")
def export_submission(
    submission_id: int,
    format: ExportFormat = Query(ExportFormat.pdf),
    db: Session = Depends(get_db),
    identity: TokenPayload = Depends(get_identity),
):
    submission = db.get(Submission, submission_id) if fits_row_id(submission_id) else None
    if not submission:
        raise NotFound("Submission not found")

    quiz = db.get(Quiz, submission.quiz_id)
    if not quiz:
        raise NotFound("Quiz not found")

    allowed = (
        identity.role == "admin"
        or quiz.owner_id == identity.user_id
        or (submission.user_id is not None and submission.user_id == identity.user_id)
    )
    if not allowed:
        raise Forbidden("Access denied")

    stem = f"{submission.student_name}_{quiz.title}_result"
    if format is ExportFormat.xlsx:
        return _attachment(
            submission_workbook(quiz, submission), XLSX_MEDIA_TYPE, safe_filename(stem, "xlsx")
        )
    return _attachment(submission_pdf(quiz, submission), PDF_MEDIA_TYPE, safe_filename(stem, "pdf"))
