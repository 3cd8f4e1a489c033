from fastapi import Depends

from quizly.core.current_user import get_identity
from quizly.core.errors import Forbidden
from quizly.models.quiz import Quiz
from quizly.schemas.auth import TokenPayload


def require_admin(identity: TokenPayload = Depends(get_identity)) -> TokenPayload:
    if identity.role != "admin":
        raise Forbidden("Access denied. Admin only.")
    return identity


def ensure_quiz_owner(quiz: Quiz, identity: TokenPayload) -> None:
    if quiz.owner_id != identity.user_id:
        raise Forbidden("Only the quiz owner can do this")
