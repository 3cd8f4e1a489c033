from pydantic import Field, model_validator

from quizly.core.config import TIME_LIMIT_MAX_MINUTES
from quizly.schemas.common import CamelModel, UtcDatetime
from quizly.schemas.user import UserRead


class QuestionSchema(CamelModel):
    question_text: str = Field(min_length=1)
    choices: list[str] = Field(min_length=2)
    correct_answer: int = Field(ge=0)

    @model_validator(mode="after")
    def _correct_answer_in_range(self):
        if self.correct_answer >= len(self.choices):
            raise ValueError("correctAnswer must be the index of one of the choices")
        return self


class QuizCreate(CamelModel):
    title: str = Field(min_length=1, max_length=255)
    display_name: str | None = Field(default=None, max_length=255)
    thumbnail: str | None = None
    time_limit: int | None = Field(default=None, ge=1, le=TIME_LIMIT_MAX_MINUTES)
    password: str | None = None
    questions: list[QuestionSchema] = Field(min_length=1)


class QuizUpdate(QuizCreate):
    # password: omitted keeps the current one, "" or null removes it
    pass


class QuizPublic(CamelModel):
    id: int
    slug: str
    title: str
    display_name: str | None = None
    thumbnail: str | None = None
    time_limit: int | None = None
    questions: list[QuestionSchema]
    creator_name: str
    has_password: bool = False
    created_at: UtcDatetime
    updated_at: UtcDatetime


class QuizRead(QuizPublic):
    link_token: str


class QuizWithStats(QuizRead):
    submissions_count: int = 0
    average_score: int | None = None


class PublicQuizEnvelope(CamelModel):
    success: bool = True
    quiz: QuizPublic


class QuizEnvelope(CamelModel):
    success: bool = True
    quiz: QuizRead


class QuizListResponse(CamelModel):
    success: bool = True
    quizzes: list[QuizWithStats]


class UserQuizListResponse(QuizListResponse):
    user: UserRead


class PasswordCheckRequest(CamelModel):
    password: str | None = None


class PasswordCheckResponse(CamelModel):
    success: bool = True
    valid: bool


class AdminQuizDelete(CamelModel):
    quiz_id: int | None = None
