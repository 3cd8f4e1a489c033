from pydantic import Field, StrictInt

from quizly.schemas.common import CamelModel, UtcDatetime
from quizly.schemas.quiz import QuestionSchema


class SubmissionCreate(CamelModel):
    # quiz id or slug; any client-side "score" field is ignored
    quiz_id: str | int
    student_name: str = Field(min_length=1, max_length=255)
    answers: list[StrictInt | None] = Field(default_factory=list)
    start_time: UtcDatetime | None = None
    end_time: UtcDatetime | None = None


class SubmissionRead(CamelModel):
    id: int
    quiz_id: int
    student_name: str
    answers: list[int | None]
    score: int
    time_spent: int | None = None
    submitted_at: UtcDatetime


class SubmissionResult(SubmissionRead):
    total_questions: int
    correct_answers: int


class SubmissionEnvelope(CamelModel):
    success: bool = True
    submission: SubmissionResult


class Pagination(CamelModel):
    current_page: int
    total_pages: int
    total_submissions: int
    has_next: bool
    has_prev: bool


class SubmissionPage(CamelModel):
    success: bool = True
    submissions: list[SubmissionRead]
    pagination: Pagination


class QuizSummary(CamelModel):
    title: str
    questions_count: int
    questions: list[QuestionSchema]
    created_at: UtcDatetime
    time_limit: int | None = None


class MySubmission(SubmissionRead):
    quiz: QuizSummary


class MySubmissionsResponse(CamelModel):
    success: bool = True
    submissions: list[MySubmission]


class QuizStatistics(CamelModel):
    total_submissions: int
    average_score: float | None = None
    highest_score: int | None = None
    lowest_score: int | None = None
    average_time_spent: int | None = None
    # "90-100", "80-89", "70-79", "60-69", "0-59"
    distribution: dict[str, int]


class StatisticsEnvelope(CamelModel):
    success: bool = True
    statistics: QuizStatistics
