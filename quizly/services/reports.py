"""Row data shared by the spreadsheet and PDF exports."""

import re
from datetime import datetime
from typing import NamedTuple

from quizly.models.quiz import Quiz
from quizly.models.submission import Submission
from quizly.services.stats import format_time_spent, grade_label

NO_ANSWER = "No Answer"

_UNSAFE_FILENAME = re.compile(r"[^A-Za-z0-9_\-]")


class AnswerRow(NamedTuple):
    number: int
    question: str
    student_answer: str
    correct_answer: str
    is_correct: bool


class SubmissionRow(NamedTuple):
    student_name: str
    score: int
    grade: str
    time_spent: str
    submitted_at: str


def format_date(value: datetime | None) -> str:
    if value is None:
        return "--"
    return value.strftime("%Y-%m-%d %H:%M")


def safe_filename(stem: str, extension: str) -> str:
    return f"{_UNSAFE_FILENAME.sub('_', stem)}.{extension}"


def _choice(choices: list[str], index: int | None) -> str | None:
    if index is None or index < 0 or index >= len(choices):
        return None
    return choices[index]


def answer_rows(quiz: Quiz, submission: Submission) -> list[AnswerRow]:
    answers = submission.answers or []
    rows = []
    for idx, question in enumerate(quiz.questions):
        choices = question["choices"]
        selected = answers[idx] if idx < len(answers) else None
        rows.append(
            AnswerRow(
                number=idx + 1,
                question=question["question_text"],
                student_answer=_choice(choices, selected) or NO_ANSWER,
                correct_answer=_choice(choices, question["correct_answer"]) or "",
                is_correct=selected is not None and selected == question["correct_answer"],
            )
        )
    return rows


def submission_rows(submissions: list[Submission]) -> list[SubmissionRow]:
    return [
        SubmissionRow(
            student_name=s.student_name,
            score=s.score,
            grade=grade_label(s.score),
            time_spent=format_time_spent(s.time_spent),
            submitted_at=format_date(s.submitted_at),
        )
        for s in submissions
    ]


def submission_header(submission: Submission) -> list[tuple[str, str]]:
    return [
        ("Student", submission.student_name),
        ("Score", f"{submission.score}%"),
        ("Grade", grade_label(submission.score)),
        ("Time Taken", format_time_spent(submission.time_spent)),
        ("Date", format_date(submission.submitted_at)),
    ]
