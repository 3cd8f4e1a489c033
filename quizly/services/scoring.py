"""Scoring of quiz attempts.

The score is always derived here from the submitted answer indices and the
quiz's answer key; nothing a client sends as a score is ever used.
"""

import math
from datetime import datetime, timezone
from typing import Any, NamedTuple, Sequence


class ScoreResult(NamedTuple):
    correct: int
    total: int
    score: int  # integer percentage 0-100


def round_half_up(numerator: int, denominator: int) -> int:
    """Round numerator/denominator to the nearest integer, .5 going up.

    Integer arithmetic, so 1/8 of 100 is 13 and not the banker's 12.
    """
    if denominator <= 0:
        raise ValueError("denominator must be positive")
    return (2 * numerator + denominator) // (2 * denominator)


def score_answers(
    questions: Sequence[dict[str, Any]],
    answers: Sequence[int | None],
) -> ScoreResult:
    """Count exact matches between answers[i] and questions[i]'s correct answer.

    Only exact integer matches count: missing, null, -1, booleans and numeric
    strings never match. Extra answers are ignored.
    Every question weighs the same, no partial or negative marking.
    """
    total = len(questions)
    correct = 0
    for index, question in enumerate(questions):
        if index >= len(answers):
            break
        answer = answers[index]
        if type(answer) is int and answer == question["correct_answer"]:
            correct += 1

    if total == 0:
        return ScoreResult(correct=0, total=0, score=0)
    return ScoreResult(
        correct=correct,
        total=total,
        score=round_half_up(correct * 100, total),
    )


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def elapsed_seconds(start: datetime | None, end: datetime | None) -> int | None:
    """Whole seconds between start and end, or None unless both are given."""
    if start is None or end is None:
        return None
    return math.floor((_as_utc(end) - _as_utc(start)).total_seconds())
