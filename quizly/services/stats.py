from typing import Any

from sqlalchemy.orm import Session

from quizly.models.submission import Submission

# (label, lowest score in the bucket), checked top-down
SCORE_BUCKETS = (
    ("90-100", 90),
    ("80-89", 80),
    ("70-79", 70),
    ("60-69", 60),
    ("0-59", 0),
)

GRADE_LABELS = (
    (90, "Excellent"),
    (80, "Very Good"),
    (70, "Good"),
    (60, "Average"),
    (50, "Poor"),
)


def score_bucket(score: int) -> str:
    for label, floor in SCORE_BUCKETS:
        if score >= floor:
            return label
    return SCORE_BUCKETS[-1][0]


def grade_label(score: int) -> str:
    for floor, label in GRADE_LABELS:
        if score >= floor:
            return label
    return "Fail"


def format_time_spent(seconds: int | None) -> str:
    if seconds is None:
        return "--"
    minutes, secs = divmod(max(0, int(seconds)), 60)
    return f"{minutes}m {secs:02d}s"


def summarize_scores(submissions: list[Submission]) -> dict[str, Any]:
    distribution = {label: 0 for label, _floor in SCORE_BUCKETS}
    if not submissions:
        return {
            "total_submissions": 0,
            "average_score": None,
            "highest_score": None,
            "lowest_score": None,
            "average_time_spent": None,
            "distribution": distribution,
        }

    scores = [s.score for s in submissions]
    for score in scores:
        distribution[score_bucket(score)] += 1

    times = [s.time_spent for s in submissions if s.time_spent is not None]
    avg_time = int(round(sum(times) / len(times))) if times else None

    return {
        "total_submissions": len(scores),
        "average_score": round(sum(scores) / len(scores), 2),
        "highest_score": max(scores),
        "lowest_score": min(scores),
        "average_time_spent": avg_time,
        "distribution": distribution,
    }


def quiz_statistics(db: Session, quiz_id: int) -> dict[str, Any]:
    """Whole-quiz aggregates from a full scan of its submissions."""
    submissions = db.query(Submission).filter(Submission.quiz_id == quiz_id).all()
    return summarize_scores(submissions)
