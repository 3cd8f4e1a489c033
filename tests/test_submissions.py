from datetime import datetime, timedelta, timezone

from quizly.models.submission import Submission
from tests.helpers import auth_header, create_quiz, login, submit


def test_anonymous_submission_is_scored_server_side(client, db):
    teacher = login(client, "teacher1@example.com")
    quiz = create_quiz(client, teacher)
    client.cookies.clear()

    start = datetime(2024, 5, 1, 9, 0, 0, tzinfo=timezone.utc)
    result = submit(
        client,
        quiz["id"],
        [0, 1, 2],
        student_name="Walk In",
        score=100,
        startTime=start.isoformat(),
        endTime=(start + timedelta(minutes=2, seconds=5)).isoformat(),
    )

    assert result["score"] == 67
    assert result["correctAnswers"] == 2
    assert result["totalQuestions"] == 3
    assert result["timeSpent"] == 125
    assert result["studentName"] == "Walk In"

    stored = db.get(Submission, result["id"])
    assert stored.user_id is None
    assert stored.score == 67


def test_submit_by_slug_records_logged_in_user(client, db):
    teacher = login(client, "teacher1@example.com")
    quiz = create_quiz(client, teacher)
    student = login(client, "student1@example.com")

    result = submit(client, quiz["slug"], [0, 1, 0], student_name="Student One", headers=auth_header(student))
    assert result["score"] == 100
    assert result["timeSpent"] is None

    stored = db.get(Submission, result["id"])
    assert stored.user_id is not None


def test_submit_to_unknown_quiz_is_404(client):
    r = client.post(
        "/api/quiz/submit",
        json={"quizId": "missing-quiz", "studentName": "X", "answers": [0]},
    )
    assert r.status_code == 404


def test_submit_requires_student_name(client):
    teacher = login(client, "teacher1@example.com")
    quiz = create_quiz(client, teacher)
    r = client.post("/api/quiz/submit", json={"quizId": quiz["id"], "answers": [0]})
    assert r.status_code == 400


def test_my_submissions_includes_anonymous_attempts_under_same_name(client):
    teacher = login(client, "teacher1@example.com")
    quiz = create_quiz(client, teacher)
    student = login(client, "student1@example.com")

    submit(client, quiz["id"], [0, 0, 0], student_name="Student One", headers=auth_header(student))
    client.cookies.clear()
    submit(client, quiz["id"], [0, 1, 0], student_name="Student One")
    submit(client, quiz["id"], [0, 1, 0], student_name="Somebody Else")

    r = client.get("/api/submissions/my-submissions", headers=auth_header(student))
    assert r.status_code == 200, r.text
    subs = r.json()["submissions"]
    assert len(subs) == 2
    assert {s["score"] for s in subs} == {67, 100}
    assert subs[0]["quiz"]["title"] == "World Capitals"
    assert subs[0]["quiz"]["questionsCount"] == 3


def test_my_submissions_skips_deleted_quizzes(client):
    teacher = login(client, "teacher1@example.com")
    quiz = create_quiz(client, teacher)
    student = login(client, "student1@example.com")
    submit(client, quiz["id"], [0, 1, 0], student_name="Student One", headers=auth_header(student))

    client.delete(f"/api/quiz/{quiz['id']}", headers=auth_header(teacher))

    r = client.get("/api/submissions/my-submissions", headers=auth_header(student))
    assert r.json()["submissions"] == []


def test_quiz_submissions_are_paginated_newest_first(client):
    teacher = login(client, "teacher1@example.com")
    quiz = create_quiz(client, teacher)
    for i in range(12):
        submit(client, quiz["id"], [0, 1, 0], student_name=f"Taker {i:02d}")

    url = f"/api/quiz/{quiz['slug']}/submissions"
    page1 = client.get(url, headers=auth_header(teacher)).json()
    assert len(page1["submissions"]) == 10
    assert page1["submissions"][0]["studentName"] == "Taker 11"
    assert page1["pagination"] == {
        "currentPage": 1,
        "totalPages": 2,
        "totalSubmissions": 12,
        "hasNext": True,
        "hasPrev": False,
    }

    page2 = client.get(url, params={"page": 2}, headers=auth_header(teacher)).json()
    assert len(page2["submissions"]) == 2
    assert page2["pagination"]["hasNext"] is False
    assert page2["pagination"]["hasPrev"] is True

    everything = client.get(url, params={"limit": 10000}, headers=auth_header(teacher)).json()
    assert len(everything["submissions"]) == 12


def test_quiz_submissions_rejects_bad_paging_and_non_owner(client):
    teacher = login(client, "teacher1@example.com")
    quiz = create_quiz(client, teacher)
    student = login(client, "student1@example.com")
    url = f"/api/quiz/{quiz['id']}/submissions"

    assert client.get(url, params={"page": 0}, headers=auth_header(teacher)).status_code == 400
    assert client.get(url, params={"limit": 10001}, headers=auth_header(teacher)).status_code == 400
    assert client.get(url, headers=auth_header(student)).status_code == 403


def test_quiz_statistics(client):
    teacher = login(client, "teacher1@example.com")
    quiz = create_quiz(client, teacher)
    submit(client, quiz["id"], [0, 1, 0])
    submit(client, quiz["id"], [0, 1, 2])
    submit(client, quiz["id"], [1, 0, 2])

    r = client.get(f"/api/quiz/{quiz['id']}/statistics", headers=auth_header(teacher))
    assert r.status_code == 200, r.text
    stats = r.json()["statistics"]
    assert stats["totalSubmissions"] == 3
    assert stats["averageScore"] == 55.67
    assert stats["highestScore"] == 100
    assert stats["lowestScore"] == 0
    assert stats["distribution"]["90-100"] == 1
    assert stats["distribution"]["60-69"] == 1
    assert stats["distribution"]["0-59"] == 1


def test_non_integer_answers_are_rejected(client, db):
    teacher = login(client, "teacher1@example.com")
    quiz = create_quiz(client, teacher)
    client.cookies.clear()

    for answers in (["0", True, "0"], [0, False, 0], [0.0, 1, 0]):
        r = client.post(
            "/api/quiz/submit",
            json={"quizId": quiz["id"], "studentName": "Sneaky", "answers": answers},
        )
        assert r.status_code == 400, answers
        assert r.json()["success"] is False

    assert db.query(Submission).filter(Submission.quiz_id == quiz["id"]).count() == 0


def test_submitted_at_carries_utc_offset(client):
    teacher = login(client, "teacher1@example.com")
    quiz = create_quiz(client, teacher)
    result = submit(client, quiz["id"], [0, 1, 0])

    parsed = datetime.fromisoformat(result["submittedAt"].replace("Z", "+00:00"))
    assert parsed.utcoffset() == timedelta(0)
