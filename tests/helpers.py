PASSWORD = "password123"


def login(client, email: str, password: str = PASSWORD) -> str:
    r = client.post("/api/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    return r.json()["token"]


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def sample_quiz(**overrides) -> dict:
    quiz = {
        "title": "World Capitals",
        "displayName": "Geography 101",
        "timeLimit": 10,
        "questions": [
            {"questionText": "Capital of France?", "choices": ["Paris", "Rome"], "correctAnswer": 0},
            {"questionText": "Capital of Italy?", "choices": ["Madrid", "Rome"], "correctAnswer": 1},
            {"questionText": "Capital of Japan?", "choices": ["Tokyo", "Kyoto", "Osaka"], "correctAnswer": 0},
        ],
    }
    quiz.update(overrides)
    return quiz


def create_quiz(client, token: str, **overrides) -> dict:
    r = client.post("/api/quiz/create", headers=auth_header(token), json=sample_quiz(**overrides))
    assert r.status_code == 200, r.text
    return r.json()["quiz"]


def submit(client, quiz_id, answers, student_name="Anon Taker", headers=None, **extra) -> dict:
    body = {"quizId": quiz_id, "studentName": student_name, "answers": answers}
    body.update(extra)
    r = client.post("/api/quiz/submit", json=body, headers=headers or {})
    assert r.status_code == 200, r.text
    return r.json()["submission"]
