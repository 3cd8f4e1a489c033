from io import BytesIO

from openpyxl import load_workbook

from quizly.services.reports import safe_filename
from tests.helpers import auth_header, create_quiz, login, submit

XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def test_safe_filename():
    assert safe_filename("World Capitals: results", "xlsx") == "World_Capitals__results.xlsx"


def test_quiz_results_export_as_workbook(client):
    teacher = login(client, "teacher1@example.com")
    quiz = create_quiz(client, teacher)
    submit(client, quiz["id"], [0, 1, 0], student_name="Ada")
    submit(client, quiz["id"], [1, 0, 2], student_name="Bob")

    r = client.get(f"/api/quiz/{quiz['slug']}/submissions/export", headers=auth_header(teacher))
    assert r.status_code == 200, r.text
    assert r.headers["content-type"] == XLSX
    assert 'filename="World_Capitals_results.xlsx"' in r.headers["content-disposition"]

    ws = load_workbook(BytesIO(r.content)).active
    rows = list(ws.iter_rows(values_only=True))
    assert rows[0][:3] == ("Student Name", "Score (%)", "Grade")
    students = {row[0]: row[2] for row in rows[1:3]}
    assert students == {"Ada": "Excellent", "Bob": "Fail"}
    assert ("Average Score:", "50.00%") in [row[:2] for row in rows]


def test_quiz_results_export_as_pdf(client):
    teacher = login(client, "teacher1@example.com")
    quiz = create_quiz(client, teacher)
    submit(client, quiz["id"], [0, 1, 0], student_name="Ada")

    r = client.get(
        f"/api/quiz/{quiz['id']}/submissions/export",
        params={"format": "pdf"},
        headers=auth_header(teacher),
    )
    assert r.status_code == 200, r.text
    assert r.headers["content-type"] == "application/pdf"
    assert r.content.startswith(b"%PDF")


def test_quiz_results_export_is_owner_only(client):
    teacher = login(client, "teacher1@example.com")
    quiz = create_quiz(client, teacher)
    student = login(client, "student1@example.com")

    r = client.get(f"/api/quiz/{quiz['id']}/submissions/export", headers=auth_header(student))
    assert r.status_code == 403

    r = client.get(
        f"/api/quiz/{quiz['id']}/submissions/export",
        params={"format": "csv"},
        headers=auth_header(teacher),
    )
    assert r.status_code == 400


def test_single_submission_export(client):
    teacher = login(client, "teacher1@example.com")
    quiz = create_quiz(client, teacher)
    student = login(client, "student1@example.com")
    result = submit(client, quiz["id"], [0, None], student_name="Student One", headers=auth_header(student))
    url = f"/api/submissions/{result['id']}/export"

    r = client.get(url, headers=auth_header(student))
    assert r.status_code == 200, r.text
    assert r.headers["content-type"] == "application/pdf"
    assert r.content.startswith(b"%PDF")

    r = client.get(url, params={"format": "xlsx"}, headers=auth_header(teacher))
    assert r.status_code == 200, r.text
    ws = load_workbook(BytesIO(r.content)).active
    values = [row for row in ws.iter_rows(values_only=True)]
    answers = [row for row in values if row and row[0] in (1, 2, 3)]
    assert [row[2] for row in answers] == ["Paris", "No Answer", "No Answer"]
    assert [row[4] for row in answers] == ["Correct", "Incorrect", "Incorrect"]


def test_single_submission_export_access(client):
    teacher = login(client, "teacher1@example.com")
    quiz = create_quiz(client, teacher)
    client.cookies.clear()
    result = submit(client, quiz["id"], [0, 1, 0], student_name="Walk In")
    url = f"/api/submissions/{result['id']}/export"

    student = login(client, "student1@example.com")
    admin = login(client, "admin1@example.com")
    assert client.get(url, headers=auth_header(student)).status_code == 403
    assert client.get(url, headers=auth_header(admin)).status_code == 200
    assert client.get("/api/submissions/99999/export", headers=auth_header(admin)).status_code == 404
