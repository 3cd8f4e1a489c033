from io import BytesIO

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill

from quizly.models.quiz import Quiz
from quizly.models.submission import Submission
from quizly.services.reports import answer_rows, submission_header, submission_rows

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

_HEADER_FILL = PatternFill(start_color="2E5BFF", end_color="2E5BFF", fill_type="solid")
_HEADER_FONT = Font(bold=True, color="FFFFFF")
_CORRECT_FONT = Font(bold=True, color="00A859")
_INCORRECT_FONT = Font(bold=True, color="F44336")


def _sheet_autofit(ws) -> None:
    for column_cells in ws.columns:
        max_length = 0
        col = column_cells[0].column_letter
        for cell in column_cells:
            if cell.value is None:
                continue
            max_length = max(max_length, len(str(cell.value)))
        ws.column_dimensions[col].width = min(max(10, max_length + 2), 60)


def _style_header_row(ws, row_idx: int) -> None:
    for cell in ws[row_idx]:
        cell.font = _HEADER_FONT
        cell.fill = _HEADER_FILL
        cell.alignment = Alignment(horizontal="center", vertical="center")


def _score_font(score: int) -> Font:
    if score >= 85:
        return Font(bold=True, color="00A859")
    if score >= 70:
        return Font(bold=True, color="FFC107")
    if score >= 50:
        return Font(bold=True, color="FF9800")
    return Font(bold=True, color="F44336")


def _to_bytes(wb: Workbook) -> bytes:
    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def submissions_workbook(quiz: Quiz, submissions: list[Submission]) -> bytes:
    """All submissions of a quiz, one per row, with a statistics block."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Submissions"
    ws.freeze_panes = "A2"

    ws.append(["Student Name", "Score (%)", "Grade", "Time Taken", "Submitted At"])
    _style_header_row(ws, 1)

    for row in submission_rows(submissions):
        ws.append(list(row))
        ws.cell(row=ws.max_row, column=2).font = _score_font(row.score)

    ws.append([])
    ws.append(["Statistics:"])
    ws.cell(row=ws.max_row, column=1).font = Font(bold=True, size=12)
    if submissions:
        average = sum(s.score for s in submissions) / len(submissions)
        ws.append(["Average Score:", f"{average:.2f}%"])
    else:
        ws.append(["Average Score:", "--"])
    ws.append(["Total Submissions:", len(submissions)])

    _sheet_autofit(ws)
    return _to_bytes(wb)


def submission_workbook(quiz: Quiz, submission: Submission) -> bytes:
    """One student's result: header block, then question by question."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Result"

    ws.append([quiz.title])
    ws.cell(row=1, column=1).font = Font(size=16, bold=True, color="2E5BFF")
    for label, value in submission_header(submission):
        ws.append([f"{label}:", value])
    ws.append([])

    ws.append(["#", "Question", "Student Answer", "Correct Answer", "Status"])
    _style_header_row(ws, ws.max_row)

    for row in answer_rows(quiz, submission):
        ws.append(
            [
                row.number,
                row.question,
                row.student_answer,
                row.correct_answer,
                "Correct" if row.is_correct else "Incorrect",
            ]
        )
        status_cell = ws.cell(row=ws.max_row, column=5)
        status_cell.font = _CORRECT_FONT if row.is_correct else _INCORRECT_FONT

    _sheet_autofit(ws)
    return _to_bytes(wb)
