import os
from io import BytesIO
from typing import Any
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from quizly.models.quiz import Quiz
from quizly.models.submission import Submission
from quizly.services.reports import answer_rows, submission_header, submission_rows
from quizly.services.stats import summarize_scores

PDF_MEDIA_TYPE = "application/pdf"

_DEJAVU_PATH = "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"
_BRAND = colors.HexColor("#2E5BFF")
_CORRECT = colors.HexColor("#00A859")
_INCORRECT = colors.HexColor("#F44336")


def _register_font() -> str:
    # DejaVu covers non-Latin student names; Helvetica is the built-in fallback
    if os.path.exists(_DEJAVU_PATH):
        try:
            pdfmetrics.registerFont(TTFont("DejaVuSans", _DEJAVU_PATH))
            return "DejaVuSans"
        except Exception:
            pass
    return "Helvetica"


def _build_styles(font_name: str) -> dict[str, ParagraphStyle]:
    base = getSampleStyleSheet()
    return {
        "title": ParagraphStyle(
            "quiz_title", parent=base["Heading1"], fontName=font_name,
            fontSize=18, leading=24, textColor=_BRAND,
        ),
        "h2": ParagraphStyle("quiz_h2", parent=base["Heading2"], fontName=font_name, fontSize=13, leading=18),
        "normal": ParagraphStyle("quiz_normal", parent=base["BodyText"], fontName=font_name, fontSize=10, leading=13),
    }


def _grid_style(font: str) -> TableStyle:
    return TableStyle([
        ("FONTNAME", (0, 0), (-1, -1), font),
        ("GRID", (0, 0), (-1, -1), 0.4, colors.grey),
        ("BACKGROUND", (0, 0), (-1, 0), _BRAND),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
    ])


def _render(story: list[Any]) -> bytes:
    buffer = BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=A4, leftMargin=28, rightMargin=28, topMargin=24, bottomMargin=24)
    doc.build(story)
    return buffer.getvalue()


def _p(text: str, style: ParagraphStyle) -> Paragraph:
    return Paragraph(escape(text), style)


def submissions_pdf(quiz: Quiz, submissions: list[Submission]) -> bytes:
    font = _register_font()
    styles = _build_styles(font)
    stats = summarize_scores(submissions)

    story: list[Any] = [
        _p(quiz.title, styles["title"]),
        _p(f"Total Submissions: {stats['total_submissions']}", styles["normal"]),
    ]
    if stats["average_score"] is not None:
        story.append(_p(f"Average Score: {stats['average_score']:.2f}%", styles["normal"]))
    story.extend([Spacer(1, 10), _p("Submissions", styles["h2"])])

    rows: list[list[Any]] = [["Student", "Score", "Grade", "Time Taken", "Submitted At"]]
    for row in submission_rows(submissions):
        rows.append([
            _p(row.student_name, styles["normal"]),
            f"{row.score}%",
            row.grade,
            row.time_spent,
            row.submitted_at,
        ])
    table = Table(rows, colWidths=[170, 55, 75, 80, 140], repeatRows=1)
    table.setStyle(_grid_style(font))
    story.append(table)
    return _render(story)


def submission_pdf(quiz: Quiz, submission: Submission) -> bytes:
    font = _register_font()
    styles = _build_styles(font)

    story: list[Any] = [_p(quiz.title, styles["title"]), _p("Student Information", styles["h2"])]
    info = Table(
        [[f"{label}:", _p(value, styles["normal"])] for label, value in submission_header(submission)],
        colWidths=[110, 400],
    )
    info.setStyle(TableStyle([
        ("FONTNAME", (0, 0), (-1, -1), font),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
    ]))
    story.extend([info, Spacer(1, 12), _p("Questions & Answers", styles["h2"])])

    rows: list[list[Any]] = [["#", "Question", "Student Answer", "Correct Answer", "Result"]]
    result_styles = []
    for row in answer_rows(quiz, submission):
        rows.append([
            str(row.number),
            _p(row.question, styles["normal"]),
            _p(row.student_answer, styles["normal"]),
            _p(row.correct_answer, styles["normal"]),
            "Correct" if row.is_correct else "Incorrect",
        ])
        line = len(rows) - 1
        result_styles.append(("TEXTCOLOR", (4, line), (4, line), _CORRECT if row.is_correct else _INCORRECT))

    table = Table(rows, colWidths=[25, 200, 110, 110, 65], repeatRows=1)
    style = _grid_style(font)
    for command in result_styles:
        style.add(*command)
    table.setStyle(style)
    story.append(table)
    return _render(story)
