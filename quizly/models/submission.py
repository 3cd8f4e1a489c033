from datetime import datetime

from sqlalchemy import JSON, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from quizly.db.base_class import Base, utcnow


class Submission(Base):
    __tablename__ = "submissions"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    # plain references: submissions outlive an owner-deleted quiz,
    # and anonymous takers have no user
    quiz_id: Mapped[int] = mapped_column(nullable=False, index=True)
    user_id: Mapped[int | None] = mapped_column(index=True)

    student_name: Mapped[str] = mapped_column(String(255), nullable=False)
    answers: Mapped[list[int | None]] = mapped_column(JSON, nullable=False, default=list)

    # percentage 0-100, always computed server-side
    score: Mapped[int] = mapped_column(nullable=False)

    start_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    end_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    time_spent: Mapped[int | None] = mapped_column()  # seconds

    submitted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, index=True
    )
