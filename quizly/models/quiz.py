from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from quizly.db.base_class import Base, utcnow


class Quiz(Base):
    __tablename__ = "quizzes"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    display_name: Mapped[str | None] = mapped_column(String(255))
    thumbnail: Mapped[str | None] = mapped_column(Text)
    time_limit: Mapped[int | None] = mapped_column()  # minutes
    hashed_password: Mapped[str | None] = mapped_column(String(255))

    # embedded questions: [{"question_text", "choices", "correct_answer"}, ...]
    questions: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON, nullable=False, default=list
    )

    # plain reference, deleting the user leaves the quiz in place
    owner_id: Mapped[int] = mapped_column(nullable=False, index=True)

    slug: Mapped[str] = mapped_column(
        String(255), unique=True, index=True, nullable=False
    )
    link_token: Mapped[str] = mapped_column(
        String(64), unique=True, index=True, nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
