from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase

from quizly.core.config import MAX_ROW_ID


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def fits_row_id(value: int) -> bool:
    """False for ids no row can have; SQLite raises OverflowError past 64 bits."""
    return 0 < value <= MAX_ROW_ID


class Base(DeclarativeBase):
    pass
