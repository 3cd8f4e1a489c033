import logging

from sqlalchemy.orm import Session

from quizly.core.config import settings
from quizly.core.security import hash_password
from quizly.db.base import Base
from quizly.db.session import SessionLocal, engine
from quizly.models.user import User

logger = logging.getLogger(__name__)


def ensure_first_admin(db: Session, email: str, password: str, name: str) -> User:
    """Create the bootstrap admin, or promote an existing account with that email."""
    user = db.query(User).filter(User.email == email).first()
    if user:
        if user.role != "admin":
            user.role = "admin"
            db.commit()
            logger.info("Promoted %s to admin", email)
        return user

    user = User(
        email=email,
        name=name,
        role="admin",
        hashed_password=hash_password(password),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Created bootstrap admin %s", email)
    return user


def init_db() -> None:
    Base.metadata.create_all(bind=engine)

    if not (settings.FIRST_ADMIN_EMAIL and settings.FIRST_ADMIN_PASSWORD):
        return

    db = SessionLocal()
    try:
        ensure_first_admin(
            db,
            settings.FIRST_ADMIN_EMAIL,
            settings.FIRST_ADMIN_PASSWORD,
            settings.FIRST_ADMIN_NAME,
        )
    finally:
        db.close()
