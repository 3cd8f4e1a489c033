import re
import secrets
import unicodedata

from sqlalchemy.orm import Session

from quizly.models.quiz import Quiz

_NON_ALNUM = re.compile(r"[^a-z0-9]+")

SLUG_MAX_LENGTH = 80
FALLBACK_SLUG = "quiz"


def slugify(title: str) -> str:
    """ASCII, lowercase, words joined by '-'. Empty titles become 'quiz'."""
    normalized = unicodedata.normalize("NFKD", title or "")
    ascii_title = normalized.encode("ascii", "ignore").decode("ascii").lower()
    slug = _NON_ALNUM.sub("-", ascii_title).strip("-")
    slug = slug[:SLUG_MAX_LENGTH].rstrip("-")
    return slug or FALLBACK_SLUG


def _slug_taken(db: Session, slug: str) -> bool:
    return db.query(Quiz.id).filter(Quiz.slug == slug).first() is not None


def generate_unique_slug(db: Session, title: str) -> str:
    """slugify(title), then base-1, base-2, ... until no quiz uses it."""
    base = slugify(title)
    candidate = base
    counter = 1
    while _slug_taken(db, candidate):
        candidate = f"{base}-{counter}"
        counter += 1
    return candidate


def generate_link_token(db: Session) -> str:
    while True:
        token = secrets.token_urlsafe(16)
        exists = db.query(Quiz.id).filter(Quiz.link_token == token).first()
        if exists is None:
            return token
