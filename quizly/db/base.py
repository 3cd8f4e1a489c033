from quizly.db.base_class import Base

# import models so SQLAlchemy registers them
from quizly.models.quiz import Quiz  # noqa: F401
from quizly.models.submission import Submission  # noqa: F401
from quizly.models.user import User  # noqa: F401
