import os

# must be set before quizly.core.config is imported
TEST_DB_FILE = "test_quizly.db"
TEST_DB_URL = f"sqlite:///./{TEST_DB_FILE}"
os.environ.setdefault("QUIZLY_DATABASE_URL", TEST_DB_URL)
os.environ.setdefault("QUIZLY_BCRYPT_ROUNDS", "4")
os.environ.setdefault("QUIZLY_SECRET_KEY", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from quizly.core.deps import get_db
from quizly.core.security import hash_password
from quizly.db.base import Base
from quizly.main import app
from quizly.models.quiz import Quiz
from quizly.models.submission import Submission
from quizly.models.user import User

engine = create_engine(
    TEST_DB_URL,
    connect_args={"check_same_thread": False},
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session", autouse=True)
def setup_test_db():
    """Create a fresh schema once for the whole test session."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
    if os.path.exists(TEST_DB_FILE):
        os.remove(TEST_DB_FILE)


@pytest.fixture(autouse=True)
def seed_data():
    """Seed one user per role for each test."""
    db = TestingSessionLocal()
    try:
        db.query(Submission).delete()
        db.query(Quiz).delete()
        db.query(User).delete()
        db.commit()

        db.add_all(
            [
                User(
                    email="admin1@example.com",
                    name="Admin One",
                    role="admin",
                    hashed_password=hash_password("password123"),
                ),
                User(
                    email="teacher1@example.com",
                    name="Teacher One",
                    role="teacher",
                    hashed_password=hash_password("password123"),
                ),
                User(
                    email="student1@example.com",
                    name="Student One",
                    role="student",
                    hashed_password=hash_password("password123"),
                ),
            ]
        )
        db.commit()

        yield
    finally:
        db.close()


@pytest.fixture()
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client():
    """Test client that uses the test DB session via dependency override."""
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
