"""Test configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.auth.service import AuthService
from app.database import Base, get_db
from app.dependencies import (
    get_cloudinary_uploader,
    get_completion_client,
    get_content_processor,
    get_email_service,
)
from app.main import app
from app.models import GradingResult, GuideFormat, StudyGuide, TeacherFollow, UserProfile, UserType
from processor.service import ContentProcessor


# Use in-memory SQLite for testing
TEST_DATABASE_URL = "sqlite:///:memory:"


class FakeCompletionClient:
    """Returns a canned reply and records the prompts it was sent."""
    configured = True

    def __init__(self, reply: str = "SCORE: 85\nFEEDBACK: Good answer."):
        self.reply = reply
        self.error = None
        self.calls = []

    def complete(self, prompt, max_tokens=500, temperature=0.3, images=None, error_message=None):
        self.calls.append({
            "prompt": prompt,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "images": images or [],
        })
        if self.error is not None:
            raise self.error
        return self.reply


class FakeUploader:
    configured = True

    def __init__(self):
        self.uploads = []

    def upload(self, data, filename, folder=None):
        self.uploads.append((filename, data))
        return {
            "public_id": f"casanovastudy/{filename.rsplit('.', 1)[0]}",
            "secure_url": f"https://res.cloudinary.com/demo/raw/upload/casanovastudy/{filename}",
            "bytes": len(data),
            "format": filename.rsplit(".", 1)[-1],
        }


class FakeEmailService:
    configured = True

    def __init__(self):
        self.sent = []

    def send_html(self, to, subject, html):
        self.sent.append({"to": to, "subject": subject, "html": html})


@pytest.fixture
def engine():
    """Fresh in-memory database per test."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture
def completion_client():
    return FakeCompletionClient()


@pytest.fixture
def uploader():
    return FakeUploader()


@pytest.fixture
def email_service():
    return FakeEmailService()


@pytest.fixture
def content_processor(tmp_path):
    return ContentProcessor(upload_dir=str(tmp_path / "uploads"))


@pytest.fixture
def client(db_session, completion_client, uploader, email_service, content_processor):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_completion_client] = lambda: completion_client
    app.dependency_overrides[get_cloudinary_uploader] = lambda: uploader
    app.dependency_overrides[get_email_service] = lambda: email_service
    app.dependency_overrides[get_content_processor] = lambda: content_processor
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    """Factory for user profiles."""
    counter = {"n": 0}

    def _make(user_type=UserType.student, first_name="Test", last_name="User",
              email=None, is_profile_public=False, password=None, **kwargs):
        counter["n"] += 1
        user = UserProfile(
            email=email or f"{user_type.value}{counter['n']}@example.com",
            user_type=user_type,
            first_name=first_name,
            last_name=last_name,
            is_profile_public=is_profile_public,
            **kwargs,
        )
        if password:
            user.set_password(password)
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


@pytest.fixture
def teacher(make_user):
    return make_user(UserType.teacher, first_name="Grace", last_name="Hopper", is_profile_public=True)


@pytest.fixture
def student(make_user):
    return make_user(UserType.student, first_name="Jane", last_name="Doe")


@pytest.fixture
def follow(db_session):
    """Factory creating a follow edge."""
    def _follow(follower, teacher):
        edge = TeacherFollow(follower_id=follower.id, teacher_id=teacher.id)
        db_session.add(edge)
        db_session.commit()
        return edge

    return _follow


@pytest.fixture
def make_guide(db_session):
    def _make(owner, title="Photosynthesis", published=False, **kwargs):
        fields = dict(
            user_id=owner.id,
            title=title,
            subject="Biology",
            grade_level="9",
            format=GuideFormat.outline,
            content="# Photosynthesis\nLight reactions and the Calvin cycle.",
            is_published=published,
        )
        fields.update(kwargs)
        guide = StudyGuide(**fields)
        db_session.add(guide)
        db_session.commit()
        db_session.refresh(guide)
        return guide

    return _make


@pytest.fixture
def make_result(db_session):
    def _make(teacher, student=None, total_marks=17, total_possible_marks=20, **kwargs):
        percentage = round(total_marks / total_possible_marks * 100, 2)
        result = GradingResult(
            user_id=teacher.id,
            student_user_id=student.id if student else None,
            student_name=kwargs.pop("student_name", "Jane Doe"),
            exam_title=kwargs.pop("exam_title", "Unit 1 Test"),
            class_name=kwargs.pop("class_name", "Biology"),
            total_marks=total_marks,
            total_possible_marks=total_possible_marks,
            percentage=percentage,
            grade="B",
            **kwargs,
        )
        db_session.add(result)
        db_session.commit()
        db_session.refresh(result)
        return result

    return _make


@pytest.fixture
def auth_headers(db_session):
    """Build a bearer header for a user."""
    def _headers(user):
        token = AuthService(db_session).issue_token(user)
        return {"Authorization": f"Bearer {token}"}

    return _headers
