# tests/conftest.py
import os
import tempfile
from pathlib import Path

_TMP = Path(tempfile.mkdtemp(prefix="vidshare-tests-"))

# must be set before vidshare.config is imported
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP / 'test.db'}"
os.environ["SECRET_KEY"] = "test-secret-key-not-for-production"
os.environ["PASSWORD_HASH_SCHEMES"] = "pbkdf2_sha256"
os.environ["UPLOAD_DIR"] = str(_TMP / "uploads")
os.environ["AUTO_CREATE_TABLES"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient

from vidshare.constants import VideoPrivacy, VideoStatus
from vidshare.db import Base, SessionLocal, engine
from vidshare.main import app
from vidshare.models import User, Video
from vidshare.utils.security import create_access_token, get_password_hash

PASSWORD = "password123"


@pytest.fixture(autouse=True)
def _schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def make_user(db):
    def _make(username="alice", role="user", **kw):
        user = User(
            username=username,
            email=f"{username}@example.com",
            password_hash=get_password_hash(PASSWORD),
            full_name=username.title(),
            channel_name=username.title(),
            role=role,
            **kw,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_video(db):
    def _make(owner, title="A video", **kw):
        kw.setdefault("description", "Some description")
        kw.setdefault("status", VideoStatus.ready.value)
        kw.setdefault("privacy", VideoPrivacy.public.value)
        video = Video(owner_id=owner.id, title=title, video_file="file.mp4", **kw)
        db.add(video)
        db.commit()
        db.refresh(video)
        return video

    return _make


@pytest.fixture
def user(make_user):
    return make_user("alice")


@pytest.fixture
def other(make_user):
    return make_user("bob")


@pytest.fixture
def auth():
    def _headers(user) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return _headers
