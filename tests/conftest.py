import os
import sys
import tempfile
from pathlib import Path

# Ajoute la racine du projet au PYTHONPATH EN PREMIER
sys.path.insert(0, str(Path(__file__).parent.parent))

# Settings are read at import time: point them at test resources BEFORE importing app
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ.setdefault("VOICE_NOTE_DIR", tempfile.mkdtemp(prefix="voice-notes-"))
os.environ.setdefault("VOICE_NOTE_MAX_BYTES", "1024")

import pytest
from fastapi.testclient import TestClient

from app.core.database import Base, SessionLocal, engine
from app.main import app
from app.models.user import User
from app.services.blob_store import LocalBlobStore, get_blob_store


@pytest.fixture(autouse=True)
def setup_teardown():
    """Fresh tables for every test"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def blob_store(tmp_path):
    store = LocalBlobStore(str(tmp_path / "blobs"), "/voice-notes")
    app.dependency_overrides[get_blob_store] = lambda: store
    yield store
    app.dependency_overrides.pop(get_blob_store, None)


@pytest.fixture
def client(blob_store):
    return TestClient(app)


@pytest.fixture
def db():
    db = SessionLocal()
    yield db
    db.close()


def make_user(db, user_id=None, email=None):
    """Insert a user directly, bypassing the API"""
    user = User(
        id=user_id,
        email=email or f"user{user_id}@example.com",
        username=(email or f"user{user_id}@example.com").split("@")[0]
    )
    user.set_password("password123")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def signup_and_login(client, email, password="password123"):
    client.post(
        "/auth/signup",
        json={"email": email, "username": email.split("@")[0], "password": password}
    )
    response = client.post("/auth/login", json={"email": email, "password": password})
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def auth_headers(client):
    return signup_and_login(client, "alice@example.com")


@pytest.fixture
def other_headers(client):
    return signup_and_login(client, "bob@example.com")
